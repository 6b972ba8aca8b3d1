"""
Maps a fetched page to the error kind the source is signalling.
"""

from typing import Optional

from ..models import ErrorKind

# Redirect targets, checked in order against the final URL
URL_MARKERS = (
    ("Beranda/Error", ErrorKind.GENERIC_FAILURE),
    ("Beranda/BatasSehari", ErrorKind.DAILY_LIMIT_EXCEEDED),
    ("Beranda/ModaTerbatas", ErrorKind.RESTRICTED_MODE),
    ("Account/Banned", ErrorKind.ACCOUNT_SUSPENDED),
)

NOT_FOUND_MARKER = "Entri tidak ditemukan."

RESTRICTED_MODE_MARKERS = (
    "Moda terbatas sedang diaktifkan",
    "pengguna tidak terdaftar tidak dapat dilayani",
    "moda terbatas",
)


def classify(final_url: str, html: str) -> Optional[ErrorKind]:
    """
    Classify a response by its final URL and markup.

    Redirect targets take precedence over markup; the first match wins.

    Args:
        final_url: URL after following redirects
        html: Response markup

    Returns:
        The matching ErrorKind, or None for a normal page
    """
    for marker, kind in URL_MARKERS:
        if marker in final_url:
            return kind

    if NOT_FOUND_MARKER in html:
        return ErrorKind.NOT_FOUND

    if any(marker in html for marker in RESTRICTED_MODE_MARKERS):
        return ErrorKind.RESTRICTED_MODE

    return None

"""
Authenticated session handling and cookie persistence.
"""

import json
import fcntl
import os
import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse
import httpx
import logging

from ..config import DEFAULT_COOKIE_PATH
from ..models import DEFAULT_HOST

logger = logging.getLogger(__name__)


LOGIN_PATH = "Account/Login"
AUTH_COOKIE = ".AspNet.ApplicationCookie"
# Only anonymous pages render the login link
LOGIN_LINK_MARKER = "loginLink"
TOKEN_PATTERN = re.compile(
    r'<input name="__RequestVerificationToken".*value="([^"]*)"'
)


class AuthenticationError(Exception):
    """Login failed or saved credentials are unusable."""
    pass


class KBBISession:
    """
    Holds an HTTP client carrying the KBBI account cookie.

    Provides:
    - Form login with the anti-forgery token
    - Cookie persistence to a JSON file
    - Tracking whether the server still treats us as logged in
    """

    def __init__(
        self,
        cookie_path: Union[str, Path] = DEFAULT_COOKIE_PATH,
        client: Optional[httpx.Client] = None,
        host: str = DEFAULT_HOST,
        timeout: float = 30.0
    ):
        """
        Initialize the session.

        Args:
            cookie_path: JSON file holding the saved account cookie
            client: Optional HTTP client (a new cookie-keeping client otherwise)
            host: Dictionary base URL
            timeout: Request timeout in seconds for the default client
        """
        self.cookie_path = Path(cookie_path).expanduser()
        self.host = host.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self.authenticated = False

    @classmethod
    def from_saved_cookies(
        cls,
        cookie_path: Union[str, Path] = DEFAULT_COOKIE_PATH,
        **kwargs
    ) -> Optional["KBBISession"]:
        """
        Create a session from a previously saved cookie.

        Returns:
            Session, or None if no usable cookie is stored
        """
        session = cls(cookie_path, **kwargs)
        if session.load_cookies():
            return session
        session.close()
        return None

    def is_authenticated(self) -> bool:
        """Whether the last response was served to a logged-in account."""
        return self.authenticated

    def update_from_html(self, html: str) -> bool:
        """
        Refresh the authenticated flag from a fetched page.

        Args:
            html: Page markup

        Returns:
            The updated flag
        """
        self.authenticated = LOGIN_LINK_MARKER not in html
        return self.authenticated

    def login(self, email: str, password: str) -> None:
        """
        Log in with account credentials.

        Args:
            email: Account email address
            password: Account password

        Raises:
            AuthenticationError: Token missing or credentials rejected
        """
        token = self._fetch_token()

        data = {
            "__RequestVerificationToken": token,
            "Posel": email,
            "KataSandi": password,
            "IngatSaya": "true",
        }

        try:
            response = self.client.post(f"{self.host}/{LOGIN_PATH}", data=data)
        except httpx.RequestError as e:
            raise AuthenticationError(f"Gagal melakukan login: {e}") from e

        final_url = str(response.url)
        if "Beranda/Error" in final_url:
            raise AuthenticationError(
                "Terjadi kesalahan saat memproses permintaan login"
            )
        if LOGIN_PATH in final_url:
            raise AuthenticationError(
                "Gagal melakukan autentikasi dengan alamat posel dan sandi yang diberikan"
            )

        self.authenticated = True
        logger.info("Logged in to KBBI Daring")

    def _fetch_token(self) -> str:
        try:
            response = self.client.get(f"{self.host}/{LOGIN_PATH}")
        except httpx.RequestError as e:
            raise AuthenticationError(f"Gagal mengakses halaman login: {e}") from e

        match = TOKEN_PATTERN.search(response.text)
        if match is None:
            raise AuthenticationError("Token CSRF tidak ditemukan")
        return match.group(1)

    def _auth_cookie(self) -> Optional[str]:
        for cookie in self.client.cookies.jar:
            if cookie.name == AUTH_COOKIE:
                return cookie.value
        return None

    def save_cookies(self) -> Path:
        """
        Persist the account cookie.

        Uses file locking for safe concurrent access.

        Returns:
            Path to the cookie file

        Raises:
            AuthenticationError: No account cookie to save
        """
        value = self._auth_cookie()
        if value is None:
            raise AuthenticationError("Tidak ada kuki autentikasi untuk disimpan")

        self.cookie_path.parent.mkdir(parents=True, exist_ok=True)

        fd = os.open(self.cookie_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, 'w', encoding="utf-8") as f:
            # Acquire exclusive lock for writing
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                json.dump({AUTH_COOKIE: value}, f)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        logger.debug(f"Cookie saved: {self.cookie_path}")
        return self.cookie_path

    def load_cookies(self) -> bool:
        """
        Load the account cookie into the client.

        Returns:
            True if a cookie was loaded
        """
        if not self.cookie_path.exists():
            return False

        try:
            with open(self.cookie_path, 'r', encoding="utf-8") as f:
                # Acquire shared lock for reading
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = json.load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load cookie: {e}")
            return False

        value = data.get(AUTH_COOKIE) if isinstance(data, dict) else None
        if not value:
            return False

        domain = urlparse(self.host).hostname or ""
        self.client.cookies.set(AUTH_COOKIE, value, domain=domain)
        self.authenticated = True
        logger.debug(f"Loaded cookie from {self.cookie_path}")
        return True

    def clear_cookies(self) -> bool:
        """
        Delete the cookie file.

        Returns:
            True if a file was deleted
        """
        if self.cookie_path.exists():
            self.cookie_path.unlink()
            logger.info(f"Deleted cookie: {self.cookie_path}")
            return True
        return False

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

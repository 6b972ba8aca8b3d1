"""
Output renderers for search results.
"""

from .json_exporter import result_to_json, export_to_json
from .text_renderer import (
    render_result,
    render_entry,
    render_sense,
    render_etymology,
    strip_examples,
    strip_related,
)

__all__ = [
    "result_to_json",
    "export_to_json",
    "render_result",
    "render_entry",
    "render_sense",
    "render_etymology",
    "strip_examples",
    "strip_related",
]

"""Input validation for render requests."""

from typing import Any


def validate_html(html: Any, size_limit_bytes: int) -> bool:
    """
    Check that ``html`` is renderable input.

    Rejects missing, non-string and blank content, and anything whose UTF-8
    encoding is larger than ``size_limit_bytes``.
    """
    if not html or not isinstance(html, str):
        return False

    if not html.strip():
        return False

    # Cheap upper bound first: UTF-8 never uses more than 4 bytes per char.
    if len(html) * 4 <= size_limit_bytes:
        return True

    return len(html.encode("utf-8", errors="surrogatepass")) <= size_limit_bytes

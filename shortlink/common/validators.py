"""Validation utilities for URL shortener."""

from urllib.parse import urlsplit
from typing import Tuple


MAX_URL_LENGTH = 2048
ALLOWED_SCHEMES = ("http", "https")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Check that a URL is something a redirect can point at.

    Only absolute http(s) URLs with a host are accepted; whitespace and
    control characters are rejected since they cannot appear in a
    Location header.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(ch.isspace() or ord(ch) < 0x20 for ch in url):
        return False, "URL must not contain whitespace or control characters"

    try:
        parts = urlsplit(url)
        # port is parsed lazily and raises on garbage such as ":abc"
        parts.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return False, "URL must use http or https protocol"

    if not parts.hostname:
        return False, "URL must have a valid domain"

    return True, ""

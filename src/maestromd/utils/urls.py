#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/utils/urls.py
"""URL helpers shared by renderers and the image resolver."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin, urlparse

from maestromd.constants import DANGEROUS_URL_SCHEMES

logger = logging.getLogger(__name__)


def is_relative_url(url: str) -> bool:
    """Check if a URL has no scheme.

    Examples
    --------
    >>> is_relative_url("images/plan.png")
    True
    >>> is_relative_url("https://example.com")
    False

    """
    if not url or not url.strip():
        return True
    try:
        return not urlparse(url.strip()).scheme
    except ValueError:
        return False


def is_url_scheme_dangerous(url: str) -> bool:
    """Check if a URL uses a scheme that can execute code in a browser.

    Examples
    --------
    >>> is_url_scheme_dangerous("javascript:alert(1)")
    True
    >>> is_url_scheme_dangerous("data:image/png;base64,AAAA")
    False

    """
    if not url or not url.strip():
        return False

    url_lower = url.lower().strip()
    if any(url_lower.startswith(scheme) for scheme in DANGEROUS_URL_SCHEMES):
        return True

    try:
        scheme = urlparse(url_lower).scheme
    except ValueError:
        return True
    return scheme in ("javascript", "vbscript", "about")


def sanitize_url(url: str) -> str:
    """Return the URL, or an empty string if it uses a dangerous scheme."""
    if is_url_scheme_dangerous(url):
        logger.debug("Dropped dangerous URL: %s", url[:80])
        return ""
    return url


def resolve_url(url: str, base_url: Optional[str]) -> str:
    """Resolve a possibly relative URL against a base URL.

    Absolute URLs, fragment-only references and calls without a base URL
    return the URL unchanged.

    Examples
    --------
    >>> resolve_url("img/a.png", "https://notes.example/page/")
    'https://notes.example/page/img/a.png'
    >>> resolve_url("#top", "https://notes.example/page/")
    '#top'

    """
    if not base_url or not url or url.startswith("#") or not is_relative_url(url):
        return url
    return urljoin(base_url, url)

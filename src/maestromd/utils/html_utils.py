#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/utils/html_utils.py
"""HTML escaping and raw HTML handling for the HTML renderer."""

from __future__ import annotations

import html
import re

from maestromd.constants import (
    DEPS_SANITIZE,
    SANITIZE_ALLOWED_ATTRIBUTES,
    SANITIZE_ALLOWED_TAGS,
    HtmlPassthroughMode,
)
from maestromd.utils.decorators import requires_dependencies
from maestromd.utils.urls import is_url_scheme_dangerous

_SINGLE_TAG_RE = re.compile(
    r"^<(?P<closing>\/)?(?P<name>[A-Za-z][A-Za-z0-9-]*)(?P<attrs>(?:\s[^<>]*)?)\s*\/?>$",
    re.DOTALL,
)
_ATTRIBUTE_RE = re.compile(r"""([A-Za-z_:][-\w:.]*)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?""")


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape HTML special characters when enabled."""
    if not enabled:
        return text
    return html.escape(text)


def sanitize_html_content(content: str, mode: HtmlPassthroughMode = "escape") -> str:
    """Handle raw HTML content according to the passthrough mode.

    Parameters
    ----------
    content : str
        HTML content from an HTMLBlock or HTMLInline node
    mode : {"pass-through", "escape", "drop", "sanitize"}, default "escape"
        - "pass-through": Return content unchanged (for trusted sources)
        - "escape": HTML-escape all content
        - "drop": Return empty string
        - "sanitize": Keep only allow-listed tags and attributes

    Returns
    -------
    str
        Processed HTML content

    Examples
    --------
    >>> sanitize_html_content("<script>alert('xss')</script>", mode="escape")
    '&lt;script&gt;alert(&#x27;xss&#x27;)&lt;/script&gt;'

    >>> sanitize_html_content('<mark data-sqlmaestro="match">x</mark>', mode="sanitize")
    '<mark data-sqlmaestro="match">x</mark>'

    """
    if mode == "pass-through":
        return content
    if mode == "escape":
        return html.escape(content)
    if mode == "drop":
        return ""
    if mode == "sanitize":
        return sanitize_html_string(content)
    raise ValueError(f"Unknown HTML passthrough mode: {mode!r}")


@requires_dependencies("sanitize", DEPS_SANITIZE)
def sanitize_html_string(content: str) -> str:
    """Remove disallowed elements and attributes with bleach.

    Disallowed tags are stripped (their text is kept) and comments are
    removed. ``<mark data-sqlmaestro="...">`` highlight markers and ``<br>``
    survive.
    """
    import bleach

    return bleach.clean(
        content,
        tags=SANITIZE_ALLOWED_TAGS,
        attributes=SANITIZE_ALLOWED_ATTRIBUTES,
        protocols={"http", "https", "mailto"},
        strip=True,
        strip_comments=True,
    )


def sanitize_inline_html(fragment: str) -> str:
    """Sanitize one inline HTML fragment.

    Inline HTML arrives from the grammar one tag at a time, so an opening
    ``<mark>`` and its closing ``</mark>`` are separate fragments. Running
    them through an HTML tree builder would auto-close the first and drop
    the second, so single tags are filtered directly against the allow-list
    and anything else (comments, multi-tag fragments) goes through bleach.

    Examples
    --------
    >>> sanitize_inline_html('<mark data-sqlmaestro="active" onclick="x()">')
    '<mark data-sqlmaestro="active">'
    >>> sanitize_inline_html("</mark>")
    '</mark>'
    >>> sanitize_inline_html("<script>")
    ''

    """
    match = _SINGLE_TAG_RE.match(fragment.strip())
    if match is None:
        return sanitize_html_string(fragment)

    name = match.group("name").lower()
    if name not in SANITIZE_ALLOWED_TAGS:
        return ""
    if match.group("closing"):
        return f"</{name}>"

    allowed = set(SANITIZE_ALLOWED_ATTRIBUTES.get("*", [])) | set(SANITIZE_ALLOWED_ATTRIBUTES.get(name, []))
    attributes = []
    for attr_match in _ATTRIBUTE_RE.finditer(match.group("attrs")):
        attr_name = attr_match.group(1).lower()
        if attr_name not in allowed:
            continue
        value = next((group for group in attr_match.groups()[1:] if group is not None), "")
        value = html.unescape(value)
        if attr_name == "href" and is_url_scheme_dangerous(value):
            continue
        attributes.append(f' {attr_name}="{html.escape(value)}"')
    return f"<{name}{''.join(attributes)}>"

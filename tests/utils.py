"""Test utilities for the maestromd test suite.

This module provides small image payloads, fake async image loaders and
helpers for inspecting rich Text spans.
"""

import asyncio
import base64
from typing import Callable, Optional

from rich.style import Style
from rich.text import Text

from maestromd.images import ResolvedImage

# Base64 encoded 1x1 pixel PNG for testing
MINIMAL_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9FpQHLwAAAAASUVORK5CYII="
MINIMAL_PNG_BYTES = base64.b64decode(MINIMAL_PNG_B64)
MINIMAL_PNG_DATA_URI = f"data:image/png;base64,{MINIMAL_PNG_B64}"


class FakeImageLoader:
    """Async image loader with scripted slow and failing sources.

    Parameters
    ----------
    slow : set of str
        URLs that never finish on their own
    failing : set of str
        URLs that raise
    on_call : callable or None
        Awaited with the URL at the start of every call

    """

    def __init__(self, slow=(), failing=(), on_call: Optional[Callable] = None):
        self.slow = set(slow)
        self.failing = set(failing)
        self.on_call = on_call
        self.calls: list[str] = []
        self.cancelled: list[str] = []

    async def __call__(self, url: str, alt_text: str) -> ResolvedImage:
        self.calls.append(url)
        if self.on_call is not None:
            await self.on_call(url)
        if url in self.slow:
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                self.cancelled.append(url)
                raise
        if url in self.failing:
            raise RuntimeError(f"cannot load {url}")
        return ResolvedImage(source=url, url=url, data=MINIMAL_PNG_BYTES, media_type="image/png", alt_text=alt_text)


def spans_for(text: Text, fragment: str) -> list[Style]:
    """Return the styles of every span covering exactly ``fragment``."""
    styles = []
    for span in text.spans:
        if text.plain[span.start : span.end] == fragment:
            style = span.style
            styles.append(Style.parse(style) if isinstance(style, str) else style)
    return styles

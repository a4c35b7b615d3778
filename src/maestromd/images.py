#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/images.py
"""Concurrent resolution of images referenced by a note.

Rendering never waits for images: a renderer given no image mapping simply
leaves images out. Callers that want images resolve them first, with
:func:`resolve_images`, and render again with the returned mapping.

All distinct sources of a tree are loaded concurrently, each with its own
timeout. A failed or timed-out image is logged and left out of the result;
it never fails the whole batch. Cancelling the caller cancels every
outstanding load.

Examples
--------
    >>> import asyncio
    >>> from maestromd import parse
    >>> tree = parse("![dot](data:image/png;base64,iVBORw0KGgo=)")
    >>> images = asyncio.run(resolve_images(tree))
    >>> images["data:image/png;base64,iVBORw0KGgo="].media_type
    'image/png'

"""

from __future__ import annotations

import asyncio
import base64
import binascii
import dataclasses
import logging
import mimetypes
import os
from dataclasses import dataclass
from email.message import Message
from pathlib import Path
from types import TracebackType
from typing import Any, Awaitable, Iterable, Optional, Protocol, Union
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

from maestromd.ast.nodes import Node
from maestromd.ast.utils import collect_image_sources
from maestromd.constants import DEFAULT_USER_AGENT, DEPS_NETWORK, ENV_DISABLE_NETWORK, ENV_USER_AGENT
from maestromd.exceptions import ImageResolutionError, NetworkSecurityError
from maestromd.options.images import ImageResolverOptions
from maestromd.utils.decorators import requires_dependencies
from maestromd.utils.urls import resolve_url

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class ResolvedImage:
    """An image loaded into memory.

    Parameters
    ----------
    source : str
        Image source as written in the note (the key in resolved mappings)
    url : str
        URL the image was actually loaded from, after base URL resolution
    data : bytes
        Raw image bytes
    media_type : str
        MIME type, e.g. ``"image/png"``
    alt_text : str, default ""
        Alt text of the first image that referenced the source

    """

    source: str
    url: str
    data: bytes = dataclasses.field(repr=False)
    media_type: str
    alt_text: str = ""

    @property
    def size(self) -> int:
        """Size of the image data in bytes."""
        return len(self.data)


class ImageLoader(Protocol):
    """Callable that loads one image and raises on failure."""

    def __call__(self, url: str, alt_text: str) -> Awaitable[ResolvedImage]: ...


def is_network_disabled() -> bool:
    """Check if network access is globally disabled via environment variable.

    Returns
    -------
    bool
        True if ``MAESTROMD_DISABLE_NETWORK`` is set to a true value

    """
    return os.getenv(ENV_DISABLE_NETWORK, "").lower() in ("true", "1", "yes", "on")


def _parse_content_type(content_type: str) -> str:
    """Extract the lowercased main MIME type from a Content-Type header.

    Examples
    --------
    >>> _parse_content_type("image/png; charset=utf-8")
    'image/png'

    """
    if not content_type:
        return ""
    msg = Message()
    msg["content-type"] = content_type
    return msg.get_content_type().lower()


class HttpxImageLoader:
    """Default image loader built on :class:`httpx.AsyncClient`.

    Supports ``http``/``https`` (streamed, with a size cap), ``data:`` URIs
    and local files (``file:`` URLs or plain paths). Use it as an async
    context manager to share one HTTP connection pool across many loads;
    outside a context every HTTP load opens its own client.

    Parameters
    ----------
    options : ImageResolverOptions or None, default = None
        Loader limits and policies
    transport : httpx.AsyncBaseTransport or None, default = None
        Custom transport, e.g. ``httpx.MockTransport`` in tests

    """

    def __init__(self, options: ImageResolverOptions | None = None, transport: Any = None):
        self.options = options or ImageResolverOptions()
        self.transport = transport
        self._client: Any = None

    @property
    def user_agent(self) -> str:
        return self.options.user_agent or os.getenv(ENV_USER_AGENT) or DEFAULT_USER_AGENT

    @requires_dependencies("images", DEPS_NETWORK)
    def _create_client(self) -> Any:
        import httpx

        return httpx.AsyncClient(
            timeout=self.options.timeout,
            follow_redirects=self.options.follow_redirects,
            max_redirects=self.options.max_redirects,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    async def __aenter__(self) -> HttpxImageLoader:
        self._client = self._create_client()
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        client, self._client = self._client, None
        await client.__aexit__(exc_type, exc_val, exc_tb)

    async def __call__(self, url: str, alt_text: str = "") -> ResolvedImage:
        """Load one image.

        Parameters
        ----------
        url : str
            Absolute URL, ``data:`` URI or local path
        alt_text : str, default ""
            Alt text recorded on the result

        Returns
        -------
        ResolvedImage
            The loaded image

        Raises
        ------
        NetworkSecurityError
            If the scheme is not allowed or network access is disabled
        ImageResolutionError
            If the image cannot be loaded or fails validation

        """
        scheme = urlparse(url).scheme.lower()
        # Single letters are Windows drive letters, not schemes
        if len(scheme) <= 1:
            scheme = "file"
        if scheme not in self.options.allowed_schemes:
            raise NetworkSecurityError(f"Image URL scheme not allowed: {scheme}")

        if scheme == "data":
            data, media_type = self._decode_data_uri(url)
        elif scheme == "file":
            data, media_type = await self._read_file(url)
        elif scheme in ("http", "https"):
            data, media_type = await self._fetch(url)
        else:
            raise NetworkSecurityError(f"Unsupported image URL scheme: {scheme}")

        self._check_media_type(url, media_type)
        logger.debug("Loaded image %s (%d bytes, %s)", url[:80], len(data), media_type)
        return ResolvedImage(source=url, url=url, data=data, media_type=media_type, alt_text=alt_text)

    def _check_size(self, url: str, size: int) -> None:
        if size > self.options.max_size_bytes:
            raise ImageResolutionError(
                f"Image too large: {size} bytes (max: {self.options.max_size_bytes})",
                source=url,
            )

    def _check_media_type(self, url: str, media_type: str) -> None:
        if self.options.require_image_content_type and not media_type.startswith("image/"):
            raise ImageResolutionError(f"Not an image: {media_type or 'unknown type'}", source=url)

    def _decode_data_uri(self, url: str) -> tuple[bytes, str]:
        header, separator, payload = url[len("data:") :].partition(",")
        if not separator:
            raise ImageResolutionError("Malformed data URI", source=url[:80])

        parameters = header.split(";")
        media_type = parameters[0].strip().lower() or "text/plain"
        try:
            if "base64" in (parameter.strip().lower() for parameter in parameters[1:]):
                data = base64.b64decode(unquote_to_bytes(payload), validate=True)
            else:
                data = unquote_to_bytes(payload)
        except (binascii.Error, ValueError) as e:
            raise ImageResolutionError("Invalid base64 data URI", source=url[:80], original_error=e) from e

        self._check_size(url[:80], len(data))
        return data, media_type

    async def _read_file(self, url: str) -> tuple[bytes, str]:
        parsed = urlparse(url)
        path = Path(url2pathname(parsed.path)) if parsed.scheme.lower() == "file" else Path(url)
        try:
            size = path.stat().st_size
            self._check_size(url, size)
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ImageResolutionError(f"Cannot read image file: {path}", source=url, original_error=e) from e

        media_type = mimetypes.guess_type(path.name)[0] or ""
        return data, media_type

    async def _fetch(self, url: str) -> tuple[bytes, str]:
        if is_network_disabled():
            raise NetworkSecurityError(
                f"Network access is globally disabled via {ENV_DISABLE_NETWORK} environment variable"
            )

        if self._client is not None:
            return await self._stream(self._client, url)
        async with self._create_client() as client:
            return await self._stream(client, url)

    async def _stream(self, client: Any, url: str) -> tuple[bytes, str]:
        import httpx

        try:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                media_type = _parse_content_type(response.headers.get("content-type", ""))
                self._check_media_type(url, media_type)

                declared = response.headers.get("content-length")
                if declared and declared.isdigit():
                    self._check_size(url, int(declared))

                chunks = []
                total_size = 0
                async for chunk in response.aiter_bytes(chunk_size=_CHUNK_SIZE):
                    total_size += len(chunk)
                    self._check_size(url, total_size)
                    chunks.append(chunk)
        except httpx.HTTPError as e:
            raise ImageResolutionError(f"HTTP request failed for {url}: {e}", source=url, original_error=e) from e

        if total_size == 0:
            raise ImageResolutionError("Empty response received", source=url)
        return b"".join(chunks), media_type


async def _resolve_one(
    loader: ImageLoader, source: str, alt_text: str, base_url: Optional[str], timeout: Optional[float]
) -> Optional[ResolvedImage]:
    url = resolve_url(source, base_url)
    try:
        if timeout is None:
            image = await loader(url, alt_text)
        else:
            image = await asyncio.wait_for(loader(url, alt_text), timeout)
    except asyncio.TimeoutError:
        logger.warning("Timed out after %ss loading image %s", timeout, source[:80])
        return None
    except Exception as e:
        # Per-image failures are recovered here; cancellation is a BaseException and propagates
        logger.warning("Failed to load image %s: %s", source[:80], e)
        return None
    return dataclasses.replace(image, source=source, alt_text=image.alt_text or alt_text)


async def resolve_images(
    node_or_inlines: Union[Node, Iterable[Node]],
    loader: Optional[ImageLoader] = None,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    options: Optional[ImageResolverOptions] = None,
) -> dict[str, ResolvedImage]:
    """Load every distinct image referenced by a tree or inline sequence.

    Parameters
    ----------
    node_or_inlines : Node or iterable of Node
        Document, block or inline content to scan for images
    loader : ImageLoader or None, default = None
        Async callable loading one image. Defaults to
        :class:`HttpxImageLoader`.
    base_url : str or None, default = None
        Base URL that relative sources are resolved against
    timeout : float or None, default = None
        Per-image timeout in seconds; defaults to ``options.timeout``
    options : ImageResolverOptions or None, default = None
        Options for the default loader and the default timeout

    Returns
    -------
    dict[str, ResolvedImage]
        Loaded images keyed by source as written in the note. Failed and
        timed-out images are absent.

    """
    options = options or ImageResolverOptions()
    effective_timeout = timeout if timeout is not None else options.timeout
    sources = collect_image_sources(node_or_inlines)
    if not sources:
        return {}

    logger.debug("Resolving %d distinct image source(s)", len(sources))

    async def gather_with(active_loader: ImageLoader) -> list[Optional[ResolvedImage]]:
        return await asyncio.gather(
            *(_resolve_one(active_loader, source, alt, base_url, effective_timeout) for source, alt in sources)
        )

    if loader is None:
        async with HttpxImageLoader(options) as default_loader:
            results = await gather_with(default_loader)
    else:
        results = await gather_with(loader)

    resolved = {image.source: image for image in results if image is not None}
    logger.debug("Resolved %d of %d image(s)", len(resolved), len(sources))
    return resolved


def resolve_images_sync(
    node_or_inlines: Union[Node, Iterable[Node]],
    loader: Optional[ImageLoader] = None,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    options: Optional[ImageResolverOptions] = None,
) -> dict[str, ResolvedImage]:
    """Run :func:`resolve_images` for synchronous callers.

    Must not be called from inside a running event loop; use
    ``await resolve_images(...)`` there instead.
    """
    return asyncio.run(
        resolve_images(node_or_inlines, loader, base_url=base_url, timeout=timeout, options=options)
    )


__all__ = [
    "ResolvedImage",
    "ImageLoader",
    "HttpxImageLoader",
    "is_network_disabled",
    "resolve_images",
    "resolve_images_sync",
]

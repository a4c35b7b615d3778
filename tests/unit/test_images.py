#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_images.py
"""Unit tests for image loading and concurrent image resolution.

Tests cover:
- HttpxImageLoader over a mock HTTP transport, data URIs and local files
- Size, content type, scheme and network policy checks
- User-Agent selection
- resolve_images: deduplication, keys, failures, timeouts, concurrency
  and cancellation

"""

import asyncio
import logging

import httpx
import pytest
from utils import MINIMAL_PNG_BYTES, MINIMAL_PNG_DATA_URI, FakeImageLoader

from maestromd.exceptions import ImageResolutionError, NetworkSecurityError
from maestromd.images import HttpxImageLoader, ResolvedImage, resolve_images, resolve_images_sync
from maestromd.options import ImageResolverOptions
from maestromd.parsers.markdown import MarkdownParser


def png_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=MINIMAL_PNG_BYTES, headers={"content-type": "image/png"})


def load(url: str, handler=png_handler, options: ImageResolverOptions | None = None) -> ResolvedImage:
    async def run() -> ResolvedImage:
        async with HttpxImageLoader(options, transport=httpx.MockTransport(handler)) as loader:
            return await loader(url, "alt")

    return asyncio.run(run())


@pytest.mark.unit
@pytest.mark.network
class TestHttpLoading:
    """Tests for HTTP loading through a mock transport."""

    def test_fetch_png(self) -> None:
        """Test a successful image download."""
        image = load("https://img.example/a.png")
        assert image.data == MINIMAL_PNG_BYTES
        assert image.media_type == "image/png"
        assert image.url == "https://img.example/a.png"
        assert image.alt_text == "alt"
        assert image.size == len(MINIMAL_PNG_BYTES)

    def test_content_type_parameters_ignored(self) -> None:
        """Test that Content-Type parameters do not affect the media type."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=MINIMAL_PNG_BYTES, headers={"content-type": "IMAGE/PNG; q=1"})

        assert load("https://img.example/a.png", handler).media_type == "image/png"

    def test_non_image_rejected(self) -> None:
        """Test that a non-image response is an error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html></html>", headers={"content-type": "text/html"})

        with pytest.raises(ImageResolutionError):
            load("https://img.example/a.png", handler)

    def test_non_image_allowed_when_not_required(self) -> None:
        """Test that the content type check can be disabled."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"bytes", headers={"content-type": "application/octet-stream"})

        options = ImageResolverOptions(require_image_content_type=False)
        assert load("https://img.example/a.bin", handler, options).data == b"bytes"

    def test_http_error_status(self) -> None:
        """Test that a 404 becomes an image resolution error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        with pytest.raises(ImageResolutionError) as exc_info:
            load("https://img.example/missing.png", handler)
        assert exc_info.value.source == "https://img.example/missing.png"

    def test_oversize_rejected(self) -> None:
        """Test that payloads over the size limit are rejected."""
        with pytest.raises(ImageResolutionError):
            load("https://img.example/a.png", options=ImageResolverOptions(max_size_bytes=10))

    def test_empty_response_rejected(self) -> None:
        """Test that an empty body is an error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"", headers={"content-type": "image/png"})

        with pytest.raises(ImageResolutionError):
            load("https://img.example/a.png", handler)

    def test_default_user_agent(self) -> None:
        """Test the library User-Agent header."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["user-agent"])
            return png_handler(request)

        load("https://img.example/a.png", handler)
        assert seen == ["maestromd/0.1"]

    def test_user_agent_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the environment overrides the default User-Agent."""
        monkeypatch.setenv("MAESTROMD_USER_AGENT", "notes-app/2")
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["user-agent"])
            return png_handler(request)

        load("https://img.example/a.png", handler)
        assert seen == ["notes-app/2"]

    def test_user_agent_option_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an explicit User-Agent beats the environment."""
        monkeypatch.setenv("MAESTROMD_USER_AGENT", "notes-app/2")
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["user-agent"])
            return png_handler(request)

        load("https://img.example/a.png", handler, ImageResolverOptions(user_agent="custom/1"))
        assert seen == ["custom/1"]

    def test_loader_without_context(self) -> None:
        """Test that a loader works without entering its context."""
        loader = HttpxImageLoader(transport=httpx.MockTransport(png_handler))
        image = asyncio.run(loader("https://img.example/a.png", ""))
        assert image.data == MINIMAL_PNG_BYTES

    def test_network_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that HTTP loads fail when the network is disabled."""
        monkeypatch.setenv("MAESTROMD_DISABLE_NETWORK", "1")
        with pytest.raises(NetworkSecurityError):
            load("https://img.example/a.png")


@pytest.mark.unit
class TestLocalLoading:
    """Tests for data URIs, files and scheme policy."""

    def test_data_uri(self) -> None:
        """Test decoding a base64 data URI."""
        image = asyncio.run(HttpxImageLoader()(MINIMAL_PNG_DATA_URI, "dot"))
        assert image.data == MINIMAL_PNG_BYTES
        assert image.media_type == "image/png"

    def test_data_uri_works_with_network_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that data URIs need no network access."""
        monkeypatch.setenv("MAESTROMD_DISABLE_NETWORK", "true")
        assert asyncio.run(HttpxImageLoader()(MINIMAL_PNG_DATA_URI)).size == len(MINIMAL_PNG_BYTES)

    def test_invalid_base64(self) -> None:
        """Test that broken base64 payloads are rejected."""
        with pytest.raises(ImageResolutionError):
            asyncio.run(HttpxImageLoader()("data:image/png;base64,@@@@"))

    def test_non_image_data_uri(self) -> None:
        """Test that a text data URI is not an image."""
        with pytest.raises(ImageResolutionError):
            asyncio.run(HttpxImageLoader()("data:text/plain,hello"))

    def test_plain_path_is_file(self, tmp_path) -> None:
        """Test loading a local file by plain path."""
        path = tmp_path / "dot.png"
        path.write_bytes(MINIMAL_PNG_BYTES)
        image = asyncio.run(HttpxImageLoader()(str(path)))
        assert image.data == MINIMAL_PNG_BYTES
        assert image.media_type == "image/png"

    def test_file_url(self, tmp_path) -> None:
        """Test loading a local file by file URL."""
        path = tmp_path / "dot.png"
        path.write_bytes(MINIMAL_PNG_BYTES)
        image = asyncio.run(HttpxImageLoader()(path.as_uri()))
        assert image.data == MINIMAL_PNG_BYTES

    def test_missing_file(self, tmp_path) -> None:
        """Test that a missing file is an image resolution error."""
        with pytest.raises(ImageResolutionError):
            asyncio.run(HttpxImageLoader()(str(tmp_path / "missing.png")))

    def test_disallowed_scheme(self) -> None:
        """Test that schemes outside the allow-list are blocked."""
        with pytest.raises(NetworkSecurityError):
            asyncio.run(HttpxImageLoader()("ftp://files.example/a.png"))

    def test_restricted_schemes(self) -> None:
        """Test that removing a scheme from the allow-list blocks it."""
        loader = HttpxImageLoader(ImageResolverOptions(allowed_schemes=("https",)))
        with pytest.raises(NetworkSecurityError):
            asyncio.run(loader(MINIMAL_PNG_DATA_URI))

    def test_invalid_options(self) -> None:
        """Test option validation."""
        with pytest.raises(ValueError):
            ImageResolverOptions(timeout=0)
        with pytest.raises(ValueError):
            ImageResolverOptions(allowed_schemes=())


@pytest.mark.unit
class TestResolveImages:
    """Tests for concurrent resolution of a tree's images."""

    def test_deduplicates_sources(self) -> None:
        """Test that each distinct source is loaded once."""
        tree = MarkdownParser().parse("![a](x.png) ![b](x.png) ![c](y.png)")
        loader = FakeImageLoader()
        images = asyncio.run(resolve_images(tree, loader))
        assert sorted(loader.calls) == ["x.png", "y.png"]
        assert set(images) == {"x.png", "y.png"}
        assert images["x.png"].alt_text == "a"

    def test_keys_are_sources_as_written(self) -> None:
        """Test that results are keyed by source, not by resolved URL."""
        tree = MarkdownParser().parse("![a](img/x.png)")
        loader = FakeImageLoader()
        images = asyncio.run(resolve_images(tree, loader, base_url="https://notes.example/"))
        assert loader.calls == ["https://notes.example/img/x.png"]
        assert images["img/x.png"].url == "https://notes.example/img/x.png"
        assert images["img/x.png"].source == "img/x.png"

    def test_no_images(self) -> None:
        """Test that a tree without images needs no loads."""
        loader = FakeImageLoader()
        assert asyncio.run(resolve_images(MarkdownParser().parse("text only"), loader)) == {}
        assert loader.calls == []

    def test_failure_is_omitted_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that one failing image does not fail the batch."""
        tree = MarkdownParser().parse("![a](bad.png) ![b](good.png)")
        loader = FakeImageLoader(failing={"bad.png"})
        with caplog.at_level(logging.WARNING, logger="maestromd.images"):
            images = asyncio.run(resolve_images(tree, loader))
        assert set(images) == {"good.png"}
        assert any("bad.png" in record.getMessage() for record in caplog.records)

    def test_timeout_is_omitted(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a slow image times out without blocking the others."""
        tree = MarkdownParser().parse("![a](slow.png) ![b](fast.png)")
        loader = FakeImageLoader(slow={"slow.png"})
        with caplog.at_level(logging.WARNING, logger="maestromd.images"):
            images = asyncio.run(resolve_images(tree, loader, timeout=0.05))
        assert set(images) == {"fast.png"}
        assert loader.cancelled == ["slow.png"]
        assert any("Timed out" in record.getMessage() for record in caplog.records)

    def test_loads_run_concurrently(self) -> None:
        """Test that loads overlap instead of running one after another."""

        async def run() -> dict[str, ResolvedImage]:
            started: list[str] = []
            all_started = asyncio.Event()

            async def on_call(url: str) -> None:
                started.append(url)
                if len(started) == 2:
                    all_started.set()
                await asyncio.wait_for(all_started.wait(), 2)

            tree = MarkdownParser().parse("![a](one.png) ![b](two.png)")
            return await resolve_images(tree, FakeImageLoader(on_call=on_call))

        assert set(asyncio.run(run())) == {"one.png", "two.png"}

    def test_cancellation_propagates(self) -> None:
        """Test that cancelling the caller cancels outstanding loads."""
        loader = FakeImageLoader(slow={"slow.png"})

        async def run() -> None:
            tree = MarkdownParser().parse("![a](slow.png)")
            task = asyncio.create_task(resolve_images(tree, loader, timeout=None))
            await asyncio.sleep(0.05)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(run())
        assert loader.cancelled == ["slow.png"]

    def test_inline_sequence(self) -> None:
        """Test resolving images of an inline sequence."""
        paragraph = MarkdownParser().parse("see ![a](x.png)")[0]
        images = asyncio.run(resolve_images(paragraph.content, FakeImageLoader()))
        assert set(images) == {"x.png"}

    def test_default_loader_with_data_uri(self) -> None:
        """Test the default loader end to end on an inline data URI."""
        tree = MarkdownParser().parse(f"![dot]({MINIMAL_PNG_DATA_URI})")
        images = asyncio.run(resolve_images(tree))
        assert images[MINIMAL_PNG_DATA_URI].data == MINIMAL_PNG_BYTES

    def test_sync_wrapper(self) -> None:
        """Test the synchronous wrapper."""
        tree = MarkdownParser().parse("![a](x.png)")
        assert set(resolve_images_sync(tree, FakeImageLoader())) == {"x.png"}

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_utils.py
"""Unit tests for URL, HTML, dependency and logging helpers.

Tests cover:
- URL classification, sanitizing and resolution
- Raw HTML passthrough modes and inline tag filtering
- requires_dependencies and version checks
- debug_timer
- configure_logging

"""

import logging

import pytest

from maestromd.exceptions import DependencyError
from maestromd.logging_utils import HTTP_LOGGERS, configure_logging
from maestromd.utils.decorators import debug_timer, requires_dependencies
from maestromd.utils.html_utils import (
    escape_html,
    sanitize_html_content,
    sanitize_html_string,
    sanitize_inline_html,
)
from maestromd.utils.packages import check_version_requirement, get_package_version
from maestromd.utils.urls import is_relative_url, is_url_scheme_dangerous, resolve_url, sanitize_url


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    http_levels = {name: logging.getLogger(name).level for name in HTTP_LOGGERS}
    yield root
    for name, http_level in http_levels.items():
        logging.getLogger(name).setLevel(http_level)
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestUrls:
    """Tests for URL helpers."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("images/plan.png", True),
            ("", True),
            ("https://example.com/a.png", False),
            ("file:///tmp/a.png", False),
        ],
    )
    def test_is_relative_url(self, url: str, expected: bool) -> None:
        """Test relative URL detection."""
        assert is_relative_url(url) is expected

    @pytest.mark.parametrize(
        "url",
        ["javascript:alert(1)", "  JavaScript:alert(1)", "vbscript:x", "data:text/html,<b>x</b>", "about:blank"],
    )
    def test_dangerous_schemes(self, url: str) -> None:
        """Test that script-capable schemes are flagged."""
        assert is_url_scheme_dangerous(url) is True

    @pytest.mark.parametrize("url", ["https://example.com", "mailto:a@b.c", "data:image/png;base64,AA", "a.png", ""])
    def test_safe_schemes(self, url: str) -> None:
        """Test that ordinary schemes are not flagged."""
        assert is_url_scheme_dangerous(url) is False

    def test_sanitize_url(self) -> None:
        """Test that dangerous URLs are replaced by an empty string."""
        assert sanitize_url("javascript:alert(1)") == ""
        assert sanitize_url("https://example.com") == "https://example.com"

    @pytest.mark.parametrize(
        "url,base,expected",
        [
            ("img/a.png", "https://notes.example/page/", "https://notes.example/page/img/a.png"),
            ("../a.png", "https://notes.example/page/", "https://notes.example/a.png"),
            ("https://cdn.example/a.png", "https://notes.example/", "https://cdn.example/a.png"),
            ("#top", "https://notes.example/", "#top"),
            ("img/a.png", None, "img/a.png"),
        ],
    )
    def test_resolve_url(self, url: str, base, expected: str) -> None:
        """Test resolution against a base URL."""
        assert resolve_url(url, base) == expected


@pytest.mark.unit
class TestHtmlUtils:
    """Tests for HTML escaping and raw HTML handling."""

    def test_escape_html(self) -> None:
        """Test escaping and its switch."""
        assert escape_html("<a & b>") == "&lt;a &amp; b&gt;"
        assert escape_html("<a>", enabled=False) == "<a>"

    def test_passthrough_modes(self) -> None:
        """Test each passthrough mode on the same content."""
        content = "<b>x</b>"
        assert sanitize_html_content(content, "pass-through") == content
        assert sanitize_html_content(content, "escape") == "&lt;b&gt;x&lt;/b&gt;"
        assert sanitize_html_content(content, "drop") == ""
        assert sanitize_html_content(content, "sanitize") == content

    def test_unknown_mode(self) -> None:
        """Test that an unknown mode is rejected."""
        with pytest.raises(ValueError):
            sanitize_html_content("x", "allow")  # type: ignore[arg-type]

    def test_sanitize_strips_attributes(self) -> None:
        """Test that event handler attributes are removed."""
        assert sanitize_html_string('<p onclick="x()">a</p>') == "<p>a</p>"

    def test_sanitize_removes_comments(self) -> None:
        """Test that comments are removed."""
        assert sanitize_html_string("a<!-- c -->b") == "ab"

    def test_sanitize_keeps_highlight_marker(self) -> None:
        """Test that search markers survive sanitizing."""
        marker = '<mark data-sqlmaestro="match">x</mark>'
        assert sanitize_html_string(marker) == marker

    @pytest.mark.parametrize(
        "fragment,expected",
        [
            ('<mark data-sqlmaestro="active" onclick="x()">', '<mark data-sqlmaestro="active">'),
            ("</mark>", "</mark>"),
            ("<br>", "<br>"),
            ("<br/>", "<br>"),
            ("<script>", ""),
            ("</script>", ""),
            ("<SPAN class='a'>", '<span class="a">'),
            ('<a href="javascript:alert(1)" title="t">', '<a title="t">'),
            ('<a href="https://example.com">', '<a href="https://example.com">'),
        ],
    )
    def test_sanitize_inline_tag(self, fragment: str, expected: str) -> None:
        """Test single tag filtering against the allow-list."""
        assert sanitize_inline_html(fragment) == expected


@pytest.mark.unit
class TestDependencies:
    """Tests for dependency checks."""

    def test_installed_package_version(self) -> None:
        """Test that an installed distribution reports a version."""
        assert get_package_version("rich")

    def test_missing_package_version(self) -> None:
        """Test that an unknown distribution has no version."""
        assert get_package_version("maestromd-no-such-distribution") is None
        assert check_version_requirement("maestromd-no-such-distribution", ">=1") == (False, None)

    def test_requirement_met(self) -> None:
        """Test a satisfied version requirement."""
        met, installed = check_version_requirement("rich", ">=1.0")
        assert met is True
        assert installed

    def test_missing_dependency_raises(self) -> None:
        """Test that a missing module raises before the call."""
        calls = []

        @requires_dependencies("example", [("no-such-dist", "maestromd_no_such_module", "")])
        def run():
            calls.append(1)

        with pytest.raises(DependencyError) as exc_info:
            run()
        assert calls == []
        assert "'no-such-dist'" in str(exc_info.value)
        assert exc_info.value.missing_packages == [("no-such-dist", "")]

    def test_version_mismatch_raises(self) -> None:
        """Test that an outdated install is reported."""

        @requires_dependencies("example", [("rich", "rich", ">=9999")])
        def run():
            return 1

        with pytest.raises(DependencyError) as exc_info:
            run()
        assert "version mismatches" in str(exc_info.value)

    def test_satisfied_dependency_calls_through(self) -> None:
        """Test that the wrapped function runs when dependencies are present."""

        @requires_dependencies("example", [("rich", "rich", "")])
        def run(value):
            return value * 2

        assert run(2) == 4


@pytest.mark.unit
class TestLogging:
    """Tests for logging helpers."""

    def test_debug_timer_logs_at_debug(self, caplog) -> None:
        """Test that the elapsed time is logged when DEBUG is enabled."""
        logger = logging.getLogger("maestromd.tests.timer")
        with caplog.at_level(logging.DEBUG, logger="maestromd.tests.timer"):
            with debug_timer(logger, "Rendering (html)"):
                pass
        assert any("Rendering (html) completed in" in record.getMessage() for record in caplog.records)

    def test_debug_timer_silent_above_debug(self, caplog) -> None:
        """Test that nothing is logged above DEBUG."""
        logger = logging.getLogger("maestromd.tests.timer")
        with caplog.at_level(logging.INFO, logger="maestromd.tests.timer"):
            with debug_timer(logger, "Rendering (html)"):
                pass
        assert caplog.records == []

    def test_configure_logging_level_name(self, restore_root_logger) -> None:
        """Test that a level name is resolved and one handler installed."""
        root = configure_logging("warning")
        assert root is logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_configure_logging_file(self, restore_root_logger, tmp_path) -> None:
        """Test teeing log output to a file."""
        log_file = tmp_path / "maestromd.log"
        root = configure_logging(logging.INFO, log_file=str(log_file), trace_mode=True)
        assert len(root.handlers) == 2
        logging.getLogger("maestromd.tests").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_configure_logging_quiets_http_stack(self, restore_root_logger) -> None:
        """Test that httpx request logging is held at the HTTP level."""
        configure_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        configure_logging("DEBUG", http_log_level="info")
        assert logging.getLogger("httpcore").level == logging.INFO

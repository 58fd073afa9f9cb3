"""Unit tests for guestpin_cli.output module."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from guestpin_cli import output


@pytest.fixture
def plain_console() -> Generator[None, None, None]:
    """Swap in a colorless console for the duration of a test."""
    original_console = output.console
    output.console = output.create_console(no_color=True)
    try:
        yield
    finally:
        output.console = original_console


class TestCreateConsole:
    """Tests for create_console function."""

    def test_create_console_no_color(self) -> None:
        console = output.create_console(no_color=True)
        assert console.no_color is True


@pytest.mark.usefixtures("plain_console")
class TestMessages:
    """Tests for success/error/warning/info."""

    def test_success_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.success("Generated 1 binding(s)")
        captured = capsys.readouterr()
        assert "Generated 1 binding(s)" in captured.out
        assert "✓" in captured.out

    def test_error_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.error("artifact unreadable")
        captured = capsys.readouterr()
        assert "artifact unreadable" in captured.out
        assert "✗" in captured.out

    def test_warning_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.warning("Artifact not built yet")
        captured = capsys.readouterr()
        assert "Artifact not built yet" in captured.out
        assert "⚠" in captured.out

    def test_markup_is_printed_literally(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.info("crate [bold]adder[/bold]")
        captured = capsys.readouterr()
        assert "[bold]adder[/bold]" in captured.out

    def test_print_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.print_json({"crate_name": "adder", "exists": True})
        captured = capsys.readouterr()
        assert '"crate_name": "adder"' in captured.out
        assert '"exists": true' in captured.out


class TestSetNoColor:
    """Tests for set_no_color()."""

    def test_replaces_console(self) -> None:
        original_console = output.console
        try:
            output.set_no_color(True)
            assert output.console is not original_console
            assert output.console.no_color is True
        finally:
            output.console = original_console

"""Tests for pstore.output.console module."""

from __future__ import annotations

import pytest

from pstore.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_error_and_warning_prefixes(self) -> None:
        console = MockConsole()
        console.error("upload failed")
        console.warning("could not delete edit")
        assert console.messages == ["error: upload failed", "warning: could not delete edit"]
        assert console.has_error()
        assert console.has_warning()

    def test_debug_captured_when_verbose(self) -> None:
        console = MockConsole(verbose=True)
        console.debug("created edit 1")
        assert console.outputs[0].style == Style.DIM

    def test_debug_dropped_when_quiet(self) -> None:
        console = MockConsole(verbose=False)
        console.debug("created edit 1")
        assert console.outputs == []

    def test_find(self) -> None:
        console = MockConsole()
        console.print("app.aab: 1 KB / 2 KB", Style.DIM)
        console.print("other")
        assert len(console.find("app.aab")) == 1


class TestRichConsole:
    def test_debug_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(verbose=False).debug("hidden trace")
        RichConsole(verbose=True).debug("shown trace")

        out = capsys.readouterr().out
        assert "hidden trace" not in out
        assert "shown trace" in out

    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().error("boom")

        captured = capsys.readouterr()
        assert "boom" in captured.err
        assert "boom" not in captured.out

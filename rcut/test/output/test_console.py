"""Tests for rcut.output.console module."""

from __future__ import annotations

import pytest

from rcut.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)
from rcut.output.errors import print_release_error
from rcut.services.release.errors import ReleaseError


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"
        assert str(Style.DEFAULT) == "default"


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs == [OutputRecord("hello", Style.DEFAULT)]

    def test_shortcuts(self) -> None:
        console = MockConsole()
        console.success("tagged")
        console.error("push rejected")
        console.warning("dirty tree")
        console.info("dry run")
        console.header("Checking preconditions")

        assert console.messages == [
            "OK tagged",
            "error: push rejected",
            "warning: dirty tree",
            "info: dry run",
            "Checking preconditions",
        ]
        assert [o.style for o in console.outputs] == [
            Style.SUCCESS,
            Style.ERROR,
            Style.WARNING,
            Style.INFO,
            Style.HEADER,
        ]

    def test_command_is_shell_quoted(self) -> None:
        console = MockConsole()
        console.command(["git", "commit", "-m", "Release 1.2.3 (widget-1.2.3-rc0)"])

        assert console.outputs[0].style == Style.DIM
        assert console.commands == ["git commit -m 'Release 1.2.3 (widget-1.2.3-rc0)'"]

    def test_commands_ignores_other_output(self) -> None:
        console = MockConsole()
        console.print("plain")
        console.command(["gpg", "--version"])
        assert console.commands == ["gpg --version"]

    def test_panel(self) -> None:
        console = MockConsole()
        console.panel("Vote email", "To: dev@example.org")
        assert console.text == "Vote email\nTo: dev@example.org"

    def test_clear(self) -> None:
        console = MockConsole()
        console.print("one")
        console.newline()
        console.clear()
        assert console.outputs == []

    def test_has_error_and_warning(self) -> None:
        console = MockConsole()
        assert console.has_error() is False
        assert console.has_warning() is False
        console.error("oops")
        console.warning("hmm")
        assert console.has_error() is True
        assert console.has_warning() is True

    def test_find(self) -> None:
        console = MockConsole()
        console.print("hello world")
        console.print("hello there")
        console.print("goodbye")
        matches = console.find("hello")
        assert [m.message for m in matches] == ["hello world", "hello there"]


class TestRichConsole:
    def test_satisfies_protocol(self) -> None:
        def accept_console(_c: ConsoleProtocol) -> bool:
            return True

        assert accept_console(RichConsole())

    def test_markup_is_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.success("[bold]widget[/bold]")
        console.command(["git", "tag", "-m", "[rc]", "t"])

        out = capsys.readouterr().out
        assert "OK [bold]widget[/bold]" in out
        assert "$ git tag -m '[rc]' t" in out

    def test_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=True).error("boom")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: boom" in captured.err


class TestReleaseErrorOutput:
    def test_pre_mutation_error(self) -> None:
        console = MockConsole()
        error = ReleaseError(
            kind="precondition_failed",
            message="working tree is not clean",
            hint="Commit or stash your changes.",
            before_mutation=True,
        )

        print_release_error(error, console)

        assert console.messages == [
            "error: working tree is not clean",
            "hint: Commit or stash your changes.",
            "the repository was not modified",
        ]

    def test_mutation_error_has_no_reassurance(self) -> None:
        console = MockConsole()
        error = ReleaseError(kind="sign_failed", message="gpg failed")

        print_release_error(error, console)

        assert console.messages == ["error: gpg failed"]

    def test_reassurance_follows_phase_not_kind(self) -> None:
        console = MockConsole()
        # a fetch failure during the checks
        error = ReleaseError(kind="git_failed", message="fetch failed", before_mutation=True)

        print_release_error(error, console)

        assert console.messages == ["error: fetch failed", "the repository was not modified"]

    def test_precondition_kind_after_mutation(self) -> None:
        console = MockConsole()
        error = ReleaseError(kind="precondition_failed", message="late check")

        print_release_error(error, console)

        assert console.messages == ["error: late check"]

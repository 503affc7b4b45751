from __future__ import annotations

from pathlib import Path

import pytest

from rcut.output.console import MockConsole
from rcut.services.release.planner import plan_versions
from rcut.services.release.rollback import rollback_advice, rollback_commands
from rcut.services.release.semver import Version


def _versions():
    return plan_versions(base=Version(1, 2, 3), level="patch", rc_number=0, prefix="widget")


def test_rollback_commands() -> None:
    cmds = rollback_commands(main_branch="main", start_sha="abc123", versions=_versions())
    assert cmds == [
        ["git", "checkout", "main"],
        ["git", "reset", "--hard", "abc123"],
        ["git", "tag", "-d", "widget-1.2.3-rc0"],
        ["git", "branch", "-D", "1.2.3-rc0"],
    ]


def test_rollback_commands_unknown_start() -> None:
    cmds = rollback_commands(main_branch="main", start_sha=None, versions=_versions())
    assert cmds[1][-1] == "<commit before the release run>"


def test_disarmed_guard_prints_nothing() -> None:
    console = MockConsole()
    with rollback_advice(
        console=console, main_branch="main", start_sha="abc123", versions=_versions()
    ) as guard:
        guard.disarm()
    assert console.outputs == []


def test_armed_guard_prints_advice() -> None:
    console = MockConsole()
    with rollback_advice(
        console=console, main_branch="main", start_sha="abc123", versions=_versions()
    ):
        pass

    assert console.messages[0] == "Release aborted: manual rollback"
    assert console.has_warning()
    assert "1.2.4-SNAPSHOT" in console.text
    assert "  git reset --hard abc123" in console.messages
    assert "  git branch -D 1.2.3-rc0" in console.messages


def test_advice_printed_on_exception() -> None:
    console = MockConsole()
    with pytest.raises(RuntimeError):
        with rollback_advice(
            console=console, main_branch="main", start_sha="abc123", versions=_versions()
        ):
            raise RuntimeError("interrupted")

    assert "  git tag -d widget-1.2.3-rc0" in console.messages


def test_rollback_commands_remove_candidate_artifacts() -> None:
    cmds = rollback_commands(
        main_branch="main",
        start_sha="abc123",
        versions=_versions(),
        artifacts_dir=Path("dist/widget-1.2.3-rc0"),
    )
    assert cmds[-1] == ["rm", "-r", "dist/widget-1.2.3-rc0"]

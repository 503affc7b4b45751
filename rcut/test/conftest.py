from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` and return stdout (raises on failure)."""
    proc = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout


def init_repo(path: Path, *, version: str = "1.2.3-SNAPSHOT") -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-q", "-b", "main")
    git(path, "config", "user.email", "release@example.org")
    git(path, "config", "user.name", "Release Manager")
    git(path, "config", "commit.gpgsign", "false")
    git(path, "config", "tag.gpgsign", "false")
    (path / "VERSION").write_text(f"{version}\n", encoding="utf-8")
    (path / "README.md").write_text("# widget\n", encoding="utf-8")
    (path / ".gitignore").write_text("dist/\n", encoding="utf-8")
    git(path, "add", "-A")
    git(path, "commit", "-q", "-m", "Initial commit")
    return path


@pytest.fixture
def work_repo(tmp_path: Path) -> Path:
    """A ``widget`` repository on main with a bare ``origin`` it is pushed to."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    origin = tmp_path / "origin.git"
    git(tmp_path, "init", "-q", "--bare", "-b", "main", str(origin))

    work = init_repo(tmp_path / "widget")
    (work / "src.c").write_text("int main(void) { return 0; }\n", encoding="utf-8")
    git(work, "add", "src.c")
    git(work, "commit", "-q", "-m", "Add entry point")
    git(work, "remote", "add", "origin", str(origin))
    git(work, "push", "-q", "-u", "origin", "main")
    return work


@pytest.fixture
def run_git():
    return git


@pytest.fixture
def make_repo():
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    return init_repo

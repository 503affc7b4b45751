"""Git repository abstraction.

This module provides the Repository class wrapping every git operation a
release run needs. All operations return Result types for proper error
handling.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.status():
        case Ok(status):
            print(f"Branch: {status.branch}")
            if status.is_clean:
                print("Working tree clean")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rcut.core.result import Err, Ok, Result
from rcut.platform.process import ProcessError
from rcut.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "ls-remote"})

__all__ = [
    "GitError",
    "GitStatus",
    "LogEntry",
    "Repository",
    "StatusEntry",
    "find_toplevel",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"

    def pretty_xy(self) -> str:
        """Format XY with dots for spaces (". M" instead of " M")."""
        return self.xy.replace(" ", ".")


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed ``git status --porcelain=v1 -b`` output."""

    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True if working tree has no changes (untracked files included)."""
        return len(self.entries) == 0


@dataclass(frozen=True, slots=True)
class LogEntry:
    sha: str
    subject: str

    @property
    def short_sha(self) -> str:
        return self.sha[:8]


def _error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(command=command, message=e.detail or fallback, returncode=e.returncode)


def find_toplevel(start: Path) -> Result[Path, GitError]:
    """Return the root of the git working tree containing ``start``."""
    result = run_process(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=start,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(_error("rev-parse --show-toplevel", result.error, "not a git repository"))
    return Ok(Path(result.value.strip()))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def status(self) -> Result[GitStatus, GitError]:
        """Get repository status.

        Runs `git status --porcelain=v1 -b` and parses the output.
        """
        result = self._git(["status", "--porcelain=v1", "-b"], "status")
        if isinstance(result, Err):
            return result
        return Ok(self._parse_status(result.value))

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def head_sha(self, ref: str = "HEAD") -> Result[str, GitError]:
        """Full commit hash ``ref`` points at."""
        result = self._git(["rev-parse", "--verify", f"{ref}^{{commit}}"], "rev-parse")
        return result.map(str.strip)

    def fetch(self, remote: str) -> Result[str, GitError]:
        """Fetch branches and tags from ``remote``."""
        return self._git(["fetch", "--tags", remote], "fetch").map(str.strip)

    def remote_url(self, remote: str) -> Result[str, GitError]:
        return self._git(["remote", "get-url", remote], "remote get-url").map(str.strip)

    def list_tags(self, pattern: str = "*") -> Result[list[str], GitError]:
        """Tag names matching a glob ``pattern``."""
        result = self._git(["tag", "--list", pattern], "tag --list")
        if isinstance(result, Err):
            return result
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        result = self.list_tags(name)
        if isinstance(result, Err):
            return result
        return Ok(name in result.value)

    def branch_exists(self, name: str) -> Result[bool, GitError]:
        """True if a local branch ``name`` exists."""
        result = self._git(["branch", "--list", name], "branch --list")
        if isinstance(result, Err):
            return result
        # Lines look like "* main", "  1.2.3-rc0" or "+ worktree-branch".
        return Ok(any(ln[2:].strip() == name for ln in result.value.splitlines()))

    def log(self, rev_range: str) -> Result[list[LogEntry], GitError]:
        """Non-merge commits in ``rev_range``, newest first."""
        result = self._git(
            ["log", "--no-merges", "--pretty=format:%H%x09%s", rev_range],
            "log",
        )
        if isinstance(result, Err):
            return result

        entries: list[LogEntry] = []
        for line in result.value.splitlines():
            if not line.strip():
                continue
            sha, _, subject = line.partition("\t")
            entries.append(LogEntry(sha=sha.strip(), subject=subject.strip()))
        return Ok(entries)

    def add(self, paths: list[str]) -> Result[None, GitError]:
        result = self._git(["add", "--", *paths], "add")
        return result.map(lambda _: None)

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the index and return the new commit hash."""
        result = self._git(["commit", "-m", message], "commit")
        if isinstance(result, Err):
            return result
        return self.head_sha()

    def checkout(self, branch: str, *, create: bool = False) -> Result[None, GitError]:
        args = ["checkout", "-b", branch] if create else ["checkout", branch]
        result = self._git(args, " ".join(args[:2]))
        return result.map(lambda _: None)

    def archive(self, *, ref: str, output: Path, prefix: str) -> Result[Path, GitError]:
        """Write a gzipped tarball of ``ref`` to ``output``.

        The format is inferred by git from the ``.tar.gz`` suffix.
        """
        result = self._git(
            [
                "archive",
                "--format=tar.gz",
                f"--prefix={prefix}/",
                "-o",
                str(output),
                ref,
            ],
            "archive",
        )
        return result.map(lambda _: output)

    def tag_signed(
        self,
        *,
        name: str,
        ref: str,
        message: str,
        key: str | None,
    ) -> Result[None, GitError]:
        """Create a GPG-signed annotated tag."""
        sign = ["-u", key] if key else ["-s"]
        result = self._git(["tag", *sign, "-m", message, name, ref], "tag")
        return result.map(lambda _: None)

    def push(self, remote: str, refspec: str) -> Result[str, GitError]:
        return self._git(["push", remote, refspec], "push").map(str.strip)

    def _git(self, args: list[str], command: str) -> Result[str, GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_error(command, result.error, f"git {command} failed"))
        return Ok(result.value)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", *args], cwd=self.path, timeout=timeout)

    def _parse_status(self, output: str) -> GitStatus:
        """Parse git status --porcelain=v1 -b output."""
        lines = [ln for ln in output.splitlines() if ln.strip()]

        if not lines:
            return GitStatus(branch="")

        # First line is branch info: ## branch...upstream [ahead N, behind M]
        branch = self._parse_branch_line(lines[0])

        entries: list[StatusEntry] = []
        for line in lines[1:]:
            entry = self._parse_entry(line)
            if entry:
                entries.append(entry)

        return GitStatus(branch=branch, entries=tuple(entries))

    def _parse_branch_line(self, line: str) -> str:
        s = line.strip()
        if s.startswith("##"):
            s = s[2:].lstrip()
        s = s.split(" [", 1)[0].strip()
        return s.split("...", 1)[0].strip()

    def _parse_entry(self, line: str) -> StatusEntry | None:
        if len(line) < 4:
            return None
        return StatusEntry(xy=line[:2], path=line[3:])

from __future__ import annotations

from datetime import date
from pathlib import Path

from rcut.core.result import Ok
from rcut.git.repository import LogEntry, Repository
from rcut.services.release.changelog import (
    collect_entries,
    has_section,
    insert_section,
    previous_release_tag,
    render_section,
    write_changelog,
)
from rcut.services.release.semver import Version

DAY = date(2026, 10, 16)


def test_previous_release_tag_picks_newest_older_final() -> None:
    tags = [
        "widget-1.0.0",
        "widget-1.2.2",
        "widget-1.2.3-rc0",
        "widget-1.10.0",
        "widget-1.1.9",
        "other-1.2.2",
    ]
    assert previous_release_tag(tags=tags, prefix="widget", current=Version(1, 2, 3)) == (
        "widget-1.2.2"
    )


def test_previous_release_tag_none() -> None:
    tags = ["widget-1.2.3", "widget-1.2.3-rc0"]
    assert previous_release_tag(tags=tags, prefix="widget", current=Version(1, 2, 3)) is None


def test_render_section() -> None:
    entries = [
        LogEntry(sha="a" * 40, subject="Fix overflow"),
        LogEntry(sha="b" * 40, subject="Add entry point"),
    ]
    assert render_section(version="1.2.3", entries=entries, day=DAY) == (
        "## 1.2.3 (2026-10-16)\n\n- aaaaaaaa Fix overflow\n- bbbbbbbb Add entry point\n"
    )


def test_render_empty_section() -> None:
    assert render_section(version="1.2.3", entries=[], day=DAY).endswith("- No changes.\n")


class TestInsertSection:
    SECTION = "## 1.2.3 (2026-10-16)\n\n- aaaaaaaa Fix\n"

    def test_new_file(self) -> None:
        assert insert_section(None, self.SECTION) == f"# Changelog\n\n{self.SECTION}"

    def test_below_title(self) -> None:
        existing = "# Widget changes\n\n## 1.2.2 (2026-01-01)\n\n- old\n"

        out = insert_section(existing, self.SECTION)

        assert out == (
            "# Widget changes\n\n"
            "## 1.2.3 (2026-10-16)\n\n- aaaaaaaa Fix\n\n"
            "## 1.2.2 (2026-01-01)\n\n- old\n"
        )

    def test_without_title(self) -> None:
        out = insert_section("## 1.2.2 (2026-01-01)\n", self.SECTION)
        assert out.startswith(f"# Changelog\n\n{self.SECTION}\n## 1.2.2")


class TestWithGit:
    def test_collect_since_previous_release(self, make_repo, run_git, tmp_path: Path) -> None:
        root = make_repo(tmp_path / "widget")
        run_git(root, "tag", "widget-1.2.2")
        (root / "a.txt").write_text("a")
        run_git(root, "add", "a.txt")
        run_git(root, "commit", "-q", "-m", "Add a")

        result = collect_entries(repo=Repository(root), prefix="widget", current=Version(1, 2, 3))

        assert isinstance(result, Ok)
        assert [e.subject for e in result.value] == ["Add a"]

    def test_collect_full_history_without_tags(self, make_repo, tmp_path: Path) -> None:
        root = make_repo(tmp_path / "widget")

        result = collect_entries(repo=Repository(root), prefix="widget", current=Version(1, 2, 3))

        assert isinstance(result, Ok)
        assert [e.subject for e in result.value] == ["Initial commit"]


def test_write_changelog(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text("# Changelog\n\n## 1.2.2 (2026-01-01)\n\n- old\n")

    result = write_changelog(
        path=path,
        version="1.2.3",
        entries=[LogEntry(sha="c" * 40, subject="Fix")],
        day=DAY,
    )

    assert result == Ok(True)
    text = path.read_text()
    assert text.index("## 1.2.3") < text.index("## 1.2.2")
    assert "- cccccccc Fix" in text


class TestHasSection:
    def test_missing_file(self) -> None:
        assert has_section(None, "1.2.3") is False

    def test_dated_heading(self) -> None:
        assert has_section("# Changelog\n\n## 1.2.3 (2026-10-16)\n\n- x\n", "1.2.3") is True

    def test_bare_heading(self) -> None:
        assert has_section("## 1.2.3\n", "1.2.3") is True

    def test_other_versions(self) -> None:
        text = "## 1.2.30 (2026-01-01)\n\n- mentions 1.2.3\n\n## 11.2.3\n"
        assert has_section(text, "1.2.3") is False


def test_write_changelog_keeps_existing_section(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    original = "# Changelog\n\n## 1.2.3 (2026-10-09)\n\n- aaaaaaaa Fix\n"
    path.write_text(original)

    result = write_changelog(
        path=path,
        version="1.2.3",
        entries=[LogEntry(sha="c" * 40, subject="Later fix")],
        day=DAY,
    )

    assert result == Ok(False)
    assert path.read_text() == original

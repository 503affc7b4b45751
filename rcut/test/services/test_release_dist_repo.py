from __future__ import annotations

from pathlib import Path

from rcut.core.result import Err, Ok
from rcut.output.console import MockConsole
from rcut.platform.process import ProcessError
from rcut.services.release import dist_repo
from rcut.services.release.dist_repo import candidate_url, upload_candidate
from rcut.services.release.model import ArtifactSet
from rcut.services.release.planner import plan_versions
from rcut.services.release.semver import Version

DIST = "https://dist.example.org/repos/dist/dev/widget"


class FakeSvn:
    """Records svn invocations; ``checkout`` creates the working copy."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[list[str], Path]] = []
        self.committed: list[str] = []
        self.fail_on = fail_on

    def __call__(self, cmd: list[str], cwd: Path, env=None, *, timeout=None):
        self.calls.append((cmd, cwd))
        sub = cmd[1]
        if sub == self.fail_on:
            return Err(ProcessError(tuple(cmd), 1, "", f"svn: E170013: {sub} refused"))
        if sub == "checkout":
            Path(cmd[-1]).mkdir(parents=True)
        if sub == "commit":
            self.committed = sorted(p.name for p in cwd.iterdir())
        return Ok("")


def _versions():
    return plan_versions(base=Version(1, 2, 3), level="patch", rc_number=0, prefix="widget")


def _artifacts(tmp_path: Path) -> ArtifactSet:
    out = tmp_path / "dist"
    out.mkdir()
    archive = out / "widget-1.2.3.tar.gz"
    archive.write_bytes(b"x")
    sig = out / "widget-1.2.3.tar.gz.asc"
    sig.write_text("sig")
    sums = []
    for algo in ("md5", "sha1", "sha256", "sha512"):
        p = out / f"widget-1.2.3.tar.gz.{algo}"
        p.write_text(algo)
        sums.append(p)
    return ArtifactSet(archive=archive, signature=sig, checksums=tuple(sums))


def test_candidate_url() -> None:
    assert candidate_url(dist_url=DIST + "/", versions=_versions()) == f"{DIST}/widget-1.2.3-rc0"


def test_upload_sequence(tmp_path: Path, monkeypatch) -> None:
    svn = FakeSvn()
    monkeypatch.setattr(dist_repo, "run_process", svn)
    console = MockConsole()

    result = upload_candidate(
        dist_url=DIST,
        versions=_versions(),
        artifacts=_artifacts(tmp_path),
        console=console,
        work_dir=tmp_path,
    )

    url = f"{DIST}/widget-1.2.3-rc0"
    assert result == Ok(url)
    cmds = [cmd for cmd, _ in svn.calls]
    assert cmds[0] == ["svn", "mkdir", "-m", "Create widget-1.2.3-rc0 directory", url]
    assert cmds[1][:4] == ["svn", "checkout", "--depth=empty", url]
    assert cmds[2][:2] == ["svn", "add"]
    assert sorted(cmds[2][2:]) == svn.committed
    assert cmds[3] == ["svn", "commit", "-m", "Add widget-1.2.3-rc0 release candidate"]
    assert len(svn.committed) == 6
    # add and commit run inside the checkout, which is gone afterwards
    checkout = Path(cmds[1][-1])
    assert svn.calls[2][1] == checkout
    assert not checkout.exists()
    assert len(console.commands) == 4


def test_mkdir_failure_stops_upload(tmp_path: Path, monkeypatch) -> None:
    svn = FakeSvn(fail_on="mkdir")
    monkeypatch.setattr(dist_repo, "run_process", svn)

    result = upload_candidate(
        dist_url=DIST,
        versions=_versions(),
        artifacts=_artifacts(tmp_path),
        console=MockConsole(),
        work_dir=tmp_path,
    )

    assert isinstance(result, Err)
    assert result.error.kind == "dist_failed"
    assert "E170013" in (result.error.hint or "")
    assert len(svn.calls) == 1


def test_commit_failure(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(dist_repo, "run_process", FakeSvn(fail_on="commit"))

    result = upload_candidate(
        dist_url=DIST,
        versions=_versions(),
        artifacts=_artifacts(tmp_path),
        console=MockConsole(),
        work_dir=tmp_path,
    )

    assert isinstance(result, Err)
    assert result.error.message == "svn commit failed"

"""Vote email for a release candidate.

Rendering is pure: every input, including the current time, is passed in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from rcut.core.result import Err, Ok, Result
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import CHECKSUM_ALGORITHMS, ReleaseVersions

VOTE_DURATION = timedelta(days=3)

DIST_URL_PLACEHOLDER = "<dist-url>"
REPO_URL_PLACEHOLDER = "<repo-url>"
MAILING_LIST_PLACEHOLDER = "<mailing-list>"

_SCP_REMOTE_RE = re.compile(r"^(?:[\w.-]+@)?([\w.-]+):(?!//)(.+)$")


@dataclass(frozen=True, slots=True)
class VoteContext:
    project: str
    mailing_list: str | None
    repo_url: str | None
    dist_url: str | None
    changelog_file: str
    archive_name: str
    commit_sha: str


def vote_closes_at(now: datetime) -> datetime:
    return now + VOTE_DURATION


def web_url_from_remote(remote_url: str) -> str | None:
    """Browsable https URL for a git remote, or None for local/unknown remotes.

    ``git@host:org/repo.git`` and ``https://host/org/repo.git`` both map to
    ``https://host/org/repo``.
    """
    url = remote_url.strip()
    if url.startswith(("https://", "http://")):
        base = url.split("://", 1)[1]
        base = base.split("@", 1)[-1]
    elif url.startswith("ssh://"):
        base = url[len("ssh://") :].split("@", 1)[-1]
        host, _, path = base.partition("/")
        base = f"{host.split(':', 1)[0]}/{path}"
    else:
        m = _SCP_REMOTE_RE.match(url)
        if m is None:
            return None
        base = f"{m.group(1)}/{m.group(2)}"

    base = base.rstrip("/")
    if base.endswith(".git"):
        base = base[: -len(".git")]
    if "/" not in base:
        return None
    return f"https://{base}"


def compose_vote_email(
    *,
    ctx: VoteContext,
    versions: ReleaseVersions,
    now: datetime,
) -> str:
    repo_url = ctx.repo_url or REPO_URL_PLACEHOLDER
    dist_base = f"{(ctx.dist_url or DIST_URL_PLACEHOLDER).rstrip('/')}/{versions.rc_tag}"
    archive_url = f"{dist_base}/{ctx.archive_name}"
    closes = vote_closes_at(now)
    hours = int(VOTE_DURATION.total_seconds() // 3600)

    artifact_urls = [archive_url, f"{archive_url}.asc"]
    artifact_urls += [f"{archive_url}.{algo}" for algo in CHECKSUM_ALGORITHMS]

    lines = [
        f"To: {ctx.mailing_list or MAILING_LIST_PLACEHOLDER}",
        f"Subject: [VOTE] Release {ctx.project} {versions.current_version} rc{versions.rc_number}",
        "",
        "Hi all,",
        "",
        f"Please review and vote on release candidate #{versions.rc_number} "
        f"for version {versions.current_version} of {ctx.project}.",
        "",
        "The changelog is available at:",
        f"{repo_url}/blob/{versions.rc_tag}/{ctx.changelog_file}",
        "",
        f"The tag to be voted upon is {versions.rc_tag}:",
        f"{repo_url}/tree/{versions.rc_tag}",
        "",
        f"The latest commit hash is {ctx.commit_sha}",
        "",
        "The release archive, its signature and checksums are available at:",
        *artifact_urls,
        "",
        f"The vote will be open for at least {hours} hours, "
        f"until {closes.strftime('%Y-%m-%d %H:%M %Z').strip()}.",
        "",
        f"[ ] +1 Release this package as {ctx.project} {versions.current_version}",
        "[ ] +0 No opinion",
        "[ ] -1 Do not release this package because...",
        "",
    ]
    return "\n".join(lines)


def write_vote_email(path: Path, text: str) -> Result[Path, ReleaseError]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {path.name}: {e}"))
    return Ok(path)

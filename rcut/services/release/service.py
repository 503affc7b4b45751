from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from rcut.core.result import Err, Ok, Result
from rcut.output.console import Style
from rcut.services.release.artifact import (
    archive_name,
    build_artifacts,
    candidate_dir,
    ensure_artifacts_absent,
)
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import ReleaseOptions, ReleaseOutcome, ReleaseVersions
from rcut.services.release.mutator import mutate_repository
from rcut.services.release.planner import (
    ensure_staging_branch_absent,
    ensure_tags_absent,
    plan_versions,
)
from rcut.services.release.preconditions import check_preconditions, check_tools
from rcut.services.release.publisher import after_release_refspec, publish_candidate
from rcut.services.release.rollback import rollback_advice
from rcut.services.release.session import ReleaseSession
from rcut.services.release.vote import (
    VoteContext,
    compose_vote_email,
    web_url_from_remote,
    write_vote_email,
)


def prepare_release(
    *,
    session: ReleaseSession,
    options: ReleaseOptions,
) -> Result[ReleaseVersions, ReleaseError]:
    """Validate the repository and compute versions; touches nothing."""
    base = check_preconditions(session=session, options=options)
    if isinstance(base, Err):
        return base

    tools = check_tools(session=session, options=options)
    if isinstance(tools, Err):
        return tools

    versions = plan_versions(
        base=base.value,
        level=options.level,
        rc_number=options.rc_number,
        prefix=session.tag_prefix,
    )
    absent = ensure_tags_absent(repo=session.repo, versions=versions)
    if isinstance(absent, Err):
        return absent

    branch = ensure_staging_branch_absent(repo=session.repo, versions=versions)
    if isinstance(branch, Err):
        return branch

    artifacts = ensure_artifacts_absent(output_dir=session.output_dir, versions=versions)
    if isinstance(artifacts, Err):
        return artifacts

    return Ok(versions)


def cut_release(
    *,
    session: ReleaseSession,
    options: ReleaseOptions,
    now: datetime | None = None,
) -> Result[ReleaseOutcome, ReleaseError]:
    """Cut a release candidate.

    Preconditions and version planning run first and leave the repository
    untouched on failure. From the first commit on, a failure prints manual
    rollback advice.
    """
    now = now or datetime.now(UTC)
    planned = prepare_release(session=session, options=options)
    if isinstance(planned, Err):
        return Err(replace(planned.error, before_mutation=True))
    versions = planned.value
    _print_plan(session=session, versions=versions, options=options)

    with rollback_advice(
        console=session.console,
        main_branch=session.main_branch,
        start_sha=session.start_sha,
        versions=versions,
        artifacts_dir=candidate_dir(output_dir=session.output_dir, versions=versions),
    ) as guard:
        outcome = _run(session=session, options=options, versions=versions, now=now)
        if isinstance(outcome, Ok):
            guard.disarm()
    return outcome


def _run(
    *,
    session: ReleaseSession,
    options: ReleaseOptions,
    versions: ReleaseVersions,
    now: datetime,
) -> Result[ReleaseOutcome, ReleaseError]:
    console = session.console

    head = mutate_repository(session=session, versions=versions, day=now.date())
    if isinstance(head, Err):
        return head

    artifacts = build_artifacts(session=session, versions=versions)
    if isinstance(artifacts, Err):
        return artifacts

    if options.publish:
        published = publish_candidate(session=session, versions=versions, artifacts=artifacts.value)
        if isinstance(published, Err):
            return published
    else:
        console.header("Dry run")
        console.info("nothing was pushed and the distribution store was not touched")
        console.print("re-run with -p (or `publish`) to publish the candidate", Style.DIM)

    email = compose_vote_email(
        ctx=VoteContext(
            project=session.project_name,
            mailing_list=session.config.vote.mailing_list,
            repo_url=_repo_url(session),
            dist_url=session.config.dist.url,
            changelog_file=session.config.project.changelog_file,
            archive_name=archive_name(versions),
            commit_sha=head.value,
        ),
        versions=versions,
        now=now,
    )
    written = write_vote_email(session.output_dir / f"{versions.rc_tag}.vote.txt", email)
    if isinstance(written, Err):
        return written
    console.panel(f"Vote email ({written.value.name})", email)

    return Ok(
        ReleaseOutcome(
            versions=versions,
            artifacts=artifacts.value,
            commit_sha=head.value,
            published=options.publish,
            vote_email=email,
            vote_email_path=written.value,
        )
    )


def _repo_url(session: ReleaseSession) -> str | None:
    configured = session.config.project.repo_url
    if configured:
        return configured
    remote = session.repo.remote_url(session.remote)
    if isinstance(remote, Err):
        return None
    return web_url_from_remote(remote.value)


def _print_plan(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
    options: ReleaseOptions,
) -> None:
    console = session.console
    console.header(f"Release plan ({'publish' if options.publish else 'dry run'})")
    rows = [
        ("release version", versions.current_version),
        ("next snapshot", versions.new_snapshot_version),
        ("rc version", versions.rc_version),
        ("release tag", versions.release_tag),
        ("rc tag", versions.rc_tag),
        ("staging branch", versions.staging_branch),
    ]
    if options.publish:
        refspec = after_release_refspec(main_branch=session.main_branch, rc_tag=versions.rc_tag)
        rows.append(("main line push", refspec))
    for label, value in rows:
        console.print(f"  {label:<16} {value}")

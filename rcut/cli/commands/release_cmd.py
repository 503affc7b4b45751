from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from rcut.cli.context import build_context
from rcut.core.errors import ErrorCode
from rcut.core.result import Err
from rcut.output.errors import print_release_error
from rcut.services.release.model import ReleaseOptions
from rcut.services.release.semver import parse_level
from rcut.services.release.service import cut_release
from rcut.services.release.session import open_session

PUBLISH_KEYWORD = "publish"


def _exit(err: str, *, code: ErrorCode = ErrorCode.FAILURE) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def parse_options(
    *,
    level: str,
    version: str | None,
    rc: int,
    publish: bool,
    action: str | None,
) -> ReleaseOptions:
    """Validate raw command-line values; exits 1 on bad input."""
    parsed_level = parse_level(level)
    if isinstance(parsed_level, Err):
        _exit(f"{parsed_level.error.message} ({parsed_level.error.hint})")

    if rc < 0:
        _exit(f"invalid rc number: {rc} (must be >= 0)")

    if action is not None and action != PUBLISH_KEYWORD:
        _exit(f"unexpected argument: {action!r} (only '{PUBLISH_KEYWORD}' is accepted)")

    override = version.strip() if version is not None else None
    if override == "":
        _exit("empty version override")

    return ReleaseOptions(
        level=parsed_level.value,
        rc_number=rc,
        version_override=override,
        publish=publish or action == PUBLISH_KEYWORD,
    )


def release(
    level: str = typer.Option(
        "patch",
        "-l",
        "--level",
        metavar="p|patch|m|minor|M|major",
        help="Which version component the next snapshot increments.",
    ),
    version: str | None = typer.Option(
        None,
        "-v",
        "--release-version",
        help="Release this version instead of the one in the version file.",
    ),
    rc: int = typer.Option(0, "-r", "--rc", help="Release candidate number."),
    publish: bool = typer.Option(
        False,
        "-p",
        "--publish",
        help="Upload artifacts and push the rc tag (default: dry run).",
    ),
    action: str | None = typer.Argument(
        None,
        metavar="[publish]",
        help="Same as -p.",
        show_default=False,
    ),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository root (default: the enclosing git repository).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: <repo>/.rcut.toml).",
    ),
) -> None:
    """Cut a release candidate: bump versions, tag, build, sign, publish."""
    options = parse_options(level=level, version=version, rc=rc, publish=publish, action=action)
    ctx = build_context(repo=repo, config_path=config_path)

    with open_session(root=ctx.root, config=ctx.config, console=ctx.console) as session:
        result = cut_release(session=session, options=options)

    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    outcome = result.value
    ctx.console.newline()
    if outcome.published:
        ctx.console.success(f"{outcome.versions.rc_tag} published")
    else:
        ctx.console.success(f"{outcome.versions.rc_tag} prepared locally (dry run)")
    ctx.console.print(f"vote email: {outcome.vote_email_path}")

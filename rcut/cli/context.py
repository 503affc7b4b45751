from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from rcut.core.config import CONFIG_FILE_NAME, Config, load_config, load_config_or_default
from rcut.core.errors import ErrorCode
from rcut.core.result import Err
from rcut.git.repository import find_toplevel
from rcut.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol


def build_context(*, repo: Path | None = None, config_path: Path | None = None) -> CLIContext:
    start = (repo or Path.cwd()).expanduser()
    if not start.is_dir():
        typer.echo(f"error: not a directory: {start}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    root_result = find_toplevel(start.resolve())
    if isinstance(root_result, Err):
        typer.echo(f"error: {start} is not inside a git repository", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    root = root_result.value

    if config_path is not None:
        config_result = load_config(config_path.expanduser())
    else:
        config_result = load_config_or_default(root / CONFIG_FILE_NAME)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(root=root, config=config_result.value, console=RichConsole())

from __future__ import annotations

import click
import typer

from rcut.cli.commands.release_cmd import release
from rcut.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command()(release)


def main() -> None:
    # Usage errors exit 1 like every other failure (click defaults to 2).
    try:
        code = app(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        raise SystemExit(int(ErrorCode.FAILURE)) from None
    except click.Abort:
        typer.echo("Aborted!", err=True)
        raise SystemExit(int(ErrorCode.FAILURE)) from None
    raise SystemExit(code if isinstance(code, int) else int(ErrorCode.OK))

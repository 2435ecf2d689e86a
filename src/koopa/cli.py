"""Root ``kp`` command with its flags."""

from __future__ import annotations

from pathlib import Path

import click

from koopa import __version__
from koopa.commands._base import KoopaCommand
from koopa.commands._context import AppContext
from koopa.config.settings import KoopaSettings
from koopa.domain.errors import KoopaError, ShellKeyError
from koopa.domain.shells import Shell, ShellMap

EXAMPLES = """\
  kp template.txt out.txt
  kp basic.py app.py -s project=override
  kp prj-cpp ./demo -s project=demo -s user="Darth Vader"
  kp --force prj-cpp ./demo
  kp --list
  kp --json --list --ignore-home"""


def _parse_shells(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> ShellMap:
    """Turn repeated ``-s KEY=VALUE`` options into a ShellMap (last one wins)."""
    shells = ShellMap()
    for raw in values:
        try:
            shells.insert(Shell.parse(raw))
        except ShellKeyError as exc:
            raise click.BadParameter(exc.message, ctx=ctx, param=param) from exc
    return shells


def _require_paths(
    ctx: click.Context, src: Path | None, dest: Path | None
) -> tuple[Path, Path]:
    if src is None or dest is None:
        raise click.UsageError("SRC and DEST are required unless --list is given.", ctx=ctx)
    return src, dest


@click.command(
    cls=KoopaCommand,
    examples=EXAMPLES,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="kp")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Overwrite DEST, create missing directories, and skip unknown keys.",
)
@click.option(
    "-s",
    "--shell",
    "shells",
    multiple=True,
    metavar="KEY=VALUE",
    callback=_parse_shells,
    help="Set a shell value (repeatable). Overrides config files.",
)
@click.option(
    "-l", "--list", "list_mode", is_flag=True, help="List known sources and shells, then exit."
)
@click.option("--ignore-home", is_flag=True, help="Skip the home directory's .koopa folder.")
@click.option("--ignore-work", is_flag=True, help="Skip .koopa folders above the working dir.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.argument("src", required=False, type=click.Path(path_type=Path))
@click.argument("dest", required=False, type=click.Path(path_type=Path))
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    force: bool,
    shells: ShellMap,
    list_mode: bool,
    ignore_home: bool,
    ignore_work: bool,
    json_output: bool,
    log_json: bool,
    src: Path | None,
    dest: Path | None,
) -> None:
    """Koopa is a copy/paste tool with superpowers.

    Copies SRC to DEST, replacing every {{ koopa.KEY }} placeholder with its
    shell value.  SRC may name a file or folder inside any .koopa directory
    in your home or above the working directory.
    """
    settings = KoopaSettings.from_cli(
        verbose=verbose,
        force=force,
        list_mode=list_mode,
        ignore_home=ignore_home,
        ignore_work=ignore_work,
        json_output=json_output,
        log_json=log_json,
    )
    paths = None if settings.list_mode else _require_paths(ctx, src, dest)

    app = AppContext(settings, explicit=shells)
    ctx.obj = app

    from koopa.services.koopa import KoopaService
    from koopa.services.result import error_result

    op = "list" if settings.list_mode else "copy"
    try:
        service = KoopaService(app.cascade, settings)
    except (KoopaError, OSError) as exc:
        app.emit(error_result(op, exc))
        return

    if paths is None:
        app.emit(service.list_sources())
    else:
        app.emit(service.copy(*paths))

"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from koopa.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from koopa.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS[result.op]
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="koopa.key")
    style = "koopa.path" if key in ("src", "dest") else ""
    console.print(k, Text(str(value), style=style), sep="", end="")
    console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="koopa.error")
    op = Text(f"  {result.op}", style="koopa.op")
    console.print(label, op, Text(" — "), Text(msg), soft_wrap=True)

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_copy(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a successful copy: bytes written to the final destination."""
    d = result.data
    files = d.get("files", 0)
    noun = "file" if files == 1 else "files"
    console.print(
        Text("OK", style="koopa.ok"),
        Text(f" copied {d.get('bytes', 0)} bytes ({files} {noun}) to"),
        Text(str(d.get("dest", "")), style="koopa.path"),
        soft_wrap=True,
    )
    if verbose:
        _field(console, "src", d.get("src", ""))


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render discovered template sources and effective shells as tables."""
    files = Table(title="Files", title_justify="left", show_header=True, pad_edge=False)
    files.add_column("Path", style="koopa.path", no_wrap=True)
    files.add_column("Source")
    for item in result.data.get("files", []):
        files.add_row(Text(item["path"]), Text(item["source"]))

    shells = Table(title="Shells", title_justify="left", show_header=True, pad_edge=False)
    shells.add_column("Key", style="koopa.shell", no_wrap=True)
    shells.add_column("Value", style="koopa.value")
    for item in result.data.get("shells", []):
        value = repr(item["value"]) if verbose else item["value"]
        shells.add_row(Text(item["key"]), Text(value))

    console.print(files)
    console.print()
    console.print(shells)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "copy": _render_copy,
    "list": _render_list,
}

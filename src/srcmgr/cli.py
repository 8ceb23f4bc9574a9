"""srcmgr command line: locate offsets and render diagnostics for files."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from srcmgr import __version__
from srcmgr.config import SrcmgrConfig, find_config, load_config
from srcmgr.errors import Diagnostic, DiagnosticKind, FixIt, SourceManagerError
from srcmgr.manager import SourceManager
from srcmgr.output import StreamSink
from srcmgr.source import SourceBuffer, SourceRange


def _parse_span(value: str) -> tuple[int, int]:
    start, sep, end = value.partition(":")
    if not sep:
        raise click.BadParameter(f"expected START:END, got {value!r}")
    try:
        return int(start), int(end)
    except ValueError:
        raise click.BadParameter(f"offsets must be integers, got {value!r}") from None


def _ranges_callback(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]):
    return [_parse_span(v) for v in values]


def _fixits_callback(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]):
    fixits = []
    for value in values:
        parts = value.split(":", 2)
        if len(parts) != 3:
            raise click.BadParameter(f"expected START:END:TEXT, got {value!r}")
        fixits.append((*_parse_span(f"{parts[0]}:{parts[1]}"), parts[2]))
    return fixits


def _load_config(config_path: str | None) -> SrcmgrConfig:
    if config_path:
        return load_config(Path(config_path))
    try:
        return load_config(find_config())
    except FileNotFoundError:
        return SrcmgrConfig()


def _open(manager: SourceManager, file: str) -> int:
    buffer_id = manager.add_include_file(file).buffer_id
    if not buffer_id:
        click.echo(f"error: could not open {file}", err=True)
        raise SystemExit(1)
    return buffer_id


@click.group()
@click.version_option(__version__, prog_name="srcmgr")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """Source buffer and diagnostic tools for parser front ends."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("offset", type=int)
def locate(file: str, offset: int) -> None:
    """Print FILE:LINE:COLUMN for a 0-based byte OFFSET."""
    manager = SourceManager()
    buffer_id = _open(manager, file)
    try:
        loc = manager.get_buffer(buffer_id).location(offset)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    line, column = manager.get_line_and_column(loc, buffer_id)
    click.echo(f"{file}:{line}:{column}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("number", type=click.IntRange(min=1))
def line(file: str, number: int) -> None:
    """Print line NUMBER of FILE."""
    manager = SourceManager()
    buffer_id = _open(manager, file)
    text = manager.get_line_text(number, buffer_id)
    click.echo(text.decode("utf-8", errors="replace").rstrip("\r\n"))


@main.command()
@click.argument("file")
@click.option("--offset", type=int, required=True, help="0-based byte offset of the diagnostic.")
@click.option("--message", "-m", required=True, help="Diagnostic message.")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in DiagnosticKind]),
    default="error",
    show_default=True,
)
@click.option("--range", "ranges", multiple=True, callback=_ranges_callback,
              help="Highlight START:END (byte offsets).")
@click.option("--fixit", "fixits", multiple=True, callback=_fixits_callback,
              help="Suggest replacing START:END with TEXT.")
@click.option("-I", "include_dirs", multiple=True, help="Extra include search directory.")
@click.option("--color/--no-color", default=None, help="Force colors on or off.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Use this srcmgr.toml instead of searching for one.")
def report(
    file: str,
    offset: int,
    message: str,
    kind: str,
    ranges: list[tuple[int, int]],
    fixits: list[tuple[int, int, str]],
    include_dirs: tuple[str, ...],
    color: bool | None,
    config_path: str | None,
) -> None:
    """Render a diagnostic at OFFSET in FILE.

    FILE is looked up directly, then in each include directory. Exits with
    status 1 for errors.
    """
    try:
        config = _load_config(config_path)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    stderr = sys.stderr
    if color is None:
        if config.diagnostics.color == "auto":
            color = not click.utils.should_strip_ansi(stderr)
        else:
            color = config.diagnostics.color == "always"
    sink = StreamSink(stderr, colors=color)

    manager = SourceManager()
    manager.include_dirs = [*config.includes.directories, *include_dirs]
    diag_kind = DiagnosticKind(kind)
    program_name = config.diagnostics.program_name or None

    result = manager.add_include_file(file)
    if not result.buffer_id:
        missing = Diagnostic.for_file(file, DiagnosticKind.ERROR, "file not found")
        manager.print_message(missing, sink, program_name=program_name)
        raise SystemExit(1)
    buffer: SourceBuffer = manager.get_buffer(result.buffer_id)

    try:
        loc = buffer.location(offset)
        source_ranges = [SourceRange(buffer.location(s), buffer.location(e)) for s, e in ranges]
        source_fixits = [
            FixIt(SourceRange(buffer.location(s), buffer.location(e)), text)
            for s, e, text in fixits
        ]
        diagnostic = manager.get_message(loc, diag_kind, message, source_ranges, source_fixits)
    except (ValueError, SourceManagerError) as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    manager.print_message(
        diagnostic,
        sink,
        program_name=program_name,
        show_kind_label=config.diagnostics.show_kind_label,
    )
    if diag_kind == DiagnosticKind.ERROR:
        raise SystemExit(1)

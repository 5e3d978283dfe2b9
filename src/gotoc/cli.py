"""gotoc command line interface."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import click

from gotoc import __version__
from gotoc.ast_nodes import BasicLit, Ident
from gotoc.c_emitter import CEmitter
from gotoc.config import GotocConfig, find_config, load_config
from gotoc.driver import parse_source
from gotoc.errors import CompileError, DiagnosticRenderer
from gotoc.source import NO_SPAN


def _resolve_config(source: Path, config_path: str | None) -> GotocConfig:
    """Explicit --config wins; otherwise search upwards from the source file."""
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config(source))
    except FileNotFoundError:
        return GotocConfig()


def _report(error: CompileError, renderer: DiagnosticRenderer) -> None:
    for diag in error.diagnostics:
        click.echo(renderer.render(diag), err=True)


@click.command()
@click.version_option(__version__, prog_name="gotoc")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--ast", "dump_ast", is_flag=True, help="Print the parsed tree before the C output.")
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False), default=None,
    help="Write the C source to a file instead of stdout.",
)
@click.option(
    "--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None,
    help="Use this gotoc.toml instead of searching for one.",
)
@click.option("-v", "--verbose", is_flag=True, help="Report progress on stderr.")
@click.option("--no-color", is_flag=True, help="Disable colors in diagnostics.")
def main(
    source: str, dump_ast: bool, output: str | None,
    config_path: str | None, verbose: bool, no_color: bool,
) -> None:
    """Translate a Go-subset SOURCE file to C."""
    source_path = Path(source)
    try:
        config = _resolve_config(source_path, config_path)
    except ValueError as e:
        click.echo(f"error: invalid configuration: {e}", err=True)
        raise SystemExit(1)

    renderer = DiagnosticRenderer(color=config.diagnostics.color and not no_color)

    if verbose:
        click.echo(f"parsing {source}...", err=True)
    try:
        source_text = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"error: cannot read {source}: {e}", err=True)
        raise SystemExit(1)

    try:
        file = parse_source(source_text, str(source_path))
    except CompileError as e:
        _report(e, renderer)
        raise SystemExit(1)

    if dump_ast:
        _dump_ast(file, 0)

    if verbose:
        click.echo(f"emitting {len(file.decls)} declarations...", err=True)
    try:
        text = CEmitter(file, indent_width=config.emit.indent_width).emit()
    except CompileError as e:
        _report(e, renderer)
        raise SystemExit(1)

    if output is not None:
        Path(output).write_text(text, encoding="utf-8")
        if verbose:
            click.echo(f"wrote {output}", err=True)
    else:
        click.echo(text, nl=False)


def _dump_ast(node: object, depth: int) -> None:
    """Print the tree one node per line, children indented under parents.

    Identifiers and literals fit on their parent's line; name lists such
    as ``Field.names`` print inline.
    """
    indent = "  " * depth
    if isinstance(node, (Ident, BasicLit)):
        click.echo(f"{indent}{_leaf(node)}")
        return

    span = getattr(node, "span", NO_SPAN)
    where = f" @{span.start_line}" if span.known else ""
    click.echo(f"{indent}{type(node).__name__}{where}")
    for f in dataclasses.fields(node):  # type: ignore[arg-type]
        if f.name == "span":
            continue
        value = getattr(node, f.name)
        if value is None:
            continue
        if isinstance(value, (Ident, BasicLit)):
            click.echo(f"{indent}  {f.name}: {_leaf(value)}")
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            click.echo(f"{indent}  {f.name}: {value!r}")
        elif isinstance(value, list):
            click.echo(f"{indent}  {f.name}:")
            for item in value:
                _dump_ast(item, depth + 2)
        elif dataclasses.is_dataclass(value):
            click.echo(f"{indent}  {f.name}:")
            _dump_ast(value, depth + 2)
        else:
            click.echo(f"{indent}  {f.name}: {value!r}")


def _leaf(node: Ident | BasicLit) -> str:
    if isinstance(node, Ident):
        return f"Ident {node.name}"
    return f"BasicLit {node.value}"

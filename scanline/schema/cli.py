"""Command-line interface for scanline shape definitions."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from scanline.de import Options, ScanError, Variant, VariantMatch, from_str
from scanline.de.shapes import Enum, Struct
from scanline.schema import count_definitions, parse, python

if TYPE_CHECKING:
    from scanline.de.shapes import Shape
    from scanline.schema.counts import TokenCount


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log each decoded token")
def cli(verbose: bool) -> None:
    """Scanline shape definition tools."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _load(input_file: str) -> dict[str, Shape]:
    with open(input_file, encoding="utf-8") as f:
        text = f.read()
    return parse(text)


def _jsonable(value: Any) -> Any:
    """Convert a deserialized value to something json.dumps accepts."""
    if isinstance(value, Variant):
        if value.is_unit:
            return value.name
        return {value.name: [_jsonable(v) for v in value.values]}
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@cli.command(name="parse")
@click.option("--input", "-i", "input_file", required=True, help="Shape definition file")
@click.option("--type", "-t", "type_name", required=True, help="Definition to read")
@click.option(
    "--ignore-case",
    is_flag=True,
    default=False,
    help="Match enum variant names case-insensitively",
)
@click.argument("text", required=False)
def parse_command(input_file: str, type_name: str, ignore_case: bool, text: str | None) -> None:
    """Deserialize TEXT, or each line of stdin, and print it as JSON."""
    definitions = _load(input_file)
    if type_name not in definitions:
        click.echo(f"Unknown type: {type_name}", err=True)
        sys.exit(1)

    shape = definitions[type_name]
    options = Options(
        variant_match=VariantMatch.IGNORE_CASE if ignore_case else VariantMatch.EXACT
    )

    # Blank stdin lines are skipped; an explicit TEXT argument is always read
    lines = [text] if text is not None else [ln for ln in sys.stdin if ln.strip()]
    for line in lines:
        try:
            value = from_str(line, shape, options=options)
        except ScanError as e:
            click.echo(f"error: {e}", err=True)
            sys.exit(1)
        click.echo(json.dumps(_jsonable(value)))


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input definition file")
@click.option("--output", "-o", "output_file", required=True, help="Output file")
@click.option(
    "--runtime-import",
    "runtime_import",
    default="scanline",
    help="Import path of the scanline runtime used by the generated module",
)
def gen(input_file: str, output_file: str, runtime_import: str) -> None:
    """Generate Python classes from a definition file."""
    definitions = _load(input_file)
    generated_file = python.render(definitions, runtime_import=runtime_import)

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated_file)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input definition file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display definitions and how many tokens each consumes."""
    definitions = _load(input_file)
    counts = count_definitions(definitions)

    if output_json:
        _output_json(definitions, counts)
    else:
        _output_plain(definitions, counts)


def _kind(shape: Shape) -> str:
    return type(shape).__name__.lower()


def _format_count(count: TokenCount) -> str:
    """Format a token count, handling None for unbounded."""
    if count.max_tokens is None:
        return f"{count.min_tokens}-unbounded"
    if count.min_tokens == count.max_tokens:
        return str(count.min_tokens)
    return f"{count.min_tokens}-{count.max_tokens}"


def _output_json(definitions: dict[str, Shape], counts: dict[str, TokenCount]) -> None:
    """Output definition info as JSON."""
    data: dict[str, Any] = {}
    for name, shape in definitions.items():
        count = counts[name]
        data[name] = {
            "kind": _kind(shape),
            "shape": shape.to_dict(encode_json=True),
            "min_tokens": count.min_tokens,
            "max_tokens": count.max_tokens,
            "count": count.kind.value,
        }

    click.echo(json.dumps(data, indent=2))


def _output_plain(definitions: dict[str, Shape], counts: dict[str, TokenCount]) -> None:
    """Output definition info using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Definitions[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Kind", style="dim")
    table.add_column("Shape", style="white")
    table.add_column("Tokens", style="yellow", justify="right")
    table.add_column("Count", style="dim")

    for name, shape in definitions.items():
        count = counts[name]
        if isinstance(shape, (Struct, Enum)) and shape.name == name:
            detail = _members(shape)
        else:
            detail = str(shape)
        table.add_row(name, _kind(shape), escape(detail), _format_count(count), count.kind.value)

    console.print(table)


def _members(shape: Struct | Enum) -> str:
    if isinstance(shape, Struct):
        return " ".join(f"{f.name}: {f.shape}" for f in shape.fields)
    return " | ".join(str(v) for v in shape.variants)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

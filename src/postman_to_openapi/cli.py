"""CLI entry point for postman-to-openapi."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from postman_to_openapi.config import load_options
from postman_to_openapi.converter.document import convert
from postman_to_openapi.errors import ConversionError
from postman_to_openapi.openapi.encoder import dump_document, format_for_path, write_document
from postman_to_openapi.openapi.models import ConversionOptions
from postman_to_openapi.parser.postman import parse_environment, parse_postman


def _build_options(
    options_path: Path | None,
    environment_path: Path | None,
    default_tag: str | None,
    path_depth: int | None,
) -> ConversionOptions:
    """Options file first, command-line flags on top."""
    options = load_options(options_path) if options_path else ConversionOptions()
    update = {}
    if environment_path:
        update["environment"] = {**options.environment, **parse_environment(environment_path)}
    if default_tag is not None:
        update["default_tag"] = default_tag
    if path_depth is not None:
        update["path_depth"] = path_depth
    return options.model_copy(update=update)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every converted request.")
def main(verbose: bool):
    """Convert Postman collections into OpenAPI 3 documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("convert")
@click.argument("collection_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output file; prints to stdout when omitted.")
@click.option("--options", "options_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML/JSON file with conversion options.")
@click.option("--environment", "environment_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Postman environment file overriding collection variables.")
@click.option("--default-tag", default=None, help="Tag for requests outside any folder.")
@click.option("--path-depth", default=None, type=click.IntRange(min=0), help="Keep only the last N path segments in operation paths.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "yaml", "json"]), help="Output format.")
def convert_cmd(
    collection_path: Path,
    output: Path | None,
    options_path: Path | None,
    environment_path: Path | None,
    default_tag: str | None,
    path_depth: int | None,
    fmt: str,
):
    """Convert a Postman collection into an OpenAPI document."""
    try:
        options = _build_options(options_path, environment_path, default_tag, path_depth)
        collection = parse_postman(collection_path)
        document = convert(collection, options)
    except (ConversionError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(dump_document(document, "yaml" if fmt == "auto" else fmt), nl=False)
        return

    fmt = format_for_path(output) if fmt == "auto" else fmt
    click.echo(f"Converting {collection_path} (format: {fmt})...")
    write_document(document, output, fmt)
    click.echo(f"Found {sum(len(ops) for ops in document.paths.values())} operations.")
    click.echo(f"OpenAPI document saved to {output}")

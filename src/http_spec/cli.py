"""CLI entry point for http-spec."""

import json
from pathlib import Path

import click

from http_spec.loader import (
    FORMATS,
    UnsupportedDocumentError,
    apply_style_defaults,
    detect_format,
    read_document,
    read_raw,
    write_document,
)
from http_spec.log import setup_logging
from http_spec.model.service import HttpDocument
from http_spec.responses import select_response
from http_spec.validation import InvalidDocumentError, Severity, check_document


def _read(doc_path: Path, fill_style_defaults: bool = False) -> HttpDocument:
    try:
        return read_document(doc_path, fill_style_defaults=fill_style_defaults)
    except (UnsupportedDocumentError, InvalidDocumentError) as e:
        raise click.ClickException(str(e)) from e


def _output_format(output: Path, fmt: str | None, doc_path: Path) -> str:
    if fmt:
        return fmt
    suffix = output.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    # no telling suffix: keep the input's format
    return detect_format(doc_path)


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="HTTP_SPEC_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
def main(log_level: str):
    """Validate and normalize canonical HTTP API documents."""
    setup_logging(log_level)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--fill-style-defaults", is_flag=True, help="Assume the default style where a parameter omits it.")
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.option("--json", "as_json", is_flag=True, help="Print violations as a JSON array.")
def validate(doc_path: Path, fill_style_defaults: bool, strict: bool, as_json: bool):
    """Check a document and report every violation found."""
    try:
        data = read_raw(doc_path)
    except UnsupportedDocumentError as e:
        raise click.ClickException(str(e)) from e
    if fill_style_defaults:
        data = apply_style_defaults(data)

    violations = check_document(data)

    if as_json:
        click.echo(json.dumps([v.model_dump(mode="json") for v in violations], indent=2))
    else:
        for violation in violations:
            click.echo(str(violation))

    errors = [v for v in violations if v.severity == Severity.ERROR]
    warnings = len(violations) - len(errors)
    if not as_json:
        click.echo(f"{doc_path}: {len(errors)} error(s), {warnings} warning(s)")
    if errors or (strict and warnings):
        raise SystemExit(1)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file path.")
@click.option(
    "--format",
    "fmt",
    default=None,
    type=click.Choice(FORMATS),
    help="Output format (default: from the output suffix, else the input format).",
)
@click.option("--fill-style-defaults", is_flag=True, help="Assume the default style where a parameter omits it.")
def normalize(doc_path: Path, output: Path, fmt: str | None, fill_style_defaults: bool):
    """Rewrite a document in canonical form."""
    doc = _read(doc_path, fill_style_defaults)
    fmt = _output_format(output, fmt, doc_path)
    write_document(doc, output, fmt)
    click.echo(f"Wrote {len(doc.operations)} operations to {output} ({fmt})")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--method", required=True, help="HTTP method, e.g. GET.")
@click.option("--path", "op_path", required=True, help="Operation path template, e.g. /pets/{petId}.")
@click.option("--status", required=True, type=click.IntRange(100, 599), help="Concrete status code.")
def match(doc_path: Path, method: str, op_path: str, status: int):
    """Print the response code that would be selected for a status."""
    doc = _read(doc_path)
    operation = doc.find_operation(method, op_path)
    if operation is None:
        raise click.ClickException(f"No operation {method.upper()} {op_path}")

    response = select_response(operation.responses, status)
    if response is None:
        click.echo(f"No response of {method.upper()} {op_path} matches {status}", err=True)
        raise SystemExit(1)
    click.echo(response.code)

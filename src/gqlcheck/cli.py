import logging
import sys
from pathlib import Path

import rich_click as click
import yaml
from pydantic import ValidationError
from rich.traceback import install

from gqlcheck import __version__, log
from gqlcheck.annotation.formatter import FormatOptions, format_annotation
from gqlcheck.checker import check_source
from gqlcheck.config import DEFAULT_CONFIG_FILENAME, GqlCheckConfig, load_config
from gqlcheck.errors import GqlCheckError
from gqlcheck.inference import infer_types
from gqlcheck.models import Diagnostic
from gqlcheck.query import parse_and_validate
from gqlcheck.render import EnumStyle, render_annotation
from gqlcheck.schema import SchemaCache, load_schema
from gqlcheck.source import apply_edits

# Sources parsed with the TSX grammar
JSX_SUFFIXES = {".tsx", ".jsx"}

schema_option = click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="The GraphQL schema file or directory containing schema files",
)

query_option = click.option(
    "--query",
    "-q",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="File holding the GraphQL query document",
)


def line_and_column(source: str, offset: int) -> tuple[int, int]:
    """1-based line and column of an offset."""
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column


def report_diagnostic(path: Path, source: str, diagnostic: Diagnostic) -> None:
    line, column = line_and_column(source, diagnostic.range.start)
    log.print(f"[bold]{path}:{line}:{column}[/bold] [red]{diagnostic.kind.value}[/red]")
    log.print(diagnostic.message, markup=False)
    if diagnostic.edit is not None:
        log.hint("Fixable with --fix")


def read_config(config_path: Path) -> GqlCheckConfig:
    try:
        return load_config(config_path)
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
        log.error(f"Invalid configuration in {config_path}: {e}")
        sys.exit(1)


@click.group(context_settings={"auto_envvar_prefix": "gqlcheck"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    help="YAML file configuring the annotated query calls",
)
@click.option("--fix", is_flag=True, default=False, help="Write the inferred annotations back to the files")
def lint(files: tuple[Path, ...], config_path: Path, fix: bool) -> None:
    """Check that query calls are annotated with the types inferred from their queries."""
    config = read_config(config_path)
    cache = SchemaCache()

    remaining = 0
    for path in files:
        source = path.read_text(encoding="utf-8")
        tsx = path.suffix in JSX_SUFFIXES
        diagnostics = check_source(source, config, cache=cache, tsx=tsx)

        if fix:
            edits = [diagnostic.edit for diagnostic in diagnostics if diagnostic.edit is not None]
            if edits:
                source = apply_edits(source, edits)
                path.write_text(source, encoding="utf-8")
                log.success(f"Fixed {len(edits)} annotation(s) in {path}")
                diagnostics = check_source(source, config, cache=cache, tsx=tsx)

        for diagnostic in diagnostics:
            report_diagnostic(path, source, diagnostic)
        remaining += len(diagnostics)

    if remaining:
        log.rule(f"{remaining} problem(s) found", style="bold red")
        sys.exit(1)
    log.success(f"Checked {len(files)} file(s), no problems found")


@click.command()
@schema_option
@query_option
@click.option(
    "--omit-empty-arguments",
    is_flag=True,
    default=False,
    help="Leave out the arguments type when the query has no variables",
)
@click.option(
    "--enum-style",
    type=click.Choice([style.value for style in EnumStyle]),
    default=EnumStyle.NAME.value,
    show_default=True,
    help="Render enums by name or as the union of their values",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the inferred types as JSON")
def infer(schema: Path, query: Path, omit_empty_arguments: bool, enum_style: str, as_json: bool) -> None:
    """Print the type annotation inferred from a query."""
    try:
        graphql_schema = load_schema(schema)
        document = parse_and_validate(graphql_schema, query.read_text(encoding="utf-8"))
    except GqlCheckError as e:
        log.error(e.diagnostic_message)
        sys.exit(1)

    inferred = infer_types(graphql_schema, document)
    if as_json:
        log.print_dict(inferred.as_dict())
        return

    annotation = render_annotation(
        inferred.result_type,
        inferred.arguments_type,
        omit_empty_arguments=omit_empty_arguments,
        enum_style=EnumStyle(enum_style),
    )
    log.print(format_annotation(annotation, options=FormatOptions(), suffix=""), markup=False)


@click.command()
@schema_option
@query_option
def validate(schema: Path, query: Path) -> None:
    """Validate a query against a schema without inferring types."""
    try:
        graphql_schema = load_schema(schema)
        parse_and_validate(graphql_schema, query.read_text(encoding="utf-8"))
    except GqlCheckError as e:
        log.rule(e.kind.value, style="bold red")
        log.print(e.diagnostic_message, markup=False)
        sys.exit(1)

    log.success("Query is valid")


cli.add_command(lint)
cli.add_command(infer)
cli.add_command(validate)

if __name__ == "__main__":
    cli()

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from gqlcheck import __version__
from gqlcheck.cli import cli, line_and_column
from tests.conftest import TestSchemaData

GREETING_SOURCE = 'export const q = annotateQuery<{}, {}>(gql`query { greeting(language: "en") { message } }`);\n'


@pytest.fixture(scope="module")
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A project directory holding the test schemas and config."""
    for path in (TestSchemaData.APOLLO_SCHEMA, TestSchemaData.CAREGIVER_SCHEMA, TestSchemaData.INVALID_SCHEMA):
        shutil.copy(path, tmp_path / path.name)
    shutil.copy(TestSchemaData.CONFIG, tmp_path / "gqlcheck.yaml")
    return tmp_path


@pytest.fixture
def query_file(tmp_path: Path) -> Path:
    path = tmp_path / "query.graphql"
    path.write_text(TestSchemaData.GREETING_QUERY)
    return path


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0, result.output
    assert __version__ in result.output


def test_lint_reports_wrong_annotation(runner: CliRunner, workspace: Path) -> None:
    source_file = workspace / "app.ts"
    source_file.write_text(GREETING_SOURCE)

    result = runner.invoke(cli, ["lint", str(source_file), "--config", str(workspace / "gqlcheck.yaml")])

    assert result.exit_code == 1, result.output
    assert f"{source_file}:1:18" in result.output
    assert "wrong-annotation" in result.output
    assert "Operation type annotation does not match GraphQL query type" in result.output
    assert source_file.read_text() == GREETING_SOURCE


def test_lint_fix_rewrites_file(runner: CliRunner, workspace: Path) -> None:
    source_file = workspace / "app.ts"
    source_file.write_text(GREETING_SOURCE)

    result = runner.invoke(cli, ["lint", str(source_file), "--config", str(workspace / "gqlcheck.yaml"), "--fix"])

    assert result.exit_code == 0, result.output
    assert source_file.read_text() == (
        "export const q = annotateQuery<\n"
        "  { greeting: { message: string } },\n"
        "  Record<PropertyKey, never>\n"
        '>(gql`query { greeting(language: "en") { message } }`);\n'
    )

    rerun = runner.invoke(cli, ["lint", str(source_file), "--config", str(workspace / "gqlcheck.yaml")])
    assert rerun.exit_code == 0, rerun.output


def test_lint_keeps_unfixable_diagnostics(runner: CliRunner, workspace: Path) -> None:
    source_file = workspace / "app.ts"
    source_file.write_text("annotateQuery(gql`query { missing }`);\n")

    result = runner.invoke(cli, ["lint", str(source_file), "--config", str(workspace / "gqlcheck.yaml"), "--fix"])

    assert result.exit_code == 1, result.output
    assert "query-invalid" in result.output
    assert source_file.read_text() == "annotateQuery(gql`query { missing }`);\n"


def test_lint_clean_file(runner: CliRunner, workspace: Path) -> None:
    source_file = workspace / "clean.ts"
    source_file.write_text("const answer = 42;\n")

    result = runner.invoke(cli, ["lint", str(source_file), "--config", str(workspace / "gqlcheck.yaml")])

    assert result.exit_code == 0, result.output
    assert "no problems found" in result.output


def test_lint_invalid_config(runner: CliRunner, tmp_path: Path) -> None:
    config_file = tmp_path / "gqlcheck.yaml"
    config_file.write_text("targets:\n  - methodName: query\n")
    source_file = tmp_path / "app.ts"
    source_file.write_text("")

    result = runner.invoke(cli, ["lint", str(source_file), "--config", str(config_file)])

    assert result.exit_code == 1


def test_infer(runner: CliRunner, query_file: Path) -> None:
    result = runner.invoke(cli, ["infer", "--schema", str(TestSchemaData.APOLLO_SCHEMA), "--query", str(query_file)])

    assert result.exit_code == 0, result.output
    assert TestSchemaData.GREETING_ANNOTATION in result.output


def test_infer_json(runner: CliRunner, query_file: Path) -> None:
    result = runner.invoke(
        cli, ["infer", "--schema", str(TestSchemaData.APOLLO_SCHEMA), "--query", str(query_file), "--json"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["arguments"]["fields"][0]["name"] == "language"
    assert data["result"]["kind"] == "record"


def test_infer_omit_empty_arguments(runner: CliRunner, tmp_path: Path) -> None:
    query = tmp_path / "count.graphql"
    query.write_text('{ greeting(language: "en") { message } }')

    result = runner.invoke(
        cli,
        ["infer", "-s", str(TestSchemaData.APOLLO_SCHEMA), "-q", str(query), "--omit-empty-arguments"],
    )

    assert result.exit_code == 0, result.output
    assert "<{ greeting: { message: string } }>" in result.output


def test_infer_enum_literals(runner: CliRunner, tmp_path: Path) -> None:
    query = tmp_path / "book.graphql"
    query.write_text('{ book(id: "1") { genre } }')

    result = runner.invoke(
        cli,
        ["infer", "-s", str(TestSchemaData.CATALOG_SCHEMA), "-q", str(query), "--enum-style", "literals"],
    )

    assert result.exit_code == 0, result.output
    assert '"FICTION"' in result.output


def test_validate(runner: CliRunner, query_file: Path) -> None:
    result = runner.invoke(cli, ["validate", "-s", str(TestSchemaData.APOLLO_SCHEMA), "-q", str(query_file)])

    assert result.exit_code == 0, result.output
    assert "Query is valid" in result.output


def test_validate_reports_invalid_query(runner: CliRunner, tmp_path: Path) -> None:
    query = tmp_path / "bad.graphql"
    query.write_text("query {nonexistent_field}")

    result = runner.invoke(cli, ["validate", "-s", str(TestSchemaData.APOLLO_SCHEMA), "-q", str(query)])

    assert result.exit_code == 1
    assert "nonexistent_field" in result.output


@pytest.mark.parametrize(
    "source, offset, expected",
    [
        ("abc", 0, (1, 1)),
        ("abc", 2, (1, 3)),
        ("ab\ncd", 3, (2, 1)),
        ("ab\ncd\nef", 7, (3, 2)),
    ],
)
def test_line_and_column(source: str, offset: int, expected: tuple[int, int]) -> None:
    assert line_and_column(source, offset) == expected

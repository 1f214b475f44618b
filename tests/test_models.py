import pytest
from jinja2 import UndefinedError

from gqlcheck.errors import DiagnosticKind, QueryInvalidReason, QueryValidationError, render_message
from gqlcheck.models import AnnotationTarget, Diagnostic, Edit, TargetKind, TextRange


def test_text_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        TextRange(5, 2)
    with pytest.raises(ValueError):
        TextRange(-1, 2)


def test_target_requires_annotation_text_and_range_together() -> None:
    with pytest.raises(ValueError):
        AnnotationTarget(TargetKind.FUNCTION, "useQuery", TextRange(0, 8), annotation_text="<{}>")


def test_target_from_source_with_tabs() -> None:
    source = "function f() {\n\tconst x = client.query<{}>(q);\n}"
    identifier_start = source.index("query")
    annotation_start = identifier_start + len("query")

    target = AnnotationTarget.from_source(
        source,
        TargetKind.METHOD,
        TextRange(identifier_start, annotation_start),
        TextRange(annotation_start, annotation_start + len("<{}>")),
    )

    assert target.identifier == "query"
    assert target.annotation_text == "<{}>"
    assert target.line_indent == "\t"
    assert target.column == len("\tconst x = client.query")
    assert target.insertion_range == TextRange(annotation_start, annotation_start + 4)


def test_diagnostic_as_dict() -> None:
    diagnostic = Diagnostic(
        kind=DiagnosticKind.WRONG_ANNOTATION,
        message="Operation type annotation does not match GraphQL query type",
        range=TextRange(0, 8),
        edit=Edit(TextRange(8, 12), "<{ a: string }>"),
    )

    assert diagnostic.as_dict() == {
        "kind": "wrong-annotation",
        "reason": None,
        "message": "Operation type annotation does not match GraphQL query type",
        "range": {"start": 0, "end": 8},
        "edit": {"range": {"start": 8, "end": 12}, "text": "<{ a: string }>"},
    }


def test_render_message_requires_template_data() -> None:
    with pytest.raises(UndefinedError):
        render_message(DiagnosticKind.SCHEMA_UNREADABLE)


def test_validation_error_message() -> None:
    error = QueryValidationError(["first (1:1)", "second (2:3)"])

    assert error.reason == QueryInvalidReason.VALIDATION
    assert error.diagnostic_message == "Invalid GraphQL document in template literal:\n\nfirst (1:1)\nsecond (2:3)"


def test_validation_error_needs_messages() -> None:
    with pytest.raises(ValueError):
        QueryValidationError([])

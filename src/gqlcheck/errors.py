from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined


class DiagnosticKind(str, Enum):
    SCHEMA_UNREADABLE = "schema-unreadable"
    SCHEMA_INVALID = "schema-invalid"
    INTERPOLATION_NOT_ALLOWED = "interpolation-not-allowed"
    QUERY_PARSE_ERROR = "query-parse-error"
    QUERY_INVALID = "query-invalid"
    MISSING_ANNOTATION = "missing-annotation"
    WRONG_ANNOTATION = "wrong-annotation"
    UNHANDLED_ENGINE_EXCEPTION = "unhandled-engine-exception"


class QueryInvalidReason(str, Enum):
    VALIDATION = "validation"
    MULTIPLE_DEFINITIONS = "multiple-definitions"
    ONLY_QUERY_OPERATIONS = "only-query-operations"


MESSAGE_TEMPLATES: dict[DiagnosticKind, str] = {
    DiagnosticKind.SCHEMA_UNREADABLE: "Cannot read GraphQL schema file at '{{ schema_path }}':\n\n{{ error_message }}",
    DiagnosticKind.SCHEMA_INVALID: "Invalid GraphQL schema at '{{ schema_path }}':\n\n{{ error_message }}",
    DiagnosticKind.INTERPOLATION_NOT_ALLOWED: "Interpolation not allowed in gql template literals",
    DiagnosticKind.QUERY_PARSE_ERROR: "Parse error in GraphQL template literal:\n\n{{ error_message }}",
    DiagnosticKind.QUERY_INVALID: (
        "{% if reason == 'multiple-definitions' %}"
        "Only a single definition is allowed in gql template literals"
        "{% elif reason == 'only-query-operations' %}"
        "Only query operations are allowed in gql template literals"
        "{% else %}"
        "Invalid GraphQL document in template literal:\n\n{{ error_message }}"
        "{% endif %}"
    ),
    DiagnosticKind.MISSING_ANNOTATION: "Operation should have a type annotation that matches the GraphQL query type",
    DiagnosticKind.WRONG_ANNOTATION: "Operation type annotation does not match GraphQL query type",
    DiagnosticKind.UNHANDLED_ENGINE_EXCEPTION: (
        "Unhandled exception in gqlcheck, probably due to a bug in gqlcheck. "
        "Note that the query type annotations may be incorrect.\n\n{{ error_message }}"
    ),
}

_environment = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)


def render_message(kind: DiagnosticKind, **data: Any) -> str:
    """Render the user facing message of a diagnostic kind.

    Args:
        kind: The diagnostic kind
        **data: Values referenced by the kind's message template

    Returns:
        The rendered message

    Raises:
        jinja2.UndefinedError: If the template references a value missing from data
    """
    template = _environment.from_string(MESSAGE_TEMPLATES[kind])
    return template.render(**data)


class GqlCheckError(Exception):
    """Base class for user errors reported as diagnostics."""

    kind: DiagnosticKind = DiagnosticKind.UNHANDLED_ENGINE_EXCEPTION

    def message_data(self) -> dict[str, Any]:
        return {"error_message": str(self)}

    @property
    def diagnostic_message(self) -> str:
        return render_message(self.kind, **self.message_data())


class SchemaError(GqlCheckError):
    def __init__(self, path: Path, cause: str) -> None:
        super().__init__(cause)
        self.path = path
        self.cause = cause

    def message_data(self) -> dict[str, Any]:
        return {"schema_path": str(self.path), "error_message": self.cause}


class SchemaUnreadableError(SchemaError):
    kind = DiagnosticKind.SCHEMA_UNREADABLE


class SchemaInvalidError(SchemaError):
    kind = DiagnosticKind.SCHEMA_INVALID


class QueryError(GqlCheckError):
    pass


class InterpolationNotAllowedError(QueryError):
    kind = DiagnosticKind.INTERPOLATION_NOT_ALLOWED

    def __init__(self, offset: int, length: int) -> None:
        super().__init__(f"Interpolation placeholder at offset {offset}")
        self.offset = offset
        self.length = length


class QueryParseError(QueryError):
    kind = DiagnosticKind.QUERY_PARSE_ERROR


class QueryInvalidError(QueryError):
    kind = DiagnosticKind.QUERY_INVALID
    reason: QueryInvalidReason = QueryInvalidReason.VALIDATION

    def message_data(self) -> dict[str, Any]:
        return {"reason": self.reason.value, "error_message": str(self)}


class QueryValidationError(QueryInvalidError):
    reason = QueryInvalidReason.VALIDATION

    def __init__(self, messages: list[str]) -> None:
        if not messages:
            raise ValueError("QueryValidationError requires at least one message")
        super().__init__("\n".join(messages))
        self.messages = messages


class MultipleDefinitionsError(QueryInvalidError):
    reason = QueryInvalidReason.MULTIPLE_DEFINITIONS

    def __init__(self, count: int) -> None:
        super().__init__(f"Document contains {count} definitions")
        self.count = count


class OnlyQueryOperationsError(QueryInvalidError):
    reason = QueryInvalidReason.ONLY_QUERY_OPERATIONS

    def __init__(self, found: str) -> None:
        super().__init__(f"Found {found} definition")
        self.found = found

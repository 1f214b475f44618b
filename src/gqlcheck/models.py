from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from gqlcheck.errors import DiagnosticKind, QueryInvalidReason


@dataclass(frozen=True)
class TextRange:
    """Half-open range of character offsets into a source text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid text range [{self.start}, {self.end})")

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def as_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}


class TargetKind(str, Enum):
    FUNCTION = "function"
    METHOD = "method"
    TAGGED_TEMPLATE = "tagged-template"


def _line_start(source: str, offset: int) -> int:
    return source.rfind("\n", 0, offset) + 1


@dataclass(frozen=True)
class AnnotationTarget:
    """Where a query annotation is, or would be, attached in the host source.

    Attributes:
        kind: Whether the annotation decorates a function call, method call or tagged template
        identifier: Name of the called function, method or template tag
        identifier_range: Range of the identifier in the host source
        annotation_text: Verbatim current annotation, angle brackets included
        annotation_range: Range of the current annotation
        column: Column of the annotation's insertion point
        line_indent: Leading whitespace of the line holding the insertion point
    """

    kind: TargetKind
    identifier: str
    identifier_range: TextRange
    annotation_text: str | None = None
    annotation_range: TextRange | None = None
    column: int = 0
    line_indent: str = ""

    def __post_init__(self) -> None:
        if (self.annotation_text is None) != (self.annotation_range is None):
            raise ValueError("annotation_text and annotation_range must be given together")

    @property
    def insertion_range(self) -> TextRange:
        """Range replaced by a new annotation, empty right after the identifier when there is none."""
        if self.annotation_range is not None:
            return self.annotation_range
        return TextRange(self.identifier_range.end, self.identifier_range.end)

    @classmethod
    def from_source(
        cls,
        source: str,
        kind: TargetKind,
        identifier_range: TextRange,
        annotation_range: TextRange | None = None,
    ) -> "AnnotationTarget":
        """Build a target from ranges into the host source, reading positions and texts from it."""
        insertion = annotation_range.start if annotation_range else identifier_range.end
        line_start = _line_start(source, insertion)
        line = source[line_start:insertion]
        return cls(
            kind=kind,
            identifier=identifier_range.slice(source),
            identifier_range=identifier_range,
            annotation_text=annotation_range.slice(source) if annotation_range else None,
            annotation_range=annotation_range,
            column=len(line),
            line_indent=line[: len(line) - len(line.lstrip(" \t"))],
        )


@dataclass(frozen=True)
class CallSite:
    """A query literal passed to an annotated call, as supplied by the host.

    `query_text` is the literal's value with escape sequences decoded, and
    `interpolations` the host ranges of its `${...}` substitutions. Hosts that
    leave `interpolations` unset have placeholders detected in the text itself.
    """

    schema_path: Path
    query_text: str
    query_range: TextRange
    target: AnnotationTarget
    interpolations: tuple[TextRange, ...] | None = None


@dataclass(frozen=True)
class Edit:
    range: TextRange
    text: str

    def as_dict(self) -> dict[str, Any]:
        return {"range": self.range.as_dict(), "text": self.text}


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    range: TextRange
    edit: Edit | None = None
    reason: QueryInvalidReason | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "range": self.range.as_dict(),
            "edit": self.edit.as_dict() if self.edit else None,
        }

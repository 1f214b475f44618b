from dataclasses import dataclass, field

from gqlcheck import log
from gqlcheck.annotation.canonical import canonical_form
from gqlcheck.annotation.formatter import FormatOptions, format_annotation
from gqlcheck.annotation.parser import AnnotationSyntaxError, parse_annotation
from gqlcheck.errors import DiagnosticKind
from gqlcheck.inference.descriptors import TypeDescriptor
from gqlcheck.models import AnnotationTarget, TextRange
from gqlcheck.render.renderer import EnumStyle, render_annotation


@dataclass(frozen=True)
class Unchanged:
    """The existing annotation already matches the inferred one."""


@dataclass(frozen=True)
class Replace:
    range: TextRange
    new_text: str
    kind: DiagnosticKind


Outcome = Unchanged | Replace


@dataclass(frozen=True)
class ReconcileOptions:
    omit_empty_arguments: bool = False
    enum_style: EnumStyle = EnumStyle.NAME
    format: FormatOptions = field(default_factory=FormatOptions)


def annotations_match(existing_annotation: str, inferred_annotation: str) -> bool:
    """
    Compare two annotations ignoring formatting.

    Whitespace, line breaks, comments, member separators, redundant parentheses,
    quote style and the order of union members don't matter. The order of object
    members does.

    An existing annotation that can't be parsed never matches.
    """
    inferred = canonical_form(parse_annotation(inferred_annotation))
    try:
        existing = canonical_form(parse_annotation(existing_annotation))
    except AnnotationSyntaxError as e:
        log.debug(f"Existing annotation is not comparable: {e}")
        return False
    return existing == inferred


def reconcile(
    existing_annotation: str | None,
    result_type: TypeDescriptor,
    arguments_type: TypeDescriptor,
    target: AnnotationTarget,
    *,
    options: ReconcileOptions = ReconcileOptions(),
) -> Outcome:
    """
    Decide whether a call site's annotation must change, and to what.

    Args:
        existing_annotation: Current annotation text, or None if the call has none
        result_type: Inferred result type
        arguments_type: Inferred arguments type
        target: Where the annotation is attached
        options: Rendering and formatting options

    Returns:
        Unchanged, or Replace with the range to replace and the formatted annotation

    Raises:
        ValueError: If an existing annotation is given for a target without an annotation range
    """
    if existing_annotation is not None and target.annotation_range is None:
        raise ValueError(f"Annotation of '{target.identifier}' has no range to replace")

    inferred_annotation = render_annotation(
        result_type,
        arguments_type,
        omit_empty_arguments=options.omit_empty_arguments,
        enum_style=options.enum_style,
    )

    if existing_annotation is None:
        kind = DiagnosticKind.MISSING_ANNOTATION
        replaced_range = TextRange(target.identifier_range.end, target.identifier_range.end)
    elif annotations_match(existing_annotation, inferred_annotation):
        log.debug(f"Annotation of '{target.identifier}' is up to date")
        return Unchanged()
    else:
        kind = DiagnosticKind.WRONG_ANNOTATION
        replaced_range = target.insertion_range

    new_text = format_annotation(
        inferred_annotation,
        options=options.format,
        start_column=target.column,
        base_indent=target.line_indent,
    )
    log.debug(f"Annotation of '{target.identifier}' needs replacing ({kind.value})")
    return Replace(range=replaced_range, new_text=new_text, kind=kind)

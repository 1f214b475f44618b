import json
from enum import Enum

from gqlcheck.inference.descriptors import (
    EmptyRecordType,
    EnumLiteral,
    ListType,
    OptionalType,
    RecordField,
    RecordType,
    ScalarType,
    StringLiteral,
    TypeDescriptor,
    UnionType,
)

GRAPHQL_SCALAR_TO_TYPESCRIPT = {
    "String": "string",
    "ID": "string",
    "Int": "number",
    "Float": "number",
    "Boolean": "boolean",
}

EMPTY_RECORD_ANNOTATION = "Record<PropertyKey, never>"
LIST_WRAPPER = "ReadonlyArray"
NULL_TYPE = "null"


class EnumStyle(str, Enum):
    NAME = "name"
    LITERALS = "literals"


def render_scalar(name: str) -> str:
    """Built-in scalars map to primitives, custom scalars keep their schema name."""
    return GRAPHQL_SCALAR_TO_TYPESCRIPT.get(name, name)


def _union_members(descriptor: TypeDescriptor, enum_style: EnumStyle) -> list[str]:
    if isinstance(descriptor, OptionalType):
        return [*_union_members(descriptor.inner, enum_style), NULL_TYPE]
    if isinstance(descriptor, UnionType):
        return [member for item in descriptor.members for member in _union_members(item, enum_style)]
    if isinstance(descriptor, EnumLiteral) and enum_style == EnumStyle.LITERALS and descriptor.values:
        return [json.dumps(value) for value in descriptor.values]
    return [render(descriptor, enum_style=enum_style)]


def render_field(field: RecordField, enum_style: EnumStyle = EnumStyle.NAME) -> str:
    marker = "?" if field.optional else ""
    return f"{field.name}{marker}: {render(field.type, enum_style=enum_style)}"


def render(descriptor: TypeDescriptor, *, enum_style: EnumStyle = EnumStyle.NAME) -> str:
    """
    Render a type descriptor as single-line TypeScript type text.

    Args:
        descriptor: The descriptor to render
        enum_style: Render enums by name or as the union of their values

    Returns:
        TypeScript type text
    """
    if isinstance(descriptor, ScalarType):
        return render_scalar(descriptor.name)
    if isinstance(descriptor, EnumLiteral):
        if enum_style == EnumStyle.LITERALS and descriptor.values:
            return " | ".join(_union_members(descriptor, enum_style))
        return descriptor.name
    if isinstance(descriptor, StringLiteral):
        return json.dumps(descriptor.value)
    if isinstance(descriptor, RecordType):
        if not descriptor.fields:
            return "{}"
        return "{ " + "; ".join(render_field(field, enum_style) for field in descriptor.fields) + " }"
    if isinstance(descriptor, ListType):
        return f"{LIST_WRAPPER}<{render(descriptor.element, enum_style=enum_style)}>"
    if isinstance(descriptor, OptionalType | UnionType):
        return " | ".join(_union_members(descriptor, enum_style))
    if isinstance(descriptor, EmptyRecordType):
        return EMPTY_RECORD_ANNOTATION
    raise TypeError(f"Unsupported type descriptor: {type(descriptor).__name__}")


def render_annotation(
    result_type: TypeDescriptor,
    arguments_type: TypeDescriptor,
    *,
    omit_empty_arguments: bool = False,
    enum_style: EnumStyle = EnumStyle.NAME,
) -> str:
    """
    Render the type arguments annotating a query call, `<Result, Arguments>`.

    Args:
        result_type: The inferred result type
        arguments_type: The inferred arguments type
        omit_empty_arguments: Leave the arguments out when the query has no variables
        enum_style: Render enums by name or as the union of their values

    Returns:
        The annotation text, including the angle brackets
    """
    rendered = [render(result_type, enum_style=enum_style)]
    if not (omit_empty_arguments and isinstance(arguments_type, EmptyRecordType)):
        rendered.append(render(arguments_type, enum_style=enum_style))
    return "<" + ", ".join(rendered) + ">"

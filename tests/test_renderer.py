import pytest

from gqlcheck.inference import (
    EMPTY_RECORD,
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
from gqlcheck.render import EnumStyle, render, render_annotation

GENRE = EnumLiteral("Genre", ("FICTION", "HISTORY"))


@pytest.mark.parametrize(
    "descriptor, expected",
    [
        (ScalarType("String"), "string"),
        (ScalarType("ID"), "string"),
        (ScalarType("Int"), "number"),
        (ScalarType("Float"), "number"),
        (ScalarType("Boolean"), "boolean"),
        (ScalarType("DateTime"), "DateTime"),
        (StringLiteral("Greeting"), '"Greeting"'),
        (GENRE, "Genre"),
        (OptionalType(ScalarType("Int")), "number | null"),
        (ListType(ScalarType("String")), "ReadonlyArray<string>"),
        (ListType(OptionalType(ScalarType("String"))), "ReadonlyArray<string | null>"),
        (OptionalType(ListType(ScalarType("String"))), "ReadonlyArray<string> | null"),
        (RecordType(), "{}"),
        (EMPTY_RECORD, "Record<PropertyKey, never>"),
        (UnionType((StringLiteral("Author"), StringLiteral("Book"))), '"Author" | "Book"'),
    ],
)
def test_render(descriptor: TypeDescriptor, expected: str) -> None:
    assert render(descriptor) == expected


def test_render_record_with_optional_field() -> None:
    record = RecordType(
        (
            RecordField("title", ScalarType("String")),
            RecordField("genre", OptionalType(GENRE), optional=True),
        )
    )

    assert render(record) == "{ title: string; genre?: Genre | null }"


def test_render_enum_as_literals() -> None:
    assert render(GENRE, enum_style=EnumStyle.LITERALS) == '"FICTION" | "HISTORY"'
    assert render(OptionalType(GENRE), enum_style=EnumStyle.LITERALS) == '"FICTION" | "HISTORY" | null'
    assert render(ListType(GENRE), enum_style=EnumStyle.LITERALS) == 'ReadonlyArray<"FICTION" | "HISTORY">'


def test_render_annotation() -> None:
    result = RecordType((RecordField("greeting", RecordType((RecordField("message", ScalarType("String")),))),))
    arguments = RecordType((RecordField("language", ScalarType("String")),))

    assert render_annotation(result, arguments) == "<{ greeting: { message: string } }, { language: string }>"


def test_render_annotation_without_variables() -> None:
    result = RecordType((RecordField("count", ScalarType("Int")),))

    assert render_annotation(result, EMPTY_RECORD) == "<{ count: number }, Record<PropertyKey, never>>"
    assert render_annotation(result, EMPTY_RECORD, omit_empty_arguments=True) == "<{ count: number }>"


def test_omit_empty_arguments_keeps_declared_variables() -> None:
    result = RecordType((RecordField("count", ScalarType("Int")),))
    arguments = RecordType((RecordField("limit", OptionalType(ScalarType("Int")), optional=True),))

    assert render_annotation(result, arguments, omit_empty_arguments=True) == (
        "<{ count: number }, { limit?: number | null }>"
    )


def test_render_rejects_unknown_descriptors() -> None:
    with pytest.raises(TypeError):
        render("string")  # type: ignore[arg-type]

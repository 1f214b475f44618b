"""Pretty-printing of type annotations.

Annotations are converted to a document of text, line breaks, groups and
indentation, which is then laid out with the same fitting rules as prettier: a
group is printed on one line when it fits the remaining width, otherwise its line
breaks become newlines.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from gqlcheck.annotation.nodes import (
    ArrayType,
    IndexSignature,
    IntersectionType,
    LiteralType,
    ObjectMember,
    ObjectType,
    PropertySignature,
    TupleType,
    TypeArguments,
    TypeNode,
    TypeOperator,
    TypeReference,
    UnionType,
)
from gqlcheck.annotation.parser import parse_annotation

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")
NULLISH_TYPES = {"null", "undefined"}


@dataclass(frozen=True)
class Group:
    contents: "Doc"
    should_break: bool = False


@dataclass(frozen=True)
class Indent:
    contents: "Doc"


@dataclass(frozen=True)
class Line:
    soft: bool = False


@dataclass(frozen=True)
class IfBreak:
    break_contents: "Doc"
    flat_contents: "Doc" = ""


Doc: TypeAlias = str | list["Doc"] | Group | Indent | Line | IfBreak

LINE = Line()
SOFTLINE = Line(soft=True)


class Mode(Enum):
    BREAK = "break"
    FLAT = "flat"


Command: TypeAlias = tuple[int, Mode, Doc]


@dataclass(frozen=True)
class FormatOptions:
    print_width: int = 80
    tab_width: int = 2


def join(separator: Doc, docs: list[Doc]) -> list[Doc]:
    joined: list[Doc] = []
    for index, doc in enumerate(docs):
        if index:
            joined.append(separator)
        joined.append(doc)
    return joined


# Layout


def fits(next_command: Command, rest_commands: list[Command], width: int) -> bool:
    """Check whether a command fits the width, up to the next line break of the rest."""
    stack = [next_command]
    rest_index = len(rest_commands)
    while width >= 0:
        if not stack:
            if rest_index == 0:
                return True
            rest_index -= 1
            stack.append(rest_commands[rest_index])
            continue

        indent, mode, doc = stack.pop()
        if isinstance(doc, str):
            width -= len(doc)
        elif isinstance(doc, list):
            stack.extend((indent, mode, part) for part in reversed(doc))
        elif isinstance(doc, Indent):
            stack.append((indent + 1, mode, doc.contents))
        elif isinstance(doc, Group):
            stack.append((indent, Mode.BREAK if doc.should_break else mode, doc.contents))
        elif isinstance(doc, IfBreak):
            stack.append((indent, mode, doc.break_contents if mode is Mode.BREAK else doc.flat_contents))
        elif isinstance(doc, Line):
            if mode is Mode.BREAK:
                return True
            if not doc.soft:
                width -= 1
    return False


def _trim_trailing_spaces(out: list[str]) -> None:
    while out:
        trimmed = out[-1].rstrip(" ")
        if trimmed:
            out[-1] = trimmed
            return
        out.pop()


def print_doc(
    doc: Doc,
    options: FormatOptions = FormatOptions(),
    start_column: int = 0,
    base_indent: str = "",
    suffix: str = "",
) -> str:
    """
    Lay out a document.

    Args:
        doc: The document to print
        options: Print width and indentation width
        start_column: Column the first line starts at
        base_indent: Leading whitespace of every line after the first
        suffix: Text following the document on its last line, taken into account
            when fitting groups but not printed

    Returns:
        The printed text
    """
    base_width = len(base_indent.expandtabs(options.tab_width))
    trailing: list[Command] = [(0, Mode.BREAK, suffix)] if suffix else []

    out: list[str] = []
    position = start_column
    commands: list[Command] = [(0, Mode.BREAK, doc)]
    while commands:
        indent, mode, current = commands.pop()
        if isinstance(current, str):
            out.append(current)
            position += len(current)
        elif isinstance(current, list):
            commands.extend((indent, mode, part) for part in reversed(current))
        elif isinstance(current, Indent):
            commands.append((indent + 1, mode, current.contents))
        elif isinstance(current, Group):
            if mode is Mode.FLAT and not current.should_break:
                commands.append((indent, Mode.FLAT, current.contents))
                continue
            flat: Command = (indent, Mode.FLAT, current.contents)
            if not current.should_break and fits(flat, trailing + commands, options.print_width - position):
                commands.append(flat)
            else:
                commands.append((indent, Mode.BREAK, current.contents))
        elif isinstance(current, IfBreak):
            commands.append((indent, mode, current.break_contents if mode is Mode.BREAK else current.flat_contents))
        elif isinstance(current, Line):
            if mode is Mode.FLAT:
                if not current.soft:
                    out.append(" ")
                    position += 1
                continue
            _trim_trailing_spaces(out)
            padding = " " * (options.tab_width * indent)
            out.append("\n" + base_indent + padding)
            position = base_width + len(padding)
    return "".join(out)


# Annotation documents


def _should_hug(node: TypeNode) -> bool:
    if isinstance(node, ObjectType):
        return True
    return isinstance(node, TypeReference) and not node.arguments


def type_arguments_doc(params: tuple[TypeNode, ...]) -> Doc:
    if len(params) == 1 and _should_hug(params[0]):
        return ["<", type_doc(params[0], in_type_arguments=True), ">"]

    docs = [type_doc(param, in_type_arguments=True) for param in params]
    return Group(["<", Indent([SOFTLINE, join([",", LINE], docs)]), SOFTLINE, ">"])


def property_name(name: str) -> str:
    return name if IDENTIFIER_PATTERN.match(name) else json.dumps(name)


def member_doc(member: ObjectMember) -> Doc:
    readonly = "readonly " if member.readonly else ""
    if isinstance(member, IndexSignature):
        return [readonly, "[", member.key_name, ": ", type_doc(member.key_type), "]: ", type_doc(member.type)]
    optional = "?" if member.optional else ""
    return [readonly, property_name(member.name), optional, ": ", type_doc(member.type)]


def object_doc(node: ObjectType) -> Doc:
    if not node.members:
        return "{}"
    members = [member_doc(member) for member in node.members]
    return Group(["{", Indent([LINE, join([";", LINE], members)]), IfBreak(";"), LINE, "}"])


def _is_nullish(node: TypeNode) -> bool:
    return isinstance(node, TypeReference) and node.name in NULLISH_TYPES and not node.arguments


def union_doc(node: UnionType, in_type_arguments: bool) -> Doc:
    docs = [_wrapped_doc(member, (IntersectionType,)) for member in node.members]

    # A single object or list next to null keeps the object's own layout
    substantial = [member for member in node.members if not _is_nullish(member)]
    if len(substantial) == 1 and isinstance(substantial[0], ObjectType | TypeReference | ArrayType):
        return join(" | ", docs)

    if in_type_arguments:
        return Group([IfBreak("| "), join([LINE, "| "], docs)])
    return Group(Indent([IfBreak([LINE, "| "]), join([LINE, "| "], docs)]))


def literal_doc(node: LiteralType) -> Doc:
    if isinstance(node.value, str):
        return json.dumps(node.value)
    return node.raw


def _wrapped_doc(node: TypeNode, wrapped_kinds: tuple[type, ...]) -> Doc:
    doc = type_doc(node)
    if isinstance(node, wrapped_kinds):
        return ["(", doc, ")"]
    return doc


def type_doc(node: TypeNode, in_type_arguments: bool = False) -> Doc:
    if isinstance(node, TypeReference):
        if not node.arguments:
            return node.name
        return [node.name, type_arguments_doc(node.arguments)]
    if isinstance(node, LiteralType):
        return literal_doc(node)
    if isinstance(node, ObjectType):
        return object_doc(node)
    if isinstance(node, ArrayType):
        return [_wrapped_doc(node.element, (UnionType, IntersectionType, TypeOperator)), "[]"]
    if isinstance(node, TupleType):
        if not node.elements:
            return "[]"
        elements = [type_doc(element) for element in node.elements]
        return Group(["[", Indent([SOFTLINE, join([",", LINE], elements)]), SOFTLINE, "]"])
    if isinstance(node, UnionType):
        return union_doc(node, in_type_arguments)
    if isinstance(node, IntersectionType):
        return join(" & ", [_wrapped_doc(member, (UnionType,)) for member in node.members])
    if isinstance(node, TypeOperator):
        return [node.operator, " ", _wrapped_doc(node.type, (UnionType, IntersectionType))]
    raise TypeError(f"Unsupported annotation node: {type(node).__name__}")


def format_annotation(
    annotation: TypeArguments | str,
    *,
    options: FormatOptions = FormatOptions(),
    start_column: int = 0,
    base_indent: str = "",
    suffix: str = "(",
) -> str:
    """
    Format type arguments as they would be laid out at a given position.

    Args:
        annotation: Parsed type arguments, or annotation text to parse
        options: Print width and indentation width
        start_column: Column of the opening angle bracket
        base_indent: Leading whitespace of the line the annotation starts on
        suffix: Text following the annotation, such as the call's opening parenthesis

    Returns:
        The formatted annotation text, including the angle brackets
    """
    if isinstance(annotation, str):
        annotation = parse_annotation(annotation)
    return print_doc(type_arguments_doc(annotation.params), options, start_column, base_indent, suffix)

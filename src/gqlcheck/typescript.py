"""TypeScript syntax trees, shared by the call site locator and the annotation parser."""

import re
from dataclasses import dataclass
from functools import cache

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Query, QueryCursor, Tree

from gqlcheck.models import TextRange

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())
TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v"}
LINE_TERMINATORS = "\r\n\u2028\u2029"
HEX_ESCAPE_PATTERN = re.compile(r"(?:x([0-9a-fA-F]{2})|u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4}))$")

# Calls whose callee may be a configured target. Tagged templates parse as calls
# whose arguments are a template string.
CALL_QUERY_SOURCE = """
(call_expression
  function: (identifier) @callee
  arguments: (arguments) @arguments) @call
(call_expression
  function: (member_expression
    object: (identifier) @object
    property: (property_identifier) @callee)
  arguments: (arguments) @arguments) @call
(call_expression
  function: (identifier) @callee
  arguments: (template_string) @template) @call
"""


@cache
def call_query(tsx: bool = False) -> Query:
    return Query(TSX_LANGUAGE if tsx else TS_LANGUAGE, CALL_QUERY_SOURCE)


@dataclass(frozen=True)
class ParsedSource:
    """A source text with its syntax tree.

    Tree-sitter reports UTF-8 byte offsets; ranges handed out are character
    offsets into `text`.
    """

    text: str
    data: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def offset(self, byte_offset: int) -> int:
        if len(self.data) == len(self.text):
            return byte_offset
        return len(self.data[:byte_offset].decode("utf-8"))

    def range(self, node: Node) -> TextRange:
        return TextRange(self.offset(node.start_byte), self.offset(node.end_byte))

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")


def parse_source(text: str, *, tsx: bool = False) -> ParsedSource:
    data = text.encode("utf-8")
    parser = Parser(TSX_LANGUAGE if tsx else TS_LANGUAGE)
    return ParsedSource(text=text, data=data, tree=parser.parse(data))


def query_matches(query: Query, node: Node) -> list[tuple[int, dict[str, list[Node]]]]:
    """Matches of a query under node, as (pattern index, captures by name)."""
    return QueryCursor(query).matches(node)


def named_children(node: Node) -> list[Node]:
    """Named children of a node, comments excluded."""
    return [child for child in node.named_children if child.type != "comment"]


def has_token(node: Node, token: str) -> bool:
    """Whether an anonymous child token such as `?` or `readonly` is present."""
    return any(not child.is_named and child.type == token for child in node.children)


def decode_escape(sequence: str) -> str:
    """Return the value of a JavaScript escape sequence, backslash included."""
    body = sequence[1:]
    if not body or body[0] in LINE_TERMINATORS:
        return ""
    if body in SIMPLE_ESCAPES:
        return SIMPLE_ESCAPES[body]
    if match := HEX_ESCAPE_PATTERN.match(body):
        return chr(int(next(group for group in match.groups() if group), 16))
    if body.isdigit() and all(digit in "01234567" for digit in body):
        return chr(int(body, 8))
    return body


def literal_content(source: ParsedSource, node: Node) -> TextRange:
    """Range between the delimiters of a string or template literal."""
    start = node.start_byte + 1
    end = node.end_byte
    children = node.children
    if len(children) > 1 and not children[-1].is_named and children[-1].type == children[0].type:
        end -= 1
    return TextRange(source.offset(start), source.offset(max(start, end)))


def cooked_value(source: ParsedSource, node: Node) -> str:
    """Decode the escape sequences of a string or template literal.

    Template substitutions are kept verbatim.
    """
    content = literal_content(source, node)
    pieces: list[str] = []
    position = content.start
    for child in named_children(node):
        if child.type != "escape_sequence":
            continue
        child_range = source.range(child)
        pieces.append(source.text[position : child_range.start])
        pieces.append(decode_escape(child_range.slice(source.text)))
        position = child_range.end
    pieces.append(source.text[position : content.end])
    return "".join(pieces)


def substitutions(source: ParsedSource, node: Node) -> tuple[TextRange, ...]:
    """Ranges of the `${...}` substitutions of a template literal."""
    return tuple(source.range(child) for child in node.named_children if child.type == "template_substitution")

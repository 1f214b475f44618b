from tree_sitter import Node

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
from gqlcheck.typescript import ParsedSource, cooked_value, has_token, named_children, parse_source

# Annotation text is parsed as the type arguments of a call to this name. The
# call's parentheses go on their own line so a trailing line comment can't hide them.
CALL_NAME = "f"
CALL_ARGUMENTS = "\n()"

REFERENCE_NODE_TYPES = {"predefined_type", "type_identifier", "nested_type_identifier"}
LITERAL_NODE_TYPES = {"string", "number", "true", "false", "null", "undefined", "unary_expression"}
TYPE_OPERATOR_NODE_TYPES = {"readonly_type": "readonly", "index_type_query": "keyof"}
PROPERTY_NAME_NODE_TYPES = {"property_identifier", "string", "number"}


class AnnotationSyntaxError(ValueError):
    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


def number_value(raw: str) -> float:
    """Value of a numeric literal such as `1`, `-2.5` or `0x1F`."""
    text = raw.replace("_", "")
    try:
        return float(text)
    except ValueError:
        return float(int(text, 0))


def first_error(node: Node) -> Node:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            return first_error(child)
    return node


class TypeConverter:
    """Builds annotation nodes from the type syntax tree of a parsed annotation."""

    def __init__(self, source: ParsedSource) -> None:
        self.source = source

    def error(self, message: str, node: Node) -> AnnotationSyntaxError:
        offset = max(0, self.source.offset(node.start_byte) - len(CALL_NAME))
        return AnnotationSyntaxError(message, offset)

    def text(self, node: Node) -> str:
        return self.source.node_text(node)

    def single_child(self, node: Node) -> Node:
        children = named_children(node)
        if len(children) != 1:
            raise self.error(f"Expected a single type in '{node.type}'", node)
        return children[0]

    def convert_arguments(self, node: Node) -> TypeArguments:
        params = tuple(self.convert(child) for child in named_children(node))
        if not params:
            raise self.error("Expected at least one type argument", node)
        return TypeArguments(params)

    def convert(self, node: Node) -> TypeNode:
        node_type = node.type
        if node_type in REFERENCE_NODE_TYPES:
            return TypeReference("".join(self.text(node).split()))
        if node_type == "generic_type":
            return self.convert_generic(node)
        if node_type == "literal_type":
            return self.convert_literal(self.single_child(node))
        if node_type in LITERAL_NODE_TYPES:
            return self.convert_literal(node)
        if node_type == "object_type":
            return ObjectType(tuple(self.convert_member(member) for member in named_children(node)))
        if node_type == "array_type":
            return ArrayType(self.convert(self.single_child(node)))
        if node_type == "tuple_type":
            return TupleType(tuple(self.convert(element) for element in named_children(node)))
        if node_type == "union_type":
            return self.convert_members(node, UnionType)
        if node_type == "intersection_type":
            return self.convert_members(node, IntersectionType)
        if node_type == "parenthesized_type":
            return self.convert(self.single_child(node))
        if node_type in TYPE_OPERATOR_NODE_TYPES:
            return TypeOperator(TYPE_OPERATOR_NODE_TYPES[node_type], self.convert(self.single_child(node)))
        raise self.error(f"Unsupported type syntax '{node_type}'", node)

    def convert_generic(self, node: Node) -> TypeReference:
        name = node.child_by_field_name("name")
        arguments = node.child_by_field_name("type_arguments")
        if name is None or arguments is None:
            raise self.error("Expected a generic type name and arguments", node)
        return TypeReference(
            "".join(self.text(name).split()),
            tuple(self.convert(argument) for argument in named_children(arguments)),
        )

    def convert_literal(self, node: Node) -> TypeNode:
        raw = self.text(node)
        if node.type == "string":
            return LiteralType(cooked_value(self.source, node), raw)
        if node.type in ("true", "false"):
            return LiteralType(node.type == "true", raw)
        if node.type in ("null", "undefined"):
            return TypeReference(raw)
        if node.type in ("number", "unary_expression"):
            raw = "".join(raw.split())
            try:
                return LiteralType(number_value(raw), raw)
            except ValueError:
                raise self.error(f"Unsupported numeric literal {raw!r}", node) from None
        raise self.error(f"Unsupported literal type '{node.type}'", node)

    def convert_members(self, node: Node, kind: type[UnionType] | type[IntersectionType]) -> TypeNode:
        """Flatten a chain of `|` or `&`, which parses as nested binary nodes."""
        members: list[TypeNode] = []
        pending = [node]
        while pending:
            current = pending.pop()
            if current.type == node.type:
                pending.extend(reversed(named_children(current)))
            else:
                members.append(self.convert(current))
        return members[0] if len(members) == 1 else kind(tuple(members))

    def convert_member(self, node: Node) -> ObjectMember:
        readonly = has_token(node, "readonly")
        if node.type == "property_signature":
            return self.convert_property(node, readonly)
        if node.type == "index_signature":
            return self.convert_index_signature(node, readonly)
        raise self.error(f"Unsupported object member '{node.type}'", node)

    def member_type(self, node: Node) -> TypeNode:
        annotation = node.child_by_field_name("type")
        if annotation is None or annotation.type != "type_annotation":
            raise self.error("Expected a member type annotation", node)
        return self.convert(self.single_child(annotation))

    def convert_property(self, node: Node, readonly: bool) -> PropertySignature:
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type not in PROPERTY_NAME_NODE_TYPES:
            raise self.error("Expected a property name", node)
        name = cooked_value(self.source, name_node) if name_node.type == "string" else self.text(name_node)
        return PropertySignature(
            name=name,
            type=self.member_type(node),
            optional=has_token(node, "?"),
            readonly=readonly,
        )

    def convert_index_signature(self, node: Node, readonly: bool) -> IndexSignature:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            raise self.error("Expected an index signature parameter", node)
        key_types = [
            child for child in named_children(node) if child != name_node and child.type != "type_annotation"
        ]
        if len(key_types) != 1:
            raise self.error("Expected an index signature key type", node)
        return IndexSignature(
            key_name=self.text(name_node),
            key_type=self.convert(key_types[0]),
            type=self.member_type(node),
            readonly=readonly,
        )


def type_arguments_node(source: ParsedSource) -> Node:
    """Return the type arguments of the wrapping call, checking nothing else was parsed."""
    root = source.root
    if root.has_error:
        error = first_error(root)
        offset = max(0, source.offset(error.start_byte) - len(CALL_NAME))
        raise AnnotationSyntaxError("Invalid type annotation syntax", offset)

    statements = named_children(root)
    if len(statements) != 1 or statements[0].type != "expression_statement":
        raise AnnotationSyntaxError("Expected a single type argument list", 0)
    expression = named_children(statements[0])
    if len(expression) != 1:
        raise AnnotationSyntaxError("Expected a single type argument list", 0)
    call = expression[0]
    function = call.child_by_field_name("function")
    type_arguments = call.child_by_field_name("type_arguments")
    arguments = call.child_by_field_name("arguments")
    if (
        call.type != "call_expression"
        or function is None
        or function.start_byte != 0
        or source.node_text(function) != CALL_NAME
        or arguments is None
        or named_children(arguments)
    ):
        raise AnnotationSyntaxError("Expected a single type argument list", 0)
    if type_arguments is None:
        raise AnnotationSyntaxError("Expected type arguments", 0)
    return type_arguments


def parse_annotation(text: str) -> TypeArguments:
    """
    Parse the type arguments of a call, such as `<{ a: string }, { b: number }>`.

    Whitespace, comments, member separators and redundant parentheses are
    dropped.

    Args:
        text: The annotation text, including the angle brackets

    Returns:
        The parsed type arguments

    Raises:
        AnnotationSyntaxError: If the text is not a type argument list of the
            supported grammar
    """
    source = parse_source(f"{CALL_NAME}{text}{CALL_ARGUMENTS}")
    return TypeConverter(source).convert_arguments(type_arguments_node(source))


def parse_type(text: str) -> TypeNode:
    """Parse a single TypeScript type."""
    annotation = parse_annotation(f"<{text}\n>")
    if len(annotation.params) != 1:
        raise AnnotationSyntaxError("Expected a single type", 0)
    return annotation.params[0]

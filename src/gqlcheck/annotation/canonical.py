import json
from typing import Any

from gqlcheck.annotation.nodes import (
    ArrayType,
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


def _flatten(node: TypeNode, kind: type[UnionType] | type[IntersectionType]) -> list[TypeNode]:
    if isinstance(node, kind):
        return [flat for member in node.members for flat in _flatten(member, kind)]
    return [node]


def _canonical_members(members: list[TypeNode]) -> list[Any]:
    """Union and intersection members compare as a set."""
    unique: dict[str, Any] = {}
    for member in members:
        data = to_canonical_data(member)
        unique.setdefault(json.dumps(data, sort_keys=True), data)
    return [unique[key] for key in sorted(unique)]


def _member_data(member: ObjectMember) -> Any:
    if isinstance(member, PropertySignature):
        return {
            "property": member.name,
            "optional": member.optional,
            "readonly": member.readonly,
            "type": to_canonical_data(member.type),
        }
    return {
        "index": to_canonical_data(member.key_type),
        "readonly": member.readonly,
        "type": to_canonical_data(member.type),
    }


def to_canonical_data(node: TypeNode) -> Any:
    """Convert a type to plain data that is equal for equivalent spellings.

    Object member order is kept; union and intersection member order is not.
    """
    if isinstance(node, TypeReference):
        return {"ref": node.name, "args": [to_canonical_data(argument) for argument in node.arguments]}
    if isinstance(node, LiteralType):
        return {"literal": node.value, "type": type(node.value).__name__}
    if isinstance(node, ObjectType):
        return {"object": [_member_data(member) for member in node.members]}
    if isinstance(node, ArrayType):
        return {"array": to_canonical_data(node.element)}
    if isinstance(node, TupleType):
        return {"tuple": [to_canonical_data(element) for element in node.elements]}
    if isinstance(node, UnionType):
        members = _canonical_members(_flatten(node, UnionType))
        return members[0] if len(members) == 1 else {"union": members}
    if isinstance(node, IntersectionType):
        members = _canonical_members(_flatten(node, IntersectionType))
        return members[0] if len(members) == 1 else {"intersection": members}
    if isinstance(node, TypeOperator):
        return {"operator": node.operator, "type": to_canonical_data(node.type)}
    raise TypeError(f"Unsupported annotation node: {type(node).__name__}")


def canonical_form(annotation: TypeArguments) -> str:
    """Serialize type arguments to a string equal for equivalent annotations."""
    return json.dumps([to_canonical_data(param) for param in annotation.params], sort_keys=True)


def canonicalize(text: str) -> str:
    """Parse annotation text and return its canonical form."""
    return canonical_form(parse_annotation(text))


"""Syntax tree of TypeScript type annotations.

Only the type grammar that query annotations are written in is covered: type
references with type arguments, object type literals, arrays, tuples, unions,
intersections, literal types and the `readonly`/`keyof` operators.
"""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class TypeReference:
    """A named type, optionally with type arguments (`string`, `ReadonlyArray<T>`)."""

    name: str
    arguments: tuple["TypeNode", ...] = ()


@dataclass(frozen=True)
class LiteralType:
    """A string, number or boolean literal type. `raw` keeps the source spelling."""

    value: str | float | bool
    raw: str


@dataclass(frozen=True)
class PropertySignature:
    name: str
    type: "TypeNode"
    optional: bool = False
    readonly: bool = False


@dataclass(frozen=True)
class IndexSignature:
    key_name: str
    key_type: "TypeNode"
    type: "TypeNode"
    readonly: bool = False


ObjectMember: TypeAlias = PropertySignature | IndexSignature


@dataclass(frozen=True)
class ObjectType:
    members: tuple[ObjectMember, ...] = ()


@dataclass(frozen=True)
class ArrayType:
    element: "TypeNode"


@dataclass(frozen=True)
class TupleType:
    elements: tuple["TypeNode", ...] = ()


@dataclass(frozen=True)
class UnionType:
    members: tuple["TypeNode", ...]


@dataclass(frozen=True)
class IntersectionType:
    members: tuple["TypeNode", ...]


@dataclass(frozen=True)
class TypeOperator:
    operator: str
    type: "TypeNode"


TypeNode: TypeAlias = (
    TypeReference | LiteralType | ObjectType | ArrayType | TupleType | UnionType | IntersectionType | TypeOperator
)


@dataclass(frozen=True)
class TypeArguments:
    """The `<A, B>` type arguments of a call or tagged template."""

    params: tuple[TypeNode, ...]

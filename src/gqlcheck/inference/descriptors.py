"""Structural type descriptors inferred from a query.

Descriptors are immutable values without source positions or formatting. They
can be compared, hashed and converted to plain data independently of the schema
and document they were inferred from.
"""

from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True)
class ScalarType:
    """A scalar value, named as declared in the schema."""

    name: str

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "scalar", "name": self.name}


@dataclass(frozen=True)
class EnumLiteral:
    """An enum value, keeping the declared values for literal rendering."""

    name: str
    values: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "enum", "name": self.name, "values": list(self.values)}


@dataclass(frozen=True)
class StringLiteral:
    """A fixed string, such as the `__typename` of a concrete object."""

    value: str

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "literal", "value": self.value}


@dataclass(frozen=True)
class RecordField:
    name: str
    type: "TypeDescriptor"
    optional: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type.as_dict(), "optional": self.optional}


@dataclass(frozen=True)
class RecordType:
    """An object with a fixed, ordered set of keys."""

    fields: tuple[RecordField, ...] = ()

    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    def get(self, name: str) -> RecordField | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "record", "fields": [field.as_dict() for field in self.fields]}


@dataclass(frozen=True)
class ListType:
    element: "TypeDescriptor"

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "list", "element": self.element.as_dict()}


@dataclass(frozen=True)
class OptionalType:
    """A value that may be null."""

    inner: "TypeDescriptor"

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "optional", "inner": self.inner.as_dict()}


@dataclass(frozen=True)
class UnionType:
    """One of several shapes, depending on the runtime object type."""

    members: tuple["TypeDescriptor", ...]

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "union", "members": [member.as_dict() for member in self.members]}


@dataclass(frozen=True)
class EmptyRecordType:
    """An object that admits no keys at all, used for operations without variables."""

    def as_dict(self) -> dict[str, Any]:
        return {"kind": "empty-record"}


EMPTY_RECORD = EmptyRecordType()

TypeDescriptor: TypeAlias = (
    ScalarType | EnumLiteral | StringLiteral | RecordType | ListType | OptionalType | UnionType | EmptyRecordType
)


@dataclass(frozen=True)
class InferredTypes:
    result_type: TypeDescriptor
    arguments_type: TypeDescriptor

    def as_dict(self) -> dict[str, Any]:
        return {"result": self.result_type.as_dict(), "arguments": self.arguments_type.as_dict()}

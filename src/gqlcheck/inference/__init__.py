"""Inference of structural result and arguments types from query documents."""

from .descriptors import (
    EMPTY_RECORD,
    EmptyRecordType,
    EnumLiteral,
    InferredTypes,
    ListType,
    OptionalType,
    RecordField,
    RecordType,
    ScalarType,
    StringLiteral,
    TypeDescriptor,
    UnionType,
)
from .engine import TypeInferrer, infer_types

__all__ = [
    "EMPTY_RECORD",
    "EmptyRecordType",
    "EnumLiteral",
    "InferredTypes",
    "ListType",
    "OptionalType",
    "RecordField",
    "RecordType",
    "ScalarType",
    "StringLiteral",
    "TypeDescriptor",
    "TypeInferrer",
    "UnionType",
    "infer_types",
]

"""Parsing, comparison, formatting and reconciliation of query type annotations."""

from .canonical import canonical_form, canonicalize
from .formatter import FormatOptions, format_annotation
from .parser import AnnotationSyntaxError, parse_annotation
from .reconciler import Outcome, ReconcileOptions, Replace, Unchanged, annotations_match, reconcile

__all__ = [
    "AnnotationSyntaxError",
    "FormatOptions",
    "Outcome",
    "ReconcileOptions",
    "Replace",
    "Unchanged",
    "annotations_match",
    "canonical_form",
    "canonicalize",
    "format_annotation",
    "parse_annotation",
    "reconcile",
]

"""Parsing and validation of query literals."""

from .validator import get_operation, parse_and_validate

__all__ = ["get_operation", "parse_and_validate"]

"""Loading and caching of GraphQL schemas."""

from .loader import SchemaCache, load_schema

__all__ = ["SchemaCache", "load_schema"]

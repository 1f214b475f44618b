from pathlib import Path

from ariadne import load_schema_from_path
from ariadne.exceptions import GraphQLFileSyntaxError
from graphql import GraphQLError, GraphQLSchema, build_schema, print_schema, validate_schema

from gqlcheck import log
from gqlcheck.errors import SchemaInvalidError, SchemaUnreadableError


def read_schema_text(path: Path) -> str:
    """Read GraphQL SDL from a file, or from every `.graphql` file of a directory.

    Args:
        path: Absolute path to the schema file or directory

    Returns:
        The schema source text

    Raises:
        SchemaUnreadableError: If the path can't be read or decoded as UTF-8
        SchemaInvalidError: If the text is not syntactically valid SDL
    """
    try:
        return load_schema_from_path(path)
    except GraphQLFileSyntaxError as e:
        # Surface graphql-core's own syntax error, location excerpt included
        raise SchemaInvalidError(path, str(e.__cause__ or e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaUnreadableError(path, str(e)) from e


def build_schema_from_text(path: Path, schema_str: str) -> GraphQLSchema:
    """Build and validate a schema, never returning a partially valid one."""
    try:
        schema = build_schema(schema_str)
    except (GraphQLError, TypeError) as e:
        raise SchemaInvalidError(path, str(e)) from e

    errors = validate_schema(schema)
    if errors:
        raise SchemaInvalidError(path, "\n\n".join(error.message for error in errors))

    return schema


def load_schema(schema_path: Path | str) -> GraphQLSchema:
    """Load and build the GraphQL schema at the given path.

    Relative paths resolve against the current working directory, and errors
    always cite the resolved absolute path.

    Args:
        schema_path: Path to a GraphQL schema file or a directory of schema files

    Returns:
        The validated GraphQL schema

    Raises:
        SchemaUnreadableError: If the schema can't be read
        SchemaInvalidError: If the schema text can't be parsed or built
    """
    path = Path(schema_path).resolve()
    log.debug(f"Loading GraphQL schema from {path}")

    schema = build_schema_from_text(path, read_schema_text(path))

    log.debug(f"Built GraphQL schema with {len(schema.type_map)} types from {path}")
    return schema


class SchemaCache:
    """Read-through cache of built schemas keyed by absolute path.

    The cache is owned by the caller and never invalidated implicitly. Building is
    pure, so sharing an instance between threads at worst builds a schema twice.
    """

    def __init__(self) -> None:
        self._schemas: dict[Path, GraphQLSchema] = {}

    def get(self, schema_path: Path | str) -> GraphQLSchema:
        path = Path(schema_path).resolve()
        schema = self._schemas.get(path)
        if schema is None:
            schema = load_schema(path)
            self._schemas[path] = schema
        else:
            log.debug(f"Using cached GraphQL schema for {path}")
        return schema

    def invalidate(self, schema_path: Path | str | None = None) -> None:
        """Drop one cached schema, or all of them when no path is given."""
        if schema_path is None:
            self._schemas.clear()
        else:
            self._schemas.pop(Path(schema_path).resolve(), None)

    def __contains__(self, schema_path: object) -> bool:
        if not isinstance(schema_path, str | Path):
            return False
        return Path(schema_path).resolve() in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


def schema_fingerprint(schema: GraphQLSchema) -> str:
    """Printed SDL of a schema, equal for structurally identical schemas."""
    return print_schema(schema)

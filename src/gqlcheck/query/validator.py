import re

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    GraphQLSyntaxError,
    LoneAnonymousOperationRule,
    OperationDefinitionNode,
    OperationType,
    parse,
    specified_rules,
    validate,
)

from gqlcheck import log
from gqlcheck.errors import (
    InterpolationNotAllowedError,
    MultipleDefinitionsError,
    OnlyQueryOperationsError,
    QueryParseError,
    QueryValidationError,
)

INTERPOLATION_PATTERN = re.compile(r"\$\{")

# A second operation is reported as a multiple definitions error instead
VALIDATION_RULES = tuple(rule for rule in specified_rules if rule is not LoneAnonymousOperationRule)


def find_interpolation(query_text: str) -> tuple[int, int] | None:
    """Locate the first `${...}` placeholder of a query literal.

    Returns:
        (offset, length) of the placeholder, or None if there is none. An
        unterminated placeholder extends to the end of the text.
    """
    match = INTERPOLATION_PATTERN.search(query_text)
    if match is None:
        return None

    depth = 0
    for index in range(match.start() + 1, len(query_text)):
        char = query_text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return match.start(), index + 1 - match.start()
    return match.start(), len(query_text) - match.start()


def format_validation_error(error: GraphQLError) -> str:
    """Render a validation error as a single line of text."""
    message = " ".join(error.message.split())
    if error.locations:
        location = error.locations[0]
        return f"{message} ({location.line}:{location.column})"
    return message


def collect_validation_errors(schema: GraphQLSchema, document: DocumentNode) -> list[str]:
    """Validate a document, normalizing raised errors to a list of messages.

    graphql-core returns a list of errors for invalid documents, but raises a
    TypeError when the schema itself is invalid and may raise a GraphQLError from
    inside a rule.
    """
    try:
        errors = validate(schema, document, VALIDATION_RULES)
    except GraphQLError as e:
        errors = [e]
    except TypeError as e:
        return [" ".join(str(e).split())]

    return [format_validation_error(error) for error in errors]


def parse_and_validate(schema: GraphQLSchema, query_text: str, *, detect_interpolation: bool = True) -> DocumentNode:
    """Parse query text and check it can be used to infer annotation types.

    Checks run in order, and the first failing one raises.

    Args:
        schema: The schema the query is validated against
        query_text: The literal query text of a call site
        detect_interpolation: Look for `${...}` placeholders in the text, for hosts that
            do not report a literal's substitutions themselves

    Returns:
        The parsed document, holding exactly one query operation

    Raises:
        InterpolationNotAllowedError: If the text contains a `${...}` placeholder
        QueryParseError: If the text is not syntactically valid GraphQL
        QueryValidationError: If the document is invalid against the schema
        MultipleDefinitionsError: If the document holds more than one definition
        OnlyQueryOperationsError: If the definition is not a query operation
    """
    interpolation = find_interpolation(query_text) if detect_interpolation else None
    if interpolation is not None:
        raise InterpolationNotAllowedError(*interpolation)

    try:
        document = parse(query_text)
    except GraphQLSyntaxError as e:
        raise QueryParseError(str(e)) from e

    validation_errors = collect_validation_errors(schema, document)
    if validation_errors:
        log.debug(f"Query validation failed with {len(validation_errors)} error(s)")
        raise QueryValidationError(validation_errors)

    if len(document.definitions) > 1:
        raise MultipleDefinitionsError(len(document.definitions))

    definition = document.definitions[0]
    if not isinstance(definition, OperationDefinitionNode):
        raise OnlyQueryOperationsError("fragment")
    if definition.operation != OperationType.QUERY:
        raise OnlyQueryOperationsError(definition.operation.value)

    log.debug("Query validation succeeded")
    return document


def get_operation(document: DocumentNode) -> OperationDefinitionNode:
    """Return the single query operation of a validated document."""
    operation = document.definitions[0]
    if not isinstance(operation, OperationDefinitionNode):
        raise ValueError("Document has not been validated: first definition is not an operation")
    return operation

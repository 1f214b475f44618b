from dataclasses import dataclass

from tree_sitter import Node

from gqlcheck import log
from gqlcheck.config import GqlCheckConfig, OperationTargetConfig
from gqlcheck.models import AnnotationTarget, CallSite, TargetKind, TextRange
from gqlcheck.typescript import (
    ParsedSource,
    call_query,
    cooked_value,
    literal_content,
    named_children,
    parse_source,
    query_matches,
    substitutions,
)


@dataclass(frozen=True)
class LocatedCallSite:
    """A call site found in a source file, with the target configuration it matched."""

    call_site: CallSite
    target_config: OperationTargetConfig


def gql_template_argument(source: ParsedSource, argument: Node, tag_name: str) -> Node | None:
    """Return the template string of an argument written as tag_name`...`, if it is one."""
    if argument.type != "call_expression" or argument.child_by_field_name("type_arguments") is not None:
        return None
    function = argument.child_by_field_name("function")
    template = argument.child_by_field_name("arguments")
    if function is None or function.type != "identifier" or source.node_text(function) != tag_name:
        return None
    if template is None or template.type != "template_string":
        return None
    return template


def build_call_site(
    source: ParsedSource,
    call: Node,
    callee: Node,
    template: Node,
    kind: TargetKind,
    target_config: OperationTargetConfig,
) -> CallSite:
    type_arguments = call.child_by_field_name("type_arguments")
    annotation_range = source.range(type_arguments) if type_arguments is not None else None
    target = AnnotationTarget.from_source(source.text, kind, source.range(callee), annotation_range)
    return CallSite(
        schema_path=target_config.schema_file_path,
        query_text=cooked_value(source, template),
        query_range=literal_content(source, template),
        target=target,
        interpolations=substitutions(source, template),
    )


def locate_call_sites(source: str, config: GqlCheckConfig, *, tsx: bool = False) -> list[LocatedCallSite]:
    """
    Find every configured query call in a TypeScript or JavaScript source.

    Recognized forms are `name<...>(..., gql`...`, ...)`, `object.name<...>(...)`
    and tagged templates `name<...>`...``; the type arguments are optional.

    Args:
        source: The host source text
        config: Targets and the name of the query literal tag
        tsx: Parse the source with the TSX grammar

    Returns:
        Call sites in source order
    """
    parsed = parse_source(source, tsx=tsx)
    names = config.target_names
    located: list[tuple[int, LocatedCallSite]] = []

    for _, captures in query_matches(call_query(tsx), parsed.root):
        [call] = captures["call"]
        [callee] = captures["callee"]
        name = parsed.node_text(callee)
        if name not in names:
            continue
        object_node = captures.get("object")
        object_name = parsed.node_text(object_node[0]) if object_node else None

        target_config: OperationTargetConfig | None
        template: Node | None = None
        if "template" in captures:
            target_config = config.find_target(None, name, tagged_template=True)
            [template] = captures["template"]
            kind = TargetKind.TAGGED_TEMPLATE
        else:
            target_config = config.find_target(object_name, name)
            if target_config is None:
                continue
            [arguments] = captures["arguments"]
            values = named_children(arguments)
            argument_index = target_config.gql_literal_argument_index
            if argument_index < len(values):
                template = gql_template_argument(parsed, values[argument_index], config.gql_tag_name)
            kind = TargetKind.METHOD if object_name is not None else TargetKind.FUNCTION

        if target_config is None or template is None:
            continue

        call_site = build_call_site(parsed, call, callee, template, kind, target_config)
        log.debug(f"Found {kind.value} call site '{name}' at offset {call_site.target.identifier_range.start}")
        located.append((call.start_byte, LocatedCallSite(call_site=call_site, target_config=target_config)))

    return [item for _, item in sorted(located, key=lambda entry: entry[0])]

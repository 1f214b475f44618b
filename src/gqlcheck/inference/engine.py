from dataclasses import dataclass, field
from enum import Enum
from typing import cast

from graphql import (
    BooleanValueNode,
    DocumentNode,
    FieldNode,
    FragmentSpreadNode,
    GraphQLAbstractType,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLSchema,
    GraphQLUnionType,
    InlineFragmentNode,
    OperationDefinitionNode,
    SchemaMetaFieldDef,
    SelectionNode,
    SelectionSetNode,
    TypeMetaFieldDef,
    Undefined,
    is_abstract_type,
    is_enum_type,
    is_input_object_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
    is_scalar_type,
    type_from_ast,
)

from gqlcheck import log
from gqlcheck.inference.descriptors import (
    EMPTY_RECORD,
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
from gqlcheck.query.validator import get_operation
from gqlcheck.schema.graphql_type import is_typename_field

CompositeType = GraphQLObjectType | GraphQLInterfaceType | GraphQLUnionType


class Inclusion(Enum):
    ALWAYS = "always"
    NEVER = "never"
    CONDITIONAL = "conditional"


@dataclass
class CollectedField:
    """All field nodes selected under one response key."""

    nodes: list[FieldNode] = field(default_factory=list)
    conditional: bool = False


def get_inclusion(selection: SelectionNode) -> Inclusion:
    """Evaluate the @skip and @include directives of a selection statically."""
    inclusion = Inclusion.ALWAYS
    for directive in selection.directives or ():
        name = directive.name.value
        if name not in ("skip", "include"):
            continue

        condition = next((arg.value for arg in directive.arguments if arg.name.value == "if"), None)
        if not isinstance(condition, BooleanValueNode):
            inclusion = Inclusion.CONDITIONAL
            continue

        skipped = condition.value if name == "skip" else not condition.value
        if skipped:
            return Inclusion.NEVER
    return inclusion


class TypeInferrer:
    """
    Infer the structural result and arguments types of a query operation.

    The document must have passed `parse_and_validate` against the same schema.
    """

    def __init__(self, schema: GraphQLSchema) -> None:
        self.schema = schema

    def infer(self, operation: OperationDefinitionNode) -> InferredTypes:
        query_type = self.schema.query_type
        if query_type is None:
            raise ValueError("Schema has no query type defined")

        result_type = self.describe_selection(query_type, [operation.selection_set])
        arguments_type = self.describe_variables(operation)

        name = operation.name.value if operation.name else "<anonymous>"
        log.debug(f"Inferred types for query {name}")
        return InferredTypes(result_type=result_type, arguments_type=arguments_type)

    # Result type

    def describe_output(self, output_type: GraphQLOutputType, selection_sets: list[SelectionSetNode]) -> TypeDescriptor:
        if is_non_null_type(output_type):
            inner = cast(GraphQLNonNull[GraphQLOutputType], output_type).of_type
            return self._describe_non_null_output(inner, selection_sets)
        return OptionalType(self._describe_non_null_output(output_type, selection_sets))

    def _describe_non_null_output(
        self, output_type: GraphQLOutputType, selection_sets: list[SelectionSetNode]
    ) -> TypeDescriptor:
        if is_list_type(output_type):
            element_type = cast(GraphQLList[GraphQLOutputType], output_type).of_type
            return ListType(self.describe_output(element_type, selection_sets))
        if is_scalar_type(output_type):
            return ScalarType(cast(GraphQLNamedType, output_type).name)
        if is_enum_type(output_type):
            return self.describe_enum(cast(GraphQLEnumType, output_type))
        return self.describe_selection(cast(CompositeType, output_type), selection_sets)

    def describe_enum(self, enum_type: GraphQLEnumType) -> EnumLiteral:
        return EnumLiteral(name=enum_type.name, values=tuple(enum_type.values))

    def describe_selection(self, parent_type: CompositeType, selection_sets: list[SelectionSetNode]) -> TypeDescriptor:
        """Describe the value selected from a composite type.

        Selections on an interface or union that depend on the runtime type become
        a union of one record per possible object type.
        """
        if not is_abstract_type(parent_type) or not self._has_narrowing_fragments(parent_type, selection_sets):
            return self.build_record(parent_type, selection_sets)

        members: list[TypeDescriptor] = []
        for possible_type in self.schema.get_possible_types(cast(GraphQLAbstractType, parent_type)):
            record = self.build_record(possible_type, selection_sets)
            if record not in members:
                members.append(record)

        if len(members) == 1:
            return members[0]
        return UnionType(tuple(members))

    def _has_narrowing_fragments(self, parent_type: CompositeType, selection_sets: list[SelectionSetNode]) -> bool:
        for selection_set in selection_sets:
            for selection in selection_set.selections:
                if not isinstance(selection, InlineFragmentNode):
                    continue
                condition = selection.type_condition
                if condition is not None and condition.name.value != parent_type.name:
                    return True
                if self._has_narrowing_fragments(parent_type, [selection.selection_set]):
                    return True
        return False

    def build_record(self, runtime_type: CompositeType, selection_sets: list[SelectionSetNode]) -> RecordType:
        collected: dict[str, CollectedField] = {}
        for selection_set in selection_sets:
            self.collect_fields(runtime_type, selection_set, collected, conditional=False)

        entries: list[RecordField] = []
        for response_key, collected_field in collected.items():
            field_name = collected_field.nodes[0].name.value
            if is_typename_field(field_name):
                entries.append(RecordField(response_key, self.describe_typename(runtime_type), collected_field.conditional))
                continue

            field_def = self.get_field_definition(runtime_type, field_name)
            sub_selections = [node.selection_set for node in collected_field.nodes if node.selection_set is not None]
            entries.append(
                RecordField(
                    name=response_key,
                    type=self.describe_output(field_def.type, sub_selections),
                    optional=collected_field.conditional or not is_non_null_type(field_def.type),
                )
            )
        return RecordType(tuple(entries))

    def collect_fields(
        self,
        runtime_type: CompositeType,
        selection_set: SelectionSetNode,
        collected: dict[str, CollectedField],
        conditional: bool,
    ) -> None:
        """Group the fields of a selection set by response key, in selection order.

        Inline fragments that apply to the runtime type are flattened into the
        parent selection.
        """
        for selection in selection_set.selections:
            inclusion = get_inclusion(selection)
            if inclusion == Inclusion.NEVER:
                continue
            is_conditional = conditional or inclusion == Inclusion.CONDITIONAL

            if isinstance(selection, FieldNode):
                response_key = selection.alias.value if selection.alias else selection.name.value
                if response_key in collected:
                    existing = collected[response_key]
                    existing.nodes.append(selection)
                    existing.conditional = existing.conditional and is_conditional
                else:
                    collected[response_key] = CollectedField(nodes=[selection], conditional=is_conditional)
            elif isinstance(selection, InlineFragmentNode):
                if self.does_fragment_apply(selection, runtime_type):
                    self.collect_fields(runtime_type, selection.selection_set, collected, is_conditional)
            elif isinstance(selection, FragmentSpreadNode):
                raise ValueError(f"Fragment spread '...{selection.name.value}' can't appear in a single definition")

    def does_fragment_apply(self, fragment: InlineFragmentNode, runtime_type: CompositeType) -> bool:
        if fragment.type_condition is None:
            return True

        condition_type = self.schema.get_type(fragment.type_condition.name.value)
        if condition_type is runtime_type:
            return True
        if is_object_type(runtime_type) and is_abstract_type(condition_type):
            return self.schema.is_sub_type(
                cast(GraphQLAbstractType, condition_type), cast(GraphQLObjectType, runtime_type)
            )
        return False

    def describe_typename(self, runtime_type: CompositeType) -> TypeDescriptor:
        if is_object_type(runtime_type):
            return StringLiteral(runtime_type.name)

        possible_types = self.schema.get_possible_types(cast(GraphQLAbstractType, runtime_type))
        literals = tuple(StringLiteral(possible_type.name) for possible_type in possible_types)
        if len(literals) == 1:
            return literals[0]
        return UnionType(literals)

    def get_field_definition(self, parent_type: CompositeType, field_name: str) -> GraphQLField:
        if parent_type is self.schema.query_type:
            if field_name == "__schema":
                return SchemaMetaFieldDef
            if field_name == "__type":
                return TypeMetaFieldDef

        fields = getattr(parent_type, "fields", None)
        if not fields or field_name not in fields:
            raise KeyError(f"Type '{parent_type.name}' has no field '{field_name}'")
        return cast(GraphQLField, fields[field_name])

    # Arguments type

    def describe_variables(self, operation: OperationDefinitionNode) -> TypeDescriptor:
        if not operation.variable_definitions:
            return EMPTY_RECORD

        entries: list[RecordField] = []
        for variable_definition in operation.variable_definitions:
            variable_type = type_from_ast(self.schema, variable_definition.type)
            if variable_type is None:
                raise KeyError(f"Unknown type for variable '${variable_definition.variable.name.value}'")

            input_type = cast(GraphQLInputType, variable_type)
            entries.append(
                RecordField(
                    name=variable_definition.variable.name.value,
                    type=self.describe_input(input_type),
                    optional=not is_non_null_type(input_type) or variable_definition.default_value is not None,
                )
            )
        return RecordType(tuple(entries))

    def describe_input(self, input_type: GraphQLInputType, expanding: tuple[str, ...] = ()) -> TypeDescriptor:
        if is_non_null_type(input_type):
            inner = cast(GraphQLNonNull[GraphQLInputType], input_type).of_type
            return self._describe_non_null_input(inner, expanding)
        return OptionalType(self._describe_non_null_input(input_type, expanding))

    def _describe_non_null_input(self, input_type: GraphQLInputType, expanding: tuple[str, ...]) -> TypeDescriptor:
        if is_list_type(input_type):
            element_type = cast(GraphQLList[GraphQLInputType], input_type).of_type
            return ListType(self.describe_input(element_type, expanding))
        if is_enum_type(input_type):
            return self.describe_enum(cast(GraphQLEnumType, input_type))
        if is_input_object_type(input_type):
            return self.describe_input_object(cast(GraphQLInputObjectType, input_type), expanding)
        return ScalarType(cast(GraphQLNamedType, input_type).name)

    def describe_input_object(
        self, input_object_type: GraphQLInputObjectType, expanding: tuple[str, ...]
    ) -> TypeDescriptor:
        # Recursive input objects render by name
        if input_object_type.name in expanding:
            return ScalarType(input_object_type.name)

        nested = (*expanding, input_object_type.name)
        entries = [
            RecordField(
                name=field_name,
                type=self.describe_input(input_field.type, nested),
                optional=not is_non_null_type(input_field.type) or input_field.default_value is not Undefined,
            )
            for field_name, input_field in input_object_type.fields.items()
        ]
        return RecordType(tuple(entries))


def infer_types(
    schema: GraphQLSchema,
    document: DocumentNode,
    operation: OperationDefinitionNode | None = None,
) -> InferredTypes:
    """
    Infer the result and arguments types of a validated query document.

    Args:
        schema: The schema the document was validated against
        document: The validated document
        operation: The operation to describe (default: the document's only definition)

    Returns:
        InferredTypes with the result type and the arguments type. The arguments
        type is EMPTY_RECORD when the operation declares no variables.
    """
    return TypeInferrer(schema).infer(operation or get_operation(document))

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from ariadne import gql
from faker import Faker
from graphql import GraphQLSchema, build_schema
from hypothesis import strategies as st
from hypothesis.strategies import composite

from gqlcheck.models import AnnotationTarget, CallSite, TargetKind, TextRange
from gqlcheck.schema import SchemaCache

SCALAR_TYPES = ["String", "Int", "Float", "Boolean", "ID"]


class TestSchemaData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    APOLLO_SCHEMA: Path = TESTS_DATA_DIR / "apollo-schema.graphql"
    CAREGIVER_SCHEMA: Path = TESTS_DATA_DIR / "caregiver-schema.graphql"
    CATALOG_SCHEMA: Path = TESTS_DATA_DIR / "catalog-schema.graphql"
    INVALID_SCHEMA: Path = TESTS_DATA_DIR / "invalid-schema.txt"
    CONFIG: Path = TESTS_DATA_DIR / "gqlcheck.yaml"

    GREETING_QUERY = "query($language: String!) { greeting(language: $language) { message } }"
    GREETING_ANNOTATION = "<{ greeting: { message: string } }, { language: string }>"


def make_target(identifier: str = "annotateQuery", annotation_text: str | None = None) -> AnnotationTarget:
    """A synthetic target at the start of a line, annotation placed right after the identifier."""
    identifier_range = TextRange(0, len(identifier))
    annotation_range = None
    if annotation_text is not None:
        annotation_range = TextRange(len(identifier), len(identifier) + len(annotation_text))
    return AnnotationTarget(
        kind=TargetKind.FUNCTION,
        identifier=identifier,
        identifier_range=identifier_range,
        annotation_text=annotation_text,
        annotation_range=annotation_range,
        column=len(identifier),
    )


def make_call_site(
    query_text: str,
    schema_path: Path = TestSchemaData.APOLLO_SCHEMA,
    annotation_text: str | None = None,
) -> CallSite:
    target = make_target(annotation_text=annotation_text)
    query_start = target.insertion_range.end + len("(gql`")
    return CallSite(
        schema_path=schema_path,
        query_text=query_text,
        query_range=TextRange(query_start, query_start + len(query_text)),
        target=target,
    )


@pytest.fixture(scope="module")
def apollo_schema() -> GraphQLSchema:
    return SchemaCache().get(TestSchemaData.APOLLO_SCHEMA)


@pytest.fixture(scope="module")
def catalog_schema() -> GraphQLSchema:
    return SchemaCache().get(TestSchemaData.CATALOG_SCHEMA)


@pytest.fixture(scope="module")
def caregiver_schema() -> GraphQLSchema:
    return SchemaCache().get(TestSchemaData.CAREGIVER_SCHEMA)


@dataclass
class MockFieldData:
    name: str
    data_type: str
    non_null: bool
    is_list: bool

    @classmethod
    def random(cls, faker: Faker) -> "MockFieldData":
        """Generates a random scalar field, e.g. `title: [String!]`"""
        return cls(
            name=faker.unique.word().lower(),
            data_type=faker.random_element(SCALAR_TYPES),
            non_null=faker.pybool(),
            is_list=faker.pybool(),
        )

    def to_field_str(self) -> str:
        type_str = f"{self.data_type}!" if self.is_list else self.data_type
        type_str = f"[{type_str}]" if self.is_list else type_str
        return f"{self.name}: {type_str}{'!' if self.non_null else ''}"


@composite
def mock_graphql_schema_strategy(
    draw: Callable[[st.SearchStrategy[Any]], Any],
) -> tuple[GraphQLSchema, list[MockFieldData]]:
    """Generate a random GraphQL schema with a `vehicle` object of random scalar fields."""
    faker = Faker()
    faker.seed_instance(draw(st.integers(min_value=0, max_value=2**32 - 1)))

    num_fields = draw(st.integers(min_value=1, max_value=6))
    fields = [MockFieldData.random(faker) for _ in range(num_fields)]

    schema_str = gql(
        f"""#graphql
        type Query {{
            vehicle: Vehicle
        }}

        type Vehicle {{
            {" ".join(field.to_field_str() for field in fields)}
        }}
        """
    )
    return build_schema(schema_str), fields

from textwrap import dedent

import pytest

from gqlcheck.annotation.formatter import (
    LINE,
    SOFTLINE,
    FormatOptions,
    Group,
    Indent,
    format_annotation,
    print_doc,
)

CAREGIVER_ANNOTATION = (
    "<{ visibleTrainingCenterBundles: ReadonlyArray<{ caregiver_id: CaregiverId; agency_id: AgencyId; "
    "caregiver_visible_date: LocalDate; agency: { name: string; website: string } }> }, "
    "{ bundleId: TrainingCenterBundleId }>"
)


def test_short_annotation_stays_on_one_line() -> None:
    annotation = "<{greeting:{message:string}},{language:string}>"

    assert format_annotation(annotation) == "<{ greeting: { message: string } }, { language: string }>"


def test_long_annotation_breaks_like_prettier() -> None:
    formatted = format_annotation(CAREGIVER_ANNOTATION, start_column=len("await CaregiverGraphQL.query"))

    assert formatted == dedent(
        """\
        <
          {
            visibleTrainingCenterBundles: ReadonlyArray<{
              caregiver_id: CaregiverId;
              agency_id: AgencyId;
              caregiver_visible_date: LocalDate;
              agency: { name: string; website: string };
            }>;
          },
          { bundleId: TrainingCenterBundleId }
        >"""
    )


def test_continuation_lines_are_reindented() -> None:
    formatted = format_annotation(CAREGIVER_ANNOTATION, start_column=30, base_indent="    ")

    lines = formatted.split("\n")
    assert lines[0] == "<"
    assert lines[1] == "      {"
    assert lines[-1] == "    >"


def test_formatting_is_idempotent() -> None:
    once = format_annotation(CAREGIVER_ANNOTATION)

    assert format_annotation(once) == once


def test_print_width_is_respected() -> None:
    annotation = "<{ a: string; b: number }, { c: boolean }>"

    assert format_annotation(annotation, options=FormatOptions(print_width=120)) == annotation
    assert format_annotation(annotation, options=FormatOptions(print_width=30)) == dedent(
        """\
        <
          { a: string; b: number },
          { c: boolean }
        >"""
    )


def test_tab_width() -> None:
    formatted = format_annotation(CAREGIVER_ANNOTATION, options=FormatOptions(tab_width=4))

    assert formatted.split("\n")[1] == "    {"


def test_single_object_argument_is_hugged() -> None:
    annotation = "<{ alpha: string; beta: string; gamma: string; delta: string; epsilon: string }>"

    assert format_annotation(annotation, options=FormatOptions(print_width=40)) == dedent(
        """\
        <{
          alpha: string;
          beta: string;
          gamma: string;
          delta: string;
          epsilon: string;
        }>"""
    )


def test_long_union_breaks_with_leading_bars() -> None:
    annotation = '<{ kind: "FIRST_VALUE" | "SECOND_VALUE" | "THIRD_VALUE" | "FOURTH_VALUE" | null }>'

    assert format_annotation(annotation, options=FormatOptions(print_width=40)) == dedent(
        """\
        <{
          kind:
            | "FIRST_VALUE"
            | "SECOND_VALUE"
            | "THIRD_VALUE"
            | "FOURTH_VALUE"
            | null;
        }>"""
    )


def test_property_names_are_quoted_when_needed() -> None:
    assert format_annotation("<{ 'needs quoting': string; plain: string }>") == (
        '<{ "needs quoting": string; plain: string }>'
    )


@pytest.mark.parametrize(
    "suffix, expected",
    [
        ("", "[a, b]"),
        ("(", "[\n  a,\n  b\n]"),
    ],
)
def test_suffix_is_taken_into_account_when_fitting(suffix: str, expected: str) -> None:
    doc = Group(["[", Indent([SOFTLINE, "a", ",", LINE, "b"]), SOFTLINE, "]"])

    assert print_doc(doc, FormatOptions(print_width=6), suffix=suffix) == expected

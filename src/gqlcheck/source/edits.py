from gqlcheck.models import Edit


def apply_edits(source: str, edits: list[Edit]) -> str:
    """
    Apply text edits to a source.

    Edits are applied from the end of the source backwards, so the ranges of the
    remaining edits stay valid.

    Raises:
        ValueError: If two edits overlap or an edit lies outside the source.
    """
    ordered = sorted(edits, key=lambda edit: (edit.range.start, edit.range.end))
    for previous, current in zip(ordered, ordered[1:]):
        if current.range.start < previous.range.end:
            raise ValueError(f"Overlapping edits at offsets {previous.range.start} and {current.range.start}")
    if ordered and ordered[-1].range.end > len(source):
        raise ValueError(f"Edit ends at {ordered[-1].range.end}, past the end of the source")

    for edit in reversed(ordered):
        source = source[: edit.range.start] + edit.text + source[edit.range.end :]
    return source

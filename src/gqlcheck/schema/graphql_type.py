TYPENAME_FIELD = "__typename"


def is_typename_field(field_name: str) -> bool:
    return field_name == TYPENAME_FIELD

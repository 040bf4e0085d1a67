from typing import Any


def reject_null(value: Any) -> Any:
    """Field validator body for update fields that may be omitted but not cleared."""
    if value is None:
        raise ValueError("may not be null")
    return value


def strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("title cannot be empty")
    return value

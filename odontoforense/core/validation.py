from typing import Annotated

from pydantic import Field

# largest value a signed 64-bit primary key column can hold
MAX_RECORD_ID = 2**63 - 1

RecordId = Annotated[int, Field(gt=0, le=MAX_RECORD_ID)]


def normalize_required_text(value: str | None) -> str | None:
    """Strip a required text field, rejecting blanks. ``None`` passes through
    so partial updates can leave the field untouched."""
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        raise ValueError('Field cannot be blank.')
    return normalized

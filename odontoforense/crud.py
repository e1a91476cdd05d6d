"""Shared create/read/update/delete helpers used by every resource router."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from odontoforense.core.errors import InvalidIdentifier, RecordNotFound, ValidationFailed
from odontoforense.core.validation import MAX_RECORD_ID


def parse_record_id(raw_id: str | int) -> int:
    if isinstance(raw_id, int):
        record_id = raw_id
    else:
        candidate = raw_id.strip()
        if not (candidate.isascii() and candidate.isdecimal()):
            raise InvalidIdentifier(raw_id)
        record_id = int(candidate)

    if record_id <= 0 or record_id > MAX_RECORD_ID:
        raise InvalidIdentifier(raw_id)
    return record_id


def get_record(db: Session, model, raw_id: str | int, resource: str):
    record_id = parse_record_id(raw_id)
    record = db.get(model, record_id)
    if record is None:
        raise RecordNotFound(resource, record_id)
    return record


def list_records(db: Session, model, **filters: Any) -> list:
    query = db.query(model)
    for column_name, value in filters.items():
        if value is not None:
            query = query.filter(getattr(model, column_name) == value)
    return query.order_by(model.id.asc()).all()


def create_record(db: Session, model, values: dict[str, Any]):
    record = model(**values)
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(record)
    return record


def update_record(db: Session, record, changes: dict[str, Any]):
    if not changes:
        raise ValidationFailed('No fields to update.')

    for field_name, value in changes.items():
        setattr(record, field_name, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(record)
    return record


def delete_record(db: Session, record) -> None:
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def delete_all_records(db: Session, model, **filters: Any) -> int:
    query = db.query(model)
    for column_name, value in filters.items():
        if value is not None:
            query = query.filter(getattr(model, column_name) == value)
    try:
        deleted_count = query.delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return deleted_count


def reject_null_fields(changes: dict[str, Any], required: tuple[str, ...]) -> dict[str, Any]:
    nulled = [field_name for field_name in required if field_name in changes and changes[field_name] is None]
    if nulled:
        raise ValidationFailed(f"Field(s) cannot be null: {', '.join(nulled)}.")
    return changes

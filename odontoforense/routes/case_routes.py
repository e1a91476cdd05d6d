from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from odontoforense import crud
from odontoforense.auth.dependencies import ADMIN_ONLY, ALL_ROLES, require_roles
from odontoforense.core.errors import DuplicateRecord
from odontoforense.core.validation import normalize_required_text
from odontoforense.database import get_db
from odontoforense.models.case import CASE_STATUSES, Case
from odontoforense.models.evidence import Evidence
from odontoforense.models.report import Report
from odontoforense.models.user import User

router = APIRouter(tags=['caso'])


def normalize_status(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in CASE_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(CASE_STATUSES)}.")
    return normalized


class CaseCreateRequest(BaseModel):
    case_number: str
    title: str
    description: str | None = None
    status: str = 'em_andamento'
    location: str | None = None
    opened_at: datetime | None = None

    @field_validator('case_number', 'title')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return normalize_required_text(value)

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str) -> str:
        return normalize_status(value)


class CaseUpdateRequest(BaseModel):
    case_number: str | None = None
    title: str | None = None
    description: str | None = None
    status: str | None = None
    location: str | None = None
    opened_at: datetime | None = None

    @field_validator('case_number', 'title')
    @classmethod
    def validate_required_text(cls, value: str | None) -> str | None:
        return normalize_required_text(value)

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str | None) -> str | None:
        return normalize_status(value)


class CaseResponse(BaseModel):
    id: int
    case_number: str
    title: str
    description: str | None = None
    status: str
    location: str | None = None
    opened_at: datetime | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


def ensure_case_number_available(db: Session, case_number: str, current_id: int | None = None) -> None:
    existing = db.query(Case).filter(Case.case_number == case_number).first()
    if existing is not None and existing.id != current_id:
        raise DuplicateRecord(f"Case number '{case_number}' already exists.")


def delete_case_children(db: Session, case_ids: list[int] | None = None) -> None:
    """Delete evidence and reports owned by ``case_ids`` (every case when None).

    Runs inside the caller's transaction; the caller commits.
    """
    for model in (Evidence, Report):
        query = db.query(model)
        if case_ids is not None:
            query = query.filter(model.case_id.in_(case_ids))
        query.delete(synchronize_session=False)


@router.post('', response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
def create_case(
    data: CaseCreateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    ensure_case_number_available(db, data.case_number)
    return crud.create_record(db, Case, data.model_dump())


@router.get('', response_model=list[CaseResponse])
def list_cases(db: Session = Depends(get_db), _: User = Depends(require_roles(*ALL_ROLES))):
    return crud.list_records(db, Case)


@router.get('/{case_id}', response_model=CaseResponse)
def get_case(case_id: str, db: Session = Depends(get_db), _: User = Depends(require_roles(*ALL_ROLES))):
    return crud.get_record(db, Case, case_id, 'Case')


@router.put('/{case_id}', response_model=CaseResponse)
def update_case(
    case_id: str,
    data: CaseUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    case = crud.get_record(db, Case, case_id, 'Case')
    changes = crud.reject_null_fields(data.model_dump(exclude_unset=True), ('case_number', 'title', 'status'))
    if 'case_number' in changes:
        ensure_case_number_available(db, changes['case_number'], current_id=case.id)
    return crud.update_record(db, case, changes)


@router.delete('/{case_id}')
def delete_case(case_id: str, db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    case = crud.get_record(db, Case, case_id, 'Case')
    try:
        delete_case_children(db, [case.id])
        db.delete(case)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return {'message': 'Case and its evidence and reports deleted successfully.'}


@router.delete('')
def delete_all_cases(db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    try:
        delete_case_children(db)
        deleted_count = db.query(Case).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return {'message': 'All cases deleted successfully.', 'deleted_count': deleted_count}

from datetime import date, datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from odontoforense import crud
from odontoforense.auth.dependencies import ADMIN_ONLY, ALL_ROLES, require_roles
from odontoforense.core.validation import normalize_required_text
from odontoforense.database import get_db
from odontoforense.models.dental_record import DentalRecord
from odontoforense.models.user import User

router = APIRouter(tags=['bancoodonto'])

SEX_VALUES = ('masculino', 'feminino', 'indeterminado')


def normalize_sex(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in SEX_VALUES:
        raise ValueError(f"Sex must be one of: {', '.join(SEX_VALUES)}.")
    return normalized


class DentalRecordCreateRequest(BaseModel):
    subject_name: str
    dental_chart: str
    sex: str | None = None
    birth_date: date | None = None
    identification_document: str | None = None
    notes: str | None = None

    @field_validator('subject_name', 'dental_chart')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return normalize_required_text(value)

    @field_validator('sex')
    @classmethod
    def validate_sex(cls, value: str | None) -> str | None:
        return normalize_sex(value)


class DentalRecordUpdateRequest(BaseModel):
    subject_name: str | None = None
    dental_chart: str | None = None
    sex: str | None = None
    birth_date: date | None = None
    identification_document: str | None = None
    notes: str | None = None

    @field_validator('subject_name', 'dental_chart')
    @classmethod
    def validate_required_text(cls, value: str | None) -> str | None:
        return normalize_required_text(value)

    @field_validator('sex')
    @classmethod
    def validate_sex(cls, value: str | None) -> str | None:
        return normalize_sex(value)


class DentalRecordResponse(BaseModel):
    id: int
    subject_name: str
    dental_chart: str
    sex: str | None = None
    birth_date: date | None = None
    identification_document: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


@router.post('', response_model=DentalRecordResponse, status_code=status.HTTP_201_CREATED)
def create_dental_record(
    data: DentalRecordCreateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    return crud.create_record(db, DentalRecord, data.model_dump())


@router.get('', response_model=list[DentalRecordResponse])
def list_dental_records(db: Session = Depends(get_db), _: User = Depends(require_roles(*ALL_ROLES))):
    return crud.list_records(db, DentalRecord)


@router.get('/{record_id}', response_model=DentalRecordResponse)
def get_dental_record(
    record_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    return crud.get_record(db, DentalRecord, record_id, 'Dental record')


@router.put('/{record_id}', response_model=DentalRecordResponse)
def update_dental_record(
    record_id: str,
    data: DentalRecordUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    record = crud.get_record(db, DentalRecord, record_id, 'Dental record')
    changes = crud.reject_null_fields(data.model_dump(exclude_unset=True), ('subject_name', 'dental_chart'))
    return crud.update_record(db, record, changes)


@router.delete('/{record_id}')
def delete_dental_record(
    record_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ONLY)),
):
    record = crud.get_record(db, DentalRecord, record_id, 'Dental record')
    crud.delete_record(db, record)
    return {'message': 'Dental record deleted successfully.'}


@router.delete('')
def delete_all_dental_records(db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    deleted_count = crud.delete_all_records(db, DentalRecord)
    return {'message': 'All dental records deleted successfully.', 'deleted_count': deleted_count}

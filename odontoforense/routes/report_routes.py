from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from odontoforense import crud
from odontoforense.auth.dependencies import ADMIN_ONLY, ALL_ROLES, EXAMINERS, require_roles
from odontoforense.core.validation import RecordId, normalize_required_text
from odontoforense.database import get_db
from odontoforense.models.case import Case
from odontoforense.models.report import Report
from odontoforense.models.user import User

router = APIRouter(tags=['laudo'])


class ReportCreateRequest(BaseModel):
    case_id: RecordId
    title: str
    content: str
    author: str | None = None
    generated_by_ai: bool = False

    @field_validator('title', 'content')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return normalize_required_text(value)


class ReportUpdateRequest(BaseModel):
    case_id: RecordId | None = None
    title: str | None = None
    content: str | None = None
    author: str | None = None
    generated_by_ai: bool | None = None

    @field_validator('title', 'content')
    @classmethod
    def validate_required_text(cls, value: str | None) -> str | None:
        return normalize_required_text(value)


class ReportResponse(BaseModel):
    id: int
    case_id: int
    title: str
    content: str
    author: str | None = None
    generated_by_ai: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


@router.post('', response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    data: ReportCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*EXAMINERS)),
):
    crud.get_record(db, Case, data.case_id, 'Case')
    values = data.model_dump()
    values['author'] = values['author'] or current_user.name
    return crud.create_record(db, Report, values)


@router.get('', response_model=list[ReportResponse])
def list_reports(db: Session = Depends(get_db), _: User = Depends(require_roles(*ALL_ROLES))):
    return crud.list_records(db, Report)


@router.get('/{report_id}', response_model=ReportResponse)
def get_report(report_id: str, db: Session = Depends(get_db), _: User = Depends(require_roles(*ALL_ROLES))):
    return crud.get_record(db, Report, report_id, 'Report')


@router.put('/{report_id}', response_model=ReportResponse)
def update_report(
    report_id: str,
    data: ReportUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*EXAMINERS)),
):
    report = crud.get_record(db, Report, report_id, 'Report')
    changes = crud.reject_null_fields(
        data.model_dump(exclude_unset=True),
        ('case_id', 'title', 'content', 'generated_by_ai'),
    )
    if 'case_id' in changes:
        crud.get_record(db, Case, changes['case_id'], 'Case')
    return crud.update_record(db, report, changes)


@router.delete('/{report_id}')
def delete_report(report_id: str, db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    report = crud.get_record(db, Report, report_id, 'Report')
    crud.delete_record(db, report)
    return {'message': 'Report deleted successfully.'}


@router.delete('')
def delete_all_reports(db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    deleted_count = crud.delete_all_records(db, Report)
    return {'message': 'All reports deleted successfully.', 'deleted_count': deleted_count}

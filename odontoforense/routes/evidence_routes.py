import logging
from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from odontoforense import crud, storage
from odontoforense.auth.dependencies import ADMIN_ONLY, ALL_ROLES, require_roles
from odontoforense.core.config import Settings, get_settings
from odontoforense.core.errors import ValidationFailed
from odontoforense.core.validation import MAX_RECORD_ID, RecordId, normalize_required_text
from odontoforense.database import get_db
from odontoforense.models.case import Case
from odontoforense.models.evidence import Evidence
from odontoforense.models.user import User

router = APIRouter(tags=['evidencia'])

logger = logging.getLogger(__name__)


class EvidenceUpdateRequest(BaseModel):
    case_id: RecordId | None = None
    name: str | None = None
    category: str | None = None
    collected_at: datetime | None = None
    description: str | None = None
    collection_location: str | None = None

    @field_validator('name', 'category')
    @classmethod
    def validate_required_text(cls, value: str | None) -> str | None:
        return normalize_required_text(value)


class EvidenceResponse(BaseModel):
    id: int
    case_id: int
    name: str
    category: str
    collected_at: datetime
    description: str | None = None
    collection_location: str | None = None
    file_url: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


def parse_optional_case_id(raw_case_id: str | None) -> int | None:
    if raw_case_id is None:
        return None
    return crud.parse_record_id(raw_case_id)


@router.post('', response_model=EvidenceResponse, status_code=status.HTTP_201_CREATED)
def create_evidence(
    case_id: int = Form(..., gt=0, le=MAX_RECORD_ID),
    name: str = Form(...),
    category: str = Form(...),
    collected_at: datetime = Form(...),
    description: str | None = Form(None),
    collection_location: str | None = Form(None),
    file: list[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    if not name.strip() or not category.strip():
        raise ValidationFailed('Fields name and category cannot be blank.')
    upload = storage.pick_single_upload(file)
    crud.get_record(db, Case, case_id, 'Case')

    file_url = storage.save_upload(upload, settings) if upload is not None else None

    evidence = crud.create_record(db, Evidence, {
        'case_id': case_id,
        'name': name.strip(),
        'category': category.strip(),
        'collected_at': collected_at,
        'description': description,
        'collection_location': collection_location,
        'file_url': file_url,
    })
    logger.info('Evidence %s registered for case %s', evidence.id, case_id)
    return evidence


@router.get('', response_model=list[EvidenceResponse])
def list_evidence(
    case_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    return crud.list_records(db, Evidence, case_id=parse_optional_case_id(case_id))


@router.get('/{evidence_id}', response_model=EvidenceResponse)
def get_evidence(
    evidence_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    return crud.get_record(db, Evidence, evidence_id, 'Evidence')


@router.put('/{evidence_id}', response_model=EvidenceResponse)
def update_evidence(
    evidence_id: str,
    data: EvidenceUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ALL_ROLES)),
):
    evidence = crud.get_record(db, Evidence, evidence_id, 'Evidence')
    changes = crud.reject_null_fields(
        data.model_dump(exclude_unset=True),
        ('case_id', 'name', 'category', 'collected_at'),
    )
    if 'case_id' in changes:
        crud.get_record(db, Case, changes['case_id'], 'Case')
    return crud.update_record(db, evidence, changes)


@router.delete('/{evidence_id}')
def delete_evidence(
    evidence_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ONLY)),
):
    evidence = crud.get_record(db, Evidence, evidence_id, 'Evidence')
    crud.delete_record(db, evidence)
    return {'message': 'Evidence deleted successfully.'}


@router.delete('')
def delete_all_evidence(
    case_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ONLY)),
):
    deleted_count = crud.delete_all_records(db, Evidence, case_id=parse_optional_case_id(case_id))
    return {'message': 'Evidence deleted successfully.', 'deleted_count': deleted_count}

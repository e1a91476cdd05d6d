"""AI-assisted drafting of a case report from its evidence."""

import logging
from typing import Protocol

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from odontoforense import crud
from odontoforense.auth.dependencies import EXAMINERS, require_roles
from odontoforense.core.config import Settings, get_settings
from odontoforense.core.validation import RecordId
from odontoforense.database import get_db
from odontoforense.models.evidence import Evidence
from odontoforense.models.report import Report
from odontoforense.models.user import User
from odontoforense.services.gemini import GeminiClient
from odontoforense.services.report_prompt import build_report_prompt

router = APIRouter(tags=['gerar-laudo'])

logger = logging.getLogger(__name__)

GENERATION_FAILED = 'Failed to generate report with AI.'
EMPTY_AI_RESPONSE = 'Failed to process AI response.'


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str | None:
        ...


class GenerateReportRequest(BaseModel):
    case_id: RecordId | None = None
    persist: bool = False


class GenerateReportResponse(BaseModel):
    case_id: int
    generated_report: str
    report_id: int | None = None


def get_text_generator(settings: Settings = Depends(get_settings)) -> TextGenerator:
    return GeminiClient.from_settings(settings)


@router.post('/gerar-laudo', response_model=GenerateReportResponse, response_model_exclude_none=True)
def generate_report(
    data: GenerateReportRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    text_generator: TextGenerator = Depends(get_text_generator),
    current_user: User = Depends(require_roles(*EXAMINERS)),
):
    if data is None or data.case_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The 'case_id' field is required.")

    case_id = data.case_id
    try:
        evidence_items = crud.list_records(db, Evidence, case_id=case_id)
    except SQLAlchemyError as exc:
        logger.exception('Evidence lookup failed for case %s', case_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERATION_FAILED) from exc

    if not evidence_items:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No evidence found for case '{case_id}'.",
        )

    prompt = build_report_prompt(case_id, evidence_items)
    logger.info('Requesting AI report for case %s with %d evidence item(s)', case_id, len(evidence_items))

    try:
        generated_report = text_generator.generate(prompt)
    except Exception as exc:
        logger.exception('AI report generation failed for case %s', case_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERATION_FAILED) from exc

    if not generated_report:
        logger.error('AI response for case %s carried no candidate text', case_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=EMPTY_AI_RESPONSE)

    report_id = None
    if data.persist:
        try:
            report = crud.create_record(db, Report, {
                'case_id': case_id,
                'title': f'Laudo gerado por IA - caso {case_id}',
                'content': generated_report,
                'author': current_user.name,
                'generated_by_ai': True,
            })
        except SQLAlchemyError as exc:
            logger.exception('Storing the AI report failed for case %s', case_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERATION_FAILED) from exc
        report_id = report.id

    return GenerateReportResponse(case_id=case_id, generated_report=generated_report, report_id=report_id)

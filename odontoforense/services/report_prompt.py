"""Prompt assembly for AI-assisted report drafting."""

from datetime import date, datetime
from typing import Iterable

from odontoforense.models.evidence import Evidence

DATE_FORMAT = '%d/%m/%Y, %H:%M:%S'


def format_collection_date(value: datetime | date | None) -> str:
    if value is None:
        return 'não informada'
    if not isinstance(value, datetime):
        value = datetime.combine(value, datetime.min.time())
    return value.strftime(DATE_FORMAT)


def render_evidence_entry(position: int, evidence: Evidence) -> str:
    return (
        f'{position}) Nome da Evidência: {evidence.name}\n'
        f'   Categoria: {evidence.category}\n'
        f'   Data de Coleta: {format_collection_date(evidence.collected_at)}\n'
        f'   Descrição: {evidence.description or ""}\n'
        f'   Local de Retirada: {evidence.collection_location or ""}\n'
        f'   Arquivo: {evidence.file_url or ""}\n\n'
    )


def build_report_prompt(case_id: int, evidence_items: Iterable[Evidence]) -> str:
    prompt = (
        'Gere um laudo técnico e objetivo com base nas evidências a seguir, '
        f"relacionadas ao caso '{case_id}'.\n\n"
    )
    for position, evidence in enumerate(evidence_items, start=1):
        prompt += render_evidence_entry(position, evidence)
    prompt += 'Com base nas evidências acima, elabore um laudo técnico com análise clara e objetiva.'
    return prompt

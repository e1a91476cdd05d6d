import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from odontoforense.core.config import get_settings, validate_runtime_config
from odontoforense.core.errors import register_exception_handlers
from odontoforense.core.logging import configure_logging
from odontoforense.database import create_schema
from odontoforense.routes import (
    case_routes,
    dental_record_routes,
    evidence_routes,
    report_generation_routes,
    report_routes,
    user_routes,
)
from odontoforense.storage import UPLOADS_PATH

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title='API Casos Periciais',
    version='1.0.0',
    description='Documentação da API para gerenciamento de casos odontolegais',
    docs_url='/api-docs',
    openapi_url='/api-docs/openapi.json',
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_credentials='*' not in settings.cors_allow_origins,
    allow_methods=['*'],
    allow_headers=['*'],
)

register_exception_handlers(app)

app.mount(UPLOADS_PATH, StaticFiles(directory=settings.upload_dir, check_dir=False), name='uploads')

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_application() -> None:
    validate_runtime_config(settings)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    try:
        create_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')
        raise


@app.get('/')
def root():
    return {'status': 'Odontoforense API Running'}


app.include_router(user_routes.router, prefix='/api/user')
app.include_router(case_routes.router, prefix='/api/caso')
app.include_router(evidence_routes.router, prefix='/api/evidencia')
app.include_router(report_routes.router, prefix='/api/laudo')
app.include_router(dental_record_routes.router, prefix='/api/bancoodonto')
app.include_router(report_generation_routes.router, prefix='/api')


def run() -> None:
    uvicorn.run('odontoforense.main:app', host='0.0.0.0', port=settings.port)


if __name__ == '__main__':
    run()

"""Error taxonomy and the mapping from errors to HTTP responses.

Every handler boundary funnels through :func:`classify_error`, so a
storage-layer "not found" and a malformed identifier always surface as
404 and 400 regardless of which resource raised them.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = 'Internal server error.'
GENERIC_STORAGE_ERROR = 'Database operation failed.'


class OdontoError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(OdontoError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidIdentifier(ValidationFailed):
    def __init__(self, raw_id: object):
        super().__init__(f"Invalid identifier '{raw_id}'.")
        self.raw_id = raw_id


class RecordNotFound(OdontoError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, record_id: object | None = None):
        if record_id is None:
            message = f'{resource} not found.'
        else:
            message = f"{resource} '{record_id}' not found."
        super().__init__(message)
        self.resource = resource
        self.record_id = record_id


class DuplicateRecord(OdontoError):
    status_code = status.HTTP_409_CONFLICT


class ExternalServiceError(OdontoError):
    """Raised when an upstream dependency answers with nothing usable."""


def classify_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, HTTPException):
        return exc.status_code, str(exc.detail)
    if isinstance(exc, OdontoError) and exc.status_code < 500:
        return exc.status_code, exc.message
    if isinstance(exc, OdontoError):
        return exc.status_code, GENERIC_SERVER_ERROR
    if isinstance(exc, SQLAlchemyError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_STORAGE_ERROR
    return status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR


def describe_validation_errors(exc: RequestValidationError) -> str:
    missing = []
    problems = []
    for error in exc.errors():
        location = [str(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path', 'form')]
        field_name = '.'.join(location) or 'body'
        if error.get('type') == 'missing':
            missing.append(field_name)
        else:
            problems.append(f"{field_name}: {error.get('msg', 'invalid value')}")

    parts = []
    if missing:
        parts.append(f"Missing required field(s): {', '.join(missing)}.")
    if problems:
        parts.append(f"Invalid field(s): {'; '.join(problems)}.")
    return ' '.join(parts) or 'Invalid request.'


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        status_code, message = classify_error(exc)
        return error_response(status_code, message, headers=getattr(exc, 'headers', None))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, describe_validation_errors(exc))

    @app.exception_handler(OdontoError)
    async def handle_domain_error(request: Request, exc: OdontoError) -> JSONResponse:
        status_code, message = classify_error(exc)
        if status_code >= 500:
            logger.error('Request %s %s failed: %s', request.method, request.url.path, exc.message)
        return error_response(status_code, message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception('Database error on %s %s', request.method, request.url.path, exc_info=exc)
        status_code, message = classify_error(exc)
        return error_response(status_code, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
        return error_response(*classify_error(exc))

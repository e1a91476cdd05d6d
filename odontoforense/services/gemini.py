import logging

import httpx

from odontoforense.core.config import Settings
from odontoforense.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


def extract_generated_text(payload: dict) -> str | None:
    """Return the first candidate's text from a ``generateContent`` response."""
    candidates = payload.get('candidates') or []
    if not candidates:
        return None
    parts = (candidates[0].get('content') or {}).get('parts') or []
    if not parts:
        return None
    text = parts[0].get('text')
    return text or None


class GeminiClient:
    """Thin client for the Gemini ``generateContent`` endpoint.

    The API key is sent in the ``x-goog-api-key`` header so it never shows up
    in request URLs or access logs. Calls are not retried.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> 'GeminiClient':
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.gemini_timeout_seconds,
        )

    @property
    def endpoint(self) -> str:
        return f'{self.base_url}/models/{self.model}:generateContent'

    def generate(self, prompt: str) -> str | None:
        if not self.api_key:
            raise ExternalServiceError('GEMINI_API_KEY is not configured.')

        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(
                self.endpoint,
                headers={'x-goog-api-key': self.api_key},
                json={'contents': [{'parts': [{'text': prompt}]}]},
            )
        response.raise_for_status()
        logger.info('Gemini model %s answered with status %s', self.model, response.status_code)
        return extract_generated_text(response.json())

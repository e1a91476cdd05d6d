import json

import httpx
import pytest

from odontoforense.core.errors import ExternalServiceError
from odontoforense.services.gemini import GeminiClient, extract_generated_text


def make_client(handler, api_key: str = 'secret-key') -> GeminiClient:
    return GeminiClient(
        api_key=api_key,
        model='gemini-1.5-pro',
        base_url='https://generativelanguage.example/v1beta/',
        transport=httpx.MockTransport(handler),
    )


def test_generate_sends_key_in_header_and_returns_first_candidate() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen['url'] = str(request.url)
        seen['key'] = request.headers.get('x-goog-api-key')
        seen['body'] = json.loads(request.content)
        return httpx.Response(200, json={
            'candidates': [
                {'content': {'parts': [{'text': 'Primeiro laudo'}]}},
                {'content': {'parts': [{'text': 'Segundo laudo'}]}},
            ],
        })

    result = make_client(handler).generate('prompt de teste')

    assert result == 'Primeiro laudo'
    assert seen['url'] == 'https://generativelanguage.example/v1beta/models/gemini-1.5-pro:generateContent'
    assert 'secret-key' not in seen['url']
    assert seen['key'] == 'secret-key'
    assert seen['body'] == {'contents': [{'parts': [{'text': 'prompt de teste'}]}]}


def test_generate_raises_on_http_error() -> None:
    client = make_client(lambda request: httpx.Response(503, json={'error': {'message': 'overloaded'}}))

    with pytest.raises(httpx.HTTPStatusError):
        client.generate('prompt')


def test_generate_without_api_key_fails_before_calling_out() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(ExternalServiceError):
        make_client(handler, api_key='').generate('prompt')
    assert calls == []


@pytest.mark.parametrize(
    'payload',
    [
        {},
        {'candidates': []},
        {'candidates': [{'content': {}}]},
        {'candidates': [{'content': {'parts': []}}]},
        {'candidates': [{'content': {'parts': [{'text': ''}]}}]},
    ],
)
def test_extract_generated_text_returns_none_without_candidate_text(payload: dict) -> None:
    assert extract_generated_text(payload) is None

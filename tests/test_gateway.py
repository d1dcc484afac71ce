# tests/test_gateway.py
from __future__ import annotations

import asyncio
import random
import re
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from social_support.gateway import (
    BAD_REQUEST_MESSAGE, SERVER_ERROR_MESSAGE, TIMEOUT_MESSAGE, DEFAULT_FAILURE_MESSAGE,
    HttpSubmissionGateway, MockSubmissionGateway, generate_application_id,
)
from social_support.record import FormData

URL = "https://applications.example.org/api/applications"

def _response(status: int, payload: object) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status} Error", response=response)
    else:
        response.raise_for_status.return_value = None
    return response

def _submit(gateway: HttpSubmissionGateway, form_data: FormData) -> object:
    return asyncio.run(gateway.submit(form_data))

# ===================================================================
# HTTP GATEWAY
# ===================================================================

def test_http_success_posts_snapshot_shape(valid_form_data: FormData) -> None:
    gateway = HttpSubmissionGateway(URL, timeout=5)
    with patch("social_support.gateway.requests.post",
               return_value=_response(201, {'applicationId': "APP-77", 'message': "Received"})) as post:
        result = _submit(gateway, valid_form_data)

    assert result.success
    assert result.application_id == "APP-77"
    assert result.message == "Received"
    _, kwargs = post.call_args
    assert kwargs['timeout'] == 5
    assert kwargs['json']['personalInfo']['email'] == "amina@example.com"
    assert kwargs['json']['situationDescriptions']['reasonForApplying'].startswith("I lost my job")

def test_http_application_rejection(valid_form_data: FormData) -> None:
    gateway = HttpSubmissionGateway(URL)
    with patch("social_support.gateway.requests.post",
               return_value=_response(200, {'success': False, 'error': "Duplicate application"})):
        result = _submit(gateway, valid_form_data)

    assert not result.success
    assert result.error == "Duplicate application"

@pytest.mark.parametrize("status, payload, expected", [
    (400, {}, BAD_REQUEST_MESSAGE),
    (500, {}, SERVER_ERROR_MESSAGE),
    (503, {'message': "down"}, SERVER_ERROR_MESSAGE),
    (422, {'message': "National ID already registered"}, "National ID already registered"),
    (404, {}, DEFAULT_FAILURE_MESSAGE),
])
def test_http_status_errors_are_mapped(valid_form_data: FormData, status: int,
                                       payload: dict, expected: str) -> None:
    gateway = HttpSubmissionGateway(URL)
    with patch("social_support.gateway.requests.post", return_value=_response(status, payload)):
        result = _submit(gateway, valid_form_data)

    assert not result.success
    assert result.message == expected
    assert result.error == expected

def test_http_timeout_is_mapped(valid_form_data: FormData) -> None:
    gateway = HttpSubmissionGateway(URL)
    with patch("social_support.gateway.requests.post", side_effect=requests.exceptions.Timeout("slow")):
        result = _submit(gateway, valid_form_data)

    assert not result.success
    assert result.error == TIMEOUT_MESSAGE

def test_http_connection_error_is_mapped(valid_form_data: FormData) -> None:
    gateway = HttpSubmissionGateway(URL)
    with patch("social_support.gateway.requests.post",
               side_effect=requests.exceptions.ConnectionError("refused")):
        result = _submit(gateway, valid_form_data)

    assert not result.success
    assert result.error == DEFAULT_FAILURE_MESSAGE

# ===================================================================
# SIMULATED GATEWAY
# ===================================================================

def test_application_id_format() -> None:
    app_id = generate_application_id(random.Random(1), now_ms=1700000000000)
    assert re.fullmatch(r"APP-1700000000000-[0-9A-Z]{6}", app_id)

def test_mock_gateway_success(valid_form_data: FormData) -> None:
    gateway = MockSubmissionGateway(failure_rate=0.0, delay=0)
    result = asyncio.run(gateway.submit(valid_form_data))

    assert result.success
    assert re.fullmatch(r"APP-\d+-[0-9A-Z]{6}", result.application_id)
    assert gateway.calls == 1

def test_mock_gateway_failure(valid_form_data: FormData) -> None:
    gateway = MockSubmissionGateway(failure_rate=1.0, delay=0)
    result = asyncio.run(gateway.submit(valid_form_data))

    assert not result.success
    assert result.error == "Simulated API error"
    assert result.application_id is None

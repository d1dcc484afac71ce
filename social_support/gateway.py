# social_support/gateway.py
"""
Submission endpoint clients.

Both gateways resolve to a SubmissionResponse and never raise: remote
rejections and transport failures become user-facing messages, and the
caller decides whether to resubmit.
"""
from __future__ import annotations
import asyncio
import logging
import random
import string
import time
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from .exceptions import ApiException, NetworkException
from .record import FormData, form_data_to_dict

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE: str = 'Failed to submit application. Please try again.'
TIMEOUT_MESSAGE: str = 'Request timed out. Please check your connection and try again.'
BAD_REQUEST_MESSAGE: str = 'Invalid application data. Please review your information and try again.'
SERVER_ERROR_MESSAGE: str = 'Server error. Please try again later.'
SUCCESS_MESSAGE: str = ('Your application has been submitted successfully. '
                        'You will receive a confirmation email shortly.')
SIMULATED_ERROR: str = 'Simulated API error'

@dataclass(frozen=True)
class SubmissionResponse:
    success: bool
    message: str
    application_id: str | None = None
    error: str | None = None

class SubmissionGateway(Protocol):
    async def submit(self, form_data: FormData) -> SubmissionResponse: ...

# ===================================================================
# 1. HTTP GATEWAY
# ===================================================================

def describe_submission_error(error: Exception) -> str:
    """Maps a transport/API failure to the message shown to the applicant."""
    if isinstance(error, NetworkException) and error.timed_out:
        return TIMEOUT_MESSAGE
    if isinstance(error, ApiException):
        if error.status_code == 400:
            return BAD_REQUEST_MESSAGE
        if error.status_code is not None and error.status_code >= 500:
            return SERVER_ERROR_MESSAGE
        remote_message = error.response_data.get('message')
        if isinstance(remote_message, str) and remote_message:
            return remote_message
    return DEFAULT_FAILURE_MESSAGE

class HttpSubmissionGateway:
    """
    Posts the full record as JSON to the acceptance endpoint.

    Usage:
        gateway = HttpSubmissionGateway("https://example.org/api/applications")
        response = await gateway.submit(store.data)
    """

    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self.url = url
        self.timeout = timeout

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise NetworkException("Submission timed out", original_error=e, timed_out=True) from e
        except requests.exceptions.HTTPError as e:
            data = _json_or_empty(e.response)
            status = e.response.status_code if e.response is not None else None
            raise ApiException(str(data.get('message') or e), status_code=status, response_data=data) from e
        except requests.exceptions.RequestException as e:
            raise NetworkException(f"Submission failed: {e}", original_error=e) from e
        return _json_or_empty(response)

    async def submit(self, form_data: FormData) -> SubmissionResponse:
        payload = form_data_to_dict(form_data)
        try:
            data = await asyncio.to_thread(self._post, payload)
        except (ApiException, NetworkException) as e:
            logger.error(f"Application submission error: {e}")
            message = describe_submission_error(e)
            return SubmissionResponse(success=False, message=message, error=message)

        if data.get('success') is False:
            message = str(data.get('error') or data.get('message') or DEFAULT_FAILURE_MESSAGE)
            logger.warning(f"Application rejected by the endpoint: {message}")
            return SubmissionResponse(success=False, message=message, error=message)

        application_id = data.get('applicationId')
        return SubmissionResponse(
            success=True,
            application_id=str(application_id) if application_id is not None else None,
            message=str(data.get('message') or 'Application submitted successfully'),
        )

def _json_or_empty(response: requests.Response | None) -> dict[str, Any]:
    if response is None:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}

# ===================================================================
# 2. SIMULATED GATEWAY (no endpoint configured)
# ===================================================================

def generate_application_id(rng: random.Random | None = None, now_ms: int | None = None) -> str:
    """APP-<epoch millis>-<6 upper-case base36 chars>."""
    rng = rng or random.Random()
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    alphabet = string.digits + string.ascii_uppercase
    suffix = ''.join(rng.choice(alphabet) for _ in range(6))
    return f"APP-{now_ms}-{suffix}"

class MockSubmissionGateway:
    """Accepts most submissions after a short delay; fails at `failure_rate`."""

    def __init__(self, failure_rate: float = 0.1, delay: float = 2.0,
                 rng: random.Random | None = None) -> None:
        self.failure_rate = failure_rate
        self.delay = delay
        self.rng = rng or random.Random()
        self.calls: int = 0

    async def submit(self, form_data: FormData) -> SubmissionResponse:
        self.calls += 1
        if self.delay > 0:
            await asyncio.sleep(self.delay)

        if self.rng.random() < self.failure_rate:
            logger.error(f"Application submission error: {SIMULATED_ERROR}")
            return SubmissionResponse(success=False, message=SIMULATED_ERROR, error=SIMULATED_ERROR)

        return SubmissionResponse(
            success=True,
            application_id=generate_application_id(self.rng),
            message=SUCCESS_MESSAGE,
        )

# social_support/assistant.py
"""
Writing help for the narrative fields.

With an OpenAI key the suggestion comes from the chat-completions endpoint;
without one the service answers with canned text so the feature still works.
"""
from __future__ import annotations
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

import requests

from .exceptions import ApiException, NetworkException
from .schema import AppSchema

logger = logging.getLogger(__name__)

OPENAI_API_ENDPOINT: str = 'https://api.openai.com/v1/chat/completions'
SYSTEM_PROMPT: str = (
    'You are a helpful assistant that helps people write clear, professional descriptions '
    'for government social support applications. Provide empathetic, honest, and factual '
    'responses that help applicants express their situations clearly while maintaining dignity.'
)

@dataclass(frozen=True)
class SuggestionRequest:
    prompt: str
    context: str | None = None

@dataclass(frozen=True)
class SuggestionResponse:
    suggestion: str
    success: bool
    error: str | None = None

# ===================================================================
# 1. PROMPTS & CANNED SUGGESTIONS
# ===================================================================

S = AppSchema.SituationDescriptions

_PROMPTS: dict[str, str] = {
    S.CURRENT_FINANCIAL_SITUATION.key: (
        "Help me describe my current financial situation for a government assistance application. "
        "I need to explain my income, expenses, and any financial hardships I'm facing."
    ),
    S.EMPLOYMENT_CIRCUMSTANCES.key: (
        "Help me describe my employment circumstances for a government assistance application. "
        "I need to explain my job status, work history, and any employment challenges I'm facing."
    ),
    S.REASON_FOR_APPLYING.key: (
        "Help me explain why I am applying for government financial assistance and how it would "
        "help my situation. I need to clearly articulate my need for support."
    ),
}
_PROMPT_ENDINGS: dict[str, str] = {
    S.CURRENT_FINANCIAL_SITUATION.key: 'Please provide a clear, honest description.',
    S.EMPLOYMENT_CIRCUMSTANCES.key: 'Please provide a clear, professional description.',
    S.REASON_FOR_APPLYING.key: 'Please provide a compelling, honest explanation.',
}
GENERIC_PROMPT: str = 'Help me write a clear, professional description for my application.'

def generate_prompt(field_key: str, existing_text: str | None = None) -> str:
    """Builds the prompt for one narrative field, quoting any draft text."""
    base = _PROMPTS.get(field_key)
    if base is None:
        return GENERIC_PROMPT
    if existing_text:
        return f'{base} Current text: "{existing_text}"'
    return f'{base} {_PROMPT_ENDINGS[field_key]}'

CANNED_SUGGESTIONS: dict[str, list[str]] = {
    'financial': [
        "I am currently facing significant financial hardship due to unexpected medical expenses and "
        "reduced income. My monthly expenses exceed my current income by approximately $800, making it "
        "difficult to afford basic necessities like food, utilities, and housing. I have exhausted my "
        "savings and am struggling to maintain stable living conditions for my family.",
        "My family's financial situation has become increasingly challenging following job loss three "
        "months ago. Despite actively seeking employment, I have been unable to secure stable work that "
        "matches my previous income level. Our household expenses, including rent, utilities, and "
        "childcare, continue to accumulate while our income has dropped significantly.",
    ],
    'employment': [
        "I have been unemployed for the past six months after my previous employer downsized operations. "
        "Despite submitting numerous job applications and attending interviews, I have not been able to "
        "secure employment that provides adequate income to support my family's needs.",
        "As a single parent, I face challenges in maintaining steady employment due to childcare "
        "responsibilities and lack of flexible work arrangements. My previous part-time positions have "
        "not provided sufficient income or benefits to support my family's basic needs.",
    ],
    'reason': [
        "I am applying for financial assistance to help bridge the gap between my current income and "
        "essential living expenses while I work towards achieving financial stability. This support would "
        "enable me to maintain housing, provide adequate nutrition for my family, and continue searching "
        "for sustainable employment without the immediate pressure of mounting debt.",
        "The financial assistance would provide crucial support during this transitional period, allowing "
        "me to focus on job searching and skills development without compromising my family's basic needs.",
    ],
}

def suggestion_category(prompt: str) -> str:
    lowered = prompt.lower()
    # Checked first: the financial prompt also mentions "assistance".
    if 'financial situation' in lowered:
        return 'financial'
    if any(word in lowered for word in ('employment', 'work', 'job')):
        return 'employment'
    if any(word in lowered for word in ('reason', 'applying', 'assistance')):
        return 'reason'
    return 'financial'

# ===================================================================
# 2. THE SERVICE
# ===================================================================

def describe_suggestion_error(error: Exception) -> str:
    if isinstance(error, NetworkException) and error.timed_out:
        return 'Request timed out. Please try again.'
    if isinstance(error, ApiException) and error.status_code is not None:
        if error.status_code == 401:
            return 'API authentication failed. Please check your API key.'
        if error.status_code == 429:
            return 'Rate limit exceeded. Please wait a moment and try again.'
        if error.status_code >= 500:
            return 'AI service is temporarily unavailable. Please try again later.'
    return 'Failed to generate suggestion. Please try again.'

class SuggestionService:
    def __init__(self, api_key: str | None = None, model: str = 'gpt-3.5-turbo',
                 timeout: float = 10.0, rng: random.Random | None = None) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.rng = rng or random.Random()

    @property
    def uses_canned_responses(self) -> bool:
        return not self.api_key

    def _canned(self, request: SuggestionRequest) -> SuggestionResponse:
        options = CANNED_SUGGESTIONS[suggestion_category(request.prompt)]
        return SuggestionResponse(suggestion=self.rng.choice(options), success=True)

    def _request_completion(self, request: SuggestionRequest) -> str:
        content = request.prompt + (f" Context: {request.context}" if request.context else '')
        body: dict[str, Any] = {
            'model': self.model,
            'messages': [
                {'role': 'system', 'content': SYSTEM_PROMPT},
                {'role': 'user', 'content': content},
            ],
            'max_tokens': 300,
            'temperature': 0.7,
        }
        try:
            response = requests.post(
                OPENAI_API_ENDPOINT,
                json=body,
                headers={'Authorization': f'Bearer {self.api_key}', 'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise NetworkException("Suggestion request timed out", original_error=e, timed_out=True) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ApiException(str(e), status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise NetworkException(f"Suggestion request failed: {e}", original_error=e) from e
        except ValueError as e:
            raise ApiException("AI service returned an unreadable response") from e

        if not isinstance(data, dict):
            raise ApiException("AI service returned an unexpected response")
        choices = data.get('choices')
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get('message') if isinstance(first, dict) else None
        content = message.get('content') if isinstance(message, dict) else None
        suggestion = content.strip() if isinstance(content, str) else ''
        if not suggestion:
            raise ApiException("No suggestion received from AI service")
        return suggestion

    async def get_suggestion(self, request: SuggestionRequest) -> SuggestionResponse:
        if self.uses_canned_responses:
            return self._canned(request)
        try:
            suggestion = await asyncio.to_thread(self._request_completion, request)
        except (ApiException, NetworkException) as e:
            logger.error(f"AI assistance error: {e}")
            return SuggestionResponse(suggestion='', success=False, error=describe_suggestion_error(e))
        return SuggestionResponse(suggestion=suggestion, success=True)

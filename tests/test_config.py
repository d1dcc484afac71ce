# tests/test_config.py
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from social_support.config import load_settings

def test_defaults() -> None:
    settings = load_settings({})
    assert settings.db_path == Path('.') / "social_support.db"
    assert settings.port == 8080
    assert settings.submission_api_url is None, "No endpoint means the simulated gateway"
    assert settings.openai_api_key is None, "No key means canned suggestions"

def test_environment_overrides(tmp_path: Path) -> None:
    settings = load_settings({
        'RENDER_DISK_PATH': str(tmp_path),
        'PORT': "9000",
        'SUBMISSION_API_URL': "https://example.org/apply",
        'SUBMISSION_TIMEOUT': "12.5",
        'OPENAI_API_KEY': "sk-test",
        'MOCK_FAILURE_RATE': "0",
    })
    assert settings.db_path == tmp_path / "social_support.db"
    assert settings.port == 9000
    assert settings.submission_api_url == "https://example.org/apply"
    assert settings.submission_timeout == 12.5
    assert settings.openai_api_key == "sk-test"
    assert settings.mock_failure_rate == 0.0

def test_blank_credentials_count_as_missing() -> None:
    settings = load_settings({'OPENAI_API_KEY': "", 'SUBMISSION_API_URL': ""})
    assert settings.openai_api_key is None
    assert settings.submission_api_url is None

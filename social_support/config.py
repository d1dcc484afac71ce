# social_support/config.py
from __future__ import annotations
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DB_FILENAME: str = "social_support.db"

@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read once from the environment."""
    data_dir: Path = Path('.')
    port: int = 8080
    storage_secret: str = 'a_very_secure_secret_key_for_local_dev'
    # Unset -> submissions go to the simulated gateway.
    submission_api_url: str | None = None
    submission_timeout: float = 30.0
    # Unset -> the suggestion service answers with canned text.
    openai_api_key: str | None = None
    openai_model: str = 'gpt-3.5-turbo'
    openai_timeout: float = 10.0
    mock_failure_rate: float = 0.1
    mock_submission_delay: float = 2.0

    @property
    def db_path(self) -> Path:
        return self.data_dir / DB_FILENAME

def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        # Render provides a persistent disk; the snapshot database lives there.
        data_dir=Path(env.get('RENDER_DISK_PATH', '.')),
        port=int(env.get('PORT', 8080)),
        storage_secret=env.get('STORAGE_SECRET', Settings.storage_secret),
        submission_api_url=env.get('SUBMISSION_API_URL') or None,
        submission_timeout=float(env.get('SUBMISSION_TIMEOUT', 30)),
        openai_api_key=env.get('OPENAI_API_KEY') or None,
        openai_model=env.get('OPENAI_MODEL', Settings.openai_model),
        openai_timeout=float(env.get('OPENAI_TIMEOUT', 10)),
        mock_failure_rate=float(env.get('MOCK_FAILURE_RATE', 0.1)),
        mock_submission_delay=float(env.get('MOCK_SUBMISSION_DELAY', 2.0)),
    )

from pathlib import Path
from unittest.mock import patch

import pytest

from code_remedy.core.config import Config
from code_remedy.services.ai_service import RemediationService


CONFIG_YAML = """
api_base: https://llm.example.test/v1
timeout: 30
max_code_chars: 48000
max_error_chars: 8000
transition_delay: 0
server:
  host: 127.0.0.1
  port: 9099
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's real keys and .env out of every test."""
    for name in ("OPEN_AI_SECRET_KEY", "OPENAI_API_KEY", "OPENAI_API_BASE"):
        monkeypatch.delenv(name, raising=False)
    with patch("code_remedy.core.config.load_dotenv"):
        yield


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "remedy.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture
def config(config_file, monkeypatch) -> Config:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    return Config(config_path=config_file, work_dir=config_file.parent)


@pytest.fixture
def service(config) -> RemediationService:
    return RemediationService(config)


def _completion(content, model="gpt-4.1"):
    return {
        "id": "chatcmpl-test",
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


@pytest.fixture
def completion():
    """Factory for a minimal chat-completion body with one choice."""
    return _completion

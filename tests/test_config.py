"""Tests for llm/config.py: environment and .env handling."""

import os

import pytest

from innergarden.llm.config import (
    BACKEND_CHAT,
    BACKEND_PIPELINE,
    CANDIDATE_LABELS,
    DEFAULT_CHAT_URL,
    ModelConfig,
    load_dotenv,
)

ENV_KEYS = [
    "INNERGARDEN_CLASSIFIER",
    "INNERGARDEN_MODEL",
    "INNERGARDEN_MODEL_PATH",
    "INNERGARDEN_ALLOW_REMOTE_MODELS",
    "INNERGARDEN_DEVICE",
    "INNERGARDEN_CLASSIFY_TIMEOUT",
    "LLM_BASE_URL",
    "LLM_MODEL",
    "LLM_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Isolate from the developer's environment and any .env above the CWD."""
    saved = {k: os.environ.pop(k) for k in ENV_KEYS if k in os.environ}
    monkeypatch.chdir(tmp_path)
    yield
    for k in ENV_KEYS:
        os.environ.pop(k, None)
    os.environ.update(saved)


class TestDefaults:
    def test_plain_constructor(self):
        config = ModelConfig()
        assert config.backend == BACKEND_PIPELINE
        assert config.allow_remote_models is False
        assert config.confidence_threshold == 0.45
        assert config.candidate_labels == CANDIDATE_LABELS
        assert config.candidate_labels is not CANDIDATE_LABELS

    def test_from_env_without_variables(self, tmp_path):
        (tmp_path / "sub").mkdir()
        os.chdir(tmp_path / "sub")
        config = ModelConfig.from_env()
        assert config.backend == BACKEND_PIPELINE
        assert config.chat_base_url == DEFAULT_CHAT_URL
        assert config.classify_timeout == 20.0

    def test_candidate_labels(self):
        assert len(CANDIDATE_LABELS) == 20
        assert len(set(CANDIDATE_LABELS)) == 20


class TestFromEnv:
    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("INNERGARDEN_CLASSIFIER", "Chat")
        monkeypatch.setenv("INNERGARDEN_ALLOW_REMOTE_MODELS", "yes")
        monkeypatch.setenv("INNERGARDEN_CLASSIFY_TIMEOUT", "5")
        monkeypatch.setenv("LLM_BASE_URL", "http://gpu:8000/v1/")
        monkeypatch.setenv("LLM_API_KEY", " key ")

        config = ModelConfig.from_env()
        assert config.backend == BACKEND_CHAT
        assert config.allow_remote_models is True
        assert config.classify_timeout == 5.0
        assert config.chat_base_url == "http://gpu:8000/v1"
        assert config.chat_api_key == "key"

    def test_blank_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("INNERGARDEN_MODEL", "   ")
        config = ModelConfig.from_env()
        assert config.model_name == "cross-encoder/nli-deberta-v3-base"

    def test_local_model_dir(self):
        config = ModelConfig(local_model_path="/opt/models", model_name="org/model")
        assert str(config.local_model_dir) == os.path.join("/opt/models", "org", "model")


class TestDotenv:
    def test_loads_unset_keys(self, tmp_path):
        (tmp_path / ".env").write_text(
            "# local settings\n"
            "LLM_MODEL=qwen2.5:7b\n"
            "\n"
            "INNERGARDEN_DEVICE = cpu\n"
        )
        load_dotenv()
        assert os.environ["LLM_MODEL"] == "qwen2.5:7b"
        assert os.environ["INNERGARDEN_DEVICE"] == "cpu"

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "from-shell")
        (tmp_path / ".env").write_text("LLM_MODEL=from-file\n")
        assert ModelConfig.from_env().chat_model == "from-shell"

    def test_found_in_parent_directory(self, tmp_path):
        (tmp_path / ".env").write_text("INNERGARDEN_CLASSIFIER=chat\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        os.chdir(nested)
        assert ModelConfig.from_env().backend == BACKEND_CHAT

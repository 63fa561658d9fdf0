"""Unit tests for environment driven settings."""

import os

import pytest

from arbiter.config.settings import (
    AppConfig,
    GenerationConfig,
    NarrationConfig,
    ResearchConfig,
    StorageConfig,
)

ENV_KEYS = (
    "ARBITER_ENV",
    "DATABASE_URL",
    "ARBITER_DEV_TOKENS",
    "OPENAI_API_KEY",
    "ARBITER_GENERATION_MODEL",
    "ARBITER_GENERATION_TEMPERATURE",
    "ARBITER_GENERATION_MAX_TOKENS",
    "ELEVENLABS_API_KEY",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "TAVILY_API_KEY",
    "ARBITER_RESEARCH_MAX_CLAIMS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    """Environment without any arbiter variables and no .env file."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestAppConfig:
    """Tests for AppConfig.from_environment."""

    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test an empty environment yields a development config."""
        config = AppConfig.from_environment()
        assert config.environment == "development"
        assert not config.is_production
        assert config.database_url is None
        assert config.generation.api_key is None
        assert config.generation.model == "gpt-4-turbo-preview"
        assert not config.storage.enabled
        assert config.research.max_claims == 5

    def test_reads_variables(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test values are taken from the environment."""
        clean_env.setenv("ARBITER_ENV", "Production")
        clean_env.setenv("DATABASE_URL", "postgres://db/arbiter")
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("ARBITER_GENERATION_TEMPERATURE", "0.2")
        clean_env.setenv("SUPABASE_URL", "https://x.supabase.co")
        clean_env.setenv("SUPABASE_SERVICE_KEY", "service")
        clean_env.setenv("TAVILY_API_KEY", "tvly")

        config = AppConfig.from_environment()

        assert config.is_production
        assert config.database_url == "postgres://db/arbiter"
        assert config.generation.api_key == "sk-test"
        assert config.transcription.api_key == "sk-test"
        assert config.generation.temperature == 0.2
        assert config.storage.enabled
        assert config.research.api_key == "tvly"

    def test_dotenv_file_is_loaded(self, clean_env: pytest.MonkeyPatch, tmp_path) -> None:
        """Test a .env file in the working directory is read."""
        (tmp_path / ".env").write_text("ARBITER_DEV_TOKENS=t1:alice:alice@example.com\n")
        try:
            config = AppConfig.from_environment()
        finally:
            os.environ.pop("ARBITER_DEV_TOKENS", None)
        assert config.dev_tokens == "t1:alice:alice@example.com"

    def test_invalid_numbers_fall_back(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test unparsable numbers use the default."""
        clean_env.setenv("ARBITER_GENERATION_MAX_TOKENS", "lots")
        clean_env.setenv("ARBITER_RESEARCH_MAX_CLAIMS", "")
        config = AppConfig.from_environment()
        assert config.generation.max_output_tokens == 2000
        assert config.research.max_claims == 5

    def test_unknown_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test the environment name is validated."""
        clean_env.setenv("ARBITER_ENV", "staging")
        with pytest.raises(ValueError, match="environment"):
            AppConfig.from_environment()


class TestSectionValidation:
    """Tests for per-section validation."""

    def test_generation_bounds(self) -> None:
        """Test temperature and token bounds."""
        with pytest.raises(ValueError, match="temperature"):
            GenerationConfig(temperature=3.0)
        with pytest.raises(ValueError, match="max_output_tokens"):
            GenerationConfig(max_output_tokens=0)

    def test_storage_credentials_go_together(self) -> None:
        """Test a URL without a key is rejected."""
        with pytest.raises(ValueError, match="together"):
            StorageConfig(url="https://x.supabase.co")

    def test_narration_bitrate(self) -> None:
        """Test the bitrate must be positive."""
        with pytest.raises(ValueError, match="bytes_per_second"):
            NarrationConfig(bytes_per_second=0)

    def test_research_limits(self) -> None:
        """Test claim limits must be positive."""
        with pytest.raises(ValueError):
            ResearchConfig(max_claims=0)

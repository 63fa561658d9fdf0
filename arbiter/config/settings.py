"""Arbiter configuration.

Environment-driven, frozen settings. Every section validates itself in
``__post_init__`` and is built with ``from_environment()``. A ``.env`` file in
the working directory is loaded first when present; real environment
variables take precedence over it.

Environment Variables (App):
- ARBITER_ENV: "development" or "production" (default: development)
- DATABASE_URL: PostgreSQL URL; in-memory stubs are used when unset
- ARBITER_DEV_TOKENS: "token:party_id:email" entries, comma separated

Environment Variables (Generation):
- OPENAI_API_KEY: Enables the OpenAI generator and transcriber
- ARBITER_GENERATION_MODEL: Chat model (default: gpt-4-turbo-preview)
- ARBITER_GENERATION_TEMPERATURE: Sampling temperature (default: 0.7)
- ARBITER_GENERATION_MAX_TOKENS: Reply bound (default: 2000)
- ARBITER_GENERATION_TIMEOUT_SECONDS: Call timeout (default: 60)

Environment Variables (Transcription):
- ARBITER_TRANSCRIPTION_MODEL: Speech-to-text model (default: whisper-1)
- ARBITER_TRANSCRIPTION_TIMEOUT_SECONDS: Call timeout (default: 60)

Environment Variables (Narration):
- ELEVENLABS_API_KEY: Enables ElevenLabs narration
- ARBITER_NARRATION_MODEL: Voice model (default: eleven_turbo_v2_5)
- ARBITER_NARRATION_OUTPUT_FORMAT: Audio format (default: mp3_44100_128)
- ARBITER_NARRATION_BYTES_PER_SECOND: Bitrate for estimates (default: 16000)
- ARBITER_NARRATION_TIMEOUT_SECONDS: Call timeout (default: 60)

Environment Variables (Storage):
- SUPABASE_URL, SUPABASE_SERVICE_KEY: Enable Supabase Storage
- ARBITER_STORAGE_BUCKET: Bucket name (default: dispute-audio)
- ARBITER_PLAYBACK_URL_TTL_SECONDS: Playback lease (default: 86400)
- ARBITER_UPLOAD_URL_TTL_SECONDS: Direct upload lease (default: 3600)

Environment Variables (Research):
- TAVILY_API_KEY: Enables fact checking
- ARBITER_RESEARCH_MAX_CLAIMS: Claims per dispute (default: 5)
- ARBITER_RESEARCH_RESULTS_PER_CLAIM: Hits per claim (default: 3)
- ARBITER_RESEARCH_TIMEOUT_SECONDS: Call timeout (default: 20)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

ENVIRONMENTS = frozenset({"development", "production"})


def load_environment() -> None:
    """Load a ``.env`` file without overriding variables already set."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Returns:
        Parsed integer value, or ``default`` if unset or invalid.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_str_env(key: str) -> str | None:
    """Get a non-empty string environment variable, or None."""
    value = os.environ.get(key, "").strip()
    return value or None


@dataclass(frozen=True)
class GenerationConfig:
    """Verdict generation settings.

    Attributes:
        api_key: OpenAI API key (None disables the real provider).
        model: Chat model name.
        temperature: Sampling temperature.
        max_output_tokens: Upper bound on the reply length.
        timeout_seconds: Per-call timeout.
    """

    api_key: str | None = None
    model: str = "gpt-4-turbo-preview"
    temperature: float = 0.7
    max_output_tokens: int = 2000
    timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if self.max_output_tokens < 1:
            raise ValueError(
                f"max_output_tokens must be positive, got {self.max_output_tokens}"
            )
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")

    @classmethod
    def from_environment(cls) -> GenerationConfig:
        """Create config from environment variables with defaults."""
        return cls(
            api_key=_get_str_env("OPENAI_API_KEY"),
            model=os.environ.get("ARBITER_GENERATION_MODEL", "gpt-4-turbo-preview"),
            temperature=_get_float_env("ARBITER_GENERATION_TEMPERATURE", 0.7),
            max_output_tokens=_get_int_env("ARBITER_GENERATION_MAX_TOKENS", 2000),
            timeout_seconds=_get_float_env("ARBITER_GENERATION_TIMEOUT_SECONDS", 60.0),
        )


@dataclass(frozen=True)
class TranscriptionConfig:
    """Speech-to-text settings (shares the OpenAI key with generation)."""

    api_key: str | None = None
    model: str = "whisper-1"
    timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")

    @classmethod
    def from_environment(cls) -> TranscriptionConfig:
        """Create config from environment variables with defaults."""
        return cls(
            api_key=_get_str_env("OPENAI_API_KEY"),
            model=os.environ.get("ARBITER_TRANSCRIPTION_MODEL", "whisper-1"),
            timeout_seconds=_get_float_env("ARBITER_TRANSCRIPTION_TIMEOUT_SECONDS", 60.0),
        )


@dataclass(frozen=True)
class NarrationConfig:
    """Text-to-speech settings.

    Attributes:
        api_key: ElevenLabs API key (None disables narration).
        base_url: ElevenLabs API root.
        model: Voice model.
        output_format: Encoded audio format.
        bytes_per_second: Bitrate assumed for duration estimates.
        stability: Voice stability setting.
        similarity_boost: Voice similarity setting.
        timeout_seconds: Per-call timeout.
    """

    api_key: str | None = None
    base_url: str = "https://api.elevenlabs.io"
    model: str = "eleven_turbo_v2_5"
    output_format: str = "mp3_44100_128"
    bytes_per_second: int = 16_000
    stability: float = 0.5
    similarity_boost: float = 0.75
    timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.bytes_per_second < 1:
            raise ValueError(
                f"bytes_per_second must be positive, got {self.bytes_per_second}"
            )
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")

    @classmethod
    def from_environment(cls) -> NarrationConfig:
        """Create config from environment variables with defaults."""
        return cls(
            api_key=_get_str_env("ELEVENLABS_API_KEY"),
            model=os.environ.get("ARBITER_NARRATION_MODEL", "eleven_turbo_v2_5"),
            output_format=os.environ.get("ARBITER_NARRATION_OUTPUT_FORMAT", "mp3_44100_128"),
            bytes_per_second=_get_int_env("ARBITER_NARRATION_BYTES_PER_SECOND", 16_000),
            timeout_seconds=_get_float_env("ARBITER_NARRATION_TIMEOUT_SECONDS", 60.0),
        )


@dataclass(frozen=True)
class StorageConfig:
    """Object storage settings.

    Attributes:
        url: Supabase project URL (None disables the real store).
        service_key: Supabase service-role key.
        bucket: Storage bucket for audio.
        playback_ttl_seconds: Lease of playback URLs.
        upload_ttl_seconds: Lease of direct upload URLs.
    """

    url: str | None = None
    service_key: str | None = None
    bucket: str = "dispute-audio"
    playback_ttl_seconds: int = 86_400
    upload_ttl_seconds: int = 3_600

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.playback_ttl_seconds < 1 or self.upload_ttl_seconds < 1:
            raise ValueError("URL lease lengths must be positive")
        if bool(self.url) != bool(self.service_key):
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set together")

    @property
    def enabled(self) -> bool:
        """Return True if a real store is configured."""
        return bool(self.url and self.service_key)

    @classmethod
    def from_environment(cls) -> StorageConfig:
        """Create config from environment variables with defaults."""
        return cls(
            url=_get_str_env("SUPABASE_URL"),
            service_key=_get_str_env("SUPABASE_SERVICE_KEY"),
            bucket=os.environ.get("ARBITER_STORAGE_BUCKET", "dispute-audio"),
            playback_ttl_seconds=_get_int_env("ARBITER_PLAYBACK_URL_TTL_SECONDS", 86_400),
            upload_ttl_seconds=_get_int_env("ARBITER_UPLOAD_URL_TTL_SECONDS", 3_600),
        )


@dataclass(frozen=True)
class ResearchConfig:
    """Fact-checking settings."""

    api_key: str | None = None
    base_url: str = "https://api.tavily.com"
    max_claims: int = 5
    results_per_claim: int = 3
    timeout_seconds: float = 20.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_claims < 1 or self.results_per_claim < 1:
            raise ValueError("max_claims and results_per_claim must be positive")

    @classmethod
    def from_environment(cls) -> ResearchConfig:
        """Create config from environment variables with defaults."""
        return cls(
            api_key=_get_str_env("TAVILY_API_KEY"),
            max_claims=_get_int_env("ARBITER_RESEARCH_MAX_CLAIMS", 5),
            results_per_claim=_get_int_env("ARBITER_RESEARCH_RESULTS_PER_CLAIM", 3),
            timeout_seconds=_get_float_env("ARBITER_RESEARCH_TIMEOUT_SECONDS", 20.0),
        )


@dataclass(frozen=True)
class AppConfig:
    """Top-level application settings."""

    environment: str = "development"
    database_url: str | None = None
    dev_tokens: str = ""
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    transcription: TranscriptionConfig = field(default_factory=TranscriptionConfig)
    narration: NarrationConfig = field(default_factory=NarrationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    research: ResearchConfig = field(default_factory=ResearchConfig)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(ENVIRONMENTS)}, got {self.environment!r}"
            )

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> AppConfig:
        """Load ``.env`` and build every section from the environment."""
        load_environment()
        return cls(
            environment=os.environ.get("ARBITER_ENV", "development").strip().lower(),
            database_url=_get_str_env("DATABASE_URL"),
            dev_tokens=os.environ.get("ARBITER_DEV_TOKENS", ""),
            generation=GenerationConfig.from_environment(),
            transcription=TranscriptionConfig.from_environment(),
            narration=NarrationConfig.from_environment(),
            storage=StorageConfig.from_environment(),
            research=ResearchConfig.from_environment(),
        )

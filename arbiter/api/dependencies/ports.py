"""Port wiring for the API.

Each getter returns a process-wide singleton. Configured providers get their
real adapter. Unconfigured ones fall back to in-memory stubs in development
(with a warning) and are disabled in production, except the database and the
generation provider, which production requires.

Developer Golden Rules:
1. ONE INSTANCE - Repositories and clients are created once per process
2. WARN ON STUBS - Every stub fallback is logged
3. TESTS OVERRIDE - Tests replace service getters via dependency_overrides
"""

from __future__ import annotations

import structlog

from arbiter.application.ports.dispute_repository import DisputeRepositoryProtocol
from arbiter.application.ports.identity_provider import IdentityProviderProtocol
from arbiter.application.ports.object_store import ObjectStoreProtocol
from arbiter.application.ports.party_repository import PartyRepositoryProtocol
from arbiter.application.ports.speech_synthesizer import SpeechSynthesizerProtocol
from arbiter.application.ports.speech_transcriber import SpeechTranscriberProtocol
from arbiter.application.ports.text_generator import TextGeneratorProtocol
from arbiter.application.ports.time_authority import TimeAuthorityProtocol
from arbiter.application.ports.web_research import WebResearchProtocol
from arbiter.application.services.time_authority_service import SystemTimeAuthority
from arbiter.bootstrap.database import get_session_factory
from arbiter.config.settings import AppConfig
from arbiter.infrastructure.adapters.llm import OpenAITextGenerator
from arbiter.infrastructure.adapters.persistence import (
    PostgresDisputeRepository,
    PostgresPartyRepository,
)
from arbiter.infrastructure.adapters.research import TavilyResearch
from arbiter.infrastructure.adapters.speech import ElevenLabsSynthesizer, OpenAITranscriber
from arbiter.infrastructure.adapters.storage import SupabaseObjectStore
from arbiter.infrastructure.stubs import (
    DisputeRepositoryStub,
    ObjectStoreStub,
    PartyRepositoryStub,
    SpeechSynthesizerStub,
    SpeechTranscriberStub,
    StaticTokenIdentityProvider,
    TextGeneratorStub,
)

logger = structlog.get_logger(__name__)

_config: AppConfig | None = None
_time_authority: TimeAuthorityProtocol | None = None
_party_repository: PartyRepositoryProtocol | None = None
_dispute_repository: DisputeRepositoryProtocol | None = None
_text_generator: TextGeneratorProtocol | None = None
_speech_transcriber: SpeechTranscriberProtocol | None = None
_speech_synthesizer: SpeechSynthesizerProtocol | None = None
_object_store: ObjectStoreProtocol | None = None
_web_research: WebResearchProtocol | None = None
_identity_provider: IdentityProviderProtocol | None = None
_optional_resolved: set[str] = set()


def _warn_stub(port: str) -> None:
    logger.warning("using_in_memory_stub", port=port)


def _require_or_stub(config: AppConfig, port: str, setting: str) -> None:
    """Fail in production when a required provider is unconfigured."""
    if config.is_production:
        raise ValueError(f"{setting} is required in production ({port})")
    _warn_stub(port)


def get_app_config() -> AppConfig:
    """Get the application configuration (loaded once)."""
    global _config
    if _config is None:
        _config = AppConfig.from_environment()
    return _config


def get_time_authority() -> TimeAuthorityProtocol:
    """Get the system clock."""
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_party_repository() -> PartyRepositoryProtocol:
    """Get the party repository (PostgreSQL when DATABASE_URL is set)."""
    global _party_repository
    if _party_repository is None:
        config = get_app_config()
        if config.database_url:
            _party_repository = PostgresPartyRepository(
                get_session_factory(config.database_url)
            )
        else:
            _require_or_stub(config, "party_repository", "DATABASE_URL")
            _party_repository = PartyRepositoryStub()
    return _party_repository


def get_dispute_repository() -> DisputeRepositoryProtocol:
    """Get the dispute repository (PostgreSQL when DATABASE_URL is set)."""
    global _dispute_repository
    if _dispute_repository is None:
        config = get_app_config()
        if config.database_url:
            _dispute_repository = PostgresDisputeRepository(
                get_session_factory(config.database_url)
            )
        else:
            _require_or_stub(config, "dispute_repository", "DATABASE_URL")
            _dispute_repository = DisputeRepositoryStub()
    return _dispute_repository


def get_text_generator() -> TextGeneratorProtocol:
    """Get the verdict text generator (OpenAI when a key is set)."""
    global _text_generator
    if _text_generator is None:
        config = get_app_config()
        if config.generation.api_key:
            _text_generator = OpenAITextGenerator(config.generation)
        else:
            _require_or_stub(config, "text_generator", "OPENAI_API_KEY")
            _text_generator = TextGeneratorStub()
    return _text_generator


def get_speech_transcriber() -> SpeechTranscriberProtocol | None:
    """Get the speech-to-text provider, or None when disabled."""
    global _speech_transcriber
    if "transcriber" not in _optional_resolved:
        config = get_app_config()
        if config.transcription.api_key:
            _speech_transcriber = OpenAITranscriber(config.transcription)
        elif not config.is_production:
            _warn_stub("speech_transcriber")
            _speech_transcriber = SpeechTranscriberStub()
        _optional_resolved.add("transcriber")
    return _speech_transcriber


def get_speech_synthesizer() -> SpeechSynthesizerProtocol | None:
    """Get the text-to-speech provider, or None when narration is disabled."""
    global _speech_synthesizer
    if "synthesizer" not in _optional_resolved:
        config = get_app_config()
        if config.narration.api_key:
            _speech_synthesizer = ElevenLabsSynthesizer(config.narration)
        elif not config.is_production:
            _warn_stub("speech_synthesizer")
            _speech_synthesizer = SpeechSynthesizerStub()
        _optional_resolved.add("synthesizer")
    return _speech_synthesizer


def get_object_store() -> ObjectStoreProtocol | None:
    """Get the audio object store, or None when storage is disabled."""
    global _object_store
    if "object_store" not in _optional_resolved:
        config = get_app_config()
        if config.storage.enabled:
            _object_store = SupabaseObjectStore(config.storage)
        elif not config.is_production:
            _warn_stub("object_store")
            _object_store = ObjectStoreStub(bucket=config.storage.bucket)
        _optional_resolved.add("object_store")
    return _object_store


def get_web_research() -> WebResearchProtocol | None:
    """Get the web research provider, or None when fact checking is off."""
    global _web_research
    if "web_research" not in _optional_resolved:
        config = get_app_config()
        if config.research.api_key:
            _web_research = TavilyResearch(config.research)
        else:
            logger.info("fact_checking_disabled", reason="TAVILY_API_KEY not set")
        _optional_resolved.add("web_research")
    return _web_research


def get_identity_provider() -> IdentityProviderProtocol:
    """Get the bearer-token identity provider."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = StaticTokenIdentityProvider.from_spec(
            get_app_config().dev_tokens
        )
    return _identity_provider


def reset_ports() -> None:
    """Forget every port singleton (for tests)."""
    global _config, _time_authority, _party_repository, _dispute_repository
    global _text_generator, _speech_transcriber, _speech_synthesizer
    global _object_store, _web_research, _identity_provider
    _config = None
    _time_authority = None
    _party_repository = None
    _dispute_repository = None
    _text_generator = None
    _speech_transcriber = None
    _speech_synthesizer = None
    _object_store = None
    _web_research = None
    _identity_provider = None
    _optional_resolved.clear()

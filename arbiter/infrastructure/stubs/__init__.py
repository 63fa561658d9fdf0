"""In-memory stubs of every port, for development and testing."""

from arbiter.infrastructure.stubs.dispute_repository_stub import DisputeRepositoryStub
from arbiter.infrastructure.stubs.identity_provider_stub import (
    StaticTokenIdentityProvider,
)
from arbiter.infrastructure.stubs.object_store_stub import ObjectStoreStub
from arbiter.infrastructure.stubs.party_repository_stub import PartyRepositoryStub
from arbiter.infrastructure.stubs.speech_synthesizer_stub import SpeechSynthesizerStub
from arbiter.infrastructure.stubs.speech_transcriber_stub import SpeechTranscriberStub
from arbiter.infrastructure.stubs.text_generator_stub import TextGeneratorStub
from arbiter.infrastructure.stubs.web_research_stub import WebResearchStub

__all__: list[str] = [
    "DisputeRepositoryStub",
    "ObjectStoreStub",
    "PartyRepositoryStub",
    "SpeechSynthesizerStub",
    "SpeechTranscriberStub",
    "StaticTokenIdentityProvider",
    "TextGeneratorStub",
    "WebResearchStub",
]

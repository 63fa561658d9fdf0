"""Application ports - abstract interfaces for external collaborators."""

from arbiter.application.ports.dispute_repository import (
    DisputeRepositoryProtocol,
    TurnDraft,
)
from arbiter.application.ports.identity_provider import (
    Identity,
    IdentityProviderProtocol,
)
from arbiter.application.ports.object_store import ObjectStoreProtocol
from arbiter.application.ports.party_repository import PartyRepositoryProtocol
from arbiter.application.ports.speech_synthesizer import (
    SpeechRequest,
    SpeechSynthesizerProtocol,
)
from arbiter.application.ports.speech_transcriber import (
    SpeechTranscriberProtocol,
    TranscriptionResult,
)
from arbiter.application.ports.text_generator import (
    CompletionRequest,
    TextGeneratorProtocol,
)
from arbiter.application.ports.time_authority import TimeAuthorityProtocol
from arbiter.application.ports.web_research import (
    SearchResponse,
    SearchResult,
    WebResearchProtocol,
)

__all__: list[str] = [
    "CompletionRequest",
    "DisputeRepositoryProtocol",
    "Identity",
    "IdentityProviderProtocol",
    "ObjectStoreProtocol",
    "PartyRepositoryProtocol",
    "SearchResponse",
    "SearchResult",
    "SpeechRequest",
    "SpeechSynthesizerProtocol",
    "SpeechTranscriberProtocol",
    "TextGeneratorProtocol",
    "TimeAuthorityProtocol",
    "TranscriptionResult",
    "TurnDraft",
    "WebResearchProtocol",
]

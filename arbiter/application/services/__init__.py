"""Application services for the dispute arbiter."""

from arbiter.application.services.dispute_lifecycle_service import (
    AdjudicationOutcome,
    DisputeLifecycleService,
)
from arbiter.application.services.dispute_service import (
    CreatedDispute,
    DisputeDetails,
    DisputeService,
)
from arbiter.application.services.fact_check_service import (
    FactCheckService,
    ResearchFindings,
    extract_fact_checkable_statements,
)
from arbiter.application.services.media_publisher import (
    DirectUpload,
    MediaKind,
    MediaPublisher,
    PublishedMedia,
)
from arbiter.application.services.narration_service import (
    NarrationService,
    SynthesizedSpeech,
)
from arbiter.application.services.party_profile_service import PartyProfileService
from arbiter.application.services.time_authority_service import SystemTimeAuthority
from arbiter.application.services.turn_intake_service import (
    TurnIntakeService,
    decode_audio_payload,
)
from arbiter.application.services.usage_entitlement_service import (
    UsageEntitlementService,
)
from arbiter.application.services.verdict_generator_service import (
    GeneratedVerdict,
    GenerationRequest,
    TranscriptLine,
    VerdictGeneratorService,
    build_system_instruction,
    build_transcript,
    build_user_message,
)
from arbiter.application.services.verdict_parser import ParsedVerdict, parse_verdict

__all__: list[str] = [
    "AdjudicationOutcome",
    "CreatedDispute",
    "DirectUpload",
    "DisputeDetails",
    "DisputeLifecycleService",
    "DisputeService",
    "FactCheckService",
    "GeneratedVerdict",
    "GenerationRequest",
    "MediaKind",
    "MediaPublisher",
    "NarrationService",
    "ParsedVerdict",
    "PartyProfileService",
    "PublishedMedia",
    "ResearchFindings",
    "SynthesizedSpeech",
    "SystemTimeAuthority",
    "TranscriptLine",
    "TurnIntakeService",
    "UsageEntitlementService",
    "VerdictGeneratorService",
    "build_system_instruction",
    "build_transcript",
    "build_user_message",
    "decode_audio_payload",
    "extract_fact_checkable_statements",
    "parse_verdict",
]

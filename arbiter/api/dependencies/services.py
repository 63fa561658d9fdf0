"""Application service wiring for the API.

Services are built once from the port singletons in
``arbiter.api.dependencies.ports``. Routes depend on these getters, and
integration tests replace them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from arbiter.api.dependencies.ports import (
    get_app_config,
    get_dispute_repository,
    get_object_store,
    get_party_repository,
    get_speech_synthesizer,
    get_speech_transcriber,
    get_text_generator,
    get_time_authority,
    get_web_research,
)
from arbiter.application.services.dispute_lifecycle_service import (
    DisputeLifecycleService,
)
from arbiter.application.services.dispute_service import DisputeService
from arbiter.application.services.fact_check_service import FactCheckService
from arbiter.application.services.media_publisher import MediaPublisher
from arbiter.application.services.narration_service import NarrationService
from arbiter.application.services.party_profile_service import PartyProfileService
from arbiter.application.services.turn_intake_service import TurnIntakeService
from arbiter.application.services.usage_entitlement_service import (
    UsageEntitlementService,
)
from arbiter.application.services.verdict_generator_service import (
    VerdictGeneratorService,
)

_entitlement_service: UsageEntitlementService | None = None
_party_profile_service: PartyProfileService | None = None
_dispute_service: DisputeService | None = None
_turn_intake_service: TurnIntakeService | None = None
_lifecycle_service: DisputeLifecycleService | None = None


def _media_publisher() -> MediaPublisher | None:
    store = get_object_store()
    if store is None:
        return None
    storage = get_app_config().storage
    return MediaPublisher(
        store,
        playback_ttl_seconds=storage.playback_ttl_seconds,
        upload_ttl_seconds=storage.upload_ttl_seconds,
    )


def get_entitlement_service() -> UsageEntitlementService:
    """Get the usage entitlement gate."""
    global _entitlement_service
    if _entitlement_service is None:
        _entitlement_service = UsageEntitlementService(
            party_repository=get_party_repository(),
            dispute_repository=get_dispute_repository(),
            time_authority=get_time_authority(),
        )
    return _entitlement_service


def get_party_profile_service() -> PartyProfileService:
    """Get the party profile service."""
    global _party_profile_service
    if _party_profile_service is None:
        _party_profile_service = PartyProfileService(
            party_repository=get_party_repository(),
            time_authority=get_time_authority(),
        )
    return _party_profile_service


def get_dispute_service() -> DisputeService:
    """Get the dispute service."""
    global _dispute_service
    if _dispute_service is None:
        _dispute_service = DisputeService(
            dispute_repository=get_dispute_repository(),
            party_repository=get_party_repository(),
            entitlements=get_entitlement_service(),
            time_authority=get_time_authority(),
            publisher=_media_publisher(),
        )
    return _dispute_service


def get_turn_intake_service() -> TurnIntakeService:
    """Get the turn intake service."""
    global _turn_intake_service
    if _turn_intake_service is None:
        _turn_intake_service = TurnIntakeService(
            dispute_repository=get_dispute_repository(),
            entitlements=get_entitlement_service(),
            time_authority=get_time_authority(),
            transcriber=get_speech_transcriber(),
            publisher=_media_publisher(),
        )
    return _turn_intake_service


def get_dispute_lifecycle_service() -> DisputeLifecycleService:
    """Get the adjudication lifecycle controller."""
    global _lifecycle_service
    if _lifecycle_service is None:
        config = get_app_config()
        synthesizer = get_speech_synthesizer()
        research = get_web_research()
        _lifecycle_service = DisputeLifecycleService(
            dispute_repository=get_dispute_repository(),
            generator=VerdictGeneratorService(
                get_text_generator(),
                max_output_tokens=config.generation.max_output_tokens,
                temperature=config.generation.temperature,
            ),
            entitlements=get_entitlement_service(),
            time_authority=get_time_authority(),
            narration=(
                NarrationService(
                    synthesizer,
                    bytes_per_second=config.narration.bytes_per_second,
                )
                if synthesizer is not None
                else None
            ),
            publisher=_media_publisher(),
            fact_checker=(
                FactCheckService(
                    research,
                    max_claims=config.research.max_claims,
                    results_per_claim=config.research.results_per_claim,
                )
                if research is not None
                else None
            ),
        )
    return _lifecycle_service


def reset_services() -> None:
    """Forget every service singleton (for tests)."""
    global _entitlement_service, _party_profile_service, _dispute_service
    global _turn_intake_service, _lifecycle_service
    _entitlement_service = None
    _party_profile_service = None
    _dispute_service = None
    _turn_intake_service = None
    _lifecycle_service = None

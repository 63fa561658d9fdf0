"""Dispute lifecycle controller: the adjudication pipeline.

Sequences research, verdict generation, narration and persistence for one
dispute and owns every status change made along the way.

Pipeline:
    1. Load the dispute (owner only) and its turns; zero turns is rejected
       before any transition.
    2. Claim the dispute: OPEN/COMPLETED -> PROCESSING by compare-and-set.
       Losing the race means another adjudication is in flight.
    3. Fact-check claims (research tiers only, best effort).
    4. Generate and parse the verdict. Fatal on failure.
    5. Narrate and publish the verdict (best effort; failure only leaves the
       audio fields empty).
    6. Store the verdict and move PROCESSING -> COMPLETED in one write,
       stamping the completion time.

Rollback:
    Any failure after step 2 restores the status the dispute had before the
    attempt (OPEN, or COMPLETED with its previous verdict for a
    re-adjudication) before the error reaches the caller. No partial verdict
    is ever stored.

Known Limitation:
    A process crash between steps 2 and 6 leaves the dispute PROCESSING
    with no automatic recovery.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from arbiter.application.services.base import LoggingMixin
from arbiter.application.services.media_publisher import MediaKind
from arbiter.application.services.verdict_generator_service import (
    GenerationRequest,
    TranscriptLine,
)
from arbiter.domain.errors.not_found import DisputeNotFoundError, VerdictNotFoundError
from arbiter.domain.errors.pipeline import (
    GenerationFailureError,
    MediaPublishFailureError,
    NarrationFailureError,
)
from arbiter.domain.errors.state import AdjudicationInProgressError
from arbiter.domain.errors.validation import DisputeValidationError
from arbiter.domain.models.dispute import Dispute, DisputeStatus
from arbiter.domain.models.verdict import Verdict, Winner

if TYPE_CHECKING:
    from arbiter.application.ports.dispute_repository import DisputeRepositoryProtocol
    from arbiter.application.ports.time_authority import TimeAuthorityProtocol
    from arbiter.application.services.fact_check_service import (
        FactCheckService,
        ResearchFindings,
    )
    from arbiter.application.services.media_publisher import MediaPublisher
    from arbiter.application.services.narration_service import NarrationService
    from arbiter.application.services.usage_entitlement_service import (
        UsageEntitlementService,
    )
    from arbiter.application.services.verdict_generator_service import (
        GeneratedVerdict,
        VerdictGeneratorService,
    )
    from arbiter.domain.models.turn import Turn


@dataclass(frozen=True)
class AdjudicationOutcome:
    """Result returned to the caller of an adjudication.

    Attributes:
        verdict_id: Id of the stored verdict.
        dispute_id: The adjudicated dispute.
        winner: Winning role, or TIE.
        winner_name: Display name of the winner, or "Tie".
        rationale: Reply with the verdict line stripped.
        full_text: Full model reply.
        audio_url: Signed playback URL of the narration, if any.
        audio_duration_seconds: Estimated narration length, if any.
        research_performed: Whether fact-checking ran.
        sources: Research source URLs.
        completed_at: Completion stamp of the dispute.
    """

    verdict_id: UUID
    dispute_id: UUID
    winner: Winner
    winner_name: str
    rationale: str
    full_text: str
    audio_url: str | None
    audio_duration_seconds: int | None
    research_performed: bool
    sources: tuple[str, ...] = field(default_factory=tuple)
    completed_at: datetime | None = None

    @classmethod
    def from_verdict(cls, verdict: Verdict, dispute: Dispute) -> AdjudicationOutcome:
        """Build an outcome from a stored verdict and its dispute."""
        return cls(
            verdict_id=verdict.id,
            dispute_id=dispute.id,
            winner=verdict.winner,
            winner_name=verdict.winner_name,
            rationale=verdict.rationale,
            full_text=verdict.raw_text,
            audio_url=verdict.audio_url,
            audio_duration_seconds=verdict.audio_duration_seconds,
            research_performed=verdict.research_performed,
            sources=verdict.sources,
            completed_at=dispute.completed_at,
        )


@dataclass(frozen=True)
class _Narration:
    key: str
    url: str
    duration_seconds: int


class DisputeLifecycleService(LoggingMixin):
    """Runs adjudications and keeps dispute status consistent."""

    def __init__(
        self,
        dispute_repository: DisputeRepositoryProtocol,
        generator: VerdictGeneratorService,
        entitlements: UsageEntitlementService,
        time_authority: TimeAuthorityProtocol,
        narration: NarrationService | None = None,
        publisher: MediaPublisher | None = None,
        fact_checker: FactCheckService | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            dispute_repository: Dispute, turn and verdict storage.
            generator: Verdict generator.
            entitlements: Usage gate (research eligibility).
            time_authority: Clock for verdict and completion stamps.
            narration: Speech synthesis; verdicts are not narrated without it.
            publisher: Media publisher; verdicts are not narrated without it.
            fact_checker: Research service; no research runs without it.
        """
        self._disputes = dispute_repository
        self._generator = generator
        self._entitlements = entitlements
        self._time = time_authority
        self._narration = narration
        self._publisher = publisher
        self._fact_checker = fact_checker
        self._init_logger(component="adjudication")

    async def _owned(self, party_id: str, dispute_id: UUID) -> Dispute:
        dispute = await self._disputes.get(dispute_id)
        if dispute is None or dispute.owner_id != party_id:
            raise DisputeNotFoundError(dispute_id)
        return dispute

    async def adjudicate(self, party_id: str, dispute_id: UUID) -> AdjudicationOutcome:
        """Adjudicate a dispute and store the verdict.

        Args:
            party_id: The requesting party (must own the dispute).
            dispute_id: The dispute to adjudicate.

        Returns:
            The stored verdict as an AdjudicationOutcome.

        Raises:
            DisputeNotFoundError: If absent or owned by another party.
            DisputeValidationError: If the dispute has no turns.
            AdjudicationInProgressError: If another attempt is in flight.
            GenerationFailureError: If the attempt failed; the dispute has
                been restored to its prior status.
        """
        log = self._log_operation(
            "adjudicate",
            party_id=party_id,
            dispute_id=str(dispute_id),
        )

        # Step 1: Load and validate
        dispute = await self._owned(party_id, dispute_id)
        turns = await self._disputes.list_turns(dispute_id)
        if not turns:
            raise DisputeValidationError("No turns to judge", field="turns")

        # Step 2: Claim the dispute
        prior_status = dispute.status
        if prior_status is DisputeStatus.PROCESSING:
            raise AdjudicationInProgressError(dispute_id)
        # Raises InvalidDisputeTransitionError for a disallowed move
        dispute.with_status(DisputeStatus.PROCESSING)
        claimed = await self._disputes.compare_and_set_status(
            dispute_id, prior_status, DisputeStatus.PROCESSING
        )
        if not claimed:
            log.warning("adjudication_claim_lost", expected_status=prior_status.value)
            raise AdjudicationInProgressError(dispute_id)
        log.info(
            "dispute_processing",
            from_status=prior_status.value,
            persona=dispute.persona.value,
            turns=len(turns),
        )

        try:
            verdict, completed = await self._run_pipeline(party_id, dispute, turns)
        except asyncio.CancelledError:
            await self._rollback(dispute_id, prior_status, reason="cancelled")
            raise
        except GenerationFailureError as exc:
            await self._rollback(dispute_id, prior_status, reason=str(exc))
            raise
        except Exception as exc:
            await self._rollback(dispute_id, prior_status, reason=str(exc))
            raise GenerationFailureError(f"Adjudication failed: {exc}") from exc

        log.info(
            "dispute_completed",
            verdict_id=str(verdict.id),
            winner=verdict.winner.value,
            has_audio=verdict.has_audio,
            research_performed=verdict.research_performed,
        )
        return AdjudicationOutcome.from_verdict(verdict, completed)

    async def _run_pipeline(
        self,
        party_id: str,
        dispute: Dispute,
        turns: list[Turn],
    ) -> tuple[Verdict, Dispute]:
        # Step 3: Research (best effort)
        research = await self._research(party_id, dispute, turns)

        # Step 4: Verdict
        generated = await self._generator.generate_verdict(
            GenerationRequest(
                party_a_name=dispute.party_a_name,
                party_b_name=dispute.party_b_name,
                persona=dispute.persona,
                turns=tuple(
                    TranscriptLine(
                        speaker=turn.speaker,
                        speaker_name=dispute.name_for(turn.speaker),
                        text=turn.text,
                    )
                    for turn in turns
                ),
                research=research,
            )
        )

        # Step 5: Narration (best effort)
        narration = await self._narrate(dispute, generated)

        # Step 6: Persist and complete
        now = self._time.utcnow()
        verdict = Verdict(
            id=uuid4(),
            dispute_id=dispute.id,
            winner=generated.winner,
            winner_name=generated.winner_name,
            rationale=generated.rationale,
            raw_text=generated.raw_text,
            research_performed=generated.research_performed,
            sources=generated.sources,
            research_summary=generated.research_summary,
            audio_key=narration.key if narration else None,
            audio_url=narration.url if narration else None,
            audio_duration_seconds=narration.duration_seconds if narration else None,
            created_at=now,
        )
        completed = await self._disputes.complete_adjudication(dispute.id, verdict, now)
        return verdict, completed

    async def _research(
        self,
        party_id: str,
        dispute: Dispute,
        turns: list[Turn],
    ) -> ResearchFindings | None:
        if self._fact_checker is None:
            return None
        if not await self._entitlements.is_research_enabled(party_id):
            return None
        try:
            return await self._fact_checker.research_transcript(turns)
        except Exception as exc:
            self._log_operation("research", dispute_id=dispute.id).warning(
                "research_failed", error=str(exc), error_type=type(exc).__name__
            )
            return None

    async def _narrate(
        self,
        dispute: Dispute,
        generated: GeneratedVerdict,
    ) -> _Narration | None:
        if self._narration is None or self._publisher is None:
            return None

        log = self._log_operation(
            "narrate",
            dispute_id=str(dispute.id),
            persona=dispute.persona.value,
        )
        try:
            speech = await self._narration.synthesize_speech(
                generated.raw_text or generated.rationale, dispute.persona
            )
            published = await self._publisher.publish(
                speech.audio,
                owner_id=dispute.owner_id,
                dispute_id=dispute.id,
                kind=MediaKind.JUDGMENT,
            )
        except (NarrationFailureError, MediaPublishFailureError) as exc:
            log.warning(
                "verdict_narration_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        return _Narration(
            key=published.key,
            url=published.url,
            duration_seconds=speech.estimated_duration_seconds,
        )

    async def _rollback(
        self,
        dispute_id: UUID,
        prior_status: DisputeStatus,
        reason: str,
    ) -> None:
        log = self._log_operation(
            "rollback",
            dispute_id=str(dispute_id),
            restore_status=prior_status.value,
        )
        try:
            restored = await self._disputes.compare_and_set_status(
                dispute_id, DisputeStatus.PROCESSING, prior_status
            )
        except Exception as exc:
            log.error("dispute_rollback_failed", reason=reason, error=str(exc))
            return
        if restored:
            log.warning("dispute_rolled_back", reason=reason)
        else:
            log.error("dispute_rollback_failed", reason=reason, error="status changed")

    async def refresh_verdict_audio_url(self, party_id: str, dispute_id: UUID) -> str:
        """Sign a fresh playback URL for a dispute's narrated verdict.

        Raises:
            DisputeNotFoundError: If absent or owned by another party.
            VerdictNotFoundError: If there is no narrated verdict.
            MediaPublishFailureError: If signing fails or no store is configured.
        """
        await self._owned(party_id, dispute_id)
        verdict = await self._disputes.get_verdict(dispute_id)
        if verdict is None or not verdict.audio_key:
            raise VerdictNotFoundError(dispute_id, f"No narrated verdict for dispute: {dispute_id}")
        if self._publisher is None:
            raise MediaPublishFailureError("No object store is configured", key=verdict.audio_key)
        return await self._publisher.playback_url(verdict.audio_key)

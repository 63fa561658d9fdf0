"""PostgreSQL dispute, turn and verdict repository.

SQL Patterns:
    -- Status compare-and-set
    UPDATE disputes SET status = :new WHERE id = :id AND status = :expected

    -- Turn order (same transaction as the INSERT into turns)
    UPDATE disputes SET turn_sequence = turn_sequence + 1
    WHERE id = :id AND status = 'open' RETURNING turn_sequence

    -- Completion (same transaction as the verdict upsert)
    UPDATE disputes SET status = 'completed', completed_at = :completed_at
    WHERE id = :id AND status = 'processing'
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from arbiter.application.ports.dispute_repository import (
    DisputeRepositoryProtocol,
    TurnDraft,
)
from arbiter.domain.errors.not_found import DisputeNotFoundError
from arbiter.domain.errors.state import (
    DisputeNotOpenError,
    InvalidDisputeTransitionError,
)
from arbiter.domain.models.dispute import Dispute, DisputeMode, DisputeStatus, Persona
from arbiter.domain.models.turn import Speaker, Turn
from arbiter.domain.models.verdict import Verdict, Winner

logger = get_logger(__name__)

_DISPUTE_COLUMNS = """
    id, owner_id, mode, party_a_name, party_b_name, persona, status,
    created_at, completed_at, turn_sequence
"""
_TURN_COLUMNS = """
    id, dispute_id, speaker, text, turn_order, audio_key, audio_url,
    duration_seconds, created_at
"""
_VERDICT_COLUMNS = """
    id, dispute_id, winner, winner_name, rationale, raw_text,
    research_performed, sources, research_summary, audio_key, audio_url,
    audio_duration_seconds, created_at
"""


def row_to_dispute(row: Mapping[str, Any]) -> Dispute:
    """Map a ``disputes`` row to a Dispute."""
    return Dispute(
        id=row["id"],
        owner_id=row["owner_id"],
        mode=DisputeMode(row["mode"]),
        party_a_name=row["party_a_name"],
        party_b_name=row["party_b_name"],
        persona=Persona(row["persona"]),
        status=DisputeStatus(row["status"]),
        created_at=row["created_at"],
        completed_at=row["completed_at"],
        turn_sequence=row["turn_sequence"],
    )


def row_to_turn(row: Mapping[str, Any]) -> Turn:
    """Map a ``turns`` row to a Turn."""
    return Turn(
        id=row["id"],
        dispute_id=row["dispute_id"],
        speaker=Speaker(row["speaker"]),
        text=row["text"],
        order=row["turn_order"],
        audio_key=row["audio_key"],
        audio_url=row["audio_url"],
        duration_seconds=row["duration_seconds"],
        created_at=row["created_at"],
    )


def row_to_verdict(row: Mapping[str, Any]) -> Verdict:
    """Map a ``verdicts`` row to a Verdict.

    JSONB arrives as text from asyncpg unless a codec is registered.
    """
    sources = row["sources"]
    if isinstance(sources, str):
        sources = json.loads(sources)
    return Verdict(
        id=row["id"],
        dispute_id=row["dispute_id"],
        winner=Winner(row["winner"]),
        winner_name=row["winner_name"],
        rationale=row["rationale"],
        raw_text=row["raw_text"],
        research_performed=row["research_performed"],
        sources=tuple(sources or ()),
        research_summary=row["research_summary"],
        audio_key=row["audio_key"],
        audio_url=row["audio_url"],
        audio_duration_seconds=row["audio_duration_seconds"],
        created_at=row["created_at"],
    )


class PostgresDisputeRepository(DisputeRepositoryProtocol):
    """Disputes, turns and verdicts stored in PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            session_factory: SQLAlchemy async session factory.
        """
        self._session_factory = session_factory

    async def create(self, dispute: Dispute) -> None:
        """Store a new dispute."""
        async with self._session_factory() as session, session.begin():
            await session.execute(
                text("""
                    INSERT INTO disputes (
                        id, owner_id, mode, party_a_name, party_b_name, persona,
                        status, created_at, completed_at, turn_sequence
                    ) VALUES (
                        :id, :owner_id, :mode, :party_a_name, :party_b_name, :persona,
                        :status, :created_at, :completed_at, :turn_sequence
                    )
                """),
                {
                    "id": dispute.id,
                    "owner_id": dispute.owner_id,
                    "mode": dispute.mode.value,
                    "party_a_name": dispute.party_a_name,
                    "party_b_name": dispute.party_b_name,
                    "persona": dispute.persona.value,
                    "status": dispute.status.value,
                    "created_at": dispute.created_at,
                    "completed_at": dispute.completed_at,
                    "turn_sequence": dispute.turn_sequence,
                },
            )

    async def get(self, dispute_id: UUID) -> Dispute | None:
        """Retrieve a dispute by id."""
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"SELECT {_DISPUTE_COLUMNS} FROM disputes WHERE id = :id"),
                {"id": dispute_id},
            )
            row = result.mappings().first()
        return row_to_dispute(row) if row else None

    async def list_for_owner(self, owner_id: str, limit: int = 100) -> list[Dispute]:
        """List a party's disputes, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_DISPUTE_COLUMNS}
                    FROM disputes
                    WHERE owner_id = :owner_id
                    ORDER BY created_at DESC
                    LIMIT :limit
                """),
                {"owner_id": owner_id, "limit": limit},
            )
            rows = result.mappings().all()
        return [row_to_dispute(row) for row in rows]

    async def delete(self, dispute_id: UUID) -> bool:
        """Delete a dispute; turns and verdict cascade."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("DELETE FROM disputes WHERE id = :id RETURNING id"),
                {"id": dispute_id},
            )
            deleted = result.scalar_one_or_none()
        return deleted is not None

    async def compare_and_set_status(
        self,
        dispute_id: UUID,
        expected: DisputeStatus,
        new_status: DisputeStatus,
        completed_at: datetime | None = None,
    ) -> bool:
        """Atomically move a dispute from ``expected`` to ``new_status``."""
        if new_status not in expected.valid_transitions():
            raise InvalidDisputeTransitionError(
                dispute_id=dispute_id,
                from_status=expected,
                to_status=new_status,
            )
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE disputes
                    SET status = :new_status,
                        completed_at = COALESCE(CAST(:completed_at AS TIMESTAMPTZ), completed_at)
                    WHERE id = :id AND status = :expected
                """),
                {
                    "id": dispute_id,
                    "expected": expected.value,
                    "new_status": new_status.value,
                    "completed_at": completed_at,
                },
            )
            updated = result.rowcount == 1
        logger.debug(
            "dispute_status_cas",
            dispute_id=str(dispute_id),
            expected=expected.value,
            new_status=new_status.value,
            updated=updated,
        )
        return updated

    async def _status_of(self, session: AsyncSession, dispute_id: UUID) -> DisputeStatus:
        result = await session.execute(
            text("SELECT status FROM disputes WHERE id = :id"),
            {"id": dispute_id},
        )
        status = result.scalar_one_or_none()
        if status is None:
            raise DisputeNotFoundError(dispute_id)
        return DisputeStatus(status)

    async def append_turn(self, dispute_id: UUID, draft: TurnDraft) -> Turn:
        """Append a turn with an order taken from the dispute's sequence."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE disputes
                    SET turn_sequence = turn_sequence + 1
                    WHERE id = :id AND status = 'open'
                    RETURNING turn_sequence
                """),
                {"id": dispute_id},
            )
            order = result.scalar_one_or_none()
            if order is None:
                status = await self._status_of(session, dispute_id)
                raise DisputeNotOpenError(dispute_id, status)

            result = await session.execute(
                text(f"""
                    INSERT INTO turns (
                        id, dispute_id, speaker, text, turn_order, audio_key,
                        audio_url, duration_seconds, created_at
                    ) VALUES (
                        :id, :dispute_id, :speaker, :text, :turn_order, :audio_key,
                        :audio_url, :duration_seconds, :created_at
                    )
                    RETURNING {_TURN_COLUMNS}
                """),
                {
                    "id": uuid4(),
                    "dispute_id": dispute_id,
                    "speaker": draft.speaker.value,
                    "text": draft.text,
                    "turn_order": order,
                    "audio_key": draft.audio_key,
                    "audio_url": draft.audio_url,
                    "duration_seconds": draft.duration_seconds,
                    "created_at": draft.created_at,
                },
            )
            row = result.mappings().one()
        return row_to_turn(row)

    async def list_turns(self, dispute_id: UUID) -> list[Turn]:
        """Return the turns of a dispute in order."""
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_TURN_COLUMNS}
                    FROM turns
                    WHERE dispute_id = :dispute_id
                    ORDER BY turn_order
                """),
                {"dispute_id": dispute_id},
            )
            rows = result.mappings().all()
        return [row_to_turn(row) for row in rows]

    async def count_turns(self, dispute_id: UUID) -> int:
        """Return the number of turns of a dispute."""
        async with self._session_factory() as session:
            result = await session.execute(
                text("SELECT COUNT(*) FROM turns WHERE dispute_id = :dispute_id"),
                {"dispute_id": dispute_id},
            )
            return result.scalar() or 0

    async def get_verdict(self, dispute_id: UUID) -> Verdict | None:
        """Return the current verdict of a dispute."""
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"SELECT {_VERDICT_COLUMNS} FROM verdicts WHERE dispute_id = :dispute_id"),
                {"dispute_id": dispute_id},
            )
            row = result.mappings().first()
        return row_to_verdict(row) if row else None

    async def complete_adjudication(
        self,
        dispute_id: UUID,
        verdict: Verdict,
        completed_at: datetime,
    ) -> Dispute:
        """Upsert the verdict and mark the dispute completed in one transaction."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    UPDATE disputes
                    SET status = 'completed', completed_at = :completed_at
                    WHERE id = :id AND status = 'processing'
                    RETURNING {_DISPUTE_COLUMNS}
                """),
                {"id": dispute_id, "completed_at": completed_at},
            )
            row = result.mappings().first()
            if row is None:
                status = await self._status_of(session, dispute_id)
                raise InvalidDisputeTransitionError(
                    dispute_id=dispute_id,
                    from_status=status,
                    to_status=DisputeStatus.COMPLETED,
                )

            await session.execute(
                text("""
                    INSERT INTO verdicts (
                        id, dispute_id, winner, winner_name, rationale, raw_text,
                        research_performed, sources, research_summary, audio_key,
                        audio_url, audio_duration_seconds, created_at
                    ) VALUES (
                        :id, :dispute_id, :winner, :winner_name, :rationale, :raw_text,
                        :research_performed, CAST(:sources AS JSONB), :research_summary,
                        :audio_key, :audio_url, :audio_duration_seconds, :created_at
                    )
                    ON CONFLICT (dispute_id) DO UPDATE SET
                        id = EXCLUDED.id,
                        winner = EXCLUDED.winner,
                        winner_name = EXCLUDED.winner_name,
                        rationale = EXCLUDED.rationale,
                        raw_text = EXCLUDED.raw_text,
                        research_performed = EXCLUDED.research_performed,
                        sources = EXCLUDED.sources,
                        research_summary = EXCLUDED.research_summary,
                        audio_key = EXCLUDED.audio_key,
                        audio_url = EXCLUDED.audio_url,
                        audio_duration_seconds = EXCLUDED.audio_duration_seconds,
                        created_at = EXCLUDED.created_at
                """),
                {
                    "id": verdict.id,
                    "dispute_id": dispute_id,
                    "winner": verdict.winner.value,
                    "winner_name": verdict.winner_name,
                    "rationale": verdict.rationale,
                    "raw_text": verdict.raw_text,
                    "research_performed": verdict.research_performed,
                    "sources": json.dumps(list(verdict.sources)),
                    "research_summary": verdict.research_summary,
                    "audio_key": verdict.audio_key,
                    "audio_url": verdict.audio_url,
                    "audio_duration_seconds": verdict.audio_duration_seconds,
                    "created_at": verdict.created_at,
                },
            )
        logger.info(
            "verdict_stored",
            dispute_id=str(dispute_id),
            verdict_id=str(verdict.id),
            winner=verdict.winner.value,
        )
        return row_to_dispute(row)

"""PostgreSQL party repository.

The daily counter increment is a single UPDATE with a CASE on the stored
date, so concurrent increments never lose a count and a stale counter is
reset by the same statement that increments it.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from arbiter.application.ports.party_repository import PartyRepositoryProtocol
from arbiter.domain.errors.not_found import PartyNotFoundError
from arbiter.domain.models.dispute import Persona
from arbiter.domain.models.party import Party, SubscriptionTier, UsageCounter

logger = get_logger(__name__)

_COLUMNS = """
    id, email, display_name, tier, subscription_expires_at,
    disputes_today, last_dispute_date, preferred_persona, created_at, updated_at
"""


def row_to_party(row: Mapping[str, Any]) -> Party:
    """Map a ``parties`` row to a Party."""
    return Party(
        id=row["id"],
        email=row["email"],
        display_name=row["display_name"],
        tier=SubscriptionTier(row["tier"]),
        subscription_expires_at=row["subscription_expires_at"],
        usage=UsageCounter(
            disputes_today=row["disputes_today"],
            last_dispute_date=row["last_dispute_date"],
        ),
        preferred_persona=Persona(row["preferred_persona"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class PostgresPartyRepository(PartyRepositoryProtocol):
    """Party profiles stored in the ``parties`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            session_factory: SQLAlchemy async session factory.
        """
        self._session_factory = session_factory

    async def get(self, party_id: str) -> Party | None:
        """Retrieve a party profile."""
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"SELECT {_COLUMNS} FROM parties WHERE id = :id"),
                {"id": party_id},
            )
            row = result.mappings().first()
        return row_to_party(row) if row else None

    async def upsert(self, party: Party) -> Party:
        """Insert a profile or refresh its identity fields."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    INSERT INTO parties (
                        id, email, display_name, tier, preferred_persona,
                        created_at, updated_at
                    ) VALUES (
                        :id, :email, :display_name, :tier, :preferred_persona,
                        :created_at, :updated_at
                    )
                    ON CONFLICT (id) DO UPDATE SET
                        email = EXCLUDED.email,
                        display_name = COALESCE(EXCLUDED.display_name, parties.display_name),
                        updated_at = EXCLUDED.updated_at
                    RETURNING {_COLUMNS}
                """),
                {
                    "id": party.id,
                    "email": party.email,
                    "display_name": party.display_name,
                    "tier": party.tier.value,
                    "preferred_persona": party.preferred_persona.value,
                    "created_at": party.created_at,
                    "updated_at": party.updated_at,
                },
            )
            row = result.mappings().one()
        return row_to_party(row)

    async def update_tier(
        self,
        party_id: str,
        tier: SubscriptionTier,
        updated_at: datetime,
    ) -> None:
        """Persist a new subscription tier."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE parties
                    SET tier = :tier, updated_at = :updated_at
                    WHERE id = :id
                """),
                {"id": party_id, "tier": tier.value, "updated_at": updated_at},
            )
            if result.rowcount == 0:
                raise PartyNotFoundError(party_id)

    async def set_preferred_persona(
        self,
        party_id: str,
        persona: Persona,
        updated_at: datetime,
    ) -> Party | None:
        """Change the default persona of a party."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    UPDATE parties
                    SET preferred_persona = :persona, updated_at = :updated_at
                    WHERE id = :id
                    RETURNING {_COLUMNS}
                """),
                {"id": party_id, "persona": persona.value, "updated_at": updated_at},
            )
            row = result.mappings().first()
        return row_to_party(row) if row else None

    async def increment_daily_dispute_count(self, party_id: str, today: date) -> int:
        """Atomically increment the daily counter and return the new count."""
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE parties
                    SET disputes_today = CASE
                            WHEN last_dispute_date = :today THEN disputes_today + 1
                            ELSE 1
                        END,
                        last_dispute_date = :today
                    WHERE id = :id
                    RETURNING disputes_today
                """),
                {"id": party_id, "today": today},
            )
            count = result.scalar_one_or_none()
        if count is None:
            raise PartyNotFoundError(party_id)
        logger.debug("daily_counter_incremented", party_id=party_id, disputes_today=count)
        return count

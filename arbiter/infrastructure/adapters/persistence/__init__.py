"""PostgreSQL repositories (SQLAlchemy async, raw SQL)."""

from arbiter.infrastructure.adapters.persistence.dispute_repository import (
    PostgresDisputeRepository,
)
from arbiter.infrastructure.adapters.persistence.party_repository import (
    PostgresPartyRepository,
)

__all__: list[str] = ["PostgresDisputeRepository", "PostgresPartyRepository"]

"""
Pytest configuration and shared fixtures for arbiter tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Time-dependent tests use FakeTimeAuthority
"""

import pytest

from arbiter.application.services.media_publisher import MediaPublisher
from arbiter.application.services.usage_entitlement_service import (
    UsageEntitlementService,
)
from arbiter.domain.models.dispute import Dispute
from arbiter.domain.models.party import Party
from arbiter.infrastructure.stubs import (
    DisputeRepositoryStub,
    ObjectStoreStub,
    PartyRepositoryStub,
)
from tests.helpers import FakeTimeAuthority
from tests.helpers.factories import make_dispute, make_party


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Clock frozen at 2026-03-10T10:00:00Z."""
    return FakeTimeAuthority()


@pytest.fixture
def party_repository() -> PartyRepositoryStub:
    """Fresh party repository stub."""
    return PartyRepositoryStub()


@pytest.fixture
def dispute_repository() -> DisputeRepositoryStub:
    """Fresh dispute repository stub."""
    return DisputeRepositoryStub()


@pytest.fixture
def object_store() -> ObjectStoreStub:
    """Fresh object store stub."""
    return ObjectStoreStub()


@pytest.fixture
def publisher(object_store: ObjectStoreStub) -> MediaPublisher:
    """Media publisher over the object store stub."""
    return MediaPublisher(object_store)


@pytest.fixture
def entitlements(
    party_repository: PartyRepositoryStub,
    dispute_repository: DisputeRepositoryStub,
    fake_time_authority: FakeTimeAuthority,
) -> UsageEntitlementService:
    """Entitlement gate over the stubs."""
    return UsageEntitlementService(
        party_repository=party_repository,
        dispute_repository=dispute_repository,
        time_authority=fake_time_authority,
    )


@pytest.fixture
def free_party(party_repository: PartyRepositoryStub) -> Party:
    """A free-tier party stored in the repository."""
    party = make_party()
    party_repository.add_party(party)
    return party


@pytest.fixture
def open_dispute(
    dispute_repository: DisputeRepositoryStub,
    free_party: Party,
) -> Dispute:
    """An open Alex vs Sam dispute owned by the free party."""
    dispute = make_dispute(owner_id=free_party.id)
    dispute_repository.add_dispute(dispute)
    return dispute

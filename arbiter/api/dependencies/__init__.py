"""FastAPI dependency providers."""

from arbiter.api.dependencies.ports import (
    get_app_config,
    get_identity_provider,
    reset_ports,
)
from arbiter.api.dependencies.services import (
    get_dispute_lifecycle_service,
    get_dispute_service,
    get_entitlement_service,
    get_party_profile_service,
    get_turn_intake_service,
    reset_services,
)


def reset_dependencies() -> None:
    """Forget all singletons (ports and services)."""
    reset_services()
    reset_ports()


__all__: list[str] = [
    "get_app_config",
    "get_dispute_lifecycle_service",
    "get_dispute_service",
    "get_entitlement_service",
    "get_identity_provider",
    "get_party_profile_service",
    "get_turn_intake_service",
    "reset_dependencies",
]

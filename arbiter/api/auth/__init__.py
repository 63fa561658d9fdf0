"""Request authentication."""

from arbiter.api.auth.bearer import get_current_identity

__all__: list[str] = ["get_current_identity"]

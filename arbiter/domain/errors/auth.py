"""Authentication errors.

HTTP Status: 401 Unauthorized
"""

from arbiter.domain.exceptions import ArbiterError


class AuthenticationError(ArbiterError):
    """Raised when a request carries no valid bearer token."""

"""Bearer token authentication.

Resolves ``Authorization: Bearer <token>`` to a verified Identity through
the configured identity provider. The resolved party id is trusted as-is.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Header, Request

from arbiter.api.dependencies.ports import get_identity_provider
from arbiter.api.errors import http_error_for
from arbiter.application.ports.identity_provider import (
    Identity,
    IdentityProviderProtocol,
)
from arbiter.domain.errors.auth import AuthenticationError

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "bearer "


async def get_current_identity(
    request: Request,
    authorization: Annotated[
        str | None,
        Header(description="Bearer token issued by the identity provider"),
    ] = None,
    provider: IdentityProviderProtocol = Depends(get_identity_provider),
) -> Identity:
    """Authenticate the caller.

    Raises:
        HTTPException 401: If the header is missing, malformed or unknown.
    """
    log = logger.bind(component="bearer_auth")

    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        log.warning("auth_failed", reason="missing_bearer_token")
        raise http_error_for(
            AuthenticationError("Authorization: Bearer <token> header is required"),
            request,
        ) from None

    token = authorization[len(BEARER_PREFIX):].strip()
    try:
        identity = await provider.verify(token)
    except AuthenticationError as e:
        log.warning("auth_failed", reason="invalid_token")
        raise http_error_for(e, request) from None

    return identity

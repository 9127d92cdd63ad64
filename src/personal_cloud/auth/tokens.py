"""
Bearer token verification.

Tokens are HS256 (by default) JWTs issued elsewhere; this module only
checks them against the configured secret, issuer and audience.
"""

from __future__ import annotations

import logging

import jwt
from jwt import InvalidTokenError

from ..settings.models import AuthSettings


logger = logging.getLogger(__name__)


class TokenError(RuntimeError):
    pass


def verify_token(token: str, settings: AuthSettings) -> str:
    """
    Decode and validate a bearer token.

    Args:
        token: The raw JWT (without the "Bearer " prefix).
        settings: Secret / issuer / audience to validate against.

    Returns:
        The caller identity (the "sub" claim, or "name" when absent).

    Raises:
        TokenError: If auth is not configured or the token is rejected.
    """
    if not settings.is_configured():
        raise TokenError("Server configuration error: secret key not configured")
    if not token or not token.strip():
        raise TokenError("Missing token")

    options = {
        "require": ["exp"],
        "verify_aud": settings.audience is not None,
        "verify_iss": settings.issuer is not None,
    }
    try:
        payload = jwt.decode(
            token.strip(),
            settings.secret_key,
            algorithms=[settings.algorithm],
            audience=settings.audience,
            issuer=settings.issuer,
            options=options,
        )
    except InvalidTokenError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise TokenError(f"Invalid token: {exc}") from exc

    subject = payload.get("sub") or payload.get("name")
    if not subject:
        raise TokenError("Invalid token: no subject")
    return str(subject)

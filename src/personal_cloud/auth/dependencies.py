from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..settings.models import AuthSettings
from .tokens import TokenError, verify_token


bearer_scheme = HTTPBearer(auto_error=False, description="Enter the token as: Bearer {token}")


def create_bearer_dependency(settings: AuthSettings) -> Callable[..., str]:
    """
    Build a FastAPI dependency that authorizes the caller or answers 401.

    The dependency returns the caller identity from the token.
    """

    def require_caller(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> str:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        try:
            return verify_token(credentials.credentials, settings)
        except TokenError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc

    return require_caller

"""
Caller authorization for the file API.

Token issuance lives outside this service; only verification is provided.
"""

from .dependencies import create_bearer_dependency
from .tokens import TokenError, verify_token

__all__ = [
    "TokenError",
    "create_bearer_dependency",
    "verify_token",
]

"""Authentication module."""
from auth.models import AuthenticatedIdentity
from auth.services import (
    AuthError,
    FirebaseTokenVerifier,
    identity_from_claims,
    get_token_verifier,
    get_current_identity
)

__all__ = [
    "AuthenticatedIdentity",
    "AuthError",
    "FirebaseTokenVerifier",
    "identity_from_claims",
    "get_token_verifier",
    "get_current_identity"
]

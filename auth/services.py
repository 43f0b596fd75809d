"""Authentication services - Firebase ID token verification and the auth dependency."""
import time
from typing import Dict, Any

import requests
from fastapi import HTTPException, Depends, Request
from jose import jwt, JWTError

from auth.models import AuthenticatedIdentity
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("auth.services")

BEARER_PREFIX = "Bearer "
TOKEN_ALGORITHM = "RS256"
ISSUER_PREFIX = "https://securetoken.google.com/"


class AuthError(Exception):
    """Raised when an ID token cannot be verified, whatever the cause."""


class FirebaseTokenVerifier:
    """
    Verifies Firebase ID tokens against Google's published signing certificates.

    Each call to ``verify`` fetches the certificate set once; there is no cache
    and no retry.
    """

    def __init__(self, project_id: str, certs_url: str):
        if not project_id:
            raise ValueError("project_id is required to verify ID tokens")
        self.project_id = project_id
        self.certs_url = certs_url
        self.issuer = f"{ISSUER_PREFIX}{project_id}"

    def fetch_public_certificates(self) -> Dict[str, str]:
        """Fetch the kid -> PEM certificate mapping."""
        try:
            response = requests.get(self.certs_url)
            response.raise_for_status()
            certs = response.json()
        except (requests.RequestException, ValueError) as e:
            raise AuthError(f"failed to fetch public certificates: {e}")

        if not isinstance(certs, dict) or not certs:
            raise AuthError("public certificate set is empty")
        return certs

    def verify(self, token: str) -> AuthenticatedIdentity:
        """Verify an ID token and return the identity it asserts."""
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise AuthError(f"malformed token: {e}")

        if header.get("alg") != TOKEN_ALGORITHM:
            raise AuthError(f"unexpected token algorithm: {header.get('alg')}")

        kid = header.get("kid")
        if not kid:
            raise AuthError("token header has no kid")

        certificate = self.fetch_public_certificates().get(kid)
        if not certificate:
            raise AuthError(f"no public certificate for kid {kid}")

        try:
            claims = jwt.decode(
                token,
                certificate,
                algorithms=[TOKEN_ALGORITHM],
                audience=self.project_id,
                issuer=self.issuer,
            )
        except JWTError as e:
            raise AuthError(f"token validation failed: {e}")

        return identity_from_claims(claims)


def identity_from_claims(claims: Dict[str, Any]) -> AuthenticatedIdentity:
    """Build the identity record from verified token claims."""
    subject_id = claims.get("sub")
    if not isinstance(subject_id, str) or not subject_id:
        raise AuthError("token has no subject")

    auth_time = claims.get("auth_time")
    if isinstance(auth_time, (int, float)) and auth_time > time.time():
        raise AuthError("token auth_time is in the future")

    email = claims.get("email")
    verified = claims.get("email_verified")
    return AuthenticatedIdentity(
        subject_id=subject_id,
        email=email if isinstance(email, str) else "",
        email_verified=verified if isinstance(verified, bool) else False,
    )


# ---------- Auth dependencies ----------
def get_token_verifier(request: Request) -> FirebaseTokenVerifier:
    """Return the verifier built at startup."""
    return request.app.state.token_verifier


def get_current_identity(
    request: Request,
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedIdentity:
    """Authenticate the request from its ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        logger.warning(f"Missing Authorization header on {request.url.path}")
        message, status_code = get_error_response(ErrorCode.AUTH_MISSING)
        raise HTTPException(status_code=status_code, detail=message)

    if not auth_header.startswith(BEARER_PREFIX):
        logger.warning(f"Malformed Authorization header on {request.url.path}")
        message, status_code = get_error_response(ErrorCode.AUTH_MALFORMED)
        raise HTTPException(status_code=status_code, detail=message)

    token = auth_header[len(BEARER_PREFIX):]
    try:
        identity = verifier.verify(token)
    except AuthError as e:
        logger.warning(f"Token verification failed: {e}")
        message, status_code = get_error_response(ErrorCode.AUTH_INVALID)
        raise HTTPException(status_code=status_code, detail=message)

    logger.info(f"Authenticated request from user: {identity.subject_id} (email: {identity.email})")
    return identity

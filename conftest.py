"""Shared pytest fixtures for the mockup API tests."""
import time
from datetime import datetime, timedelta, timezone
from typing import List

import pytest
import requests
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from fastapi.testclient import TestClient
from jose import jwt

from app import app
from auth.models import AuthenticatedIdentity
from auth.services import AuthError, get_token_verifier
from image.services import ImageGenerator, MockImageGenerator, get_image_generator

PROJECT_ID = "crochet-test"
KEY_ID = "test-kid"
VALID_TOKEN = "valid-token"


class FakeTokenVerifier:
    """Accepts only VALID_TOKEN and counts calls."""

    def __init__(self):
        self.calls = 0

    def verify(self, token: str) -> AuthenticatedIdentity:
        self.calls += 1
        if token != VALID_TOKEN:
            raise AuthError("token rejected")
        return AuthenticatedIdentity(subject_id="user-123", email="maker@example.com", email_verified=True)


class RecordingGenerator(ImageGenerator):
    """Wraps the mock generator and records every prompt it receives."""

    name = "recording"

    def __init__(self):
        self.prompts: List[str] = []
        self.delegate = MockImageGenerator()

    def generate_images(self, prompt: str) -> List[str]:
        self.prompts.append(prompt)
        return self.delegate.generate_images(prompt)


@pytest.fixture
def fake_verifier() -> FakeTokenVerifier:
    return FakeTokenVerifier()


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def test_client(fake_verifier, recording_generator):
    """TestClient with the verifier and generator replaced by fakes."""
    app.dependency_overrides[get_token_verifier] = lambda: fake_verifier
    app.dependency_overrides[get_image_generator] = lambda: recording_generator
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {VALID_TOKEN}"}


# ---------------------------------------------------------------------------
# Signed ID tokens.
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def signing_key():
    """RSA key pair plus a self-signed certificate in the published-cert format."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "securetoken.test")])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")
    cert_pem = cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
    return private_pem, cert_pem


@pytest.fixture
def make_token(signing_key):
    """Build a signed ID token; keyword arguments override the default claims."""
    private_pem, _ = signing_key

    def _make(kid: str = KEY_ID, **overrides) -> str:
        now = int(time.time())
        claims = {
            "iss": f"https://securetoken.google.com/{PROJECT_ID}",
            "aud": PROJECT_ID,
            "sub": "firebase-uid-1",
            "iat": now,
            "exp": now + 3600,
            "auth_time": now - 10,
            "email": "maker@example.com",
            "email_verified": True,
        }
        claims.update(overrides)
        claims = {k: v for k, v in claims.items() if v is not None}
        return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": kid})

    return _make


class FakeCertResponse:
    def __init__(self, payload, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


@pytest.fixture
def published_certs(monkeypatch, signing_key):
    """Serve the test certificate from the cert endpoint; returns the list of fetched URLs."""
    _, cert_pem = signing_key
    fetched = []

    def fake_get(url, *args, **kwargs):
        fetched.append(url)
        return FakeCertResponse({KEY_ID: cert_pem})

    monkeypatch.setattr("auth.services.requests.get", fake_get)
    return fetched

"""Authentication Pydantic models."""
from pydantic import BaseModel, ConfigDict


class AuthenticatedIdentity(BaseModel):
    """Caller identity extracted from a verified Firebase ID token."""
    model_config = ConfigDict(frozen=True)

    subject_id: str
    email: str = ""
    email_verified: bool = False

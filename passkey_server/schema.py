# (c) Copyright Datacraft, 2026
from pydantic import BaseModel, ConfigDict


class Credential(BaseModel):
    """Passkey registered for a user.

    ``credential_id`` and ``public_key`` are base64url encoded.
    """
    credential_id: str
    public_key: str
    counter: int = 0
    device_type: str | None = None
    backed_up: bool = False
    transports: list[str] = []

    model_config = ConfigDict(from_attributes=True)


class User(BaseModel):
    id: str
    email: str
    credential: Credential

    model_config = ConfigDict(from_attributes=True)


class PendingRegistration(BaseModel):
    """Registration ceremony waiting for the authenticator response."""
    user_id: str
    email: str
    challenge: str


class PendingAuthentication(BaseModel):
    """Authentication ceremony waiting for the authenticator response."""
    user_id: str
    challenge: str

# (c) Copyright Datacraft, 2026
import logging

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Relying party
    rp_id: str = Field(default="localhost", description="Relying Party ID (domain)")
    rp_name: str = Field(default="Passkey Server", description="Relying Party display name")
    client_url: str = Field(
        default="http://localhost:5173",
        description="Expected origin of the client performing ceremonies",
    )

    # Ceremonies
    session_ttl: int = Field(gt=0, default=60, description="Pending ceremony lifetime in seconds")
    webauthn_timeout: int = Field(gt=0, default=60000, description="WebAuthn timeout in ms")

    # Service
    host: str = "0.0.0.0"
    port: int = Field(gt=0, default=3000)
    db_url: str | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix='passkey_')


@lru_cache()
def get_settings():
    return Settings()

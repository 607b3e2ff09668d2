# (c) Copyright Datacraft, 2026
"""Application factory."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from passkey_server import __version__
from passkey_server.config import Settings, get_settings
from passkey_server.db import create_db_engine, get_session_factory, init_db
from passkey_server.exceptions import CeremonyError
from passkey_server.routers import ceremony_router
from passkey_server.schema import PendingAuthentication, PendingRegistration
from passkey_server.services import AuthenticationService, RegistrationService
from passkey_server.sessions import InMemorySessionStore, SessionStore, SqlSessionStore
from passkey_server.users import InMemoryUserStore, SqlUserStore, UserStore
from passkey_server.webauthn import CredentialVerifier, WebAuthnVerifier

logger = logging.getLogger(__name__)


async def ceremony_error_handler(request: Request, exc: CeremonyError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def build_stores(
    settings: Settings,
) -> tuple[UserStore, SessionStore[PendingRegistration], SessionStore[PendingAuthentication]]:
    """Pick SQL storage when ``db_url`` is configured, memory otherwise."""
    if not settings.db_url:
        return (
            InMemoryUserStore(),
            InMemorySessionStore(PendingRegistration, ttl=settings.session_ttl),
            InMemorySessionStore(PendingAuthentication, ttl=settings.session_ttl),
        )

    engine = create_db_engine(settings.db_url)
    init_db(engine)
    session_factory = get_session_factory(engine)
    return (
        SqlUserStore(session_factory),
        SqlSessionStore(
            session_factory, PendingRegistration, kind="registration", ttl=settings.session_ttl
        ),
        SqlSessionStore(
            session_factory, PendingAuthentication, kind="authentication", ttl=settings.session_ttl
        ),
    )


def create_app(
    settings: Settings | None = None,
    users: UserStore | None = None,
    verifier: CredentialVerifier | None = None,
    registration_sessions: SessionStore[PendingRegistration] | None = None,
    authentication_sessions: SessionStore[PendingAuthentication] | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    if users is None or registration_sessions is None or authentication_sessions is None:
        default_users, default_reg, default_auth = build_stores(settings)
        if users is None:
            users = default_users
        if registration_sessions is None:
            registration_sessions = default_reg
        if authentication_sessions is None:
            authentication_sessions = default_auth
    if verifier is None:
        verifier = WebAuthnVerifier(
            rp_id=settings.rp_id,
            rp_name=settings.rp_name,
            origin=settings.client_url,
            timeout=settings.webauthn_timeout,
        )

    app = FastAPI(title="Passkey Server", version=__version__)
    app.state.settings = settings
    app.state.registration = RegistrationService(users, registration_sessions, verifier)
    app.state.authentication = AuthenticationService(users, authentication_sessions, verifier)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CeremonyError, ceremony_error_handler)
    app.include_router(ceremony_router)

    logger.info(f"Passkey server configured for RP {settings.rp_id} at {settings.client_url}")
    return app

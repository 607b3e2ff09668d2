# (c) Copyright Datacraft, 2026
"""Registration and authentication ceremony endpoints."""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse

from passkey_server.services import (
	AuthenticationService,
	CeremonyResult,
	RegistrationService,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Passkeys"])


def get_registration_service(request: Request) -> RegistrationService:
	return request.app.state.registration


def get_authentication_service(request: Request) -> AuthenticationService:
	return request.app.state.authentication


def split_session_id(body: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
	"""Separate ``sessionId`` from the credential the browser produced."""
	response = dict(body)
	session_id = response.pop("sessionId", None)
	if not isinstance(session_id, str):
		session_id = None
	return session_id, response


def render_result(result: CeremonyResult) -> JSONResponse:
	if result.verified:
		return JSONResponse({"verified": True})
	return JSONResponse(
		{"verified": False, "error": result.error},
		status_code=status.HTTP_400_BAD_REQUEST,
	)


@router.get("/init-register")
async def init_register(
	email: str | None = None,
	service: RegistrationService = Depends(get_registration_service),
) -> dict[str, Any]:
	"""Start passkey registration for a new account."""
	challenge = await service.init_registration(email)
	return challenge.to_json()


@router.post("/verify-register")
async def verify_register(
	body: dict[str, Any] = Body(...),
	service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
	"""Complete passkey registration."""
	session_id, response = split_session_id(body)
	result = await service.complete_registration(session_id, response)
	return render_result(result)


@router.get("/init-auth")
async def init_auth(
	email: str | None = None,
	service: AuthenticationService = Depends(get_authentication_service),
) -> dict[str, Any]:
	"""Start passkey authentication."""
	challenge = await service.init_authentication(email)
	return challenge.to_json()


@router.post("/verify-auth")
async def verify_auth(
	body: dict[str, Any] = Body(...),
	service: AuthenticationService = Depends(get_authentication_service),
) -> JSONResponse:
	"""Complete passkey authentication."""
	session_id, response = split_session_id(body)
	result = await service.complete_authentication(session_id, response)
	return render_result(result)

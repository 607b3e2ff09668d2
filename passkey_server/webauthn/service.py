# (c) Copyright Datacraft, 2026
"""WebAuthn verifier backed by py_webauthn."""
import json
import logging
from dataclasses import dataclass
from typing import Any

from webauthn import (
	generate_authentication_options,
	generate_registration_options,
	options_to_json,
	verify_authentication_response,
	verify_registration_response,
)
from webauthn.helpers import (
	base64url_to_bytes,
	bytes_to_base64url,
)
from webauthn.helpers.structs import (
	AttestationConveyancePreference,
	AuthenticatorSelectionCriteria,
	AuthenticatorTransport,
	COSEAlgorithmIdentifier,
	PublicKeyCredentialDescriptor,
	PublicKeyCredentialType,
	ResidentKeyRequirement,
	UserVerificationRequirement,
)

from passkey_server.schema import Credential

from .verifier import (
	AuthenticationOutcome,
	CredentialVerifier,
	IssuedChallenge,
	RegistrationOutcome,
)

logger = logging.getLogger(__name__)


def _transports(names: list[str]) -> list[AuthenticatorTransport] | None:
	transports = []
	for name in names:
		try:
			transports.append(AuthenticatorTransport(name))
		except ValueError:
			logger.debug(f"Ignoring unknown transport {name!r}")
	return transports or None


@dataclass
class WebAuthnVerifier(CredentialVerifier):
	"""Verifier for WebAuthn/FIDO2 ceremonies."""

	rp_id: str = "localhost"
	rp_name: str = "Passkey Server"
	origin: str = "http://localhost:5173"
	timeout: int = 60000  # 60 seconds

	async def registration_options(
		self,
		user_id: str,
		user_name: str,
	) -> IssuedChallenge:
		"""Generate options for passkey registration.

		Args:
			user_id: Id the new user will be stored under
			user_name: Username (email)

		Returns:
			IssuedChallenge with options in client JSON form
		"""
		options = generate_registration_options(
			rp_id=self.rp_id,
			rp_name=self.rp_name,
			user_id=user_id.encode(),
			user_name=user_name,
			timeout=self.timeout,
			attestation=AttestationConveyancePreference.NONE,
			authenticator_selection=AuthenticatorSelectionCriteria(
				resident_key=ResidentKeyRequirement.PREFERRED,
				user_verification=UserVerificationRequirement.PREFERRED,
			),
			supported_pub_key_algs=[
				COSEAlgorithmIdentifier.ECDSA_SHA_256,
				COSEAlgorithmIdentifier.RSASSA_PKCS1_v1_5_SHA_256,
			],
		)

		return IssuedChallenge(
			options=json.loads(options_to_json(options)),
			challenge=bytes_to_base64url(options.challenge),
		)

	async def verify_registration(
		self,
		response: dict[str, Any],
		expected_challenge: str,
	) -> RegistrationOutcome:
		"""Verify registration response from authenticator.

		Args:
			response: Response from navigator.credentials.create()
			expected_challenge: Challenge issued for this ceremony

		Returns:
			RegistrationOutcome with the new credential when verified
		"""
		try:
			verification = verify_registration_response(
				credential=response,
				expected_challenge=base64url_to_bytes(expected_challenge),
				expected_rp_id=self.rp_id,
				expected_origin=self.origin,
				require_user_verification=False,
			)
		except Exception as e:
			logger.debug(f"Registration verification failed: {e}")
			return RegistrationOutcome(verified=False, reason=str(e))

		return RegistrationOutcome(
			verified=True,
			credential_id=bytes_to_base64url(verification.credential_id),
			public_key=bytes_to_base64url(verification.credential_public_key),
			counter=verification.sign_count,
			device_type=verification.credential_device_type.value,
			backed_up=verification.credential_backed_up,
		)

	async def authentication_options(
		self,
		credential: Credential,
	) -> IssuedChallenge:
		"""Generate options for passkey authentication.

		Args:
			credential: The user's registered passkey

		Returns:
			IssuedChallenge with options in client JSON form
		"""
		options = generate_authentication_options(
			rp_id=self.rp_id,
			timeout=self.timeout,
			allow_credentials=[
				PublicKeyCredentialDescriptor(
					id=base64url_to_bytes(credential.credential_id),
					type=PublicKeyCredentialType.PUBLIC_KEY,
					transports=_transports(credential.transports),
				)
			],
			user_verification=UserVerificationRequirement.PREFERRED,
		)

		return IssuedChallenge(
			options=json.loads(options_to_json(options)),
			challenge=bytes_to_base64url(options.challenge),
		)

	async def verify_authentication(
		self,
		response: dict[str, Any],
		expected_challenge: str,
		credential: Credential,
	) -> AuthenticationOutcome:
		"""Verify authentication response.

		py_webauthn raises when the sign counter did not advance, which
		ends up here as a failed outcome.
		"""
		try:
			verification = verify_authentication_response(
				credential=response,
				expected_challenge=base64url_to_bytes(expected_challenge),
				expected_rp_id=self.rp_id,
				expected_origin=self.origin,
				credential_public_key=base64url_to_bytes(credential.public_key),
				credential_current_sign_count=credential.counter,
				require_user_verification=False,
			)
		except Exception as e:
			logger.debug(f"Authentication verification failed: {e}")
			return AuthenticationOutcome(verified=False, reason=str(e))

		return AuthenticationOutcome(
			verified=True,
			new_counter=verification.new_sign_count,
		)

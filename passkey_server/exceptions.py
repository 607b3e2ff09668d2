# (c) Copyright Datacraft, 2026
"""Per-request ceremony errors.

Every error here is recovered at the HTTP boundary and rendered as a
``400 {"error": message}`` body; none of them is fatal to the process.
"""


class CeremonyError(Exception):
	"""Base class for errors reported back to the ceremony client."""

	status_code = 400
	default_message = "Bad request"

	def __init__(self, message: str | None = None):
		self.message = message or self.default_message
		super().__init__(self.message)


class InvalidInput(CeremonyError):
	default_message = "Email is required"


class DuplicateUser(CeremonyError):
	default_message = "User already exists"


class UnknownUser(CeremonyError):
	default_message = "No user for this email"


class SessionNotFound(CeremonyError):
	"""Pending ceremony is missing, already used, or expired."""

	default_message = "Session not found"


class CredentialMismatch(CeremonyError):
	default_message = "Invalid user"


class VerificationFailed(CeremonyError):
	default_message = "Verification failed"

# (c) Copyright Datacraft, 2026
from dataclasses import dataclass
from typing import Any


@dataclass
class ChallengeResponse:
	"""Options handed to the client together with its session id."""
	options: dict[str, Any]
	session_id: str

	def to_json(self) -> dict[str, Any]:
		return {**self.options, "sessionId": self.session_id}


@dataclass
class CeremonyResult:
	"""Outcome of a completed ceremony."""
	verified: bool
	error: str | None = None
	user_id: str | None = None

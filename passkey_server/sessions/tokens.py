# (c) Copyright Datacraft, 2026
"""Session identifiers for pending ceremonies."""
import secrets

# 128 bits of entropy, hex encoded
SESSION_ID_BYTES = 16


def generate_session_id() -> str:
	"""Generate an opaque, unguessable session id."""
	return secrets.token_hex(SESSION_ID_BYTES)

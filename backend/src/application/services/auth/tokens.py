"""
Opaque tokens for refresh, e-mail verification and password reset
Only SHA-256 digests are ever stored
"""
import hashlib
import secrets


def new_token() -> str:
    return secrets.token_urlsafe(48)


def digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

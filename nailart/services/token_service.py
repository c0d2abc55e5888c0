"""
Token service for the signed session and PKCE cookies.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Any

from jose import jwt, JWTError
from pydantic import ValidationError

from ..config import Config
from ..models.user import Session
from ..utils.exceptions import AuthenticationError, ConfigurationError

ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"
PKCE_TOKEN_TYPE = "pkce"


def _secret_key() -> str:
    if not Config.SESSION_SECRET_KEY:
        logging.error("SESSION_SECRET_KEY not configured")
        raise ConfigurationError("SESSION_SECRET_KEY", "Session secret key not configured")
    return Config.SESSION_SECRET_KEY


def create_signed_token(data: dict, expires_delta: timedelta) -> str:
    """
    Creates a signed JWT.

    Args:
        data: The data to encode in the token
        expires_delta: Lifetime of the token

    Returns:
        JWT token string
    """
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, _secret_key(), algorithm=ALGORITHM)


def decode_signed_token(token: str, token_type: str) -> Dict[str, Any]:
    """
    Decodes and validates a signed JWT.

    Raises:
        AuthenticationError: If the token is invalid, expired or of another type
    """
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[ALGORITHM])
    except JWTError as e:
        logging.warning(f"Error decoding {token_type} token: {e}")
        raise AuthenticationError(f"Invalid token: {str(e)}")

    if payload.get("typ") != token_type:
        raise AuthenticationError("Unexpected token type")
    return payload


def create_session_token(session: Session) -> str:
    """Packs a Supabase session into the session cookie value."""
    return create_signed_token(
        {
            "typ": SESSION_TOKEN_TYPE,
            "sub": session.user.id,
            "session": session.model_dump(mode="json"),
        },
        timedelta(days=Config.SESSION_MAX_AGE_DAYS),
    )


def read_session_token(token: Optional[str]) -> Optional[Session]:
    """
    Restores a session from the cookie value.

    An absent, tampered or expired cookie yields None.
    """
    if not token:
        return None
    try:
        payload = decode_signed_token(token, SESSION_TOKEN_TYPE)
        return Session.model_validate(payload["session"])
    except (AuthenticationError, KeyError, ValidationError) as e:
        logging.warning(f"[SESSION] Discarding unreadable session cookie: {e}")
        return None


def create_pkce_token(verifier: str) -> str:
    return create_signed_token(
        {"typ": PKCE_TOKEN_TYPE, "verifier": verifier},
        timedelta(minutes=Config.PKCE_MAX_AGE_MINUTES),
    )


def read_pkce_token(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    try:
        return decode_signed_token(token, PKCE_TOKEN_TYPE).get("verifier")
    except AuthenticationError:
        return None

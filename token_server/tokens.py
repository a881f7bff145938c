"""
Docsie trust tokens: HS256 JWT signed with the shared master key.
Docsie's validator expects exactly what its own backend produces, i.e.
jwt.encode({'exp': exp}, master_key): no iss, aud, sub or iat.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt

from token_server import config

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class ConfigurationError(RuntimeError):
    """Server is misconfigured; it must not issue tokens until fixed."""


def get_master_key() -> str:
    """Return the configured master key or raise ConfigurationError."""
    if not config.MASTER_KEY:
        raise ConfigurationError("DOCSIE_MASTER_KEY not configured")
    return config.MASTER_KEY


def get_expiry_minutes() -> int:
    """Parse JWT_EXPIRY_MINUTES (default 60). Must be a positive integer."""
    raw = config.JWT_EXPIRY_MINUTES
    if raw is None or str(raw).strip() == "":
        return 60
    try:
        minutes = int(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"JWT_EXPIRY_MINUTES must be an integer, got {raw!r}")
    if minutes <= 0:
        raise ConfigurationError(f"JWT_EXPIRY_MINUTES must be positive, got {minutes}")
    return minutes


def check_configuration() -> None:
    """Fail fast at startup if tokens cannot be issued."""
    get_master_key()
    get_expiry_minutes()


def issue_token(subject_hint: str, *, now: datetime | None = None) -> str:
    """
    Mint a token whose payload is exactly {"exp": now + expiry}.
    subject_hint is only logged, never embedded.
    """
    master_key = get_master_key()
    expiry_minutes = get_expiry_minutes()
    if now is None:
        now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expiry_minutes)

    token = jwt.encode({"exp": int(exp.timestamp())}, master_key, algorithm=ALGORITHM)

    logger.info("Generated JWT token for user: %s (exp only)", subject_hint)
    return token


def decode_token(token: str) -> dict:
    """Verify signature and exp the way Docsie does; return claims. Raises jwt.PyJWTError."""
    return jwt.decode(
        token,
        get_master_key(),
        algorithms=[ALGORITHM],
        options={"require": ["exp"], "verify_exp": True},
    )

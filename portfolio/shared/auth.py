"""
Admin session authentication

The site owner logs in at /admin/login with the credentials from the
environment and receives a signed, time-bound session token (cookie and
response body). Every mutating endpoint depends on ``require_session``.

Token format: base64("<issued_at>:<username>:<hmac>"), HMAC-SHA256 over
"<issued_at>:<username>" keyed with SESSION_SECRET.

Scripts may instead send the X-API-Key header when INTERNAL_API_KEY is set.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request, status

from portfolio.shared import config

logger = logging.getLogger(__name__)

SESSION_COOKIE = "portfolio_session"
API_KEY_HEADER = "X-API-Key"

# Fallback secret for development; sessions do not survive a restart
_ephemeral_secret: Optional[str] = None


@dataclass(frozen=True)
class AdminSession:
    username: str
    issued_at: int
    expires_at: int


def _get_secret() -> str:
    global _ephemeral_secret

    if config.SESSION_SECRET:
        return config.SESSION_SECRET
    if config.is_production():
        raise RuntimeError(
            "SESSION_SECRET must be set in production. "
            "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
        )
    if _ephemeral_secret is None:
        logger.warning(
            "SESSION_SECRET not set - using a random per-process secret. "
            "Admin sessions will not survive a restart."
        )
        _ephemeral_secret = secrets.token_urlsafe(32)
    return _ephemeral_secret


def _sign(payload: str) -> str:
    return hmac.new(_get_secret().encode(), payload.encode(), hashlib.sha256).hexdigest()


def verify_credentials(username: str, password: str) -> bool:
    """Constant-time check against ADMIN_USERNAME / ADMIN_PASSWORD."""
    if not config.ADMIN_USERNAME or not config.ADMIN_PASSWORD:
        logger.warning("Admin login attempted but ADMIN_USERNAME/ADMIN_PASSWORD are not set")
        return False

    username_ok = hmac.compare_digest(username.encode(), config.ADMIN_USERNAME.encode())
    password_ok = hmac.compare_digest(password.encode(), config.ADMIN_PASSWORD.encode())
    return username_ok and password_ok


def issue_session_token(username: str, now: Optional[int] = None) -> tuple[str, AdminSession]:
    issued_at = int(now if now is not None else time.time())
    payload = f"{issued_at}:{username}"
    token = base64.urlsafe_b64encode(f"{payload}:{_sign(payload)}".encode()).decode()
    session = AdminSession(
        username=username,
        issued_at=issued_at,
        expires_at=issued_at + config.SESSION_MAX_AGE,
    )
    return token, session


def validate_session_token(token: str, now: Optional[int] = None) -> Optional[AdminSession]:
    """
    Validate a session token.

    Checks:
    1. Token can be decoded
    2. Signature is valid (prevents tampering)
    3. Token is not older than SESSION_MAX_AGE

    Returns:
        The session, or None if the token is invalid or expired
    """
    try:
        decoded = base64.urlsafe_b64decode(token.encode()).decode()
        payload, received_signature = decoded.rsplit(":", 1)
        issued_at_str, username = payload.split(":", 1)
        issued_at = int(issued_at_str)
    except (ValueError, UnicodeDecodeError, binascii.Error):
        return None

    if not hmac.compare_digest(received_signature.encode(), _sign(payload).encode()):
        return None

    current_time = int(now if now is not None else time.time())
    expires_at = issued_at + config.SESSION_MAX_AGE
    if expires_at <= current_time:
        return None

    return AdminSession(username=username, issued_at=issued_at, expires_at=expires_at)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return None


def resolve_session(request: Request) -> Optional[AdminSession]:
    """Resolve the caller's admin session from request credentials."""
    # A stale cookie must not hide a valid Bearer token
    for token in (request.cookies.get(SESSION_COOKIE), _bearer_token(request)):
        if token:
            session = validate_session_token(token)
            if session:
                return session

    api_key = request.headers.get(API_KEY_HEADER)
    if api_key and config.INTERNAL_API_KEY:
        # Use constant-time comparison to prevent timing attacks
        if hmac.compare_digest(api_key.encode(), config.INTERNAL_API_KEY.encode()):
            now = int(time.time())
            return AdminSession(username="api-key", issued_at=now, expires_at=now)

    return None


def require_session(request: Request) -> AdminSession:
    """
    Dependency guarding every mutation

    Usage in endpoints:
    @router.post("/things")
    def create_thing(session: AdminSession = Depends(require_session)):
        # only reached with a valid session
        pass
    """
    session = resolve_session(request)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Unauthorized", "category": "security"},
        )
    return session

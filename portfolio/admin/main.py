"""
Admin login

Plain routes reachable by direct navigation. A successful login sets the
session cookie that the mutation endpoints check.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from portfolio.shared import config
from portfolio.shared.auth import (
    SESSION_COOKIE,
    AdminSession,
    issue_session_token,
    require_session,
    verify_credentials,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class LoginRequest(BaseModel):
    username: str
    password: str


def _session_body(session: AdminSession) -> dict:
    return {
        "username": session.username,
        "expiresAt": session.expires_at,
    }


@router.post("/login")
def login(credentials: LoginRequest, response: Response):
    """Exchange owner credentials for a session."""
    if not verify_credentials(credentials.username, credentials.password):
        logger.warning(f"Failed admin login for '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Invalid username or password", "category": "security"},
        )

    token, session = issue_session_token(credentials.username)
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=config.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=config.is_production(),
    )
    logger.info(f"Admin '{session.username}' logged in")
    return {"success": True, "data": {**_session_body(session), "token": token}}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE)
    return {"success": True}


@router.get("/session")
def current_session(session: AdminSession = Depends(require_session)):
    return {"success": True, "data": _session_body(session)}

"""Session cookie login for the fixed set of configured users."""
import hmac
import json
import logging
from typing import Optional
from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from pydantic import BaseModel

from ticketbook.config import settings
from ticketbook.dependencies import get_auth_users

logger = logging.getLogger(__name__)
router = APIRouter()

SESSION_COOKIE = "session"


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _passwords_match(expected: str, given: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), given.encode("utf-8"))


@router.post("/login")
def login(
    payload: LoginRequest,
    response: Response,
    users: list[dict] = Depends(get_auth_users),
):
    """Check credentials and set an httpOnly session cookie."""
    user = next((u for u in users if u.get("email") == payload.email), None)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Email not found")
    if not _passwords_match(user.get("password", ""), payload.password or ""):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")

    response.set_cookie(
        SESSION_COOKIE,
        json.dumps({"name": user.get("name", "")}),
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="strict",
        max_age=settings.SESSION_MAX_AGE,
        path="/",
    )
    logger.info("User %s logged in", payload.email)
    return {"success": True, "name": user.get("name")}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE, path="/")
    return {"success": True}


@router.get("/user")
def current_user(session: Optional[str] = Cookie(None)):
    """Display name from the session cookie."""
    if session:
        try:
            data = json.loads(session)
        except ValueError:
            logger.warning("Unparseable session cookie")
            data = None
        if isinstance(data, dict) and data.get("name"):
            return {"name": data["name"]}
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in")

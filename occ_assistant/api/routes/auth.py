"""Account registration and login routes."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from occ_assistant.api.dependencies import get_session
from occ_assistant.api.schemas import LoginRequest, RegisterRequest
from occ_assistant.analytics.logger import logger
from occ_assistant.memory.session_manager import SessionData, session_manager
from occ_assistant.memory.user_store import UserExistsError, user_store

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register")
async def register(body: Optional[RegisterRequest] = None, session: SessionData = Depends(get_session)):
    """Create an account and sign the session in."""
    body = body or RegisterRequest()
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password required")

    try:
        user = user_store.register(
            email=body.email,
            password=body.password,
            first_name=body.first_name or "",
            last_name=body.last_name or "",
        )
    except UserExistsError:
        raise HTTPException(status_code=409, detail="User already exists")

    session.login(user.id, user.email)

    return {
        "success": True,
        "message": "Registration successful",
        "userId": user.id,
        "user": {"email": body.email, "firstName": body.first_name, "lastName": body.last_name},
    }


@router.post("/login")
async def login(body: Optional[LoginRequest] = None, session: SessionData = Depends(get_session)):
    body = body or LoginRequest()
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password required")

    user = user_store.authenticate(body.email, body.password)
    if user is None:
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    session.login(user.id, user.email)

    return {
        "success": True,
        "message": "Login successful",
        "userId": user.id,
        "user": user.public_profile(),
    }


@router.get("/logout")
async def logout(session: SessionData = Depends(get_session)):
    session_manager.destroy_session(session.session_id)
    return {"success": True, "message": "Logged out"}


@router.get("/me")
async def me(session: SessionData = Depends(get_session)):
    """Profile of the signed-in user."""
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = user_store.get_by_id(session.user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    return {
        "userId": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }

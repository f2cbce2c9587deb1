"""Request dependencies shared by the routers."""
from fastapi import Depends, HTTPException, Request

from occ_assistant.memory.session_manager import SessionData, session_manager


def get_session(request: Request) -> SessionData:
    """Session attached by ``SessionMiddleware``."""
    session = getattr(request.state, "session", None)
    if session is None:
        # Middleware not installed (e.g. a bare router in tests)
        session = session_manager.create_session()
        request.state.session = session
    return session


def require_auth(session: SessionData = Depends(get_session)) -> SessionData:
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return session

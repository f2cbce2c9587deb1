"""API middleware for sessions, rate limiting and logging."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from collections import defaultdict
from datetime import datetime
from occ_assistant.analytics.logger import logger
from occ_assistant.memory.session_manager import (
    SessionManager,
    session_manager,
    sign_session_id,
    unsign_session_id,
)
from occ_assistant.utils.config import settings


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach the visitor's session to ``request.state.session``.

    Every visitor gets a session; the id travels in an HttpOnly cookie signed
    with ``session_secret``. A cookie with a bad signature starts a new session.
    """

    def __init__(self, app, manager: SessionManager = None):
        super().__init__(app)
        self.manager = manager or session_manager

    async def dispatch(self, request: Request, call_next):
        cookie_name = settings.session_cookie_name
        incoming_id = unsign_session_id(request.cookies.get(cookie_name))
        session = self.manager.get_or_create_session(incoming_id)
        request.state.session = session

        response = await call_next(request)

        if self.manager.get_session(session.session_id) is None:
            # Destroyed during the request (logout)
            response.delete_cookie(cookie_name)
        elif session.session_id != incoming_id:
            response.set_cookie(
                cookie_name,
                sign_session_id(session.session_id),
                max_age=settings.session_max_age,
                httponly=True,
                secure=settings.session_cookie_secure,
                samesite="lax",
            )
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware."""

    def __init__(self, app, calls: int = 60, period: int = 60):
        super().__init__(app)
        self.calls = calls
        self.period = period
        self.clients = defaultdict(list)

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"

        # Clean old entries
        now = datetime.now()
        self.clients[client_ip] = [
            timestamp
            for timestamp in self.clients[client_ip]
            if (now - timestamp).total_seconds() < self.period
        ]

        # Check rate limit
        if len(self.clients[client_ip]) >= self.calls:
            logger.warning(f"Rate limit exceeded for {client_ip}")
            return JSONResponse(
                status_code=429,
                content={"error": f"Rate limit exceeded: {self.calls} requests per {self.period} seconds"},
            )

        self.clients[client_ip].append(now)

        response = await call_next(request)
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware."""

    async def dispatch(self, request: Request, call_next):
        start_time = datetime.now()
        client_host = request.client.host if request.client else "unknown"

        logger.info(f"{request.method} {request.url.path} - {client_host}")

        response = await call_next(request)

        process_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )

        return response

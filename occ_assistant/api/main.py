"""FastAPI main application."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from occ_assistant.api.routes import auth, products, cart, search, orders, health, errors
from occ_assistant.api.middleware import RateLimitMiddleware, LoggingMiddleware, SessionMiddleware
from occ_assistant.analytics.logger import logger
from occ_assistant.memory.session_manager import session_manager
from occ_assistant.utils.config import settings
from occ_assistant.utils.errors import APIError
from occ_assistant.utils.validation import validate_config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting application...")

    config_status = validate_config()
    if not config_status["valid"]:
        logger.error("Configuration validation failed - some features may not work")

    logger.info(
        f"Using {settings.llm_provider} provider with model: {settings.llm_model}; "
        f"commerce API at {settings.occ_site_url}"
    )
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    purged = session_manager.purge_expired()
    if purged:
        logger.info(f"Discarded {purged} expired sessions")


app = FastAPI(
    title="OCC Shopping Assistant API",
    description="Conversational shopping assistant backed by the commerce platform's OCC API",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


# Rate limiting middleware
app.add_middleware(RateLimitMiddleware, calls=settings.rate_limit_per_minute, period=60)

# Session middleware
app.add_middleware(SessionMiddleware)

# Logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware; added last so it wraps every response, 429s included
cors_origins = settings.cors_origins.split(",") if settings.cors_origins else ["*"]
if settings.production_mode and "*" in cors_origins:
    logger.warning("CORS is set to allow all origins in production. Consider restricting this.")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(products.router)
app.include_router(cart.router)
app.include_router(search.router)
app.include_router(orders.router)
app.include_router(health.router)
app.include_router(errors.router)

@app.get("/", response_class=FileResponse)
async def root():
    """Root endpoint - serve frontend if available."""
    index_file = Path(settings.static_dir) / "index.html"
    if index_file.exists():
        return FileResponse(str(index_file))
    return JSONResponse(
        {"message": "OCC Shopping Assistant API", "version": "1.0.0", "docs": "/docs"}
    )


# Serve frontend assets; mounted last so API routes take precedence
static_path = Path(settings.static_dir)
if static_path.is_dir():
    app.mount("/", StaticFiles(directory=str(static_path), html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("occ_assistant.api.main:app", host=settings.api_host, port=settings.api_port, reload=True)

"""Health check and monitoring endpoints."""
from fastapi import APIRouter
from typing import Dict, Any
import time

from occ_assistant.memory.session_manager import session_manager
from occ_assistant.utils.cache import embedding_cache
from occ_assistant.utils.config import settings

router = APIRouter(prefix="/api", tags=["health"])

_PROVIDER_KEYS = {
    "google": "google_api_key",
    "anthropic": "anthropic_api_key",
    "openai": "openai_api_key",
}


def _provider_check(provider: str, model: str) -> Dict[str, Any]:
    key_name = _PROVIDER_KEYS.get(provider)
    if key_name is None:
        return {
            "status": "degraded",
            "provider": provider,
            "message": f"Unknown provider: {provider}"
        }
    has_key = bool(getattr(settings, key_name))
    return {
        "status": "healthy" if has_key else "degraded",
        "provider": provider,
        "model": model,
        "configured": has_key,
        "message": f"{provider} configured" if has_key else f"{key_name.upper()} missing"
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Configuration-level health check endpoint."""
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "checks": {}
    }

    health_status["checks"]["commerce_api"] = {
        "status": "healthy" if settings.occ_base_url and settings.occ_site_id else "unhealthy",
        "base_url": settings.occ_site_url,
    }

    health_status["checks"]["llm_provider"] = _provider_check(
        settings.llm_provider.lower(), settings.llm_model
    )

    embedding_provider = settings.embedding_provider.lower()
    if embedding_provider == "sentence_transformers":
        health_status["checks"]["embeddings"] = {
            "status": "healthy",
            "provider": embedding_provider,
            "model": settings.embedding_model,
        }
    else:
        health_status["checks"]["embeddings"] = _provider_check(
            embedding_provider, settings.embedding_model
        )

    health_status["checks"]["embedding_cache"] = {
        "status": "healthy",
        **embedding_cache.get_cache_stats()
    }
    health_status["checks"]["sessions"] = {
        "status": "healthy",
        "active": len(session_manager)
    }

    statuses = [check.get("status") for check in health_status["checks"].values()]
    if "unhealthy" in statuses:
        health_status["status"] = "unhealthy"
    elif "degraded" in statuses:
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/liveness")
async def liveness() -> Dict[str, str]:
    """Simple liveness probe for Kubernetes/Docker."""
    return {"status": "alive"}


@router.get("/health/readiness")
async def readiness() -> Dict[str, Any]:
    """Readiness probe - checks if service can accept traffic."""
    checks = {
        "commerce_api": "ready" if settings.occ_base_url else "not_configured",
        "llm_provider": "ready" if _provider_check(
            settings.llm_provider.lower(), settings.llm_model
        ).get("configured") else "not_configured",
    }
    ready = all(value == "ready" for value in checks.values())
    return {
        "status": "ready" if ready else "not_ready",
        "checks": checks
    }

"""Configuration and environment validation."""
from occ_assistant.utils.config import settings, DEFAULT_SESSION_SECRET
from occ_assistant.analytics.logger import logger


_KEY_FOR_PROVIDER = {
    "google": ("google_api_key", "GOOGLE_API_KEY"),
    "anthropic": ("anthropic_api_key", "ANTHROPIC_API_KEY"),
    "openai": ("openai_api_key", "OPENAI_API_KEY"),
}


def validate_config() -> dict:
    """Validate application configuration."""
    issues = []
    warnings = []

    # Critical validations - check based on LLM provider
    provider = settings.llm_provider.lower()
    if provider in _KEY_FOR_PROVIDER:
        attr, env_name = _KEY_FOR_PROVIDER[provider]
        if not getattr(settings, attr):
            issues.append(f"{env_name} is not set - agent will not function")
    else:
        issues.append(f"Invalid LLM provider: {provider}. Use 'google', 'anthropic' or 'openai'")

    if not settings.occ_base_url or not settings.occ_site_id:
        issues.append("OCC_BASE_URL and OCC_SITE_ID must be set - commerce API unavailable")

    # Warning validations
    embedding_provider = settings.embedding_provider.lower()
    if embedding_provider in _KEY_FOR_PROVIDER:
        attr, env_name = _KEY_FOR_PROVIDER[embedding_provider]
        if not getattr(settings, attr):
            warnings.append(f"{env_name} not set - semantic re-ranking will fall back to search order")
    elif embedding_provider != "sentence_transformers":
        warnings.append(f"Unknown embedding provider: {embedding_provider}")

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        warnings.append("SESSION_SECRET uses the default value")

    if issues:
        for issue in issues:
            logger.error(f"Configuration issue: {issue}")

    if warnings:
        for warning in warnings:
            logger.warning(f"Configuration warning: {warning}")

    return {
        "valid": len(issues) == 0,
        "issues": issues,
        "warnings": warnings
    }

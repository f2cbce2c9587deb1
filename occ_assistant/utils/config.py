"""Configuration management for the application."""
from pydantic_settings import BaseSettings
from typing import Optional


DEFAULT_SESSION_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings."""

    # API Keys
    google_api_key: Optional[str] = None  # Gemini (chat + embeddings)
    anthropic_api_key: Optional[str] = None  # For Claude models
    openai_api_key: Optional[str] = None

    # LLM Configuration
    llm_provider: str = "google"  # Options: "google", "anthropic", "openai"
    llm_model: str = "gemini-2.5-flash-lite"
    llm_temperature: float = 0.3
    llm_max_retries: int = 3

    # Embedding Configuration (for product re-ranking)
    embedding_provider: str = "google"  # Options: "google", "openai", "sentence_transformers"
    embedding_model: str = "models/text-embedding-004"
    embedding_cache_max_size: int = 100

    # Commerce platform (OCC REST API)
    occ_base_url: str = "https://localhost:9002/occ/v2"
    occ_site_id: str = "electronics"
    occ_lang: str = "en"
    occ_curr: str = "USD"
    occ_timeout: float = 10.0
    occ_max_retries: int = 3

    # Search / ranking
    search_page_size: int = 5
    rerank_top_k: int = 3
    rerank_min_candidates: int = 3  # Fewer candidates are returned as-is

    # Orders
    order_tax_rate: float = 0.08
    free_shipping_threshold: float = 100.0
    flat_shipping_cost: float = 10.0
    order_counter_start: int = 1000

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    session_secret: str = DEFAULT_SESSION_SECRET  # Signs the session cookie
    session_cookie_name: str = "occ_session"
    session_max_age: int = 24 * 60 * 60  # 24 hours
    session_purge_interval: int = 300  # Seconds between sweeps of expired sessions
    session_cookie_secure: bool = False

    # Rate Limiting
    rate_limit_per_minute: int = 60

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/app.log"

    # Environment Configuration
    environment: str = "development"  # development, staging, production

    # Production Settings
    production_mode: bool = False  # Auto-detected from environment

    # CORS Configuration (for production)
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    # Static frontend
    static_dir: str = "public"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Auto-detect production mode
        self.production_mode = (
            self.environment.lower() == "production" or
            self.environment.lower() == "prod"
        )

        if self.production_mode:
            # More restrictive logging in production
            if self.log_level == "INFO":
                self.log_level = "WARNING"

            self.session_cookie_secure = True

            if self.session_secret == DEFAULT_SESSION_SECRET:
                import warnings
                warnings.warn(
                    "WARNING: Using default session secret in production! "
                    "Change SESSION_SECRET in .env file immediately."
                )

    @property
    def occ_site_url(self) -> str:
        """Base URL for site-scoped OCC resources."""
        return f"{self.occ_base_url.rstrip('/')}/{self.occ_site_id}"


settings = Settings()

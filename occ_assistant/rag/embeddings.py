"""Embedding generation for product re-ranking."""

import asyncio
from typing import List, Optional, Any
from occ_assistant.utils.config import settings
from occ_assistant.utils.cache import EmbeddingCache, embedding_cache
from occ_assistant.utils.helpers import truncate_text
from occ_assistant.analytics.logger import logger
from occ_assistant.analytics.error_tracker import error_tracker


class EmbeddingGenerator:
    """Generate embeddings for text, backed by the in-process cache."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        cache: Optional[EmbeddingCache] = None,
    ):
        self.provider = (provider or settings.embedding_provider).lower()
        self.model_name = model_name or settings.embedding_model
        self.cache = cache if cache is not None else embedding_cache
        self._backend: Any = None

    def _load_backend(self):
        """Create the provider client on first use."""
        if self._backend is not None:
            return self._backend

        if self.provider == "google":
            from langchain_google_genai import GoogleGenerativeAIEmbeddings

            self._backend = GoogleGenerativeAIEmbeddings(
                model=self.model_name, google_api_key=settings.google_api_key
            )
        elif self.provider == "openai":
            from langchain_openai import OpenAIEmbeddings

            self._backend = OpenAIEmbeddings(
                model=self.model_name, openai_api_key=settings.openai_api_key
            )
        elif self.provider == "sentence_transformers":
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading embedding model: {self.model_name}")
            self._backend = SentenceTransformer(self.model_name)
            logger.info("Embedding model loaded successfully")
        else:
            raise ValueError(
                f"Unsupported embedding provider: {self.provider}. "
                "Use 'google', 'openai' or 'sentence_transformers'"
            )
        return self._backend

    async def _compute(self, text: str) -> List[float]:
        backend = self._load_backend()
        if self.provider == "sentence_transformers":
            # encode() is CPU-bound and blocking
            vector = await asyncio.to_thread(backend.encode, text)
            return vector.tolist()
        return list(await backend.aembed_query(text))

    async def embed_text(self, text: str) -> List[float]:
        """Embedding for a single text; empty list when the provider fails."""
        cached_embedding = self.cache.get(text)
        if cached_embedding is not None:
            logger.info(f"[Cache] Hit for: \"{truncate_text(text)}\"")
            return cached_embedding

        try:
            logger.info(f"[Embedding] Generating for: \"{truncate_text(text)}\"")
            embedding = await self._compute(text)
        except Exception as e:
            error_tracker.record_error(
                "embedding_error", str(e), {"provider": self.provider}
            )
            return []

        if embedding:
            self.cache.set(text, embedding)
        return embedding


# Global embedding generator
embedding_generator = EmbeddingGenerator()

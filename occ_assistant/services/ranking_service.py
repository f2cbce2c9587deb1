"""Semantic re-ranking of product search results."""

import asyncio
from typing import List, Dict, Any, Optional, Sequence

import numpy as np

from occ_assistant.rag.embeddings import EmbeddingGenerator, embedding_generator
from occ_assistant.utils.config import settings
from occ_assistant.analytics.logger import logger


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when either vector is empty, has zero norm, or the
    dimensions do not match.
    """
    if len(a) == 0 or len(b) == 0 or len(a) != len(b):
        return 0.0

    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)
    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def product_text(product: Dict[str, Any]) -> str:
    """Text that represents a product for embedding."""
    return f"{product.get('name', '')} {product.get('description', '')}"


class RankingService:
    """Re-rank a small batch of products against the user's query."""

    def __init__(
        self,
        embeddings: Optional[EmbeddingGenerator] = None,
        top_k: Optional[int] = None,
        min_candidates: Optional[int] = None,
    ):
        self.embeddings = embeddings or embedding_generator
        self.top_k = top_k if top_k is not None else settings.rerank_top_k
        self.min_candidates = (
            min_candidates if min_candidates is not None else settings.rerank_min_candidates
        )

    async def rerank_products(
        self, query: str, products: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """Order products by semantic similarity to the query.

        Args:
            query: The user's search query
            products: Cleaned candidate products

        Returns:
            At most ``top_k`` products, most similar first. Batches smaller
            than ``min_candidates`` come back untouched.
        """
        if len(products) < self.min_candidates:
            logger.info(f"[Embeddings] Skipping re-ranking for {len(products)} product(s)")
            return list(products)

        logger.info(f"[Embeddings] Ranking {len(products)} products semantically...")
        query_embedding = await self.embeddings.embed_text(query)
        if not query_embedding:
            logger.info("[Embeddings] Embedding failed, returning top results by keyword match")
            return list(products[: self.top_k])

        product_embeddings = await asyncio.gather(
            *(self.embeddings.embed_text(product_text(p)) for p in products)
        )

        scored = [
            (cosine_similarity(query_embedding, embedding), product)
            for product, embedding in zip(products, product_embeddings)
        ]
        # sorted() is stable, so ties keep search order
        scored.sort(key=lambda pair: pair[0], reverse=True)

        logger.info(f"[Embeddings] Re-ranked, returning top {self.top_k}")
        return [product for _, product in scored[: self.top_k]]


# Global ranking service
ranking_service = RankingService()

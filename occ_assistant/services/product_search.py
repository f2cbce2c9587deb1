"""Product search against the commerce platform with semantic re-ranking."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.analytics.logger import logger
from occ_assistant.services.occ_client import OCCClient, occ_client
from occ_assistant.services.ranking_service import RankingService, ranking_service
from occ_assistant.utils.errors import OCCError
from occ_assistant.utils.helpers import strip_html


NO_PRODUCTS_MESSAGE = "No products found."
SEARCH_ERROR_MESSAGE = "Error connecting to the commerce platform."


@dataclass
class SearchOutcome:
    """Products to show, plus the text handed back to the model."""

    products: List[Dict[str, Any]] = field(default_factory=list)
    message: Optional[str] = None
    error: bool = False

    @property
    def prompt_text(self) -> str:
        if self.message is not None:
            return self.message
        return json.dumps(self.products)


def clean_product(product: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a search hit with markup removed from name and description."""
    return {
        **product,
        "name": strip_html(product.get("name")),
        "description": strip_html(product.get("description")),
    }


class ProductSearchService:
    """Search, clean and re-rank products."""

    def __init__(
        self,
        client: Optional[OCCClient] = None,
        ranker: Optional[RankingService] = None,
    ):
        self.client = client or occ_client
        self.ranker = ranker or ranking_service

    async def search(self, query: str) -> SearchOutcome:
        try:
            data = await self.client.search_products(query)
        except OCCError as e:
            error_tracker.record_error("occ_error", f"Product search failed: {e.details}", {"query": query})
            return SearchOutcome(message=SEARCH_ERROR_MESSAGE, error=True)

        raw_products = (data or {}).get("products") or []
        if not raw_products:
            logger.info(f"[OCC] No products found for: {query}")
            return SearchOutcome(message=NO_PRODUCTS_MESSAGE)

        cleaned = [clean_product(p) for p in raw_products]
        ranked = await self.ranker.rerank_products(query, cleaned)
        return SearchOutcome(products=ranked)


# Global product search service
product_search_service = ProductSearchService()

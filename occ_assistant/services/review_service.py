"""Product reviews and their summary."""

from typing import Any, Dict, List, Optional

from occ_assistant.services.occ_client import OCCClient, occ_client


def summarize_reviews(reviews: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Count and mean rating (2 dp); a missing rating counts as 0."""
    if not reviews:
        return {"count": 0, "averageRating": 0}
    total = sum((review.get("rating") or 0) for review in reviews)
    return {"count": len(reviews), "averageRating": round(total / len(reviews), 2)}


class ReviewService:
    def __init__(self, client: Optional[OCCClient] = None):
        self.client = client or occ_client

    async def get_reviews(self, code: str) -> Dict[str, Any]:
        """``{"reviews": [...], "reviewsSummary": {...}}`` for a product."""
        data = await self.client.get_reviews(code)
        reviews = (data or {}).get("reviews") or []
        return {"reviews": reviews, "reviewsSummary": summarize_reviews(reviews)}


# Global review service
review_service = ReviewService()

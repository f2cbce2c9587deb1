"""Product API routes."""
from fastapi import APIRouter, HTTPException

from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.services.occ_client import occ_client
from occ_assistant.services.review_service import review_service
from occ_assistant.utils.errors import OCCError

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("/{code}")
async def get_product(code: str):
    """Get product details by code."""
    try:
        return await occ_client.get_product_detail(code)
    except OCCError as e:
        error_tracker.record_error("occ_error", f"Product fetch error: {e.details}", {"code": code})
        raise HTTPException(status_code=500, detail="Failed to fetch product details")


@router.get("/{code}/reviews")
async def get_product_reviews(code: str):
    """Reviews for a product with count and average rating."""
    try:
        return await review_service.get_reviews(code)
    except OCCError as e:
        error_tracker.record_error("occ_error", f"Product reviews fetch error: {e.details}", {"code": code})
        raise HTTPException(status_code=500, detail="Failed to fetch product reviews")

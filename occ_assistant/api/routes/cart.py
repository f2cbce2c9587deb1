"""Shopping cart API routes.

The session holds the anonymous cart handle; the cart itself lives on the
commerce platform.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from occ_assistant.api.dependencies import get_session
from occ_assistant.api.schemas import CartAddRequest, CartRemoveRequest, CartUpdateRequest
from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.analytics.logger import logger
from occ_assistant.memory.session_manager import SessionData
from occ_assistant.services.cart_service import cart_service, empty_cart
from occ_assistant.utils.errors import APIError, OCCError

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _cart_failure(error: str, e: OCCError) -> APIError:
    error_tracker.record_error("occ_error", f"{error}: {e.details}", {"status_code": e.status_code})
    return APIError(500, error, details=e.details)


@router.get("")
async def get_cart(session: SessionData = Depends(get_session)):
    """Get the session's cart; failures degrade to an empty cart."""
    if not session.cart_guid:
        return empty_cart()

    try:
        return await cart_service.get_cart(session.cart_guid)
    except OCCError as e:
        logger.error(f"Cart fetch error: {e.details}")
        return empty_cart()


@router.post("/add")
async def add_item(body: Optional[CartAddRequest] = None, session: SessionData = Depends(get_session)):
    """Add item to cart, creating an anonymous cart on first use."""
    body = body or CartAddRequest()
    if not body.product_code or not body.quantity:
        raise HTTPException(status_code=400, detail="Product code and quantity required")

    try:
        if not session.cart_guid:
            session.cart_guid = await cart_service.create_cart()
        cart = await cart_service.add_item(session.cart_guid, body.product_code, body.quantity)
    except OCCError as e:
        raise _cart_failure("Failed to add item to cart", e)

    return {"success": True, "message": "Item added to cart", "cart": cart}


@router.post("/remove")
async def remove_item(body: Optional[CartRemoveRequest] = None, session: SessionData = Depends(get_session)):
    """Remove item from cart."""
    body = body or CartRemoveRequest()
    if not session.cart_guid:
        raise HTTPException(status_code=400, detail="No cart found")

    try:
        cart = await cart_service.remove_item(session.cart_guid, body.item_id)
    except OCCError as e:
        raise _cart_failure("Failed to remove item from cart", e)

    return {"success": True, "message": "Item removed from cart", "cart": cart}


@router.post("/update")
async def update_item(body: Optional[CartUpdateRequest] = None, session: SessionData = Depends(get_session)):
    """Change the quantity of a cart entry."""
    body = body or CartUpdateRequest()
    if not session.cart_guid:
        raise HTTPException(status_code=400, detail="No cart found")

    try:
        cart = await cart_service.update_item(session.cart_guid, body.item_id, body.quantity)
    except OCCError as e:
        raise _cart_failure("Failed to update cart", e)

    return {"success": True, "message": "Cart updated", "cart": cart}

"""Checkout and order routes."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from occ_assistant.api.dependencies import require_auth
from occ_assistant.api.schemas import OrderCreateRequest
from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.memory.order_store import order_store
from occ_assistant.memory.session_manager import SessionData
from occ_assistant.memory.user_store import user_store
from occ_assistant.services.cart_service import cart_service
from occ_assistant.utils.errors import APIError, OCCError

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("/create")
async def create_order(body: Optional[OrderCreateRequest] = None, session: SessionData = Depends(require_auth)):
    """Turn the session's cart into an order."""
    body = body or OrderCreateRequest()
    cart = None
    if session.cart_guid:
        try:
            cart = await cart_service.get_cart(session.cart_guid)
        except OCCError as e:
            error_tracker.record_error("occ_error", f"Checkout cart fetch error: {e.details}")
            raise APIError(500, "Failed to create order", details=e.details)

    if not cart or not cart["items"]:
        raise HTTPException(status_code=400, detail="Cart is empty")

    if not body.shipping_address or not body.billing_address:
        raise HTTPException(status_code=400, detail="Shipping and billing addresses required")

    user = user_store.get_by_id(session.user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    order = order_store.create_order(
        user=user,
        cart=cart,
        shipping_address=body.shipping_address,
        billing_address=body.billing_address,
        payment_method=body.payment_method,
    )

    # The platform cart has been consumed by this order
    session.cart_guid = None

    return {
        "success": True,
        "message": "Order created successfully",
        "orderId": order["id"],
        "order": order,
    }


@router.get("/{order_id}")
async def get_order(order_id: str, session: SessionData = Depends(require_auth)):
    order = order_store.get_order(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if order["userId"] != session.user_id:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return order


@router.get("")
async def list_orders(session: SessionData = Depends(require_auth)):
    """Orders placed by the signed-in user."""
    orders = order_store.list_orders(session.user_id)
    return {"orders": orders, "total": len(orders)}

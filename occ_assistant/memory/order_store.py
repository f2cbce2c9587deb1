"""In-memory order records."""

import itertools
from typing import Any, Dict, List, Optional

from occ_assistant.analytics.logger import logger
from occ_assistant.memory.user_store import User
from occ_assistant.utils.config import settings
from occ_assistant.utils.helpers import get_timestamp


def calculate_totals(subtotal: float) -> Dict[str, float]:
    """Tax, shipping and grand total for a cart subtotal."""
    tax = round(subtotal * settings.order_tax_rate, 2)
    shipping = 0 if subtotal > settings.free_shipping_threshold else settings.flat_shipping_cost
    return {
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "total": subtotal + tax + shipping,
    }


class OrderStore:
    """Orders keyed by id; ids count up as ``ORD-1001``, ``ORD-1002``, ..."""

    def __init__(self, counter_start: Optional[int] = None):
        self.counter_start = counter_start if counter_start is not None else settings.order_counter_start
        self._counter = itertools.count(self.counter_start + 1)
        self._orders: Dict[str, Dict[str, Any]] = {}

    def create_order(
        self,
        user: User,
        cart: Dict[str, Any],
        shipping_address: Any,
        billing_address: Any,
        payment_method: Any = None,
    ) -> Dict[str, Any]:
        order_id = f"ORD-{next(self._counter)}"
        now = get_timestamp()
        order = {
            "id": order_id,
            "userId": user.id,
            "userEmail": user.email,
            "userName": user.full_name,
            "items": list(cart.get("items") or []),
            **calculate_totals(float(cart.get("total") or 0)),
            "shippingAddress": shipping_address,
            "billingAddress": billing_address,
            "paymentMethod": payment_method,
            "status": "PENDING",
            "createdAt": now,
            "updatedAt": now,
        }
        self._orders[order_id] = order
        logger.info(f"Created order {order_id} for user {user.id}")
        return order

    def get_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        return self._orders.get(order_id)

    def list_orders(self, user_id: str) -> List[Dict[str, Any]]:
        return [order for order in self._orders.values() if order["userId"] == user_id]

    def clear(self):
        self._orders.clear()
        self._counter = itertools.count(self.counter_start + 1)


# Global order store
order_store = OrderStore()

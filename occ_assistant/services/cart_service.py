"""Anonymous cart operations and response shaping."""

from typing import Any, Dict, List, Optional

from occ_assistant.analytics.logger import logger
from occ_assistant.services.occ_client import OCCClient, occ_client


def _to_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def empty_cart() -> Dict[str, Any]:
    return {"items": [], "total": 0, "guid": None}


def format_cart(cart_guid: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce an OCC cart payload to what the frontend renders."""
    items: List[Dict[str, Any]] = []
    for entry in data.get("entries") or []:
        product = entry.get("product") or {}
        items.append(
            {
                "id": entry.get("entryNumber"),
                "productCode": product.get("code"),
                "productName": product.get("name"),
                "price": _to_float((entry.get("basePrice") or {}).get("value")),
                "quantity": entry.get("quantity"),
                "totalPrice": (entry.get("totalPrice") or {}).get("formattedValue"),
            }
        )

    sub_total = data.get("subTotal") or {}
    return {
        "guid": cart_guid,
        "items": items,
        "total": _to_float(sub_total.get("value")),
        "subtotal": sub_total.get("formattedValue"),
        "tax": (data.get("totalTax") or {}).get("formattedValue"),
        "totalPrice": (data.get("totalPrice") or {}).get("formattedValue"),
        "totalItems": data.get("totalItems"),
    }


class CartService:
    """Cart operations keyed by the anonymous cart handle."""

    def __init__(self, client: Optional[OCCClient] = None):
        self.client = client or occ_client

    async def create_cart(self) -> str:
        data = await self.client.create_anonymous_cart()
        # The anonymous handle is the guid, not the cart code
        cart_guid = data.get("guid")
        logger.info(f"[Cart] Created new cart with GUID: {cart_guid}")
        return cart_guid

    async def get_cart(self, cart_guid: str) -> Dict[str, Any]:
        data = await self.client.get_cart(cart_guid)
        return format_cart(cart_guid, data)

    async def add_item(self, cart_guid: str, product_code: str, quantity: int) -> Dict[str, Any]:
        result = await self.client.add_cart_entry(cart_guid, product_code, quantity)
        entry_number = (result.get("entry") or {}).get("entryNumber")
        logger.info(f"[Cart] Product added successfully, entry: {entry_number}")
        return await self.get_cart(cart_guid)

    async def remove_item(self, cart_guid: str, entry_number: Any) -> Dict[str, Any]:
        await self.client.remove_cart_entry(cart_guid, entry_number)
        return await self.get_cart(cart_guid)

    async def update_item(self, cart_guid: str, entry_number: Any, quantity: int) -> Dict[str, Any]:
        await self.client.update_cart_entry(cart_guid, entry_number, quantity)
        return await self.get_cart(cart_guid)


# Global cart service
cart_service = CartService()

"""Client for the commerce platform's OCC REST API."""

from typing import Any, Dict, Optional

import httpx

from occ_assistant.analytics.logger import logger
from occ_assistant.utils.config import settings
from occ_assistant.utils.errors import OCCError
from occ_assistant.utils.retry import occ_retry


SEARCH_FIELDS = (
    "products(name,price(formattedValue),code,stock(stockLevelStatus),images(FULL),description)"
)

PRODUCT_VIEW_FIELDS = (
    "code,configurable,configuratorType,purchasable,name,summary,price(formattedValue,DEFAULT),"
    "images(galleryIndex,FULL),baseProduct,DEFAULT,averageRating,classifications,manufacturer,"
    "numberOfReviews,categories(FULL),baseOptions,variantOptions,variantType,stock(DEFAULT),"
    "description,availableForPickup,url,priceRange,multidimensional,tags,"
    "potentialPromotions(description),sapUnit"
)

PRODUCT_DETAIL_FIELDS = "DEFAULT,images(FULL),price(FULL),stock(FULL),description,reviews,averageRating"

CART_FIELDS = (
    "DEFAULT,entries(totalPrice(formattedValue),product(images(FULL),stock(FULL),name),"
    "basePrice(formattedValue,value),quantity),totalPrice(formattedValue),totalItems,"
    "totalPriceWithTax(formattedValue),totalDiscounts(value,formattedValue),"
    "subTotal(formattedValue),totalUnitCount,deliveryItemsQuantity,deliveryCost(formattedValue),"
    "totalTax(formattedValue,value),pickupItemsQuantity,net,appliedVouchers,"
    "productDiscounts(formattedValue),user,appliedOrderPromotions,appliedProductPromotions,"
    "potentialOrderPromotions,potentialProductPromotions"
)


class OCCClient:
    """Thin async wrapper around the OCC endpoints the assistant uses."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        lang: Optional[str] = None,
        curr: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.occ_site_url).rstrip("/")
        self.lang = lang or settings.occ_lang
        self.curr = curr or settings.occ_curr
        self.timeout = timeout if timeout is not None else settings.occ_timeout
        self.transport = transport

    def _locale_params(self, **extra: Any) -> Dict[str, Any]:
        params = {"lang": self.lang, "curr": self.curr}
        params.update(extra)
        return params

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, params=params, json=json)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                payload = e.response.json()
            except ValueError:
                payload = e.response.text
            raise OCCError(
                f"{method} {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
                payload=payload,
            ) from e
        except httpx.HTTPError as e:
            raise OCCError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise OCCError(
                f"{method} {path} returned invalid JSON", status_code=response.status_code
            ) from e

    @occ_retry
    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    # Products

    async def search_products(self, query: str, page_size: Optional[int] = None) -> Dict[str, Any]:
        """Free-text product search."""
        logger.info(f"[OCC] Searching for: {query}...")
        return await self._get(
            "/products/search",
            params={
                "query": query,
                "fields": SEARCH_FIELDS,
                "pageSize": page_size or settings.search_page_size,
            },
        )

    async def get_product(self, code: str) -> Dict[str, Any]:
        """Full product view used when the assistant shows a single product."""
        return await self._get(
            f"/products/{code}", params=self._locale_params(fields=PRODUCT_VIEW_FIELDS)
        )

    async def get_product_detail(self, code: str) -> Dict[str, Any]:
        """Product detail with images, price, stock and reviews."""
        return await self._get(f"/products/{code}", params={"fields": PRODUCT_DETAIL_FIELDS})

    async def get_reviews(self, code: str) -> Dict[str, Any]:
        return await self._get(f"/products/{code}/reviews", params=self._locale_params())

    # Anonymous carts

    async def create_anonymous_cart(self) -> Dict[str, Any]:
        logger.info("[Cart] Creating new anonymous cart...")
        return await self._request(
            "POST",
            "/users/anonymous/carts",
            params=self._locale_params(fields=CART_FIELDS),
            json={},
        )

    async def get_cart(self, cart_guid: str) -> Dict[str, Any]:
        return await self._get(
            f"/users/anonymous/carts/{cart_guid}", params=self._locale_params(fields=CART_FIELDS)
        )

    async def add_cart_entry(self, cart_guid: str, product_code: str, quantity: int) -> Dict[str, Any]:
        logger.info(f"[Cart] Adding product {product_code} to cart {cart_guid}")
        return await self._request(
            "POST",
            f"/users/anonymous/carts/{cart_guid}/entries",
            params=self._locale_params(),
            json={"product": {"code": product_code}, "quantity": quantity},
        )

    async def remove_cart_entry(self, cart_guid: str, entry_number: Any) -> Dict[str, Any]:
        logger.info(f"[Cart] Removing entry {entry_number} from cart {cart_guid}")
        return await self._request(
            "DELETE",
            f"/users/anonymous/carts/{cart_guid}/entries/{entry_number}",
            params=self._locale_params(),
        )

    async def update_cart_entry(self, cart_guid: str, entry_number: Any, quantity: int) -> Dict[str, Any]:
        logger.info(f"[Cart] Updating entry {entry_number} quantity to {quantity}")
        return await self._request(
            "PATCH",
            f"/users/anonymous/carts/{cart_guid}/entries/{entry_number}",
            params=self._locale_params(),
            json={"quantity": quantity},
        )


# Global OCC client
occ_client = OCCClient()

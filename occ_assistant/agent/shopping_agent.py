"""Main shopping agent orchestrator.

The agent asks the model how to handle the user's message, then acts on at
most one directive tag in the reply:

- ``[REVIEWS: <code>]`` fetches product reviews,
- ``[VIEW: <code>]`` fetches a single product,
- ``[SEARCH: <query>]`` searches the catalog and asks the model again with
  the products it found.

Replies without a directive are returned as they are.
"""

from typing import Any, Dict, Optional

from occ_assistant.agent.directives import REVIEWS, VIEW, Directive, parse_directive
from occ_assistant.agent.llm_client import LLMClient, llm_client
from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.analytics.logger import logger
from occ_assistant.services.occ_client import OCCClient, occ_client
from occ_assistant.services.product_search import ProductSearchService, product_search_service
from occ_assistant.services.review_service import ReviewService, review_service
from occ_assistant.utils.errors import LLMError, OCCError


SYSTEM_PROMPT = """You are a helpful commerce shopping assistant. When users ask about products, extract the search query and start your response with [SEARCH: <query>] to trigger a product search. For example:
- User: "I need a camera"
- You: "[SEARCH: camera] Let me find some cameras for you..."

When the user asks for details about a specific product code, start your response with [VIEW: <product code>].
When the user asks for reviews of a specific product code, start your response with [REVIEWS: <product code>].

If the user asks something that doesn't require a lookup, just respond normally without any tag."""


def build_prompt(user_input: str) -> str:
    return f"{SYSTEM_PROMPT}\n\nUser: {user_input}\n\nAssistant:"


def build_refined_prompt(user_input: str, products_text: str) -> str:
    return (
        f"{SYSTEM_PROMPT}\n\nUser: {user_input}\n\n"
        f"Products Found:\n{products_text}\n\n"
        "Based on these products, provide a helpful response to the user:"
    )


class ShoppingAgent:
    """Route a user message through the model and the commerce platform."""

    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        client: Optional[OCCClient] = None,
        search: Optional[ProductSearchService] = None,
        reviews: Optional[ReviewService] = None,
    ):
        self.llm = llm or llm_client
        self.client = client or occ_client
        self.search = search or product_search_service
        self.reviews = reviews or review_service

    async def run(self, user_input: str) -> Dict[str, Any]:
        """Process one user message and return the response payload."""
        try:
            assistant_response = await self.llm.generate(build_prompt(user_input))
            directive = parse_directive(assistant_response)

            if directive is None:
                return {"response": assistant_response, "searched": False, "products": []}

            logger.info(f"[Agent] Directive {directive.kind}: {directive.argument}")
            if directive.kind == REVIEWS:
                return await self._handle_reviews(directive, assistant_response)
            if directive.kind == VIEW:
                return await self._handle_view(directive, assistant_response)
            return await self._handle_search(directive, user_input)
        except Exception as e:
            kind = "llm_error" if isinstance(e, LLMError) else "server_error"
            error_tracker.record_error(kind, str(e), {"error_type": type(e).__name__})
            return {
                "response": f"Error: {e}",
                "searched": False,
                "products": [],
                "error": True,
            }

    async def _handle_reviews(self, directive: Directive, assistant_response: str) -> Dict[str, Any]:
        try:
            result = await self.reviews.get_reviews(directive.argument)
        except OCCError as e:
            error_tracker.record_error(
                "occ_error", f"Reviews fetch error: {e.details}", {"code": directive.argument}
            )
            return {
                "response": assistant_response + "\n\n(Unable to fetch reviews)",
                "reviews": [],
                "reviewsSummary": {"count": 0, "averageRating": 0},
                "error": True,
            }
        return {"response": assistant_response, **result}

    async def _handle_view(self, directive: Directive, assistant_response: str) -> Dict[str, Any]:
        try:
            product = await self.client.get_product(directive.argument)
        except OCCError as e:
            error_tracker.record_error(
                "occ_error", f"Product view error: {e.details}", {"code": directive.argument}
            )
            return {
                "response": assistant_response + "\n\n(Unable to fetch product details)",
                "viewed": False,
                "product": None,
                "error": True,
            }
        return {"response": assistant_response, "viewed": True, "product": product}

    async def _handle_search(self, directive: Directive, user_input: str) -> Dict[str, Any]:
        outcome = await self.search.search(directive.argument)
        refined = await self.llm.generate(build_refined_prompt(user_input, outcome.prompt_text))
        return {"response": refined, "searched": True, "products": outcome.products}


_agent: Optional[ShoppingAgent] = None


def get_shopping_agent() -> ShoppingAgent:
    """Get the shared agent instance."""
    global _agent
    if _agent is None:
        _agent = ShoppingAgent()
    return _agent

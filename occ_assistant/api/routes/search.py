"""Conversational search route."""
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from occ_assistant.agent.shopping_agent import get_shopping_agent
from occ_assistant.api.schemas import SearchRequest
from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.analytics.logger import logger
from occ_assistant.utils.errors import APIError

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search")
async def search(body: Optional[SearchRequest] = None):
    """Run the shopping agent on the user's message."""
    body = body or SearchRequest()
    if not body.query or not body.query.strip():
        raise APIError(400, "Query is required")

    try:
        agent = get_shopping_agent()
        return await agent.run(body.query)
    except Exception as e:
        error_tracker.record_error(
            "server_error",
            f"Search failed: {e}",
            {"error_type": type(e).__name__, "query": body.query[:100]},
        )
        logger.error(f"Error in search endpoint: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": str(e),
                "response": "An error occurred while processing your request",
            },
        )

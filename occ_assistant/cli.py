"""Command-line interface for asking the shopping agent a single question."""
import argparse
import asyncio
import json
import sys
from typing import List, Optional

from occ_assistant.agent.shopping_agent import get_shopping_agent


DEFAULT_QUERY = "I am looking for a high-end camera"


async def ask(query: str) -> dict:
    """Run the agent once for ``query``."""
    return await get_shopping_agent().run(query)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Ask the OCC shopping assistant a question")
    parser.add_argument("query", nargs="?", default=DEFAULT_QUERY, help="What to ask the assistant")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args(argv)

    result = asyncio.run(ask(args.query))

    if args.json:
        print(json.dumps(result, indent=2, default=str))
    else:
        print(f"\n[Agent]: {result.get('response', '')}")
        for product in result.get("products") or []:
            price = (product.get("price") or {}).get("formattedValue", "")
            print(f"  - {product.get('code', '')} {product.get('name', '')} {price}".rstrip())

    return 1 if result.get("error") else 0


if __name__ == "__main__":
    sys.exit(main())

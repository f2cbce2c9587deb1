"""Pytest configuration and fixtures for tests."""
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment variables BEFORE any imports
os.environ["GOOGLE_API_KEY"] = "test-key-for-ci"
os.environ["LLM_PROVIDER"] = "google"
os.environ["EMBEDDING_PROVIDER"] = "google"
os.environ["OCC_BASE_URL"] = "https://occ.test/occ/v2"
os.environ["OCC_SITE_ID"] = "electronics"
os.environ["OCC_MAX_RETRIES"] = "1"
os.environ["LLM_MAX_RETRIES"] = "1"
os.environ["LOG_FILE"] = ""
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["STATIC_DIR"] = str(project_root / "tests" / "no-static-dir")

import json
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from occ_assistant.analytics.error_tracker import error_tracker
from occ_assistant.memory.order_store import order_store
from occ_assistant.memory.user_store import user_store
from occ_assistant.services.occ_client import OCCClient, occ_client
from occ_assistant.utils.cache import embedding_cache

SITE_PATH = "/occ/v2/electronics"


class FakeOCC:
    """Routes requests to canned handlers keyed by method and path."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int = 200, json_body=None, handler=None):
        if handler is None:
            def handler(request, _status=status_code, _body=json_body):
                return httpx.Response(_status, json=_body if _body is not None else {})
        self.routes[(method.upper(), SITE_PATH + path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"errors": [{"message": f"No route {request.url.path}"}]})
        return handler(request)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path == SITE_PATH + path
        ]

    @staticmethod
    def body(request: httpx.Request) -> Optional[dict]:
        return json.loads(request.content) if request.content else None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeEmbeddings:
    """Embedding generator returning vectors from a lookup table."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None):
        self.vectors = vectors or {}
        self.calls: List[str] = []

    async def embed_text(self, text: str) -> List[float]:
        self.calls.append(text)
        return self.vectors.get(text, [])


class FakeLLM:
    """LLM client that replays scripted replies and records prompts."""

    def __init__(self, *replies: str):
        self.replies = list(replies)
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def reset_state():
    """Clear in-process stores between tests."""
    user_store.clear()
    order_store.clear()
    embedding_cache.clear()
    error_tracker.reset()
    yield


@pytest.fixture
def fake_occ(monkeypatch):
    """Point the shared OCC client at an in-memory fake platform."""
    fake = FakeOCC()
    monkeypatch.setattr(occ_client, "transport", fake.transport)
    return fake


@pytest.fixture
def fake_occ_client():
    """A standalone OCC client plus its fake platform."""
    fake = FakeOCC()
    return OCCClient(transport=fake.transport), fake

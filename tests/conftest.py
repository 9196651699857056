"""
SkillSwap admin client - Test Configuration and Fixtures

HTTP is faked with httpx.MockTransport; every request the client makes is
kept in FakeBackend.requests so tests can assert on what was (not) sent.
"""
import json
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from faker import Faker

from skillswap.api_client import SkillSwapAPIClient
from skillswap.config import ClientConfig

fake = Faker()

Handler = Callable[[httpx.Request], Any]


class FakeBackend:
    """Route table + request log standing in for the SkillSwap backend"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Handler] = {}

    def on(self, method: str, path: str, handler: Optional[Handler] = None,
           json_body: Any = None, status: int = 200) -> None:
        if handler is None:
            def handler(request: httpx.Request, _body=json_body, _status=status):
                return httpx.Response(_status, json=_body)
        self.routes[(method.upper(), path)] = handler

    def handle(self, request: httpx.Request):
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Route not found"})
        return handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def params(self, method: str, path: str) -> List[Dict[str, str]]:
        return [dict(r.url.params) for r in self.calls(method, path)]


def make_message(index: int, status: str = "pending") -> Dict[str, Any]:
    return {
        "_id": f"msg{index:04d}",
        "name": fake.name(),
        "email": fake.email(),
        "message": fake.sentence(),
        "status": status,
        "createdAt": "2024-05-08T10:00:00.000Z",
    }


def paged_handler(items_field: str, total: int, limit: int = 20,
                  make_item: Callable[[int], Dict[str, Any]] = make_message) -> Handler:
    """Serve `total` items in pages, echoing currentPage as a string like the backend does"""
    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        size = int(request.url.params.get("limit", str(limit)))
        start = (page - 1) * size
        items = [make_item(i) for i in range(start, min(start + size, total))]
        return httpx.Response(200, json={
            items_field: items,
            "currentPage": str(page),
            "totalPages": math.ceil(total / size),
            "total": total,
        })
    return handler


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode()) if request.content else None


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    """Config isolated from the user's home directory"""
    return ClientConfig(
        api_base_url="http://skillswap.test",
        session_cookie="s%3Atest-session",
        config_dir=str(tmp_path / ".skillswap"),
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api(config: ClientConfig, backend: FakeBackend) -> SkillSwapAPIClient:
    return SkillSwapAPIClient(config, transport=backend.transport())

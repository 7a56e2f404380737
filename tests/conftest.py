from typing import Any, Dict, List

import httpx
import pytest

from autowin.clients.statbotics_client import StatboticsClient
from autowin.clients.tba_client import TBAClient


STATBOTICS_URL = "https://stats.test/v3"
TBA_URL = "https://tba.test/api/v3"
TBA_KEY = "test-tba-key-0123456789"


class StubTransport:
    """Serves canned responses keyed by URL path and records every request.

    A route value may be a JSON body (served with 200), an int status code,
    an exception to raise, or a callable taking the request.
    """

    def __init__(self, routes: Dict[str, Any]) -> None:
        self.routes = routes
        self.calls: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        if isinstance(route, int):
            return httpx.Response(route)
        return httpx.Response(200, json=route)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def paths(self) -> List[str]:
        return [call.url.path for call in self.calls]


@pytest.fixture
def routes() -> Dict[str, Any]:
    return {}


@pytest.fixture
def transport(routes: Dict[str, Any]) -> StubTransport:
    return StubTransport(routes)


@pytest.fixture
def statbotics(transport: StubTransport) -> StatboticsClient:
    return StatboticsClient(
        client=transport.client(), base_url=STATBOTICS_URL, canary_team=254
    )


@pytest.fixture
def tba(transport: StubTransport) -> TBAClient:
    return TBAClient(client=transport.client(), api_key=TBA_KEY, base_url=TBA_URL)

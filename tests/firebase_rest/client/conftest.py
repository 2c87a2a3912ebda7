"""Shared fixtures for client tests."""

import itertools
import json
from urllib.parse import unquote

import httpx
import pytest
import respx

from firebase_rest.paths import decode_path

BASE_URL = "https://test-db.firebaseio.com"
TOKEN = "test-token"


class FakeDatabase:
    """
    In-memory stand-in for the REST API.

    Handles GET/PUT/POST and POST with the PATCH override on a nested dict,
    including delete-on-null and pruning of emptied parents.
    """

    def __init__(self) -> None:
        self.root: dict = {}
        self.requests: list[httpx.Request] = []
        self._keys = itertools.count(1)

    def read(self, segments: list[str]):
        node = self.root
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    def write(self, segments: list[str], value) -> None:
        if not segments:
            self.root = value if isinstance(value, dict) else {}
            return

        parents = [self.root]
        node = self.root
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
            parents.append(node)

        if value is None:
            node.pop(segments[-1], None)
            # Prune parents left empty by the delete
            for depth in range(len(segments) - 1, 0, -1):
                if parents[depth]:
                    break
                parents[depth - 1].pop(segments[depth - 1], None)
        else:
            node[segments[-1]] = value

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.params.get("auth") != TOKEN:
            return httpx.Response(401, json={"error": "Permission denied"})

        # Split before unquoting so an encoded "/" stays inside its segment
        raw_path = request.url.raw_path.split(b"?")[0].decode("ascii").removesuffix(".json")
        segments = [unquote(s) for s in decode_path(raw_path)]
        method = request.headers.get("X-HTTP-Method-Override", request.method)

        if method == "GET":
            result = self.read(segments)
        elif method == "PUT":
            result = json.loads(request.content)
            self.write(segments, result)
        elif method == "POST":
            key = f"-K{next(self._keys):04d}"
            self.write(segments + [key], json.loads(request.content))
            result = {"name": key}
        elif method == "PATCH":
            result = json.loads(request.content)
            for child, value in result.items():
                self.write(segments + [child], value)
        else:
            return httpx.Response(405)

        return httpx.Response(200, content=json.dumps(result).encode())


@pytest.fixture
def fake_db():
    """Route every request to BASE_URL through a FakeDatabase."""
    db = FakeDatabase()
    with respx.mock(assert_all_called=False) as router:
        router.route(host="test-db.firebaseio.com").mock(side_effect=db.handle)
        yield db

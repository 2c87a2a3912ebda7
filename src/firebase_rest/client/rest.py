"""Request/response client for the database REST API."""

import json
import logging
from typing import Any, Iterable

import httpx

from firebase_rest.client.models import ClientConfig
from firebase_rest.client.transport import build_http_client
from firebase_rest.errors import DecodeError, RequestError
from firebase_rest.paths import encode_path

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
METHOD_OVERRIDE_HEADER = "X-HTTP-Method-Override"


def _encode_body(value: Any) -> bytes:
    """Serialize a value as compact JSON (None is sent as the literal null)."""
    return json.dumps(value, separators=(",", ":")).encode("utf-8")


def _decode_body(response: httpx.Response) -> Any:
    """Parse a JSON response body into plain Python values."""
    try:
        return json.loads(response.text)
    except json.JSONDecodeError as e:
        raise DecodeError(
            f"Response from {response.request.method} {response.request.url.path} is not valid JSON: {e}",
            body=response.text,
        ) from e


class RestClient:
    """
    Blocking client for get/set/push/update against one database.

    Every request is sent to <root_url>/<path>.json?auth=<token>. Each call is
    a single round-trip: no caching, batching, or retries.

    Use as a context manager, or call close() when done.
    """

    def __init__(self, root_url: str, token: str | None, config: ClientConfig | None = None) -> None:
        self.root_url = root_url
        self._http = build_http_client(root_url, token, config)

    def _request(
        self,
        method: str,
        path: Iterable[object],
        value: Any = None,
        has_body: bool = False,
        headers: dict[str, str] | None = None,
    ) -> Any:
        resource = encode_path(path)
        request_headers = dict(headers or {})
        content = None
        if has_body:
            content = _encode_body(value)
            request_headers["Content-Type"] = JSON_CONTENT_TYPE

        logger.debug("%s %s", method, resource)

        try:
            response = self._http.request(method, resource, content=content, headers=request_headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise RequestError(
                f"HTTP {status} from {method} {resource}: {e.response.text}",
                status_code=status,
                body=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise RequestError(f"{method} {resource} failed: {e}") from e

        return _decode_body(response)

    def get(self, path: Iterable[object]) -> Any:
        """Read the value at path (None if nothing is stored there)."""
        return self._request("GET", path)

    def set(self, path: Iterable[object], value: Any) -> Any:
        """
        Replace the value at path.

        Setting None deletes the subtree at path.

        Returns:
            The value as written, echoed by the service
        """
        return self._request("PUT", path, value, has_body=True)

    def push(self, path: Iterable[object], value: Any) -> Any:
        """
        Append value as a new child with a generated key.

        Returns:
            {"name": "<generated key>"}
        """
        return self._request("POST", path, value, has_body=True)

    def update(self, path: Iterable[object], value: Any) -> Any:
        """Shallow-merge the children in value into path (siblings are kept)."""
        return self._request(
            "POST",
            path,
            value,
            has_body=True,
            headers={METHOD_OVERRIDE_HEADER: "PATCH"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def rest_client(root_url: str, token: str | None, config: ClientConfig | None = None) -> RestClient:
    """Create a REST client for root_url authenticated with token."""
    return RestClient(root_url, token, config)


def get(client: RestClient, path: Iterable[object]) -> Any:
    return client.get(path)


def set(client: RestClient, path: Iterable[object], value: Any) -> Any:  # noqa: A001
    return client.set(path, value)


def push(client: RestClient, path: Iterable[object], value: Any) -> Any:
    return client.push(path, value)


def update(client: RestClient, path: Iterable[object], value: Any) -> Any:
    return client.update(path, value)

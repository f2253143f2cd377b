"""JSON-over-HTTP endpoint used by the CRUD actions.

Sends PostgREST-style requests with ``requests`` and hands the decoded JSON
records to a completion callback.
"""

from __future__ import annotations

import random
import time
from typing import Any, Callable, Iterable, Sequence

import requests

from CollectionSync.core.predicate import RequestArgument
from CollectionSync.errors import EndpointConfigurationError
from CollectionSync.utils.log import log

DEFAULT_TIMEOUT = 30.0
MAX_ATTEMPTS = 4
BASE_PAUSE = 0.8
MAX_SLEEP = 8.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}
IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})

HEADERS = {
    "User-Agent": "collection-sync/0.1",
    "Accept": "application/json",
}

SuccessCallback = Callable[[list[Any]], None]


def parse_header(header: str) -> tuple[str, str]:
    """Split a ``"Name: value"`` header line.

    Raises:
        ValueError: If the line has no name or no ``:`` separator.
    """
    name, sep, value = header.partition(":")
    name = name.strip()
    if sep != ":" or not name:
        raise ValueError(f"Invalid header line: {header!r}")
    return name, value.strip()


def build_headers(*groups: Iterable[str]) -> dict[str, str]:
    """Merge header lines; later groups override earlier ones."""
    headers = dict(HEADERS)
    for group in groups:
        for line in group:
            name, value = parse_header(line)
            headers[name] = value
    return headers


class JsonEndpoint:
    """HTTP endpoint for one resource.

    Args:
        url: Resource URL. Can be supplied later with ``with_url``.
        method: HTTP method used for every request.
        headers: Header lines sent with every request.
        timeout: Request timeout in seconds.
        session: Optional shared ``requests.Session``. When omitted the
            endpoint creates and owns one on first use.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        method: str = "GET",
        headers: Sequence[str] = (),
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.method = method.upper()
        self.headers = tuple(headers)
        self.timeout = timeout
        self._session = session
        self._owns_session = False

    def with_url(self, url: str) -> JsonEndpoint:
        """Return a copy of this endpoint pointing at ``url``."""
        return JsonEndpoint(
            url,
            method=self.method,
            headers=self.headers,
            timeout=self.timeout,
            session=self._session,
        )

    def close(self) -> None:
        """Close the HTTP session if this endpoint created it."""
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def __enter__(self) -> JsonEndpoint:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute(
        self,
        *,
        success: SuccessCallback,
        headers: Sequence[str] = (),
        arguments: Sequence[RequestArgument] = (),
        data: Any = None,
    ) -> None:
        """Send one request and pass the returned records to ``success``.

        ``success`` is called exactly once when the request succeeds and is
        never called otherwise.

        Args:
            success: Callback receiving the list of returned records.
            headers: Per-request header lines, e.g. ``Range: 0-10``.
            arguments: URL filter arguments, sent in order.
            data: JSON-serializable request body.

        Raises:
            EndpointConfigurationError: If the endpoint has no URL.
            requests.RequestException: If the request fails.
            ValueError: If the response body is not a JSON object or array.
        """
        if not self.url:
            raise EndpointConfigurationError("Endpoint URL is not configured")

        request_headers = build_headers(self.headers, headers)
        params = [argument.as_pair() for argument in arguments]
        log.debug("%s %s params=%s headers=%s", self.method, self.url, params, request_headers)

        response = self._send_with_retry(headers=request_headers, params=params, data=data)
        response.raise_for_status()
        success(_decode_records(response))

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self._session

    def _send_with_retry(
        self,
        *,
        headers: dict[str, str],
        params: list[tuple[str, str]],
        data: Any,
    ) -> requests.Response:
        """Issue the request, retrying transient failures for idempotent methods."""
        attempts = MAX_ATTEMPTS if self.method in IDEMPOTENT_METHODS else 1
        session = self._get_session()
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = session.request(
                    self.method,
                    self.url,
                    params=params,
                    headers=headers,
                    json=data,
                    timeout=self.timeout,
                )
                if response.status_code in RETRYABLE_STATUS and attempt < attempts:
                    raise requests.HTTPError(f"HTTP {response.status_code}", response=response)
                return response
            except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as error:
                last_error = error
                if attempt >= attempts:
                    raise
                delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
                log.debug(
                    "%s %s retry attempt=%d/%d delay=%.2fs error=%s",
                    self.method,
                    self.url,
                    attempt,
                    attempts,
                    delay,
                    error,
                )
                time.sleep(delay)

        assert last_error is not None
        raise last_error

    def __repr__(self) -> str:
        return f"JsonEndpoint(url={self.url!r}, method={self.method!r}, headers={self.headers!r})"


def _decode_records(response: requests.Response) -> list[Any]:
    """Decode a response body into a list of records."""
    if not response.content:
        return []
    payload = response.json()
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return [payload]
    raise ValueError(f"Expected a JSON object or array, got {type(payload).__name__}")

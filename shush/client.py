"""HTTP transport for the Sensu API."""

import json
import logging
from typing import Any, Optional
from urllib.parse import quote, urlparse

import requests

from .errors import ConfigurationError, NotFoundError, SensuError
from .payload import SilencePayload

DEFAULT_TIMEOUT = 10

CLIENTS = "/clients"
RESULTS = "/results"
SILENCED = "/silenced"
SILENCED_CLEAR = "/silenced/clear"

logger = logging.getLogger(__name__)


def client_endpoint(name: str) -> str:
    """Path of a single client, with the name URL-quoted."""
    return f"{CLIENTS}/{quote(name, safe='')}"


class SensuClient:
    """
    Blocking client bound to one Sensu API base URL.

    Every call completes before returning. A 404 raises NotFoundError so
    callers can treat a missing resource as an answer rather than a failure.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        parsed = urlparse(base_url)
        if not (parsed.scheme and parsed.netloc):
            raise ConfigurationError(f"Invalid Sensu API URL: {base_url!r}")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def __enter__(self) -> "SensuClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def url_for(self, endpoint: str) -> str:
        if urlparse(endpoint).netloc:
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def request(self, method: str, endpoint: str,
                payload: Optional[SilencePayload] = None) -> Optional[Any]:
        """Issue one request; return decoded JSON, or None for an empty body."""
        url = self.url_for(endpoint)
        headers = {}
        data = None
        if payload is not None:
            # Sensu rejects chunked bodies, so always send an explicit length
            data = json.dumps(payload.to_dict()).encode("utf-8")
            headers["Content-Type"] = "application/json"
            headers["Content-Length"] = str(len(data))

        logger.debug("%s %s %s", method, url, data.decode("utf-8") if data else "")
        try:
            resp = self.session.request(method, url, data=data, headers=headers,
                                        timeout=self.timeout)
        except requests.RequestException as e:
            raise SensuError(f"Network error on {method} {url}: {e}") from e

        if resp.status_code == 404:
            raise NotFoundError(url)
        if not resp.ok:
            raise SensuError(f"{method} {url} failed with status {resp.status_code}",
                             status=resp.status_code, body=resp.text)

        text = resp.text
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise SensuError(f"Malformed JSON from {method} {url}: {e}",
                             status=resp.status_code, body=text) from e

    def get(self, endpoint: str) -> Optional[Any]:
        return self.request("GET", endpoint)

    def post(self, endpoint: str, payload: SilencePayload) -> Optional[Any]:
        return self.request("POST", endpoint, payload)

"""httpx-based client for the Elasticsearch cluster state API.

``fetch_cluster_state`` returns a decoded ``ClusterState`` or raises one of
ClusterUnreachableError / ClusterResponseError / SnapshotDecodeError.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from es_health_exporter.cluster_connector.models import ClusterState

logger = logging.getLogger(__name__)

CLUSTER_STATE_PATH = "/_cluster/state"


class ClusterStateError(Exception):
    """Base class for a failed cluster state poll."""


class ClusterUnreachableError(ClusterStateError):
    """Raised when the cluster cannot be reached or the request times out."""


class ClusterResponseError(ClusterStateError):
    """Raised when the cluster answers with a non-success status."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP request failed with code {status_code}: {detail}")


class SnapshotDecodeError(ClusterStateError):
    """Raised when the response body is not a decodable cluster state."""


class ClusterStateClient:
    """Synchronous httpx client for a single Elasticsearch endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._base_url}{CLUSTER_STATE_PATH}"

    def _get(self, url: str) -> httpx.Response:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(url)
        except httpx.TimeoutException as e:
            raise ClusterUnreachableError(f"Request to {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            # transport errors plus body errors such as a broken Content-Encoding
            raise ClusterUnreachableError(f"Failed to get cluster state from {url}: {e}") from e

        if resp.status_code != httpx.codes.OK:
            raise ClusterResponseError(resp.status_code, resp.text[:200])
        return resp

    def fetch_cluster_state(self) -> ClusterState:
        """GET /_cluster/state and decode it."""
        resp = self._get(self.url)
        try:
            return ClusterState.model_validate_json(resp.content)
        except ValidationError as e:
            raise SnapshotDecodeError(
                f"Failed to decode cluster state ({e.error_count()} errors): {e}"
            ) from e

"""Prometheus collector for per-index health.

Every scrape runs one poll: fetch ``/_cluster/state``, decode, aggregate,
then yield one ``<namespace>_index_health_status`` sample per index with the
severity (0 green, 1 yellow, 2 red) as its value. The up / total_scrapes /
json_parse_failures series are owned by the collector and yielded on every
scrape, including failed ones.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from prometheus_client import Counter, Gauge
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from es_health_exporter.cluster_connector.client import (
    ClusterStateClient,
    ClusterStateError,
    SnapshotDecodeError,
)
from es_health_exporter.health.aggregator import BlockMatch, aggregate
from es_health_exporter.health.models import STATUS_LABELS, HealthRecord

logger = logging.getLogger(__name__)

SUBSYSTEM = "index_health"


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts with underscores: ``<namespace>_<subsystem>_<name>``."""
    return "_".join(part for part in (namespace, subsystem, name) if part)


class PollState:
    """Outcome of the most recent poll, read by the /health endpoint."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.up: bool | None = None
        self.last_poll: str | None = None
        self.last_error: str | None = None
        self.indices: int = 0

    def record(self, up: bool, indices: int = 0, error: str | None = None) -> None:
        with self._lock:
            self.up = up
            self.last_poll = datetime.now(timezone.utc).isoformat()
            self.last_error = error
            self.indices = indices

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "up": self.up,
                "last_poll": self.last_poll,
                "last_error": self.last_error,
                "indices": self.indices,
            }


class IndexHealthCollector(Collector):
    """Custom collector: one cluster state poll per ``collect()`` call."""

    def __init__(
        self,
        client: ClusterStateClient,
        namespace: str = "elasticsearch",
        block_match: BlockMatch = "substring",
    ) -> None:
        self.client = client
        self.block_match = block_match
        self.state = PollState()
        self._status_name = build_fq_name(namespace, SUBSYSTEM, "status")

        # Unregistered: yielded from collect() alongside the per-index family.
        self.up = Gauge(
            build_fq_name(namespace, SUBSYSTEM, "up"),
            "Was the last scrape of the ElasticSearch index health endpoint successful.",
            registry=None,
        )
        self.total_scrapes = Counter(
            build_fq_name(namespace, SUBSYSTEM, "total_scrapes"),
            "Current total ElasticSearch index health scrapes.",
            registry=None,
        )
        self.json_parse_failures = Counter(
            build_fq_name(namespace, SUBSYSTEM, "json_parse_failures"),
            "Number of errors while parsing JSON.",
            registry=None,
        )

    def poll(self) -> dict[str, HealthRecord] | None:
        """Run one fetch → decode → aggregate cycle.

        Returns None when the fetch or decode failed; ``up`` is 0 then and no
        partial result is handed out.
        """
        self.total_scrapes.inc()
        try:
            cluster_state = self.client.fetch_cluster_state()
        except SnapshotDecodeError as e:
            self.json_parse_failures.inc()
            self._fail(e)
            return None
        except ClusterStateError as e:
            self._fail(e)
            return None

        self.up.set(1)
        records = aggregate(cluster_state, self.block_match)
        self.state.record(up=True, indices=len(records))
        logger.debug("Polled %s: %d indices", self.client.url, len(records))
        return records

    def _fail(self, error: ClusterStateError) -> None:
        self.up.set(0)
        self.state.record(up=False, error=str(error))
        logger.warning("Failed to fetch and decode cluster state: %s", error)

    def status_family(self, records: Mapping[str, HealthRecord]) -> GaugeMetricFamily:
        family = GaugeMetricFamily(
            self._status_name,
            "The index status and state.",
            labels=STATUS_LABELS,
        )
        for record in records.values():
            family.add_metric(record.label_values(), record.severity)
        return family

    def describe(self) -> Iterator[Metric]:
        # Lets the registry validate names without triggering a poll.
        yield self.status_family({})
        yield from self.up.describe()
        yield from self.total_scrapes.describe()
        yield from self.json_parse_failures.describe()

    def collect(self) -> Iterator[Metric]:
        records = self.poll()
        if records is not None:
            yield self.status_family(records)
        yield from self.up.collect()
        yield from self.total_scrapes.collect()
        yield from self.json_parse_failures.collect()

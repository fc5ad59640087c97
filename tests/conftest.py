"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from es_health_exporter.cluster_connector.client import ClusterStateClient
from es_health_exporter.cluster_connector.models import ClusterState
from tests.factories import build_payload, index_meta, shard_copy


@pytest.fixture
def make_state() -> Callable[..., ClusterState]:
    """Build a decoded ``ClusterState`` from section dicts."""

    def _make(**kwargs: Any) -> ClusterState:
        return ClusterState.model_validate(build_payload(**kwargs))

    return _make


@pytest.fixture
def two_index_state(make_state) -> ClusterState:
    """idx-a: metadata only. idx-b: read+write block and an unassigned replica."""
    return make_state(
        metadata={"idx-a": index_meta(uuid="a"), "idx-b": index_meta(uuid="b")},
        blocks={"idx-b": {"5": {"description": "frozen", "levels": ["read", "write"]}}},
        routing={
            "idx-b": {
                "0": [shard_copy(primary=True), shard_copy("UNASSIGNED", primary=False)],
            }
        },
    )


@pytest.fixture
def fake_client(two_index_state) -> MagicMock:
    """A ClusterStateClient whose fetch returns the two index snapshot."""
    client = MagicMock(spec=ClusterStateClient)
    client.url = "http://es.test:9200/_cluster/state"
    client.fetch_cluster_state.return_value = two_index_state
    return client

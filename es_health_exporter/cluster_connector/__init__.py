from es_health_exporter.cluster_connector.client import (
    ClusterResponseError,
    ClusterStateClient,
    ClusterStateError,
    ClusterUnreachableError,
    SnapshotDecodeError,
)
from es_health_exporter.cluster_connector.models import ClusterState

__all__ = [
    "ClusterResponseError",
    "ClusterState",
    "ClusterStateClient",
    "ClusterStateError",
    "ClusterUnreachableError",
    "SnapshotDecodeError",
]

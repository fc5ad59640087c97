"""Per-index health record and the ordered status it reduces to."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from es_health_exporter.cluster_connector.models import DEFAULT_DYNAMIC

# Block level tokens, also used as label names
READ = "read"
WRITE = "write"
METADATA_READ = "metadata_read"
METADATA_WRITE = "metadata_write"

BLOCK_LEVELS = (READ, WRITE, METADATA_READ, METADATA_WRITE)

# Label order of the index status series. Dashboards depend on these names.
STATUS_LABELS = (
    "index",
    "color",
    "state",
    "dynamic",
    "creation_date",
    "number_of_shards",
    "number_of_replicas",
    READ,
    WRITE,
    METADATA_READ,
    METADATA_WRITE,
    "es_cluster",
)


class HealthStatus(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def worst(self, other: HealthStatus) -> HealthStatus:
        """Return whichever of the two statuses is more severe."""
        return other if other.severity > self.severity else self


_SEVERITY = {HealthStatus.GREEN: 0, HealthStatus.YELLOW: 1, HealthStatus.RED: 2}


def bool_label(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class HealthRecord:
    """Merged view of one index across metadata, blocks and routing."""

    cluster: str
    index: str
    uuid: str = ""
    state: str = ""
    dynamic: str = DEFAULT_DYNAMIC
    creation_date: str = ""
    number_of_shards: str = ""
    number_of_replicas: str = ""
    read: bool = False
    write: bool = False
    metadata_read: bool = False
    metadata_write: bool = False
    status: HealthStatus = HealthStatus.GREEN

    @property
    def severity(self) -> int:
        return self.status.severity

    def label_values(self) -> list[str]:
        """Label values in ``STATUS_LABELS`` order."""
        return [
            self.index,
            self.status.value,
            self.state,
            self.dynamic,
            self.creation_date,
            self.number_of_shards,
            self.number_of_replicas,
            bool_label(self.read),
            bool_label(self.write),
            bool_label(self.metadata_read),
            bool_label(self.metadata_write),
            self.cluster,
        ]

"""Index health subsystem — record model and the cluster state aggregator."""

from .aggregator import aggregate, apply_blocks, apply_routing, build_base_records, shard_status
from .models import HealthRecord, HealthStatus

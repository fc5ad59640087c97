"""Index health aggregator — merges a cluster state into per-index records.

Three overlay passes, each keyed by index name:

1. metadata  -> one ``HealthRecord`` per index (the only pass that creates records)
2. blocks    -> read / write / metadata_read / metadata_write flags
3. routing   -> green / yellow / red from shard assignment

Blocks and routing are lookups into the records built by pass 1; entries for
indices missing from metadata are skipped. Nothing here raises for a
well-typed ``ClusterState``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Literal

from es_health_exporter.cluster_connector.models import (
    BlockDetail,
    Blocks,
    ClusterState,
    Metadata,
    RoutingTable,
    ShardCopy,
)
from es_health_exporter.health.models import (
    METADATA_READ,
    METADATA_WRITE,
    READ,
    WRITE,
    HealthRecord,
    HealthStatus,
)

logger = logging.getLogger(__name__)

BlockMatch = Literal["substring", "exact"]


# ── Pass 1: metadata ─────────────────────────────────────────────────────────


def build_base_records(cluster: str, metadata: Metadata) -> dict[str, HealthRecord]:
    """Create a default (green, unblocked) record for every index in metadata."""
    records: dict[str, HealthRecord] = {}
    for name, detail in metadata.indices.items():
        index_settings = detail.settings.index
        records[name] = HealthRecord(
            cluster=cluster,
            index=name,
            uuid=index_settings.uuid,
            state=detail.state,
            dynamic=detail.dynamic_mode,
            creation_date=index_settings.creation_date,
            number_of_shards=index_settings.number_of_shards,
            number_of_replicas=index_settings.number_of_replicas,
        )
    return records


# ── Pass 2: blocks ───────────────────────────────────────────────────────────


def _level_matcher(levels: list[str], match: BlockMatch):
    if match == "exact":
        level_set = set(levels)
        return lambda token: token in level_set
    # "metadata_write" contains "write": a metadata-only block also flags write
    joined = ",".join(levels)
    return lambda token: token in joined


def apply_block_levels(
    record: HealthRecord,
    entries: Iterable[BlockDetail],
    match: BlockMatch = "substring",
) -> None:
    """Raise the record's access flags for every level across ``entries``.

    Flags are only ever set, never cleared.
    """
    levels = [level for entry in entries for level in entry.levels]
    if not levels:
        return
    has = _level_matcher(levels, match)
    record.read = record.read or has(READ)
    record.write = record.write or has(WRITE)
    record.metadata_read = record.metadata_read or has(METADATA_READ)
    record.metadata_write = record.metadata_write or has(METADATA_WRITE)


def apply_blocks(
    records: Mapping[str, HealthRecord],
    blocks: Blocks,
    match: BlockMatch = "substring",
) -> None:
    for name, entries in blocks.indices.items():
        record = records.get(name)
        if record is None or not entries:
            continue
        apply_block_levels(record, entries.values(), match)


# ── Pass 3: routing ──────────────────────────────────────────────────────────


def shard_status(shards: Mapping[str, list[ShardCopy]]) -> HealthStatus:
    """Worst-copy-wins reduction over every copy of every shard.

    An unassigned replica makes the index yellow, an unassigned primary makes
    it red. Red is the ceiling so the scan stops at the first one.
    """
    status = HealthStatus.GREEN
    for copies in shards.values():
        for copy in copies:
            if not copy.unassigned:
                continue
            status = status.worst(HealthStatus.RED if copy.primary else HealthStatus.YELLOW)
            if status is HealthStatus.RED:
                return status
    return status


def apply_routing(records: Mapping[str, HealthRecord], routing_table: RoutingTable) -> None:
    for name, routing in routing_table.indices.items():
        record = records.get(name)
        if record is None:
            continue
        record.status = record.status.worst(shard_status(routing.shards))


# ── Composition ──────────────────────────────────────────────────────────────


def aggregate(state: ClusterState, match: BlockMatch = "substring") -> dict[str, HealthRecord]:
    """Merge a decoded cluster state into one ``HealthRecord`` per index."""
    records = build_base_records(state.cluster_name, state.metadata)
    apply_blocks(records, state.blocks, match)
    apply_routing(records, state.routing_table)
    logger.debug(
        "Aggregated %d indices for cluster %s (%d blocked, %d not green)",
        len(records),
        state.cluster_name,
        sum(1 for r in records.values() if r.read or r.write or r.metadata_read or r.metadata_write),
        sum(1 for r in records.values() if r.status is not HealthStatus.GREEN),
    )
    return records

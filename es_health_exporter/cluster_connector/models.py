"""Pydantic models for the Elasticsearch ``/_cluster/state`` response.

Only the sections the index health aggregator reads are modelled in depth:
``metadata.indices``, ``blocks.indices`` and ``routing_table.indices``.
Every field defaults to its zero value and JSON null is treated as a
missing key, so a sparse payload still decodes; unknown fields are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

UNASSIGNED = "UNASSIGNED"
DEFAULT_DYNAMIC = "true"


class _Model(BaseModel):
    # Settings such as number_of_shards are strings on the wire but some
    # clients and fixtures send numbers.
    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}

    @model_validator(mode="before")
    @classmethod
    def null_as_default(cls, data: Any) -> Any:
        # JSON null decodes like a missing key: the field default
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ── Blocks ───────────────────────────────────────────────────────────────────


class BlockDetail(_Model):
    description: str = ""
    retryable: bool = False
    levels: list[str] = Field(default_factory=list)


class Blocks(_Model):
    # cluster-wide blocks, keyed by block id
    global_: dict[str, BlockDetail] = Field(default_factory=dict, alias="global")
    # index name -> block id -> detail
    indices: dict[str, dict[str, BlockDetail]] = Field(default_factory=dict)


# ── Metadata ─────────────────────────────────────────────────────────────────


def normalize_dynamic(raw: Any) -> str:
    """Render a mapping's ``dynamic`` value as a label string ("" if unset)."""
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    return str(raw)


class TypeMapping(_Model):
    dynamic: Any = None
    properties: dict[str, Any] = Field(default_factory=dict)


class IndexSettings(_Model):
    creation_date: str = ""
    number_of_shards: str = ""
    number_of_replicas: str = ""
    uuid: str = ""


class SettingsSection(_Model):
    index: IndexSettings = Field(default_factory=IndexSettings)


class IndexMetadata(_Model):
    state: str = ""
    settings: SettingsSection = Field(default_factory=SettingsSection)
    # mapping type -> mapping, in payload order
    mappings: dict[str, TypeMapping] = Field(default_factory=dict)
    aliases: Any = None
    primary_terms: Any = None
    in_sync_allocations: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def dynamic_mode(self) -> str:
        """First non-empty ``dynamic`` setting across the type mappings."""
        candidates = (normalize_dynamic(m.dynamic) for m in self.mappings.values())
        return next((value for value in candidates if value), DEFAULT_DYNAMIC)


class Metadata(_Model):
    cluster_uuid: str = ""
    templates: Any = None
    indices: dict[str, IndexMetadata] = Field(default_factory=dict)
    repositories: Any = None
    index_graveyard: Any = Field(default=None, alias="index-graveyard")


# ── Routing ──────────────────────────────────────────────────────────────────


class ShardCopy(_Model):
    state: str = ""
    primary: bool = False
    node: str | None = None
    relocating_node: str | None = None
    shard: int = 0
    index: str = ""
    allocation_id: Any = None

    @property
    def unassigned(self) -> bool:
        return self.state == UNASSIGNED


class IndexRouting(_Model):
    # shard number -> copies (one primary, zero or more replicas)
    shards: dict[str, list[ShardCopy]] = Field(default_factory=dict)


class RoutingTable(_Model):
    indices: dict[str, IndexRouting] = Field(default_factory=dict)


class RoutingNodes(_Model):
    unassigned: list[Any] = Field(default_factory=list)
    nodes: dict[str, Any] = Field(default_factory=dict)


# ── Root ─────────────────────────────────────────────────────────────────────


class Node(_Model):
    name: str = ""
    ephemeral_id: str = ""
    transport_address: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)


class ClusterState(_Model):
    """Decoded ``GET /_cluster/state`` body."""

    cluster_name: str = ""
    cluster_uuid: str = ""
    compressed_size_in_bytes: int = 0
    version: int = 0
    state_uuid: str = ""
    master_node: str | None = None
    blocks: Blocks = Field(default_factory=Blocks)
    nodes: dict[str, Node] = Field(default_factory=dict)
    metadata: Metadata = Field(default_factory=Metadata)
    routing_table: RoutingTable = Field(default_factory=RoutingTable)
    routing_nodes: RoutingNodes = Field(default_factory=RoutingNodes)

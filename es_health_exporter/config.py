from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Elasticsearch cluster to poll
    es_uri: str = "http://localhost:9200"
    es_timeout: float = 5.0  # seconds, single boundary for the whole fetch

    # How block levels map onto the read/write flags.
    # substring: "metadata_write" also flags write (matches the legacy exporter)
    # exact: each level only flags its own column
    es_block_level_match: Literal["substring", "exact"] = "substring"

    # Metric naming: <namespace>_index_health_<metric>
    metrics_namespace: str = "elasticsearch"

    # Exporter HTTP surface
    exporter_host: str = "0.0.0.0"
    exporter_port: int = 9114

    # Logging
    log_level: str = "INFO"


settings = Settings()

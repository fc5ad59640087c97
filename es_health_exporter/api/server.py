"""FastAPI server exposing the index health metrics.

Endpoints:
  GET /metrics — Prometheus text format; every scrape polls the cluster once
  GET /health  — exporter liveness plus the outcome of the last poll
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from es_health_exporter.cluster_connector.client import ClusterStateClient
from es_health_exporter.config import settings
from es_health_exporter.metrics.collector import IndexHealthCollector

logger = logging.getLogger(__name__)


def build_collector() -> IndexHealthCollector:
    client = ClusterStateClient(base_url=settings.es_uri, timeout=settings.es_timeout)
    return IndexHealthCollector(
        client,
        namespace=settings.metrics_namespace,
        block_match=settings.es_block_level_match,
    )


def attach_collector(app: FastAPI, collector: IndexHealthCollector) -> None:
    """Register ``collector`` on a fresh registry owned by ``app``."""
    registry = CollectorRegistry()
    registry.register(collector)
    app.state.collector = collector
    app.state.registry = registry


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire the cluster client and collector on startup."""
    if getattr(app.state, "collector", None) is None:
        attach_collector(app, build_collector())
    logger.info(
        "Index health collector ready: es_uri=%s namespace=%s block_match=%s",
        settings.es_uri,
        settings.metrics_namespace,
        settings.es_block_level_match,
    )
    yield
    logger.info("Exporter shutting down")


# ── App factory ──────────────────────────────────────────────────────────────


def create_app() -> FastAPI:
    app = FastAPI(
        title="Elasticsearch Index Health Exporter",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/metrics")
    def metrics(request: Request) -> Response:
        """Poll the cluster and render every registered collector."""
        output = generate_latest(request.app.state.registry)
        return Response(content=output, media_type=CONTENT_TYPE_LATEST)

    @app.get("/health")
    def health(request: Request) -> dict[str, Any]:
        collector: IndexHealthCollector = request.app.state.collector
        return {"ok": True, **collector.state.to_dict()}

    return app


app = create_app()

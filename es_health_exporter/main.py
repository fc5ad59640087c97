"""Entry point for the Elasticsearch index health exporter."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from es_health_exporter.cluster_connector.client import ClusterStateClient, ClusterStateError
from es_health_exporter.config import settings
from es_health_exporter.health.aggregator import aggregate
from es_health_exporter.health.models import BLOCK_LEVELS, HealthRecord, HealthStatus

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

_STATUS_STYLE = {
    HealthStatus.GREEN: "green",
    HealthStatus.YELLOW: "yellow",
    HealthStatus.RED: "bold red",
}


def run_server() -> None:
    """Start the exporter's HTTP server."""
    console.print(
        Panel.fit(
            f"[bold]Index Health Exporter[/bold]\n"
            f"Bind:    {settings.exporter_host}:{settings.exporter_port}\n"
            f"Cluster: {settings.es_uri}\n"
            f"Blocks:  {settings.es_block_level_match} level match",
            border_style="green",
        )
    )
    uvicorn.run(
        "es_health_exporter.api.server:app",
        host=settings.exporter_host,
        port=settings.exporter_port,
        log_level=settings.log_level.lower(),
    )


def render_table(records: dict[str, HealthRecord]) -> Table:
    table = Table(title="Index health")
    for column in ("index", "status", "state", "shards", "replicas", "dynamic", "blocks"):
        table.add_column(column)

    for record in sorted(records.values(), key=lambda r: (-r.severity, r.index)):
        blocked = [level for level in BLOCK_LEVELS if getattr(record, level)]
        table.add_row(
            record.index,
            f"[{_STATUS_STYLE[record.status]}]{record.status.value}[/]",
            record.state,
            record.number_of_shards,
            record.number_of_replicas,
            record.dynamic,
            ", ".join(blocked) or "-",
        )
    return table


def run_snapshot(es_uri: str) -> int:
    """Poll the cluster once and print the aggregated health."""
    client = ClusterStateClient(base_url=es_uri, timeout=settings.es_timeout)
    try:
        state = client.fetch_cluster_state()
    except ClusterStateError as e:
        console.print(f"[bold red]Poll failed:[/bold red] {e}")
        return 1

    records = aggregate(state, settings.es_block_level_match)
    console.print(render_table(records))
    console.print(f"[dim]Cluster: {state.cluster_name} | Indices: {len(records)}[/dim]")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Elasticsearch index health exporter")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Serve /metrics for Prometheus")

    snap = sub.add_parser("snapshot", help="Poll the cluster once and print index health")
    snap.add_argument("--es-uri", default=settings.es_uri, help="Elasticsearch base URL")

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "snapshot":
        sys.exit(run_snapshot(args.es_uri))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

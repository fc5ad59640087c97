from es_health_exporter.metrics.collector import IndexHealthCollector, PollState, build_fq_name

__all__ = ["IndexHealthCollector", "PollState", "build_fq_name"]

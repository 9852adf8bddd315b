from reddit_cache.monitoring.metrics import PrometheusExporter

__all__ = ["PrometheusExporter"]

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, write_to_textfile

from .metrics import Metrics
from .types import ErrorKind


logger = logging.getLogger(__name__)


class PrometheusExporter:
    """Write batch totals in the Prometheus text format.

    Meant for the node-exporter textfile collector: a one-shot batch has no
    long-lived process to scrape, so the numbers are dumped to a file.
    """

    def __init__(self, metrics: Metrics) -> None:
        self.metrics = metrics
        self.registry = CollectorRegistry()

        self.requests_total = Counter(
            'quotes_requests_total', 'Total number of quote URLs fetched', registry=self.registry
        )
        self.quotes_total = Counter(
            'quotes_retrieved_total', 'Total number of quotes retrieved', registry=self.registry
        )
        self.failures_total = Counter(
            'quotes_failures_total', 'Total number of failed quote fetches', ['kind'], registry=self.registry
        )
        self.avg_fetch_duration_seconds = Gauge(
            'quotes_avg_fetch_duration_seconds', 'Average fetch duration in seconds', registry=self.registry
        )
        self.batch_duration_seconds = Gauge(
            'quotes_batch_duration_seconds', 'Seconds since metrics collection started', registry=self.registry
        )

        self._last_requests = 0
        self._last_quotes = 0
        self._last_errors = {kind: 0 for kind in ErrorKind}

    def _update_metrics(self) -> None:
        totals, elapsed = self.metrics.snapshot()
        requests_delta = totals.requests - self._last_requests
        quotes_delta = totals.quotes - self._last_quotes

        if requests_delta > 0:
            self.requests_total.inc(requests_delta)
        if quotes_delta > 0:
            self.quotes_total.inc(quotes_delta)
        for kind, count in totals.errors.items():
            # touch the child so every kind is exported, even at zero
            child = self.failures_total.labels(kind=kind.value)
            errors_delta = count - self._last_errors.get(kind, 0)
            if errors_delta > 0:
                child.inc(errors_delta)
        if totals.requests > 0:
            self.avg_fetch_duration_seconds.set(totals.fetch_ms_sum / totals.requests / 1000.0)
        self.batch_duration_seconds.set(elapsed)

        self._last_requests = totals.requests
        self._last_quotes = totals.quotes
        self._last_errors = dict(totals.errors)

    def write(self, path: str) -> None:
        self._update_metrics()
        write_to_textfile(path, self.registry)
        logger.info("Prometheus metrics written to %s", path)

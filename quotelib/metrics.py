import threading
import time
from dataclasses import dataclass, field
from typing import Dict

from .types import ErrorKind, QuoteResult


@dataclass
class Totals:
    requests: int = 0
    quotes: int = 0
    failures: int = 0
    errors: Dict[ErrorKind, int] = field(default_factory=lambda: {kind: 0 for kind in ErrorKind})
    fetch_ms_sum: float = 0.0


class Metrics:
    def __init__(self):
        self._totals = Totals()
        self._lock = threading.Lock()
        self._start = time.time()

    def record_fetch(self, result: QuoteResult, fetch_ms: float) -> None:
        with self._lock:
            self._totals.requests += 1
            if result.ok:
                self._totals.quotes += 1
            else:
                self._totals.failures += 1
                self._totals.errors[result.kind] += 1
            self._totals.fetch_ms_sum += fetch_ms

    def snapshot(self) -> tuple[Totals, float]:
        with self._lock:
            t = Totals(
                requests=self._totals.requests,
                quotes=self._totals.quotes,
                failures=self._totals.failures,
                errors=dict(self._totals.errors),
                fetch_ms_sum=self._totals.fetch_ms_sum,
            )
        elapsed = max(1e-6, time.time() - self._start)
        return t, elapsed

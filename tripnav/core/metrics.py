"""Provider call metrics.

Collects latency and failure counts for external geocoding, routing and
weather calls.
"""
import time
from collections import defaultdict
from contextlib import contextmanager

_provider_timings_ms: dict[str, list[float]] = defaultdict(list)
_provider_failures: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
_stale_responses: dict[str, int] = defaultdict(int)


@contextmanager
def record_provider_latency(provider: str):
    start = time.perf_counter()
    try:
        yield
    finally:
        _provider_timings_ms[provider].append((time.perf_counter() - start) * 1000.0)


def record_provider_failure(provider: str, error_code: str) -> None:
    _provider_failures[provider][error_code] += 1


def record_stale_response(kind: str) -> None:
    _stale_responses[kind] += 1


def _percentiles(values: list[float]) -> dict:
    if not values:
        return {"count": 0, "p95_ms": None, "p99_ms": None}
    vals = sorted(values)
    count = len(vals)

    def _p(p: float) -> float:
        idx = int(round(p * (count - 1)))
        return vals[idx]
    return {"count": count, "p95_ms": _p(0.95), "p99_ms": _p(0.99)}


def snapshot_metrics() -> dict:
    return {
        "providers": {
            name: _percentiles(timings) for name, timings in _provider_timings_ms.items()
        },
        "failures": {
            name: dict(codes) for name, codes in _provider_failures.items()
        },
        "stale_responses": dict(_stale_responses),
    }


def reset_metrics() -> None:
    _provider_timings_ms.clear()
    _provider_failures.clear()
    _stale_responses.clear()

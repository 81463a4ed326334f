"""starledger.core.metrics

In-process counters and gauges for the ledger.

The chain store counts appends and refusals and tracks height; the ownership
gate counts issued challenges and rejected proofs by reason. The health route
publishes a snapshot. Nothing is exported to an external collector.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import TypeVar


@dataclass
class _Metric:
    name: str
    _value: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False)

    @property
    def value(self) -> float:
        with self._lock:
            return self._value


@dataclass
class Counter(_Metric):
    """Monotonic: appends and rejections only ever go up."""

    _value: int = 0

    def inc(self, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError(f"counter {self.name} cannot decrease (got {amount})")
        with self._lock:
            self._value += amount


@dataclass
class Gauge(_Metric):
    def set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)


_M = TypeVar("_M", bound=_Metric)


class MetricsRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._counters: dict[str, Counter] = {}
        self._gauges: dict[str, Gauge] = {}

    def _get_or_create(self, table: dict[str, _M], kind: type[_M], name: str) -> _M:
        with self._lock:
            metric = table.get(name)
            if metric is None:
                metric = table[name] = kind(name=name)
            return metric

    def counter(self, name: str) -> Counter:
        return self._get_or_create(self._counters, Counter, name)

    def gauge(self, name: str) -> Gauge:
        return self._get_or_create(self._gauges, Gauge, name)

    def snapshot(self) -> dict[str, float]:
        """Flat view keyed ``counter.<name>`` / ``gauge.<name>``."""
        with self._lock:
            entries = [("counter", m) for m in self._counters.values()]
            entries += [("gauge", m) for m in self._gauges.values()]
        return {f"{kind}.{m.name}": float(m.value) for kind, m in entries}


REGISTRY = MetricsRegistry()

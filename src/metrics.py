"""In-process shop metrics, standard library only.

Counters, gauges and histograms in the spirit of Prometheus client
metrics.  All metrics register themselves in a module registry and can be
rendered in the Prometheus text exposition format.  The shop runs on one
thread, so no locking is done.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

LabelValues = Tuple[str, ...]


class Metric:
    """Base class for all metrics."""

    kind = "untyped"

    def __init__(self, name: str, description: str, label_names: Iterable[str]):
        self.name = name
        self.description = description
        self.label_names = list(label_names)
        _METRIC_REGISTRY.append(self)

    def _key(self, labels: Dict[str, str]) -> LabelValues:
        return tuple(str(labels.get(k, "")) for k in self.label_names)

    def _format_labels(self, label_values: LabelValues, **more: str) -> str:
        pairs = [f'{name}="{value}"' for name, value in zip(self.label_names, label_values)]
        pairs.extend(f'{name}="{value}"' for name, value in more.items())
        return "{" + ",".join(pairs) + "}" if pairs else ""

    def _header(self) -> List[str]:
        return [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} {self.kind}"]

    def reset(self) -> None:
        raise NotImplementedError

    def to_prometheus(self) -> List[str]:
        raise NotImplementedError


class Counter(Metric):
    """Monotonic counter.  ``PRODUCTS_SOLD.inc(3, product="egg")``."""

    kind = "counter"

    def __init__(self, name: str, description: str, label_names: Iterable[str]):
        super().__init__(name, description, label_names)
        self._values: Dict[LabelValues, int] = defaultdict(int)

    def inc(self, amount: int = 1, **labels: str) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        self._values[self._key(labels)] += amount

    def value(self, **labels: str) -> int:
        return self._values.get(self._key(labels), 0)

    def reset(self) -> None:
        self._values.clear()

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        for label_values, value in self._values.items():
            lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Gauge(Metric):
    """A value that can go up and down."""

    kind = "gauge"

    def __init__(self, name: str, description: str, label_names: Iterable[str]):
        super().__init__(name, description, label_names)
        self._values: Dict[LabelValues, float] = {}

    def set(self, value: float, **labels: str) -> None:
        self._values[self._key(labels)] = float(value)

    def value(self, **labels: str) -> float:
        return self._values.get(self._key(labels), 0.0)

    def reset(self) -> None:
        self._values.clear()

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        for label_values, value in self._values.items():
            lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Histogram(Metric):
    """Histogram over ascending bucket upper bounds plus ``+Inf``."""

    kind = "histogram"

    def __init__(self, name: str, description: str, label_names: Iterable[str], buckets: Iterable[float]):
        super().__init__(name, description, label_names)
        self.buckets = sorted(float(b) for b in buckets)
        self._counts: Dict[LabelValues, List[int]] = defaultdict(lambda: [0] * len(self.buckets))
        self._sums: Dict[LabelValues, float] = defaultdict(float)
        self._totals: Dict[LabelValues, int] = defaultdict(int)

    def observe(self, value: float, **labels: str) -> None:
        key = self._key(labels)
        counts = self._counts[key]
        for idx, upper in enumerate(self.buckets):
            if value <= upper:
                counts[idx] += 1
                break
        self._totals[key] += 1
        self._sums[key] += float(value)

    def count(self, **labels: str) -> int:
        return self._totals.get(self._key(labels), 0)

    def reset(self) -> None:
        self._counts.clear()
        self._sums.clear()
        self._totals.clear()

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        for label_values, total in self._totals.items():
            cumulative = 0
            for idx, upper in enumerate(self.buckets):
                cumulative += self._counts[label_values][idx]
                lines.append(f"{self.name}_bucket{self._format_labels(label_values, le=str(upper))} {cumulative}")
            lines.append(f"{self.name}_bucket{self._format_labels(label_values, le='+Inf')} {total}")
            lines.append(f"{self.name}_sum{self._format_labels(label_values)} {self._sums[label_values]}")
            lines.append(f"{self.name}_count{self._format_labels(label_values)} {total}")
        return lines


_METRIC_REGISTRY: List[Metric] = []


def generate_metrics_text() -> str:
    """Render every registered metric in Prometheus text format."""
    lines: List[str] = []
    for metric in _METRIC_REGISTRY:
        lines.extend(metric.to_prometheus())
    return "\n".join(lines)


def reset_metrics() -> None:
    for metric in _METRIC_REGISTRY:
        metric.reset()


# -----------------------------------------------------------------------------
# Shop metrics
# -----------------------------------------------------------------------------

PRODUCTS_STOCKED_TOTAL = Counter(
    name="farm_products_stocked_total",
    description="Units added to the inventory",
    label_names=["product"],
)

PRODUCTS_SOLD_TOTAL = Counter(
    name="farm_products_sold_total",
    description="Units sold in recorded transactions",
    label_names=["product"],
)

CHECKOUTS_TOTAL = Counter(
    name="farm_checkouts_total",
    description="Checkouts, labelled recorded or empty",
    label_names=["outcome"],
)

TRANSACTION_OPEN = Gauge(
    name="farm_transaction_open",
    description="1 while a transaction is in progress",
    label_names=[],
)

BASKET_SIZE = Histogram(
    name="farm_basket_size",
    description="Units per recorded transaction",
    label_names=["kind"],
    buckets=[1, 2, 5, 10, 20, 50],
)

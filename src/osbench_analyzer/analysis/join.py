"""
Align per-environment benchmark results by benchmark name.

Only benchmarks with a positive primary value in every environment make it
into the joined set; an environment without data for a name drops that
name entirely rather than defaulting it to zero.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from osbench_analyzer.parsers.go_bench import BenchmarkMetrics


def best_label(values: Sequence[Tuple[str, float]]) -> Optional[str]:
    """Return the label with the strictly lowest value; the first one wins ties."""
    best = None
    min_value = None
    for label, value in values:
        if min_value is None or value < min_value:
            best = label
            min_value = value
    return best


@dataclass(frozen=True)
class BenchmarkRecord:
    """One benchmark's results across all environments of a configuration."""

    name: str
    metric_unit: str
    per_environment: Tuple[Tuple[str, BenchmarkMetrics], ...]
    best_environment: str

    @property
    def environment_labels(self) -> Tuple[str, ...]:
        return tuple(label for label, _ in self.per_environment)

    def metrics(self, label: str) -> BenchmarkMetrics:
        for env_label, metrics in self.per_environment:
            if env_label == label:
                return metrics
        raise KeyError(label)

    def primary(self, label: str) -> float:
        return self.metrics(label).primary

    def primaries(self) -> Tuple[Tuple[str, float], ...]:
        return tuple((label, m.primary) for label, m in self.per_environment)


def make_record(
    name: str,
    metric_unit: str,
    per_environment: Sequence[Tuple[str, BenchmarkMetrics]],
) -> BenchmarkRecord:
    """Build a record, deriving the best environment from the primary values."""
    per_environment = tuple(per_environment)
    best = best_label([(label, m.primary) for label, m in per_environment])
    return BenchmarkRecord(
        name=name,
        metric_unit=metric_unit,
        per_environment=per_environment,
        best_environment=best,
    )


def join_environments(
    environment_results: Sequence[Tuple[str, Mapping[str, BenchmarkMetrics]]],
    metric_unit: str = "ns/op",
) -> Tuple[BenchmarkRecord, ...]:
    """Join per-environment mappings into records sorted by benchmark name.

    ``environment_results`` is an ordered sequence of ``(label, mapping)``
    pairs; its order decides tie-breaking for the best environment.
    """
    if not environment_results:
        return ()

    _, first_mapping = environment_results[0]
    records = []
    for name in sorted(first_mapping):
        per_environment = []
        for label, mapping in environment_results:
            metrics = mapping.get(name)
            if metrics is None or not metrics.primary > 0:
                break
            per_environment.append((label, metrics))
        else:
            records.append(make_record(name, metric_unit, per_environment))

    return tuple(records)

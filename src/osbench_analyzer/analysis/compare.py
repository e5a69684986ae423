"""
Compare a subject environment against baseline environments.

A record counts as a win for the subject over a baseline when the
subject's primary value is strictly lower. Speedup is the baseline's
primary divided by the subject's and is only sampled for wins, so every
sample is greater than 1.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from osbench_analyzer.analysis.join import BenchmarkRecord
from osbench_analyzer.environment_registry import TestConfiguration


@dataclass(frozen=True)
class SpeedupStats:
    mean: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    median: float = 0.0
    samples: int = 0


@dataclass(frozen=True)
class BaselineComparison:
    """Subject vs one baseline within one test configuration."""

    baseline: str
    subject_wins: int
    stats: SpeedupStats


@dataclass(frozen=True)
class AnalysisResult:
    configuration: str
    subject: str
    total: int
    environment_wins: Tuple[Tuple[str, int], ...]
    comparisons: Tuple[BaselineComparison, ...]

    def comparison(self, baseline: str) -> BaselineComparison:
        for comparison in self.comparisons:
            if comparison.baseline == baseline:
                return comparison
        raise KeyError(baseline)

    @property
    def subject_wins(self) -> int:
        """Wins against the first baseline."""
        return self.comparisons[0].subject_wins if self.comparisons else 0

    @property
    def win_rate(self) -> float:
        """Percentage of records won against the first baseline."""
        return percentage(self.subject_wins, self.total)


@dataclass(frozen=True)
class RankedSpeedup:
    name: str
    configuration: str
    speedup: float


def percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


def median(values: Iterable[float]) -> float:
    """Median of values; 0 for an empty sequence."""
    ordered = sorted(values)
    if not ordered:
        return 0.0
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def summarize_speedups(samples: Sequence[float]) -> SpeedupStats:
    """Mean, min, max and median of speedup samples; all zero when empty."""
    if not samples:
        return SpeedupStats()
    return SpeedupStats(
        mean=sum(samples) / len(samples),
        minimum=min(samples),
        maximum=max(samples),
        median=median(samples),
        samples=len(samples),
    )


def relative_speedup(record: BenchmarkRecord, subject: str, baseline: str) -> Optional[float]:
    """Baseline/subject ratio regardless of which environment is faster."""
    subject_value = record.primary(subject)
    baseline_value = record.primary(baseline)
    if subject_value > 0 and baseline_value > 0:
        return baseline_value / subject_value
    return None


def speedup(record: BenchmarkRecord, subject: str, baseline: str) -> Optional[float]:
    """Speedup of subject over baseline, or None unless the subject strictly wins."""
    subject_value = record.primary(subject)
    baseline_value = record.primary(baseline)
    if subject_value > 0 and baseline_value > 0 and subject_value < baseline_value:
        return baseline_value / subject_value
    return None


def speedup_samples(
    records: Iterable[BenchmarkRecord], subject: str, baseline: str
) -> List[float]:
    samples = []
    for record in records:
        value = speedup(record, subject, baseline)
        if value is not None:
            samples.append(value)
    return samples


def outright_winner(record: BenchmarkRecord) -> Optional[str]:
    """Label whose primary is strictly below every other; None on a tie for the minimum."""
    primaries = record.primaries()
    if not primaries:
        return None
    lowest = min(value for _, value in primaries)
    leaders = [label for label, value in primaries if value == lowest]
    return leaders[0] if len(leaders) == 1 else None


def count_environment_wins(
    records: Sequence[BenchmarkRecord], labels: Sequence[str]
) -> Tuple[Tuple[str, int], ...]:
    """Number of records each environment won outright, in label order.

    A record whose minimum is shared by several environments is nobody's win.
    """
    winners = [outright_winner(r) for r in records]
    return tuple((label, winners.count(label)) for label in labels)


def analyze_configuration(
    configuration: str,
    records: Sequence[BenchmarkRecord],
    subject: str,
    baselines: Sequence[str],
    environment_labels: Optional[Sequence[str]] = None,
) -> AnalysisResult:
    """Compute win counts and speedup statistics for one test configuration."""
    if environment_labels is None:
        environment_labels = records[0].environment_labels if records else ()

    comparisons = []
    for baseline in baselines:
        samples = speedup_samples(records, subject, baseline)
        comparisons.append(
            BaselineComparison(
                baseline=baseline,
                subject_wins=len(samples),
                stats=summarize_speedups(samples),
            )
        )

    return AnalysisResult(
        configuration=configuration,
        subject=subject,
        total=len(records),
        environment_wins=count_environment_wins(records, environment_labels),
        comparisons=tuple(comparisons),
    )


def rank_speedups(
    records_by_configuration: Sequence[Tuple[str, Sequence[BenchmarkRecord]]],
    subject: str,
    baseline: str,
    limit: Optional[int] = 10,
) -> List[RankedSpeedup]:
    """Largest speedups across configurations, descending.

    Equal speedups keep their first-encountered order (configurations in
    declared order, records in name order).
    """
    ranked = []
    for configuration, records in records_by_configuration:
        for record in records:
            value = speedup(record, subject, baseline)
            if value is not None:
                ranked.append(RankedSpeedup(record.name, configuration, value))

    ranked.sort(key=lambda entry: -entry.speedup)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def overall_win_rate(results: Iterable[AnalysisResult]) -> Tuple[int, int, float]:
    """Total subject wins, total records and win rate across configurations."""
    wins = 0
    total = 0
    for result in results:
        wins += result.subject_wins
        total += result.total
    return wins, total, percentage(wins, total)


@dataclass(frozen=True)
class ConfigurationAnalysis:
    """Everything computed for one test configuration."""

    configuration: TestConfiguration
    records: Tuple[BenchmarkRecord, ...]
    result: AnalysisResult
    categories: tuple = ()  # CategorySummary entries in category order

    @property
    def name(self) -> str:
        return self.configuration.name

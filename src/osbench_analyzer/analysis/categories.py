"""
Group benchmarks into categories by name keyword.

Matching is a case-sensitive substring test and categories may overlap:
``BenchmarkStringBuilder1K`` belongs to every category listing "String".
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from osbench_analyzer.analysis.compare import speedup_samples, summarize_speedups
from osbench_analyzer.analysis.join import BenchmarkRecord
from osbench_analyzer.environment_registry import Category


@dataclass(frozen=True)
class CategorySummary:
    category: str
    configuration: str
    count: int
    average_speedups: Tuple[Tuple[str, float], ...]  # (baseline, mean speedup)

    def average_speedup(self, baseline: str) -> float:
        for label, value in self.average_speedups:
            if label == baseline:
                return value
        raise KeyError(baseline)


def filter_by_category(
    records: Sequence[BenchmarkRecord], category: Category
) -> Tuple[BenchmarkRecord, ...]:
    return tuple(r for r in records if category.matches(r.name))


def classify(
    records: Sequence[BenchmarkRecord], categories: Sequence[Category]
) -> List[Tuple[Category, Tuple[BenchmarkRecord, ...]]]:
    """Return (category, matching records) pairs in category order."""
    return [(category, filter_by_category(records, category)) for category in categories]


def summarize_categories(
    configuration: str,
    records: Sequence[BenchmarkRecord],
    categories: Sequence[Category],
    subject: str,
    baselines: Sequence[str],
) -> Tuple[CategorySummary, ...]:
    """Average speedup per baseline for each category with matching records."""
    summaries = []
    for category, members in classify(records, categories):
        if not members:
            continue
        averages = tuple(
            (baseline, summarize_speedups(speedup_samples(members, subject, baseline)).mean)
            for baseline in baselines
        )
        summaries.append(
            CategorySummary(
                category=category.name,
                configuration=configuration,
                count=len(members),
                average_speedups=averages,
            )
        )
    return tuple(summaries)

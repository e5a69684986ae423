"""
Reader for comparison CSV files.

Accepts both the per-configuration files written by ``analyze-benchmarks``
(one ``<environment> (ns/op)`` column per environment) and older exports
that carry an explicit ``Metric`` column with one row per metric unit.
Only primary-metric rows with positive values in every environment are kept.
The "Best Performance" column is kept as the best environment when it names a
configured environment; otherwise the best environment is recomputed from the
values.
"""

import csv
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from osbench_analyzer.analysis.join import BenchmarkRecord, make_record
from osbench_analyzer.environment_registry import Environment
from osbench_analyzer.parsers.go_bench import BenchmarkMetrics, parse_number

METRIC_COLUMN = "Metric"
BEST_COLUMN = "Best Performance"
_SKIP_MARKERS = ("System Info", "Test Type", "Summary")


def _find_column(header: Sequence[str], candidates: Sequence[str]) -> Optional[int]:
    stripped = [h.strip() for h in header]
    for candidate in candidates:
        if candidate in stripped:
            return stripped.index(candidate)
    return None


def environment_column(header: Sequence[str], environment: Environment, unit: str) -> Optional[int]:
    """Index of the primary-metric column for an environment, if present."""
    return _find_column(
        header,
        [
            f"{environment.title} ({unit})",
            f"{environment.label} ({unit})",
            environment.title,
            environment.label,
        ],
    )


def read_comparison_csv(
    path,
    environments: Sequence[Environment],
    metric_unit: str = "ns/op",
) -> Tuple[BenchmarkRecord, ...]:
    """Read joined records back from a comparison CSV.

    Raises OSError if the file cannot be read and ValueError if the header
    lacks a column for one of the environments.
    """
    with open(path, "r", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    if not rows:
        return ()

    header = rows[0]
    env_columns: List[Tuple[str, int]] = []
    for environment in environments:
        index = environment_column(header, environment, metric_unit)
        if index is None:
            raise ValueError(f"{path}: no column for environment {environment.label}")
        env_columns.append((environment.label, index))

    metric_index = _find_column(header, [METRIC_COLUMN])
    best_index = _find_column(header, [f"{BEST_COLUMN} ({metric_unit})", BEST_COLUMN])
    labels = [label for label, _ in env_columns]
    width = max([index for _, index in env_columns] + [metric_index or 0])

    records = []
    for row in rows[1:]:
        if len(row) <= width or not row[0].strip():
            continue
        if any(marker in row[0] for marker in _SKIP_MARKERS):
            continue
        if metric_index is not None and row[metric_index].strip() != metric_unit:
            continue

        per_environment = []
        for label, index in env_columns:
            value = parse_number(row[index])
            if value is None or not value > 0:
                break
            per_environment.append((label, BenchmarkMetrics(primary=value)))
        else:
            record = make_record(row[0].strip(), metric_unit, per_environment)
            best = ""
            if best_index is not None and best_index < len(row):
                best = row[best_index].strip()
            if best in labels:
                record = replace(record, best_environment=best)
            records.append(record)

    records.sort(key=lambda r: r.name)
    return tuple(records)

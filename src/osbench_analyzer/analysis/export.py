"""
CSV and JSON artifacts.

Each export is independent: a failure to write one file is reported on
stderr and the caller carries on with the others.
"""

import csv
import json
import sys
from dataclasses import asdict
from typing import List, Optional, Sequence

from osbench_analyzer.analysis.compare import (
    AnalysisResult,
    ConfigurationAnalysis,
    RankedSpeedup,
    relative_speedup,
)
from osbench_analyzer.analysis.join import BenchmarkRecord, best_label
from osbench_analyzer.environment_registry import Environment
from osbench_analyzer.parsers.go_bench import to_dict

NO_BEST = "--"


def _write_rows(output_path, header: List[str], rows: List[List[str]]) -> bool:
    try:
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
    except OSError as e:
        print(f"Error: Cannot write {output_path}: {e}", file=sys.stderr)
        return False
    return True


def summary_header(subject: str, baselines: Sequence[str]) -> List[str]:
    return (
        ["Test Style", "Total Benchmarks", f"{subject} Wins", "Win Rate %"]
        + [f"Avg Speedup vs {baseline}" for baseline in baselines]
        + ["Min Speedup", "Max Speedup", "Median Speedup"]
    )


def summary_row(result: AnalysisResult, baselines: Sequence[str]) -> List[str]:
    stats = result.comparisons[0].stats
    return (
        [result.configuration, str(result.total), str(result.subject_wins), f"{result.win_rate:.2f}"]
        + [f"{result.comparison(baseline).stats.mean:.2f}" for baseline in baselines]
        + [f"{stats.minimum:.2f}", f"{stats.maximum:.2f}", f"{stats.median:.2f}"]
    )


def export_analysis_csv(
    output_path,
    results: Sequence[AnalysisResult],
    subject: str,
    baselines: Sequence[str],
) -> bool:
    """One row per test configuration, in the order given."""
    rows = [summary_row(result, baselines) for result in results]
    if not _write_rows(output_path, summary_header(subject, baselines), rows):
        return False
    print(f"Summary CSV generated: {output_path}")
    return True


def best_secondary(values: Sequence[tuple]) -> str:
    """Best label for a secondary metric among environments that reported it.

    ``values`` holds ``(label, value, reported)`` triples; a metric that was
    missing from the raw output never counts as the best value.
    """
    label = best_label([(lbl, value) for lbl, value, reported in values if reported])
    return label or NO_BEST


def comparison_header(
    environments: Sequence[Environment], subject: str, baselines: Sequence[str], unit: str
) -> List[str]:
    header = ["Benchmark Name"]
    header += [f"{env.title} ({unit})" for env in environments]
    header.append(f"Best Performance ({unit})")
    header += [f"{subject} vs {baseline} Speedup" for baseline in baselines]
    header += [f"{env.title} (B/op)" for env in environments]
    header.append("Best Performance (B/op)")
    header += [f"{env.title} (allocs/op)" for env in environments]
    header.append("Best Performance (allocs/op)")
    return header


def comparison_row(
    record: BenchmarkRecord,
    environments: Sequence[Environment],
    subject: str,
    baselines: Sequence[str],
) -> List[str]:
    metrics = [(env.label, record.metrics(env.label)) for env in environments]

    row = [record.name]
    row += [f"{m.primary:.2f}" for _, m in metrics]
    row.append(record.best_environment)
    for baseline in baselines:
        ratio = relative_speedup(record, subject, baseline)
        row.append(f"{ratio:.2f}x" if ratio is not None else "N/A")
    row += [f"{m.bytes_per_op:.0f}" for _, m in metrics]
    row.append(best_secondary([(label, m.bytes_per_op, m.has_bytes) for label, m in metrics]))
    row += [f"{m.allocs_per_op:.0f}" for _, m in metrics]
    row.append(best_secondary([(label, m.allocs_per_op, m.has_allocs) for label, m in metrics]))
    return row


def export_comparison_csv(
    output_path,
    records: Sequence[BenchmarkRecord],
    environments: Sequence[Environment],
    subject: str,
    baselines: Sequence[str],
    unit: str = "ns/op",
) -> bool:
    """One row per benchmark with primary and secondary metric comparisons."""
    header = comparison_header(environments, subject, baselines, unit)
    rows = [comparison_row(r, environments, subject, baselines) for r in records]
    if not _write_rows(output_path, header, rows):
        return False
    print(f"   Created {output_path} ({len(records)} benchmarks)")
    return True


def build_json_report(
    analyses: Sequence[ConfigurationAnalysis],
    environments: Sequence[Environment],
    subject: str,
    baselines: Sequence[str],
    ranked: Sequence[RankedSpeedup],
    generated: Optional[str] = None,
) -> dict:
    report = {
        "metadata": {
            "environments": [asdict(env) for env in environments],
            "subject": subject,
            "baselines": list(baselines),
            "test_styles": [analysis.name for analysis in analyses],
            "generated": generated or "N/A",
        },
        "test_styles": [],
        "top_speedups": [asdict(entry) for entry in ranked],
    }

    for analysis in analyses:
        report["test_styles"].append(
            {
                "name": analysis.name,
                "filename": analysis.configuration.filename,
                "analysis": asdict(analysis.result),
                "categories": [asdict(summary) for summary in analysis.categories],
                "benchmarks": [
                    {
                        "name": record.name,
                        "best": record.best_environment,
                        "environments": {
                            label: to_dict(metrics)
                            for label, metrics in record.per_environment
                        },
                    }
                    for record in analysis.records
                ],
            }
        )
    return report


def export_json_report(
    output_path,
    analyses: Sequence[ConfigurationAnalysis],
    environments: Sequence[Environment],
    subject: str,
    baselines: Sequence[str],
    ranked: Sequence[RankedSpeedup],
    generated: Optional[str] = None,
) -> bool:
    report = build_json_report(analyses, environments, subject, baselines, ranked, generated)
    try:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
    except OSError as e:
        print(f"Error: Cannot write {output_path}: {e}", file=sys.stderr)
        return False

    print(f"JSON report generated: {output_path}")
    return True

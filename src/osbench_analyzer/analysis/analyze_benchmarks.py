#!/usr/bin/env python3
"""
Analyze Go benchmark results collected on several operating systems.

Reads <results-root>/<environment directory>/<test style file> for every
configured environment and test style, compares the subject environment
against its baselines, and writes CSV/Markdown reports.

Usage:
    analyze-benchmarks
    analyze-benchmarks --results-root runs/ --output-dir reports/
    analyze-benchmarks --config settings.json --top 20 --json
    analyze-benchmarks --from-csv --results-root previous-reports/
"""

import sys
import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from osbench_analyzer.analysis.categories import summarize_categories
from osbench_analyzer.analysis.compare import (
    ConfigurationAnalysis,
    RankedSpeedup,
    analyze_configuration,
    rank_speedups,
)
from osbench_analyzer.analysis.export import (
    export_analysis_csv,
    export_comparison_csv,
    export_json_report,
)
from osbench_analyzer.analysis.join import BenchmarkRecord, join_environments
from osbench_analyzer.analysis.report import (
    export_detailed_report,
    format_analysis_summary,
    format_category_analysis,
    format_comparison_table,
    format_top_speedups,
    format_winner_consistency,
)
from osbench_analyzer.environment_registry import (
    EnvironmentRegistry,
    TestConfiguration,
    default_registry,
    load_registry,
)
from osbench_analyzer.parsers.comparison_csv import read_comparison_csv
from osbench_analyzer.parsers.go_bench import BenchmarkMetrics, parse_result_file

SUMMARY_CSV = "benchmark_analysis_summary.csv"
DETAILED_REPORT = "benchmark_detailed_report.md"
JSON_REPORT = "benchmark_analysis.json"


def _parse_one(label, path, prefix, median=False):
    """Parse one environment's file. Returns (label, mapping, error)."""
    try:
        return (label, parse_result_file(path, prefix, median), None)
    except OSError as e:
        return (label, {}, str(e))


def load_raw_results(
    registry: EnvironmentRegistry,
    configuration: TestConfiguration,
    results_root,
    jobs: Optional[int] = 1,
    median: bool = False,
) -> List[Tuple[str, Mapping[str, BenchmarkMetrics]]]:
    """Parse every environment's raw file for one test configuration.

    Environments whose file cannot be read contribute an empty mapping.
    Results always come back in environment order.
    """
    from concurrent.futures import ThreadPoolExecutor

    to_parse = [
        (env.label, Path(results_root) / env.directory / configuration.filename)
        for env in registry.environments
    ]

    workers = jobs if jobs is not None else len(to_parse)
    workers = max(1, min(workers, len(to_parse)))

    if workers == 1:
        parsed = [
            _parse_one(label, path, registry.line_prefix, median)
            for label, path in to_parse
        ]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_parse_one, label, path, registry.line_prefix, median)
                for label, path in to_parse
            ]
            # All parses finish before the join
            parsed = [future.result() for future in futures]

    results = []
    for (label, mapping, error), (_, path) in zip(parsed, to_parse):
        if error is not None:
            print(f"   Warning: Cannot read {path}: {error}", file=sys.stderr)
        results.append((label, mapping))
    return results


def load_configuration_records(
    registry: EnvironmentRegistry,
    configuration: TestConfiguration,
    results_root,
    jobs: Optional[int] = 1,
    from_csv: bool = False,
    median: bool = False,
) -> Tuple[BenchmarkRecord, ...]:
    """Joined records for one test configuration."""
    if from_csv:
        path = Path(results_root) / configuration.comparison_filename
        try:
            return read_comparison_csv(path, registry.environments, registry.metric_unit)
        except (OSError, ValueError) as e:
            print(f"   Warning: Cannot read {path}: {e}", file=sys.stderr)
            return ()

    environment_results = load_raw_results(
        registry, configuration, results_root, jobs, median
    )
    return join_environments(environment_results, registry.metric_unit)


def analyze_records(
    registry: EnvironmentRegistry,
    configuration: TestConfiguration,
    records: Sequence[BenchmarkRecord],
) -> ConfigurationAnalysis:
    result = analyze_configuration(
        configuration.name,
        records,
        registry.subject,
        registry.baselines,
        registry.list_environments(),
    )
    categories = summarize_categories(
        configuration.name,
        records,
        registry.categories,
        registry.subject,
        registry.baselines,
    )
    return ConfigurationAnalysis(
        configuration=configuration,
        records=tuple(records),
        result=result,
        categories=categories,
    )


def run_analysis(
    registry: EnvironmentRegistry,
    results_root=".",
    jobs: Optional[int] = 1,
    from_csv: bool = False,
    median: bool = False,
) -> List[ConfigurationAnalysis]:
    """Analyze every test configuration in declared order."""
    analyses = []
    for configuration in registry.configurations:
        duration = f" ({configuration.duration})" if configuration.duration else ""
        print(f"Analyzing {configuration.name} benchmark{duration}...")

        records = load_configuration_records(
            registry, configuration, results_root, jobs, from_csv, median
        )
        if not records:
            print("   Warning: No benchmarks found", file=sys.stderr)

        analysis = analyze_records(registry, configuration, records)
        analyses.append(analysis)

        print(format_analysis_summary(analysis.result))
        print()
    return analyses


def write_reports(
    analyses: Sequence[ConfigurationAnalysis],
    registry: EnvironmentRegistry,
    output_dir,
    ranked: Sequence[RankedSpeedup] = (),
    top: int = 10,
    json_export: bool = False,
    generated: Optional[str] = None,
) -> List[Path]:
    """Write every artifact; returns the paths that could not be written."""
    output_dir = Path(output_dir)
    subject = registry.subject
    baselines = registry.baselines
    failed = []

    path = output_dir / SUMMARY_CSV
    if not export_analysis_csv(path, [a.result for a in analyses], subject, baselines):
        failed.append(path)

    path = output_dir / DETAILED_REPORT
    if not export_detailed_report(
        path, analyses, registry.categories, subject, baselines, ranked, generated, top
    ):
        failed.append(path)

    if json_export:
        path = output_dir / JSON_REPORT
        if not export_json_report(
            path, analyses, registry.environments, subject, baselines, ranked, generated
        ):
            failed.append(path)

    print("\nGenerating detailed CSV files...")
    for analysis in analyses:
        if not analysis.records:
            continue
        path = output_dir / analysis.configuration.comparison_filename
        if not export_comparison_csv(
            path,
            analysis.records,
            registry.environments,
            subject,
            baselines,
            registry.metric_unit,
        ):
            failed.append(path)

    return failed


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compare Go benchmark results across operating systems"
    )
    parser.add_argument(
        "--results-root",
        default=".",
        help="Directory containing one results directory per environment (default: .)",
    )
    parser.add_argument(
        "--output-dir", "-o", default=".", help="Directory for generated reports (default: .)"
    )
    parser.add_argument(
        "--config", default=None, help="JSON settings file (environments, test styles, categories)"
    )
    parser.add_argument(
        "--top", type=int, default=10, help="Number of entries in the top speedup list"
    )
    parser.add_argument(
        "-j", "--jobs", type=int, default=1,
        help="Number of environment files parsed in parallel (default: 1)"
    )
    parser.add_argument(
        "--json", action="store_true", help=f"Also write {JSON_REPORT}"
    )
    parser.add_argument(
        "--from-csv", action="store_true",
        help="Read existing <configuration>_comparison.csv files from --results-root instead of raw output",
    )
    parser.add_argument(
        "--median-runs", action="store_true",
        help="Combine repeated runs of a benchmark by median instead of keeping the last line",
    )

    args = parser.parse_args(argv)

    if args.top < 1:
        print("Error: --top must be at least 1", file=sys.stderr)
        return 1

    try:
        registry = load_registry(args.config) if args.config else default_registry()
        registry.validate()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=== Go Benchmark Analysis ===\n")
    print(f"Environments: {', '.join(registry.list_environments())}")
    print(f"Comparing {registry.subject} against {', '.join(registry.baselines)}\n")

    analyses = run_analysis(
        registry, args.results_root, args.jobs, args.from_csv, args.median_runs
    )
    results = [analysis.result for analysis in analyses]

    print("\n=== Cross-Style Comparison ===\n")
    print(format_comparison_table(results, registry.subject, registry.baselines))

    print("\n=== Category Analysis ===")
    print(format_category_analysis(analyses, registry.categories, registry.subject))

    print("\n=== Winner Consistency ===\n")
    print(format_winner_consistency(results, registry.subject))

    ranked = rank_speedups(
        [(analysis.name, analysis.records) for analysis in analyses],
        registry.subject,
        registry.baselines[0],
        args.top,
    )
    print(f"\n=== Top {args.top} Speedups vs {registry.baselines[0]} ===\n")
    print(format_top_speedups(ranked))

    print("\n=== Writing Reports ===\n")
    output_dir = Path(args.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error: Cannot create {output_dir}: {e}", file=sys.stderr)

    failed = write_reports(
        analyses,
        registry,
        output_dir,
        ranked=ranked,
        top=args.top,
        json_export=args.json,
        generated=datetime.now().isoformat(timespec="seconds"),
    )

    if failed:
        print(f"\nAnalysis finished with {len(failed)} unwritten file(s):", file=sys.stderr)
        for path in failed:
            print(f"  {path}", file=sys.stderr)
        return 1

    print("\nAnalysis complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Summarize one environment's raw Go benchmark output into a JSON file.

Usage:
    summarize-results --environment IYA --input go_benchmark_standard.txt
    summarize-results --environment RHEL --input rhel/go_benchmark_quick.txt -o rhel-quick.json
"""

import sys
import json
import argparse
from pathlib import Path
from datetime import datetime

from osbench_analyzer.parsers.go_bench import parse_result_file, to_dict


def build_summary(environment, metrics_by_name, source=None):
    """Summary payload for one environment's parsed results."""
    return {
        "environment": environment,
        "source": str(source) if source is not None else None,
        "timestamp": datetime.now().isoformat(),
        "total_benchmarks": len(metrics_by_name),
        "benchmarks": {
            name: to_dict(metrics_by_name[name]) for name in sorted(metrics_by_name)
        },
    }


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Summarize raw Go benchmark output into JSON"
    )
    parser.add_argument(
        "--environment", required=True, help="Environment label (Debian, IYA, etc.)"
    )
    parser.add_argument("--input", required=True, help="Raw `go test -bench` output file")
    parser.add_argument(
        "-o", "--output", help="Output JSON file (default: <environment>-summary.json)"
    )
    parser.add_argument(
        "--prefix", default="Benchmark", help="Prefix of benchmark result lines"
    )
    parser.add_argument(
        "--median-runs", action="store_true",
        help="Combine repeated runs by median instead of keeping the last line",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    output_path = Path(args.output or f"{args.environment}-summary.json")

    try:
        results = parse_result_file(input_path, args.prefix, args.median_runs)
    except OSError as e:
        print(f"Error: Failed to read {input_path}: {e}", file=sys.stderr)
        return 1

    if not results:
        print(f"Warning: No benchmark lines found in {input_path}", file=sys.stderr)

    if args.verbose:
        for name in sorted(results):
            print(f"  Parsed: {name}")
            print(f"    Metrics: {to_dict(results[name])}")

    summary = build_summary(args.environment, results, input_path)

    try:
        with open(output_path, "w") as f:
            json.dump(summary, f, indent=2)
    except OSError as e:
        print(f"Error: Cannot write {output_path}: {e}", file=sys.stderr)
        return 1

    print(f"Summarized {len(results)} benchmarks for {args.environment}")
    print(f"Summary written to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Pytest configuration and shared fixtures for osbench-analyzer tests.

Run the full suite with::

    pytest tests/ -v
"""

import os
import sys

import pytest

# ---------------------------------------------------------------------------
# Ensure osbench_analyzer is importable without installing the package
# ---------------------------------------------------------------------------
_src_root = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if _src_root not in sys.path:
    sys.path.insert(0, _src_root)

from osbench_analyzer.analysis.join import join_environments, make_record  # noqa: E402
from osbench_analyzer.environment_registry import DEFAULT_ENVIRONMENTS  # noqa: E402
from osbench_analyzer.parsers.go_bench import BenchmarkMetrics  # noqa: E402


GO_HEADER = """goos: linux
goarch: amd64
pkg: benchmark
cpu: Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz
"""

GO_FOOTER = """PASS
ok  \tbenchmark\t42.117s
"""

# name -> (Debian, IYA, RHEL) as (ns/op, B/op, allocs/op)
QUICK_RESULTS = {
    "BenchmarkFibonacci20": ((100, 0, 0), (80, 0, 0), (120, 0, 0)),
    "BenchmarkSHA256Large": ((200, 64, 2), (100, 32, 1), (200, 64, 2)),
    "BenchmarkMatrixMultiply50x50": ((50, 1000, 3), (60, 900, 3), (40, 1100, 3)),
    "BenchmarkStringBuilder1K": ((10, 0, 0), (10, 0, 0), (10, 0, 0)),
}

STANDARD_RESULTS = dict(QUICK_RESULTS)
STANDARD_RESULTS["BenchmarkFibonacci20"] = ((100, 0, 0), (50, 0, 0), (120, 0, 0))

# Only Debian and IYA report this one, so it never survives the join
PARTIAL_BENCHMARK = "BenchmarkMapOperations1K"


def go_line(name, ns_op, bytes_op=None, allocs_op=None, procs=4, iterations=1000000):
    """One line of `go test -bench -benchmem` output."""
    line = f"{name}-{procs}    \t{iterations}\t{ns_op} ns/op"
    if bytes_op is not None:
        line += f"\t{bytes_op} B/op"
    if allocs_op is not None:
        line += f"\t{allocs_op} allocs/op"
    return line


def go_output(lines):
    return GO_HEADER + "\n".join(lines) + "\n" + GO_FOOTER


def write_environment_results(root, results, filename, partial=True):
    """Write one raw file per default environment under ``root``."""
    for index, environment in enumerate(DEFAULT_ENVIRONMENTS):
        lines = []
        for name, per_env in results.items():
            ns_op, bytes_op, allocs_op = per_env[index]
            lines.append(go_line(name, ns_op, bytes_op, allocs_op))
        if partial and environment.label != "RHEL":
            lines.append(go_line(PARTIAL_BENCHMARK, 300, 16, 1))
        directory = root / environment.directory
        directory.mkdir(parents=True, exist_ok=True)
        (directory / filename).write_text(go_output(lines))


def record(name, *primaries, labels=("A", "B", "C")):
    """Joined record with only primary values, for analysis tests."""
    return make_record(
        name,
        "ns/op",
        [(label, BenchmarkMetrics(primary=value)) for label, value in zip(labels, primaries)],
    )


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def results_root(tmp_path):
    """Results tree with Quick and Standard runs for all default environments.

    Extended and Profiled files are deliberately absent.
    """
    root = tmp_path / "results"
    write_environment_results(root, QUICK_RESULTS, "go_benchmark_quick.txt")
    write_environment_results(root, STANDARD_RESULTS, "go_benchmark_standard.txt")
    return root


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "reports"
    path.mkdir()
    return path


def joined_records(results):
    """Join a results table (see QUICK_RESULTS) across the default environments."""
    environment_results = []
    for index, environment in enumerate(DEFAULT_ENVIRONMENTS):
        mapping = {}
        for name, per_env in results.items():
            ns_op, bytes_op, allocs_op = per_env[index]
            mapping[name] = BenchmarkMetrics(
                float(ns_op), float(bytes_op), float(allocs_op), True, True
            )
        environment_results.append((environment.label, mapping))
    return join_environments(environment_results)

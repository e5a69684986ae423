"""Tests for console summaries and the Markdown report."""

from osbench_analyzer.analysis.analyze_benchmarks import analyze_records
from osbench_analyzer.analysis.compare import RankedSpeedup, rank_speedups
from osbench_analyzer.analysis.report import (
    export_detailed_report,
    format_analysis_summary,
    format_category_analysis,
    format_comparison_table,
    format_top_speedups,
    format_winner_consistency,
    generate_markdown_report,
)
from osbench_analyzer.environment_registry import default_registry

from conftest import QUICK_RESULTS, STANDARD_RESULTS, joined_records


def build_analyses():
    registry = default_registry()
    quick, standard, extended, profiled = registry.configurations
    analyses = [
        analyze_records(registry, quick, joined_records(QUICK_RESULTS)),
        analyze_records(registry, standard, joined_records(STANDARD_RESULTS)),
        analyze_records(registry, extended, ()),
        analyze_records(registry, profiled, ()),
    ]
    ranked = rank_speedups([(a.name, a.records) for a in analyses], "IYA", "Debian")
    return registry, analyses, ranked


def test_analysis_summary():
    _, analyses, _ = build_analyses()
    text = format_analysis_summary(analyses[0].result)

    assert "Total Benchmarks: 4" in text
    assert "Fastest Environment Counts: Debian 0, IYA 2, RHEL 1" in text
    assert "IYA Wins vs Debian: 2 (50.0%)" in text
    assert "IYA Wins vs RHEL: 2 (50.0%)" in text
    assert "Avg Speedup vs RHEL: 1.75x" in text
    assert "Min/Max Speedup: 1.25x / 2.00x" in text


def test_comparison_table_follows_declared_order():
    registry, analyses, _ = build_analyses()
    table = format_comparison_table(
        [a.result for a in analyses], registry.subject, registry.baselines
    )

    positions = [table.index(name) for name in ("Quick", "Standard", "Extended", "Profiled")]
    assert positions == sorted(positions)
    assert "Avg vs Debian" in table
    assert "Avg vs RHEL" in table


def test_category_analysis_lists_each_configuration():
    registry, analyses, _ = build_analyses()
    text = format_category_analysis(analyses, registry.categories, registry.subject)

    crypto = text.split("Crypto:")[1].split("Concurrency:")[0]
    assert "Quick" in crypto
    assert "Standard" in crypto
    assert "2.00x vs Debian" in crypto
    assert "Extended" not in crypto


def test_winner_consistency():
    _, analyses, _ = build_analyses()
    assert format_winner_consistency(
        [a.result for a in analyses], "IYA"
    ) == "   Overall: IYA wins 4 out of 8 (50.0%)"


def test_top_speedups():
    _, _, ranked = build_analyses()
    assert [(e.name, e.configuration) for e in ranked] == [
        ("BenchmarkSHA256Large", "Quick"),
        ("BenchmarkFibonacci20", "Standard"),
        ("BenchmarkSHA256Large", "Standard"),
        ("BenchmarkFibonacci20", "Quick"),
    ]

    table = format_top_speedups(ranked)
    assert "2.00x" in table
    assert "1.25x" in table
    assert format_top_speedups([]) == "   No speedups recorded"


def test_markdown_sections_in_order():
    registry, analyses, ranked = build_analyses()
    markdown = generate_markdown_report(
        analyses,
        registry.categories,
        registry.subject,
        registry.baselines,
        ranked,
        generated="2024-05-01T12:00:00",
    )

    sections = [
        "# Comprehensive Benchmark Analysis Report",
        "Generated: 2024-05-01T12:00:00",
        "## Executive Summary",
        "## Results by Test Style",
        "### Quick Benchmark",
        "### Standard Benchmark",
        "### Extended Benchmark",
        "### Profiled Benchmark",
        "## Cross-Style Comparison",
        "## Category Analysis",
        "## Top 10 Performance Gains",
        "## Conclusion",
    ]
    positions = [markdown.index(section) for section in sections]
    assert positions == sorted(positions)

    assert "**IYA Overall Win Rate vs Debian**: 4/8 (50.0%)" in markdown
    assert "**Largest Speedup vs Debian**: 2.00x (BenchmarkSHA256Large, Quick)" in markdown
    assert "_2 seconds - Fast overview benchmark_" in markdown
    assert "only 4 of 8" in markdown


def test_markdown_without_timestamp_or_data():
    registry = default_registry()
    analyses = [analyze_records(registry, c, ()) for c in registry.configurations]

    markdown = generate_markdown_report(
        analyses, registry.categories, "IYA", ("Debian", "RHEL"), [], top=5
    )

    assert "Generated:" not in markdown
    assert "## Top 5 Performance Gains" in markdown
    assert "No benchmarks matched any category." in markdown
    assert "IYA did not outperform Debian on any benchmark." in markdown
    assert "no comparison was possible" in markdown


def test_markdown_majority_conclusion():
    registry = default_registry()
    results = {
        "BenchmarkFibonacci20": ((100, 0, 0), (50, 0, 0), (120, 0, 0)),
        "BenchmarkSHA256Large": ((200, 64, 2), (100, 32, 1), (200, 64, 2)),
    }
    analyses = [
        analyze_records(registry, registry.configurations[0], joined_records(results))
    ]
    ranked = [RankedSpeedup("BenchmarkFibonacci20", "Quick", 2.0)]

    markdown = generate_markdown_report(
        analyses, registry.categories, "IYA", registry.baselines, ranked
    )

    assert "IYA was faster than Debian on 2 of 2 benchmarks (100.0%)" in markdown


def test_export_detailed_report(output_dir, capsys):
    registry, analyses, ranked = build_analyses()
    path = output_dir / "benchmark_detailed_report.md"

    assert export_detailed_report(
        path, analyses, registry.categories, "IYA", registry.baselines, ranked
    )
    assert path.read_text().startswith("# Comprehensive Benchmark Analysis Report")
    assert "Markdown report generated" in capsys.readouterr().out

    assert not export_detailed_report(
        output_dir, analyses, registry.categories, "IYA", registry.baselines, ranked
    )
    assert "Error: Cannot write" in capsys.readouterr().err

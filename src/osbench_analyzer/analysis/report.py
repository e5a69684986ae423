"""
Console summaries and the Markdown analysis report.

All functions here render data that has already been computed; nothing is
re-derived from raw values except through the helpers in ``compare``.
"""

import sys
from typing import List, Optional, Sequence

from tabulate import tabulate

from osbench_analyzer.analysis.compare import (
    AnalysisResult,
    ConfigurationAnalysis,
    RankedSpeedup,
    overall_win_rate,
    percentage,
)
from osbench_analyzer.environment_registry import Category


def format_analysis_summary(result: AnalysisResult) -> str:
    """Per-configuration summary block printed after each analysis."""
    lines = [f"   Total Benchmarks: {result.total}"]
    if result.environment_wins:
        wins = ", ".join(f"{label} {count}" for label, count in result.environment_wins)
        lines.append(f"   Fastest Environment Counts: {wins}")
    for comparison in result.comparisons:
        rate = percentage(comparison.subject_wins, result.total)
        lines.append(
            f"   {result.subject} Wins vs {comparison.baseline}: "
            f"{comparison.subject_wins} ({rate:.1f}%)"
        )
    for comparison in result.comparisons:
        lines.append(
            f"   Avg Speedup vs {comparison.baseline}: {comparison.stats.mean:.2f}x"
        )
    if result.comparisons:
        stats = result.comparisons[0].stats
        lines.append(f"   Min/Max Speedup: {stats.minimum:.2f}x / {stats.maximum:.2f}x")
        lines.append(f"   Median Speedup: {stats.median:.2f}x")
    return "\n".join(lines)


def comparison_rows(results: Sequence[AnalysisResult], baselines: Sequence[str]) -> List[list]:
    rows = []
    for result in results:
        row = [
            result.configuration,
            result.total,
            f"{result.subject_wins} ({result.win_rate:.1f}%)",
        ]
        for baseline in baselines:
            row.append(f"{result.comparison(baseline).stats.mean:.2f}x")
        rows.append(row)
    return rows


def comparison_headers(subject: str, baselines: Sequence[str]) -> List[str]:
    return ["Test Style", "Total", f"{subject} Wins"] + [f"Avg vs {b}" for b in baselines]


def format_comparison_table(
    results: Sequence[AnalysisResult], subject: str, baselines: Sequence[str]
) -> str:
    """Cross-configuration table; rows follow the order of ``results``."""
    return tabulate(
        comparison_rows(results, baselines),
        headers=comparison_headers(subject, baselines),
        tablefmt="grid",
    )


def format_category_analysis(
    analyses: Sequence[ConfigurationAnalysis],
    categories: Sequence[Category],
    subject: str,
) -> str:
    lines = []
    for category in categories:
        lines.append(f"\n{category.name}:")
        for analysis in analyses:
            for summary in analysis.categories:
                if summary.category != category.name:
                    continue
                speedups = ", ".join(
                    f"{value:.2f}x vs {baseline}"
                    for baseline, value in summary.average_speedups
                )
                lines.append(
                    f"  {analysis.name:<12s}: {speedups} "
                    f"({subject}, {summary.count} benchmarks)"
                )
    return "\n".join(lines)


def format_winner_consistency(results: Sequence[AnalysisResult], subject: str) -> str:
    wins, total, rate = overall_win_rate(results)
    return f"   Overall: {subject} wins {wins} out of {total} ({rate:.1f}%)"


def top_speedup_rows(ranked: Sequence[RankedSpeedup]) -> List[list]:
    return [
        [rank, entry.name, entry.configuration, f"{entry.speedup:.2f}x"]
        for rank, entry in enumerate(ranked, start=1)
    ]


TOP_SPEEDUP_HEADERS = ["Rank", "Benchmark", "Test Style", "Speedup"]


def format_top_speedups(ranked: Sequence[RankedSpeedup]) -> str:
    if not ranked:
        return "   No speedups recorded"
    return tabulate(top_speedup_rows(ranked), headers=TOP_SPEEDUP_HEADERS, tablefmt="grid")


def generate_markdown_report(
    analyses: Sequence[ConfigurationAnalysis],
    categories: Sequence[Category],
    subject: str,
    baselines: Sequence[str],
    ranked: Sequence[RankedSpeedup],
    generated: Optional[str] = None,
    top: int = 10,
) -> str:
    """Build the full Markdown report text."""
    results = [analysis.result for analysis in analyses]
    wins, total, rate = overall_win_rate(results)
    first_baseline = baselines[0]

    markdown = "# Comprehensive Benchmark Analysis Report\n\n"
    if generated:
        markdown += f"Generated: {generated}\n\n"

    markdown += "## Executive Summary\n\n"
    markdown += (
        f"- **Total Benchmarks Analyzed**: {total} across "
        f"{len(analyses)} test styles\n"
    )
    markdown += f"- **{subject} Overall Win Rate vs {first_baseline}**: {wins}/{total} ({rate:.1f}%)\n"
    if ranked:
        best = ranked[0]
        markdown += (
            f"- **Largest Speedup vs {first_baseline}**: {best.speedup:.2f}x "
            f"({best.name}, {best.configuration})\n"
        )
    markdown += "\n"

    markdown += "## Results by Test Style\n\n"
    for analysis in analyses:
        result = analysis.result
        configuration = analysis.configuration
        markdown += f"### {configuration.name} Benchmark\n\n"
        if configuration.duration or configuration.description:
            details = " - ".join(
                part for part in (configuration.duration, configuration.description) if part
            )
            markdown += f"_{details}_\n\n"
        markdown += f"- Total Tests: {result.total}\n"
        for comparison in result.comparisons:
            markdown += (
                f"- {subject} Wins vs {comparison.baseline}: {comparison.subject_wins} "
                f"({percentage(comparison.subject_wins, result.total):.1f}%)\n"
            )
        for comparison in result.comparisons:
            markdown += f"- Average Speedup vs {comparison.baseline}: {comparison.stats.mean:.2f}x\n"
        if result.comparisons:
            stats = result.comparisons[0].stats
            markdown += f"- Speedup Range: {stats.minimum:.2f}x - {stats.maximum:.2f}x\n"
            markdown += f"- Median Speedup: {stats.median:.2f}x\n"
        markdown += "\n"

    markdown += "## Cross-Style Comparison\n\n"
    markdown += tabulate(
        comparison_rows(results, baselines),
        headers=comparison_headers(subject, baselines),
        tablefmt="github",
    )
    markdown += "\n\n"

    markdown += "## Category Analysis\n\n"
    category_rows = []
    for category in categories:
        for analysis in analyses:
            for summary in analysis.categories:
                if summary.category == category.name:
                    category_rows.append(
                        [category.name, analysis.name, summary.count]
                        + [f"{value:.2f}x" for _, value in summary.average_speedups]
                    )
    if category_rows:
        headers = ["Category", "Test Style", "Benchmarks"] + [
            f"Avg vs {b}" for b in baselines
        ]
        markdown += tabulate(category_rows, headers=headers, tablefmt="github") + "\n\n"
    else:
        markdown += "No benchmarks matched any category.\n\n"

    markdown += f"## Top {top} Performance Gains\n\n"
    if ranked:
        markdown += tabulate(
            top_speedup_rows(ranked), headers=TOP_SPEEDUP_HEADERS, tablefmt="github"
        )
        markdown += "\n\n"
    else:
        markdown += f"{subject} did not outperform {first_baseline} on any benchmark.\n\n"

    markdown += "## Conclusion\n\n"
    if total == 0:
        markdown += "No benchmark was present in every environment, so no comparison was possible.\n"
    elif rate > 50:
        markdown += (
            f"{subject} was faster than {first_baseline} on {wins} of {total} "
            f"benchmarks ({rate:.1f}%) across all test styles.\n"
        )
    else:
        markdown += (
            f"{subject} was faster than {first_baseline} on only {wins} of {total} "
            f"benchmarks ({rate:.1f}%) across all test styles.\n"
        )
    return markdown


def export_detailed_report(
    output_path,
    analyses: Sequence[ConfigurationAnalysis],
    categories: Sequence[Category],
    subject: str,
    baselines: Sequence[str],
    ranked: Sequence[RankedSpeedup],
    generated: Optional[str] = None,
    top: int = 10,
) -> bool:
    """Write the Markdown report; returns False if the file could not be written."""
    markdown = generate_markdown_report(
        analyses, categories, subject, baselines, ranked, generated, top
    )
    try:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(markdown)
    except OSError as e:
        print(f"Error: Cannot write {output_path}: {e}", file=sys.stderr)
        return False

    print(f"Markdown report generated: {output_path}")
    return True

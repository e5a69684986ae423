"""
Results analysis and comparison tools.

This module contains tools for analyzing and comparing benchmark results:
- join: Align per-environment results by benchmark name
- compare: Win counts, speedup statistics and rankings
- categories: Keyword-based benchmark categories
- report: Console summaries and the Markdown report
- export: CSV and JSON artifacts
- analyze_benchmarks: The analyze-benchmarks command
- summarize_results: The summarize-results command
"""

"""
Benchmark result readers.

This module contains readers for the supported input formats:
- go_bench: Raw `go test -bench` output, one file per environment
- comparison_csv: Previously exported comparison CSV files
"""

"""
OS Bench Analyzer - Compare Go benchmark results across operating systems.

Structure:
- parsers/: Raw benchmark output and comparison CSV readers
- analysis/: Joining, speedup statistics, categories and report generation
- environment_registry: Environments, test configurations and categories
"""

__version__ = "0.1.0"

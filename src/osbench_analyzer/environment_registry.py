"""
Environment registry for cross-OS benchmark comparison.

This module declares the environments being compared, the test
configurations each environment ran, and the benchmark categories used
for grouping. Everything is kept in ordered sequences so that reports
come out in the same order on every run.
"""

import json
from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class Environment:
    """One operating-system environment under comparison."""

    label: str
    directory: str  # Results directory, relative to the results root
    display_name: str = ""

    @property
    def title(self) -> str:
        """Name used in report column headers."""
        return self.display_name or self.label


@dataclass(frozen=True)
class TestConfiguration:
    """A benchmark run style (quick, standard, ...) and its raw file name."""

    __test__ = False  # not a pytest test class

    name: str
    filename: str
    duration: str = ""
    description: str = ""
    comparison_file: str = ""

    @property
    def comparison_filename(self) -> str:
        """Name of the per-configuration comparison CSV."""
        return self.comparison_file or f"{self.name}_comparison.csv"


@dataclass(frozen=True)
class Category:
    """A named benchmark group matched by case-sensitive name substrings."""

    name: str
    keywords: Tuple[str, ...]

    def matches(self, benchmark_name: str) -> bool:
        return any(keyword in benchmark_name for keyword in self.keywords)


class EnvironmentRegistry:
    """Registry of environments, test configurations and categories."""

    def __init__(self, metric_unit: str = "ns/op", line_prefix: str = "Benchmark"):
        self.metric_unit = metric_unit
        self.line_prefix = line_prefix
        self._environments: List[Environment] = []
        self._configurations: List[TestConfiguration] = []
        self._categories: List[Category] = []
        self.subject: Optional[str] = None
        self.baselines: Tuple[str, ...] = ()

    def register_environment(self, environment: Environment):
        """Register an environment; registration order is report order."""
        if self.get_environment(environment.label) is not None:
            raise ValueError(f"Duplicate environment label: {environment.label}")
        self._environments.append(environment)

    def register_configuration(self, configuration: TestConfiguration):
        """Register a test configuration."""
        if self.get_configuration(configuration.name) is not None:
            raise ValueError(f"Duplicate test configuration: {configuration.name}")
        self._configurations.append(configuration)

    def register_category(self, category: Category):
        """Register a benchmark category."""
        self._categories.append(category)

    def set_comparison(self, subject: str, baselines: Sequence[str]):
        """Select the subject environment and the baselines it is compared to."""
        self.subject = subject
        self.baselines = tuple(baselines)

    def get_environment(self, label: str) -> Optional[Environment]:
        """Get an environment by label."""
        for environment in self._environments:
            if environment.label == label:
                return environment
        return None

    def get_configuration(self, name: str) -> Optional[TestConfiguration]:
        """Get a test configuration by name."""
        for configuration in self._configurations:
            if configuration.name == name:
                return configuration
        return None

    @property
    def environments(self) -> Tuple[Environment, ...]:
        return tuple(self._environments)

    @property
    def configurations(self) -> Tuple[TestConfiguration, ...]:
        return tuple(self._configurations)

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories)

    def list_environments(self) -> List[str]:
        """List all registered environment labels in declared order."""
        return [environment.label for environment in self._environments]

    def validate(self):
        """Raise ValueError if the registry cannot drive an analysis run."""
        if not self._environments:
            raise ValueError("No environments configured")
        if not self._configurations:
            raise ValueError("No test configurations configured")
        labels = self.list_environments()
        if self.subject not in labels:
            raise ValueError(f"Subject environment is not configured: {self.subject}")
        if not self.baselines:
            raise ValueError("At least one baseline environment is required")
        for baseline in self.baselines:
            if baseline not in labels:
                raise ValueError(f"Baseline environment is not configured: {baseline}")
            if baseline == self.subject:
                raise ValueError(f"Baseline cannot be the subject: {baseline}")


DEFAULT_ENVIRONMENTS = (
    Environment("Debian", "go_benchmark_go_system_debian11", "Debian 11"),
    Environment("IYA", "go_benchmark_go_system_IYA", "IYA Linux 0.5.0"),
    Environment("RHEL", "go_benchmark_go_system_rhel", "RHEL 10.0"),
)

DEFAULT_CONFIGURATIONS = (
    TestConfiguration(
        "Quick",
        "go_benchmark_quick.txt",
        "2 seconds",
        "Fast overview benchmark",
        comparison_file="go_benchmark_QUICK_comparison.csv",
    ),
    TestConfiguration(
        "Standard",
        "go_benchmark_standard.txt",
        "5 seconds",
        "Standard benchmark (recommended)",
        comparison_file="go_benchmark_STANDARD_comparison.csv",
    ),
    TestConfiguration(
        "Extended",
        "go_benchmark_extended.txt",
        "10 seconds x 3 runs",
        "Most accurate with multiple runs",
        comparison_file="go_benchmark_EXTENDED_comparison.csv",
    ),
    TestConfiguration(
        "Profiled",
        "go_benchmark_profiled.txt",
        "5 seconds + profiling",
        "With CPU/memory profiling data",
        comparison_file="go_benchmark_PROFILED_comparison.csv",
    ),
)

DEFAULT_CATEGORIES = (
    Category("CPU-Intensive", ("Fibonacci", "Prime", "Matrix")),
    Category("Memory", ("Sorting", "MemoryAllocation", "Map")),
    Category("String", ("String", "StringBuilder")),
    Category("JSON", ("JSON",)),
    Category("Crypto", ("SHA256",)),
    Category("Concurrency", ("Goroutines", "Channel", "Mutex")),
)

DEFAULT_SUBJECT = "IYA"
DEFAULT_BASELINES = ("Debian", "RHEL")


def default_registry() -> EnvironmentRegistry:
    """Build a registry with the built-in three-OS, four-style setup."""
    registry = EnvironmentRegistry()
    for environment in DEFAULT_ENVIRONMENTS:
        registry.register_environment(environment)
    for configuration in DEFAULT_CONFIGURATIONS:
        registry.register_configuration(configuration)
    for category in DEFAULT_CATEGORIES:
        registry.register_category(category)
    registry.set_comparison(DEFAULT_SUBJECT, DEFAULT_BASELINES)
    return registry


def _require_keys(entry: Dict, keys: Sequence[str], kind: str):
    if not isinstance(entry, dict):
        raise ValueError(f"Invalid {kind} entry: {entry!r}")
    missing = [key for key in keys if key not in entry]
    if missing:
        raise ValueError(f"{kind} entry is missing {', '.join(missing)}: {entry!r}")


def _require_list(value, what: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a JSON list, got {value!r}")
    return value


def registry_from_dict(data: Dict) -> EnvironmentRegistry:
    """Build a registry from a settings dict; absent sections use defaults."""
    if not isinstance(data, dict):
        raise ValueError("Settings must be a JSON object")

    registry = EnvironmentRegistry(
        metric_unit=data.get("metric_unit", "ns/op"),
        line_prefix=data.get("line_prefix", "Benchmark"),
    )

    if "environments" in data:
        for entry in _require_list(data["environments"], "environments"):
            _require_keys(entry, ("label", "directory"), "environment")
            registry.register_environment(
                Environment(
                    label=entry["label"],
                    directory=entry["directory"],
                    display_name=entry.get("display_name", ""),
                )
            )
    else:
        for environment in DEFAULT_ENVIRONMENTS:
            registry.register_environment(environment)

    if "configurations" in data:
        for entry in _require_list(data["configurations"], "configurations"):
            _require_keys(entry, ("name", "filename"), "configuration")
            registry.register_configuration(
                TestConfiguration(
                    name=entry["name"],
                    filename=entry["filename"],
                    duration=entry.get("duration", ""),
                    description=entry.get("description", ""),
                    comparison_file=entry.get("comparison_file", ""),
                )
            )
    else:
        for configuration in DEFAULT_CONFIGURATIONS:
            registry.register_configuration(configuration)

    if "categories" in data:
        for entry in _require_list(data["categories"], "categories"):
            _require_keys(entry, ("name", "keywords"), "category")
            registry.register_category(
                Category(
                    name=entry["name"],
                    keywords=tuple(_require_list(entry["keywords"], "Category keywords")),
                )
            )
    else:
        for category in DEFAULT_CATEGORIES:
            registry.register_category(category)

    baselines = DEFAULT_BASELINES
    if "baselines" in data:
        baselines = _require_list(data["baselines"], "baselines")
    registry.set_comparison(data.get("subject", DEFAULT_SUBJECT), baselines)
    return registry


def load_registry(path) -> EnvironmentRegistry:
    """Load a registry from a JSON settings file."""
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    return registry_from_dict(data)

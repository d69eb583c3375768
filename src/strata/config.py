"""Configuration loading and management for Strata.

Configuration sources are merged in priority order:
    1. Defaults (defined in StrataConfig and its nested tables)
    2. Global config (~/.strata.toml)
    3. Project config (./strata.toml)
    4. Explicit config file
    5. Environment variables (STRATA_* prefix)
    6. Overrides (passed as kwargs, typically from CLI flags)

Nested TOML tables map onto the nested dataclasses::

    workers = 4
    timeout_seconds = 5

    [admission]
    type_limit = 20

    [estimate]
    core_hours = 2.0

    [naming]
    extra_utility_patterns = ["Registry$"]

Example:
    >>> config = load_config(workers=2)
    >>> config.workers
    2
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError


def _as_tuple(instance: Any, *names: str) -> None:
    """Coerce list-valued fields (as loaded from TOML) to tuples on a frozen dataclass."""
    for name in names:
        value = getattr(instance, name)
        if not isinstance(value, tuple):
            object.__setattr__(instance, name, tuple(value))


@dataclass(frozen=True)
class AdmissionThresholds:
    """Limits used by the admission filter to skip generated or tabular files.

    A file is skipped when it carries a generation marker, when it has more
    than ``pragma_limit`` pragmas together with more than ``dense_type_limit``
    class declarations, more than ``type_limit`` class declarations outright,
    more than ``deleted_method_limit`` ``= delete`` methods, or more than
    ``hex_table_limit`` ``{0x.., "..."}`` table entries.
    """

    pragma_limit: int = 2
    dense_type_limit: int = 5
    type_limit: int = 10
    deleted_method_limit: int = 5
    hex_table_limit: int = 10
    binary_sniff_bytes: int = 1024
    generated_markers: tuple[str, ...] = (
        "/* This file is generated",
        "/* This is an automatically generated table",
        "// Generated by",
        "regenerated",
    )

    def __post_init__(self) -> None:
        _as_tuple(self, "generated_markers")
        for name in (
            "pragma_limit",
            "dense_type_limit",
            "type_limit",
            "deleted_method_limit",
            "hex_table_limit",
        ):
            if getattr(self, name) < 0:
                raise InvalidConfigError(name, getattr(self, name), "must be non-negative")
        if self.binary_sniff_bytes < 1:
            raise InvalidConfigError(
                "binary_sniff_bytes", self.binary_sniff_bytes, "must be at least 1"
            )


@dataclass(frozen=True)
class EstimateWeights:
    """Cost model for the complexity score and the rewrite-time estimate.

    Attributes:
        Entity base time (hours per entity, by layer):
            core_hours, utility_hours, interface_hours, derived_hours
        Line costs (seconds):
            entity_line_seconds: per line of an entity's methods
            review_line_seconds: per line of the file, charged once
        Control flow (minutes per node, by line span tier):
            small_span_lines / medium_span_lines: tier boundaries (inclusive)
            conditional_minutes: (small, medium, large)
            loop_minutes: (small, medium, large)
        Templates (minutes):
            template_base_minutes, template_param_minutes (per parameter
            beyond the first), specialization_minutes, constraint_minutes
        Overhead (ratio of summed Core+Utility entity time):
            testing_ratio, documentation_ratio
        Complexity score weights:
            score_* per counted kind or classified entity
    """

    core_hours: float = 1.5
    utility_hours: float = 1.0
    interface_hours: float = 0.5
    derived_hours: float = 0.25

    entity_line_seconds: float = 15.0
    review_line_seconds: float = 5.0

    small_span_lines: int = 5
    medium_span_lines: int = 15
    conditional_minutes: tuple[float, float, float] = (5.0, 10.0, 15.0)
    loop_minutes: tuple[float, float, float] = (7.0, 12.0, 20.0)

    template_base_minutes: float = 1.0
    template_param_minutes: float = 15.0
    specialization_minutes: float = 30.0
    constraint_minutes: float = 45.0

    testing_ratio: float = 0.5
    documentation_ratio: float = 0.3

    score_function: float = 2.0
    score_core: float = 4.0
    score_utility: float = 3.0
    score_interface: float = 2.0
    score_derived: float = 1.0
    score_template: float = 4.0
    score_conditional: float = 1.0
    score_loop: float = 1.5
    score_include: float = 0.5

    work_week_hours: float = 40.0

    def __post_init__(self) -> None:
        _as_tuple(self, "conditional_minutes", "loop_minutes")
        for name in ("conditional_minutes", "loop_minutes"):
            if len(getattr(self, name)) != 3:
                raise InvalidConfigError(
                    name, getattr(self, name), "needs exactly three tiers (small, medium, large)"
                )
        if not 0 < self.small_span_lines <= self.medium_span_lines:
            raise InvalidConfigError(
                "small_span_lines",
                self.small_span_lines,
                "must be positive and not exceed medium_span_lines",
            )
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (int, float)) and value < 0:
                raise InvalidConfigError(f.name, value, "must be non-negative")
        if self.work_week_hours <= 0:
            raise InvalidConfigError("work_week_hours", self.work_week_hours, "must be positive")


@dataclass(frozen=True)
class NamingConventions:
    """Name-convention tables feeding the layer classifier and usage extraction.

    The built-in patterns live in ``strata.classification.rules``; the
    ``extra_*`` tuples here are appended to them. Patterns are regular
    expressions matched with ``re.search`` against the bare entity name.
    """

    interface_suffixes: tuple[str, ...] = (
        "OutputDev",
        "ImgWriter",
        "Factory",
        "Builder",
        "Source",
        "FontSrc",
    )
    extra_interface_patterns: tuple[str, ...] = ()
    extra_utility_patterns: tuple[str, ...] = ()
    extra_impl_patterns: tuple[str, ...] = ()
    std_namespace_prefixes: tuple[str, ...] = ("std::",)

    def __post_init__(self) -> None:
        _as_tuple(
            self,
            "interface_suffixes",
            "extra_interface_patterns",
            "extra_utility_patterns",
            "extra_impl_patterns",
            "std_namespace_prefixes",
        )


@dataclass(frozen=True)
class StrataConfig:
    """Configuration for an analysis run.

    Attributes:
        Performance:
            workers: Parallel extraction workers (None = auto-detect)
            parallel_threshold: Batches smaller than this run sequentially
            timeout_seconds: Soft per-file extraction deadline

        File discovery:
            source_extensions: Suffixes treated as C/C++ sources
            exclude_patterns: Glob patterns excluded from discovery
            max_file_size_mb: Larger files are not analyzed
            max_files: Stop discovery after this many files
            follow_symlinks: Follow symbolic links during discovery

        Nested tables:
            admission: AdmissionThresholds
            estimate: EstimateWeights
            naming: NamingConventions
    """

    workers: Optional[int] = None
    parallel_threshold: int = 10
    timeout_seconds: float = 10.0

    source_extensions: tuple[str, ...] = (".cpp", ".cc", ".cxx", ".h", ".hh", ".hpp", ".hxx")
    exclude_patterns: tuple[str, ...] = (
        ".git/*",
        "build/*",
        "cmake-build-*/*",
        "third_party/*",
        "vendor/*",
        "*.pb.h",
        "*.pb.cc",
        "moc_*.cpp",
    )
    max_file_size_mb: float = 10.0
    max_files: int = 10000
    follow_symlinks: bool = False

    admission: AdmissionThresholds = field(default_factory=AdmissionThresholds)
    estimate: EstimateWeights = field(default_factory=EstimateWeights)
    naming: NamingConventions = field(default_factory=NamingConventions)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        _as_tuple(self, "source_extensions", "exclude_patterns")

        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.parallel_threshold < 1:
            raise InvalidConfigError(
                "parallel_threshold", self.parallel_threshold, "must be at least 1"
            )
        if self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")
        if not self.source_extensions:
            raise InvalidConfigError("source_extensions", self.source_extensions, "cannot be empty")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


DEFAULT_CONFIG = StrataConfig()

_NESTED_TABLES = {
    "admission": AdmissionThresholds,
    "estimate": EstimateWeights,
    "naming": NamingConventions,
}


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> StrataConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep file/env values.

    Returns:
        Validated StrataConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".strata.toml"
    if global_config.exists():
        _merge(merged, _load_toml_file(global_config), global_config)

    project_config = Path.cwd() / "strata.toml"
    if project_config.exists():
        _merge(merged, _load_toml_file(project_config), project_config)

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError("Config file not found", path=config_file)
        _merge(merged, _load_toml_file(config_file), config_file)

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    for table, cls in _NESTED_TABLES.items():
        value = merged.pop(table, None)
        if value is None:
            continue
        if isinstance(value, cls):
            merged[table] = value
        elif isinstance(value, dict):
            try:
                merged[table] = cls(**value)
            except TypeError as e:
                raise ConfigurationError(f"Invalid [{table}] config", error=e)
        else:
            raise InvalidConfigError(table, value, "expected a table")

    try:
        return StrataConfig(**merged)
    except TypeError as e:
        raise ConfigurationError("Invalid configuration", error=e)


def _merge(merged: dict[str, Any], loaded: dict[str, Any], source: Path) -> None:
    """Merge one config file into the accumulated dict; nested tables merge key-wise."""
    for key, value in loaded.items():
        if key in _NESTED_TABLES:
            if not isinstance(value, dict):
                raise ConfigurationError(f"[{key}] must be a table", path=source)
            merged.setdefault(key, {}).update(value)
        else:
            merged[key] = value


def _load_env_vars() -> dict[str, Any]:
    """Load top-level scalar settings from STRATA_* environment variables.

    Supported environment variables:
        STRATA_WORKERS: int
        STRATA_PARALLEL_THRESHOLD: int
        STRATA_TIMEOUT_SECONDS: float
        STRATA_MAX_FILE_SIZE_MB: float
        STRATA_MAX_FILES: int
        STRATA_FOLLOW_SYMLINKS: bool (true/false/1/0/yes/no)

    Returns:
        Dict of field_name -> parsed_value for any STRATA_* vars found.
    """
    type_hints = get_type_hints(StrataConfig)
    result: dict[str, Any] = {}

    for f in fields(StrataConfig):
        env_key = f"STRATA_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(f.name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}", error=e)
        if parsed is not None:
            result[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot come from an env var (tuples, tables).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError("Invalid config file", path=path, error=e)

"""Configuration loading and validation.

Loads ``settings.toml`` and validates all fields at startup, before any
input files are read.  Scoring constants (weights, score tables,
``MIN_SCORE``) are part of the matching contract and deliberately not
configurable here; see :mod:`promatch.matching.tables`.

The validated config is exposed as a :class:`Settings` dataclass with
typed fields for each section: ``matching``, ``data``, ``output`` and
``logging``.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from promatch.errors import ActionableError
from promatch.matching.ranker import DEFAULT_LIMIT

# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------

OUTPUT_FORMATS = ("markdown", "csv", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class MatchingConfig:
    """Result sizing from ``[matching]``."""

    limit: int = DEFAULT_LIMIT


@dataclass
class DataConfig:
    """Reference data locations from ``[data]``."""

    scope_tables_path: str = "data/scope_tables.json"


@dataclass
class OutputConfig:
    """Output settings from ``[output]``."""

    default_format: str = "markdown"
    output_dir: str = "./output"


@dataclass
class LoggingConfig:
    """Log settings from ``[logging]``."""

    level: str = "INFO"
    file_logging: bool = False
    log_dir: str = "data/logs"

    @property
    def level_number(self) -> int:
        return int(logging.getLevelName(self.level))


@dataclass
class Settings:
    """Top-level validated configuration."""

    matching: MatchingConfig = field(default_factory=MatchingConfig)
    data: DataConfig = field(default_factory=DataConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Default settings path
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS_PATH = Path("config/settings.toml")


# ---------------------------------------------------------------------------
# Loading and validation
# ---------------------------------------------------------------------------


def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> Settings:
    """Load and validate settings from a TOML file.

    Raises :class:`~promatch.errors.ActionableError`:
      - CONFIG if the file is missing
      - VALIDATION if field values are out of range
      - PARSE if the TOML is malformed

    Returns a fully validated :class:`Settings` instance.
    """
    filepath = Path(path)
    if not filepath.exists():
        raise ActionableError.config(
            field_name="settings_path",
            reason=f"Settings file not found: {filepath}",
            suggestion=f"Create {filepath} or copy from config/settings.toml.example",
        )

    raw_text = filepath.read_text(encoding="utf-8")
    try:
        data = tomllib.loads(raw_text)
    except tomllib.TOMLDecodeError as exc:
        raise ActionableError.parse(
            source=str(filepath),
            location="TOML syntax",
            raw_error=str(exc),
            suggestion=f"Fix TOML syntax in {filepath}",
        ) from None

    return _validate(data)


def _validate(data: dict[str, object]) -> Settings:
    """Validate raw TOML data and return a Settings instance."""

    # -- matching section ----------------------------------------------------
    matching_data = _section(data, "matching")
    try:
        limit = int(matching_data.get("limit", DEFAULT_LIMIT))  # type: ignore[call-overload]
    except (TypeError, ValueError):
        raise ActionableError.validation(
            field_name="matching.limit",
            reason=f"'{matching_data.get('limit')}' is not an integer",
        ) from None
    if limit < 1:
        raise ActionableError.validation(
            field_name="matching.limit",
            reason=f"is {limit}, must be >= 1",
            suggestion="Set [matching].limit to the number of pros to return (default 6)",
        )

    # -- data section --------------------------------------------------------
    data_section = _section(data, "data")
    data_config = DataConfig(
        scope_tables_path=str(data_section.get("scope_tables_path", DataConfig.scope_tables_path)),
    )

    # -- output section ------------------------------------------------------
    output_data = _section(data, "output")
    default_format = str(output_data.get("default_format", "markdown"))
    if default_format not in OUTPUT_FORMATS:
        raise ActionableError.validation(
            field_name="output.default_format",
            reason=f"'{default_format}' is not one of {', '.join(OUTPUT_FORMATS)}",
            suggestion="Set [output].default_format to markdown, csv or json",
        )
    output = OutputConfig(
        default_format=default_format,
        output_dir=str(output_data.get("output_dir", "./output")),
    )

    # -- logging section -----------------------------------------------------
    logging_data = _section(data, "logging")
    level = str(logging_data.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ActionableError.validation(
            field_name="logging.level",
            reason=f"'{level}' is not one of {', '.join(LOG_LEVELS)}",
        )
    file_logging = logging_data.get("file_logging", False)
    if not isinstance(file_logging, bool):
        raise ActionableError.validation(
            field_name="logging.file_logging",
            reason=f"'{file_logging}' is not a boolean",
            suggestion="Set [logging].file_logging to true or false (unquoted)",
        )
    logging_config = LoggingConfig(
        level=level,
        file_logging=file_logging,
        log_dir=str(logging_data.get("log_dir", "data/logs")),
    )

    return Settings(
        matching=MatchingConfig(limit=limit),
        data=data_config,
        output=output,
        logging=logging_config,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    """Return an optional top-level section; a non-table value is a CONFIG error."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ActionableError.config(
            field_name=name,
            reason=f"[{name}] must be a table, not {type(section).__name__}",
            suggestion=f"Define [{name}] as a TOML table",
        )
    return section

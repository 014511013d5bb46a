"""Configuration loading utilities for the reporting engine.

Provides a centralized way to load and validate the parameters.yaml
configuration file used by the report-engine command.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from babel import Locale, UnknownLocaleError

from .aggregator import DEFAULT_TREND_BUCKETS as DEFAULT_MAX_BUCKETS
from .classifier import DEFAULT_HORIZON_DAYS
from .enums import ExportFormat
from .export_formatter import DEFAULT_DATE_FORMAT, DEFAULT_LOCALE

SCRIPT_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = SCRIPT_DIR.parent / "config" / "parameters.yaml"

DEFAULT_FILE_PREFIX = "comprehensive_report"


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load and parse the parameters.yaml configuration file.

    Automatically validates the configuration after loading. Raises
    clear exceptions if validation fails, enabling fail-fast behavior
    for infrastructure errors.

    Parameters
    ----------
    config_path : Path, optional
        Path to the configuration file. If not provided, uses the default
        location (config/parameters.yaml in the project root).

    Returns
    -------
    Dict[str, Any]
        Parsed and validated YAML configuration as a nested dictionary.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the configuration file is invalid YAML.
    ValueError
        If the configuration fails validation (see validate_config).
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    validate_config(config)
    return config


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def validate_config(config: Dict[str, Any]) -> None:
    """Validate the entire configuration for consistency and required values.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary (result of load_config).

    Raises
    ------
    ValueError
        If a configured value is missing or invalid.

    Notes
    -----
    **Validation checks:**

    - **Classification:** classification.horizon_days must be a positive integer
    - **Trend:** trend.max_buckets must be a positive integer
    - **Export:** export.locale must be a locale Babel knows; export.date_format
      and export.file_prefix must be non-empty strings; export.format must be
      a valid ExportFormat

    Every key is optional; absent keys take the defaults exposed by
    get_settings().
    """
    classification_config = config.get("classification") or {}
    _positive_int(
        classification_config.get("horizon_days", DEFAULT_HORIZON_DAYS),
        "classification.horizon_days",
    )

    trend_config = config.get("trend") or {}
    _positive_int(
        trend_config.get("max_buckets", DEFAULT_MAX_BUCKETS), "trend.max_buckets"
    )

    export_config = config.get("export") or {}

    locale = export_config.get("locale", DEFAULT_LOCALE)
    if not isinstance(locale, str):
        raise ValueError(f"export.locale must be a string, got {type(locale).__name__}")
    try:
        Locale.parse(locale)
    except (UnknownLocaleError, ValueError) as exc:
        raise ValueError(f"Invalid export.locale: {locale} ({exc})") from exc

    for key, default in (
        ("date_format", DEFAULT_DATE_FORMAT),
        ("file_prefix", DEFAULT_FILE_PREFIX),
    ):
        value = export_config.get(key, default)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"export.{key} must be a non-empty string, got {value!r}")

    try:
        ExportFormat.from_string(export_config.get("format"))
    except ValueError as exc:
        raise ValueError(f"Invalid export.format: {exc}") from exc


def get_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a validated configuration into the settings the CLI needs.

    Returns
    -------
    Dict[str, Any]
        Keys: horizon_days, max_buckets, locale, date_format, file_prefix,
        export_format (ExportFormat).
    """
    classification_config = config.get("classification") or {}
    trend_config = config.get("trend") or {}
    export_config = config.get("export") or {}
    return {
        "horizon_days": classification_config.get("horizon_days", DEFAULT_HORIZON_DAYS),
        "max_buckets": trend_config.get("max_buckets", DEFAULT_MAX_BUCKETS),
        "locale": export_config.get("locale", DEFAULT_LOCALE),
        "date_format": export_config.get("date_format", DEFAULT_DATE_FORMAT),
        "file_prefix": export_config.get("file_prefix", DEFAULT_FILE_PREFIX),
        "export_format": ExportFormat.from_string(export_config.get("format")),
    }

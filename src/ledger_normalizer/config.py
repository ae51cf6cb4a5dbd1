"""Configuration loading and validation for the ledger normalizer."""

from dataclasses import dataclass, field
from datetime import time
from pathlib import Path

import yaml

from ledger_normalizer.models.account import PHYSICAL_CASH_SUBTYPE
from ledger_normalizer.utils.date_utils import DEFAULT_SENTINEL_TIMES, parse_sentinel_times
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


DEFAULT_LINK_INDICATOR = "🔗 "
DEFAULT_UNKNOWN_ACCOUNT_LABEL = "Unknown Account"
DEFAULT_TRANSFER_CATEGORY_NAMES = ["transfer", "transfers"]


def _as_str_list(data: dict[str, object], key: str, default: list[str]) -> list[str]:
    value = data.get(key, default)
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list, got {type(value).__name__}")
    return [str(v) for v in value]


def _as_time_strings(data: dict[str, object], key: str, default: list[str]) -> list[str]:
    """Read a list of HH:MM:SS values.

    Unquoted times like 1:00:00 are YAML 1.1 sexagesimal integers, so PyYAML
    hands them over as seconds (3600).
    """
    value = data.get(key, default)
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list, got {type(value).__name__}")
    result = []
    for v in value:
        if isinstance(v, int) and not isinstance(v, bool):
            hours, rest = divmod(v, 3600)
            minutes, seconds = divmod(rest, 60)
            result.append(f"{hours:02d}:{minutes:02d}:{seconds:02d}")
        else:
            result.append(str(v))
    return result


@dataclass
class NormalizationConfig:
    """Policy values used by the normalization engine.

    Attributes:
        link_indicator: Prefix added to labels of bank-linked accounts.
        unknown_account_label: Label used when no account name can be resolved.
        sentinel_times: Placeholder times-of-day that mean "no time recorded".
        manual_cash_subtype: The only account subtype whose entries are editable.
        transfer_category_names: Category names (case-insensitive) marking transfer groups.
    """

    link_indicator: str = DEFAULT_LINK_INDICATOR
    unknown_account_label: str = DEFAULT_UNKNOWN_ACCOUNT_LABEL
    sentinel_times: list[str] = field(default_factory=lambda: list(DEFAULT_SENTINEL_TIMES))
    manual_cash_subtype: str = PHYSICAL_CASH_SUBTYPE
    transfer_category_names: list[str] = field(
        default_factory=lambda: list(DEFAULT_TRANSFER_CATEGORY_NAMES)
    )

    def __post_init__(self) -> None:
        try:
            self._sentinels = parse_sentinel_times(self.sentinel_times)
        except ValueError as e:
            raise ConfigError(f"Invalid sentinel time in {self.sentinel_times}: {e}") from e

    @property
    def sentinels(self) -> frozenset[time]:
        """Sentinel times parsed to time objects."""
        return self._sentinels

    def is_transfer_category(self, category_name: str | None) -> bool:
        """Check whether a category name marks a transfer group."""
        if not category_name:
            return False
        names = {n.strip().lower() for n in self.transfer_category_names}
        return category_name.strip().lower() in names

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "NormalizationConfig":
        """Create from dictionary."""
        return cls(
            link_indicator=str(data.get("link_indicator", DEFAULT_LINK_INDICATOR)),
            unknown_account_label=str(
                data.get("unknown_account_label", DEFAULT_UNKNOWN_ACCOUNT_LABEL)
            ),
            sentinel_times=_as_time_strings(data, "sentinel_times", list(DEFAULT_SENTINEL_TIMES)),
            manual_cash_subtype=str(data.get("manual_cash_subtype", PHYSICAL_CASH_SUBTYPE)),
            transfer_category_names=_as_str_list(
                data, "transfer_category_names", DEFAULT_TRANSFER_CATEGORY_NAMES
            ),
        )


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        date_format: strftime format for dates in exports.
        time_format: strftime format for times in exports.
        currency_symbol: Currency symbol for display.
        decimal_places: Number of decimal places.
    """

    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M"
    currency_symbol: str = "$"
    decimal_places: int = 2

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        return cls(
            date_format=str(data.get("date_format", "%Y-%m-%d")),
            time_format=str(data.get("time_format", "%H:%M")),
            currency_symbol=str(data.get("currency_symbol", "$")),
            decimal_places=int(data.get("decimal_places", 2)),  # type: ignore[arg-type]
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "ledger_normalizer.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "ledger_normalizer.log")),
        )


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        normalization: Engine policy values.
        output: Output generation configuration.
        logging: Logging configuration.
    """

    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object] | None:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def load_config(
    settings_path: Path | None = None,
    config_dir: Path | None = None,
) -> Config:
    """Load configuration from settings.yaml.

    A missing settings file is not an error; defaults are used.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    if config_dir is None:
        config_dir = Path("config")
    if settings_path is None:
        settings_path = config_dir / "settings.yaml"

    config = Config()

    if not settings_path.exists():
        logger.warning(f"Settings file not found: {settings_path}, using defaults")
        return config

    data = load_yaml_file(settings_path)

    try:
        normalization = _section(data, "normalization")
        if normalization is not None:
            config.normalization = NormalizationConfig.from_dict(normalization)

        output = _section(data, "output")
        if output is not None:
            config.output = OutputConfig.from_dict(output)

        logging_section = _section(data, "logging")
        if logging_section is not None:
            config.logging = LoggingConfig.from_dict(logging_section)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in {settings_path}: {e}") from e

    logger.info(f"Loaded settings from {settings_path}")
    return config

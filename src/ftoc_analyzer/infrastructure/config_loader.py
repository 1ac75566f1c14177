"""Loads analysis configuration from ``ftoc-warnings.yml`` style YAML files."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ftoc_analyzer.core.models.configuration import AnalysisConfig
from ftoc_analyzer.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Searched in order, relative to the working directory
PROJECT_CONFIG_PATHS = (
    Path(".ftoc/config.yml"),
    Path(".ftoc.yml"),
    Path(".config/ftoc/warnings.yml"),
    Path("config/ftoc-warnings.yml"),
)

USER_CONFIG_PATH = Path("~/.config/ftoc/warnings.yml")


def find_config_file(base_dir: Optional[Path] = None) -> Optional[Path]:
    """First existing config file: project locations, then the user's home."""
    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    candidates = [base_dir / p for p in PROJECT_CONFIG_PATHS]
    candidates.append(USER_CONFIG_PATH.expanduser())
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read configuration {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration {path} must contain a mapping")
    return data


def load_config(path: Optional[Path] = None, base_dir: Optional[Path] = None) -> AnalysisConfig:
    """Load configuration from a file, or from the default locations.

    Args:
        path: Explicit config file; it must exist
        base_dir: Directory the default locations are relative to (cwd when None)

    Returns:
        The loaded configuration, or defaults when no file is found

    Raises:
        ConfigurationError: If an explicit file is missing, or any file holds
            invalid YAML or invalid settings
    """
    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
    else:
        path = find_config_file(base_dir)
        if path is None:
            logger.debug("No configuration file found, using defaults")
            return AnalysisConfig()

    logger.info("Loading configuration from %s", path)
    return AnalysisConfig.from_mapping(_load_yaml(path))

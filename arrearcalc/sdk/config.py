"""Configuration management for Arrear Calc.

Configuration lives in settings.json - machine-specific settings:
   - da_rates: path to a DA table YAML overriding the bundled one
   - default_output_format: tool behavior preferences

Config directory resolution:
1. ARREAR_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/arrear-calc/ (XDG_CONFIG_HOME fallback)

DA table resolution:
1. Explicit path passed by the caller (e.g. --da-rates)
2. settings.json "da_rates" key (if set via CLI)
3. Bundled arrearcalc/data/da_rates.yaml
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .schemas import PRE_REVISED, REVISED, DARate

logger = logging.getLogger(__name__)


APP_NAME = "arrear-calc"
SETTINGS_FILENAME = "settings.json"
BUNDLED_DA_RATES = Path(__file__).parent.parent / "data" / "da_rates.yaml"

# DA table YAML keys -> DARate.type
TRACK_KEYS = {
    "revised": REVISED,
    "pre_revised": PRE_REVISED,
}


class DARatesNotFoundError(Exception):
    """Raised when a configured DA table file does not exist."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. ARREAR_CALC_CONFIG_PATH environment variable
    2. ~/.config/arrear-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("ARREAR_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_da_rates_path(override: Optional[Path] = None) -> Path:
    """Resolve which DA table file to use.

    Args:
        override: Explicit path; takes precedence over settings

    Returns:
        Path to the DA table YAML

    Raises:
        DARatesNotFoundError: If an explicit or configured path doesn't exist
    """
    if override is not None:
        path = Path(override).expanduser()
        source = "argument"
    else:
        configured = get_setting("da_rates")
        if not configured:
            return BUNDLED_DA_RATES
        path = Path(configured).expanduser()
        source = f"settings.json ({get_settings_path()})"

    if not path.exists():
        raise DARatesNotFoundError(
            f"DA table not found: {path} (from {source})\n\n"
            f"Fix the path or clear it with: arrear-calc settings da-rates --clear"
        )
    return path


def parse_da_table(data: Any) -> List[DARate]:
    """Convert parsed DA table YAML into DARate models.

    Accepts either a mapping of track -> entries:

        revised:
          - {effective_date: 2016-01-01, percentage: 0}
        pre_revised:
          - {effective_date: 2016-01-01, percentage: 125}

    or a flat list of entries each carrying its own 'type'.

    Raises:
        ValueError: On unknown tracks or invalid entries
    """
    if data is None:
        return []

    if isinstance(data, list):
        return [DARate.model_validate(entry) for entry in data]

    if not isinstance(data, dict):
        raise ValueError(f"DA table must be a mapping or list, got {type(data).__name__}")

    rates = []
    for key, entries in data.items():
        track = TRACK_KEYS.get(str(key).lower())
        if track is None:
            raise ValueError(
                f"Unknown DA track '{key}' (expected one of: {', '.join(TRACK_KEYS)})"
            )
        if entries is None:
            continue
        if not isinstance(entries, list):
            raise ValueError(f"DA track '{key}' must be a list of entries, got {type(entries).__name__}")
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValueError(
                    f"DA track '{key}': expected {{effective_date, percentage}}, got {entry!r}"
                )
            rates.append(DARate.model_validate({**entry, "type": track}))
    return rates


def load_da_rates(path: Optional[Path] = None) -> List[DARate]:
    """Load DA rates for both tracks.

    Args:
        path: Optional explicit DA table path

    Returns:
        DARate list (unsorted; the engine orders them)

    Raises:
        DARatesNotFoundError: If the resolved path doesn't exist
        ValueError: If the file isn't valid YAML or holds malformed entries
    """
    da_path = get_da_rates_path(path)
    logger.debug(f"Loading DA rates from {da_path}")

    with open(da_path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"{da_path.name}: invalid YAML: {e}")

    try:
        return parse_da_table(data)
    except ValueError as e:
        raise ValueError(f"{da_path.name}: {e}")

"""
Configuration management for dbroad.

Provides utilities for loading and validating YAML/JSON configuration files
describing the broadening model parameters and the angle sampling grid.
"""

import json
from pathlib import Path
from typing import Dict, Any, Union
import logging

import yaml

logger = logging.getLogger(__name__)

# Parameters accepted in the 'broadening' section, with their defaults.
# None marks a required field.
BROADENING_FIELDS = {
    "energy_MeV": None,
    "beta": None,
    "d_theta_deg": 0.0,
    "resolution_const": 1.0,
    "d_beta": 0.0,
}

SAMPLING_FIELDS = {
    "theta_min_deg": 0.0,
    "theta_max_deg": 180.0,
    "n_points": 100,
}


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters
    ----------
    config_path : str or Path
        Path to configuration file (.yaml, .yml, or .json)

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    FileNotFoundError
        If config file does not exist
    ValueError
        If file format is not supported
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, "r") as f:
        if suffix in [".yaml", ".yml"]:
            config = yaml.safe_load(f)
        elif suffix == ".json":
            config = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. " "Use .yaml, .yml, or .json"
            )

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValueError(f"Configuration root must be a mapping, got {type(config).__name__}")

    logger.info(f"Loaded configuration from {config_path}")
    return config


def validate_broadening_config(config: Dict[str, Any]) -> bool:
    """
    Validate broadening configuration structure.

    Only the structure is checked here; physical ranges are enforced when
    the model is constructed.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    bool
        True if valid

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    if "broadening" not in config:
        raise ValueError("Configuration must contain 'broadening' section")

    section = config["broadening"]
    if not isinstance(section, dict):
        raise ValueError("'broadening' section must be a mapping")

    # Check required fields
    for field, default in BROADENING_FIELDS.items():
        if default is None and field not in section:
            raise ValueError(f"Broadening config missing required field: {field}")

    unknown = sorted(set(section) - set(BROADENING_FIELDS))
    if unknown:
        raise ValueError(
            f"Unknown broadening parameters: {unknown}. "
            f"Must be among: {list(BROADENING_FIELDS)}"
        )

    for field, value in section.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Broadening parameter '{field}' must be a number")

    return True


def validate_sampling_config(config: Dict[str, Any]) -> bool:
    """
    Validate the optional sampling section.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    bool
        True if valid (or absent)

    Raises
    ------
    ValueError
        If configuration is invalid
    """
    sampling = config.get("sampling")
    if sampling is None:
        return True

    if not isinstance(sampling, dict):
        raise ValueError("'sampling' section must be a mapping")

    unknown = sorted(set(sampling) - set(SAMPLING_FIELDS))
    if unknown:
        raise ValueError(f"Unknown sampling parameters: {unknown}")

    merged = {**SAMPLING_FIELDS, **sampling}

    for field in ("theta_min_deg", "theta_max_deg"):
        value = merged[field]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Sampling parameter '{field}' must be a number")

    n_points = merged["n_points"]
    if isinstance(n_points, bool) or not isinstance(n_points, int):
        raise ValueError("Sampling 'n_points' must be an integer")

    if n_points < 2:
        raise ValueError("Sampling 'n_points' must be at least 2")

    if merged["theta_max_deg"] <= merged["theta_min_deg"]:
        raise ValueError("Sampling 'theta_max_deg' must be greater than 'theta_min_deg'")

    return True


def get_broadening_parameters(config: Dict[str, Any]) -> Dict[str, float]:
    """
    Extract broadening parameters, filling in defaults.

    Parameters
    ----------
    config : dict
        Validated configuration dictionary

    Returns
    -------
    dict
        Keyword arguments for DopplerBroadening
    """
    validate_broadening_config(config)
    section = config["broadening"]
    return {
        field: float(section.get(field, default)) for field, default in BROADENING_FIELDS.items()
    }


def get_sampling_parameters(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract sampling parameters, filling in defaults.

    Parameters
    ----------
    config : dict
        Configuration dictionary

    Returns
    -------
    dict
        Keys 'theta_min_deg', 'theta_max_deg' and 'n_points'
    """
    validate_sampling_config(config)
    merged = {**SAMPLING_FIELDS, **(config.get("sampling") or {})}
    return {
        "theta_min_deg": float(merged["theta_min_deg"]),
        "theta_max_deg": float(merged["theta_max_deg"]),
        "n_points": int(merged["n_points"]),
    }


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> Path:
    """
    Save configuration to YAML or JSON file.

    Parameters
    ----------
    config : dict
        Configuration dictionary
    config_path : str or Path
        Path to output file. Unknown suffixes are written as YAML.

    Returns
    -------
    Path
        The path actually written
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()

    if suffix == ".json":
        with open(config_path, "w") as f:
            json.dump(config, f, indent=2)
    else:
        if suffix not in [".yaml", ".yml"]:
            config_path = config_path.with_suffix(".yaml")
        with open(config_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")
    return config_path

"""
Configuration loading for the gHM landscape workflow.

Defaults live in ``DEFAULT_CONFIG``; a YAML file only needs to hold the values
that differ from them and is deep merged on top.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# Global Human Modification dataset on the Earth Engine catalog
# https://developers.google.com/earth-engine/datasets/catalog/CSP_HM_GlobalHumanModification
DEFAULT_CONFIG = {
    'earth_engine': {
        'project': None,
        'authenticate': False,
    },
    'dataset': {
        'collection_id': 'CSP/HM/GlobalHumanModification',
        'band': 'gHM',
    },
    'boundary': {
        'path': None,
        'name_field': None,
        'names': None,
        'batch': False,
    },
    'processing': {
        'scale': 1000,
        'max_pixels': 1e9,
        'best_effort': True,
        'reducer': 'median',
        'fetch_method': 'pixels',
        'neighborhood_rule': '8',
        'nodata': 0,
    },
    'output': {
        'results_csv': None,
        'raster_dir': None,
    },
}

CONFIG_ENV_VAR = 'GHM_LANDSCAPE_CONFIG'

FETCH_METHODS = ('pixels', 'geotiff')
REDUCERS = ('median', 'mean', 'min', 'max')


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into ``base`` (in place) and return it."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the workflow configuration.

    Search order:
    1. Explicit config_path if provided
    2. Environment variable GHM_LANDSCAPE_CONFIG
    3. Built-in defaults only

    Args:
        config_path: Path to a YAML configuration file

    Returns:
        Dict[str, Any]: Defaults merged with the file contents

    Raises:
        FileNotFoundError: If an explicit (or env) path does not exist
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If a value fails validation
    """
    logger = logging.getLogger(__name__)
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)

    if config_path is None:
        logger.debug("No configuration file given, using defaults")
        validate_config(config)
        return config

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(config_file, 'r', encoding='utf-8') as f:
        try:
            user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in {config_file}: {e}")

    if not isinstance(user_config, dict):
        raise ValueError(f"Configuration in {config_file} must be a mapping")

    deep_merge(config, user_config)
    validate_config(config)

    logger.info(f"Loaded configuration from: {config_file}")
    return config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Check the values the workflow branches on.

    Raises:
        ValueError: If configuration is invalid
    """
    processing = config.get('processing', {})

    fetch_method = processing.get('fetch_method')
    if fetch_method not in FETCH_METHODS:
        raise ValueError(f"Unknown fetch_method '{fetch_method}', expected one of {FETCH_METHODS}")

    reducer = processing.get('reducer')
    if reducer not in REDUCERS:
        raise ValueError(f"Unknown reducer '{reducer}', expected one of {REDUCERS}")

    if str(processing.get('neighborhood_rule')) not in ('4', '8'):
        raise ValueError("neighborhood_rule must be '4' or '8'")

    scale = processing.get('scale')
    if not isinstance(scale, (int, float)) or scale <= 0:
        raise ValueError(f"scale must be a positive number, got {scale!r}")

    # Class rasters are uint8 with labels 1 - 5
    nodata = processing.get('nodata')
    if isinstance(nodata, bool) or not isinstance(nodata, int) or not 0 <= nodata <= 255:
        raise ValueError(f"nodata must be an integer in 0 - 255, got {nodata!r}")
    if 1 <= nodata <= 5:
        raise ValueError(f"nodata {nodata} clashes with a gHM class (1 - 5)")

    return True


def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get nested configuration value using dot notation.

    Examples:
        >>> get_config_value(config, 'processing.scale', 1000)
    """
    value = config
    try:
        for key in key_path.split('.'):
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default

"""
Configuration management for the trifocal solve-and-verify core.

This module provides predefined configurations, validation, and
configuration management utilities.
"""

from typing import Dict, List, Any
from dataclasses import dataclass, asdict
import copy
import json
import os

from .logger import get_logger

logger = get_logger("config")


# =============================================================================
# Default Configurations
# =============================================================================


DEFAULT_CONFIG = {
    'solver': {
        'max_solve_tries': 5,        # Attempts before reporting SOLVE_FAILED
    },
    'probing': {
        'tolerance': 1e-4,           # Max distance in quaternion-translation space
    },
    'evaluation': {
        'max_error': 1e-3,           # Squared normalized reprojection error
    },
    'features': {
        'feature_extension': '.feat', # <image basename><extension> per view
        'num_workers': 4,             # Loader threads
    },
}


PRESET_CONFIGS = {
    'default': {},

    'thorough': {
        'solver': {
            'max_solve_tries': 15,
        },
        'probing': {
            'tolerance': 1e-3,
        },
    },
}


@dataclass
class TrifocalSolverConfig:
    """Configuration for the solver invoker and the prober"""

    max_solve_tries: int = 5        # Attempts with fresh solver randomization
    probe_tolerance: float = 1e-4   # Ground-truth match tolerance
    max_error: float = 1e-3         # Acceptable squared reprojection error

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'TrifocalSolverConfig':
        """Build from a nested configuration dictionary (see DEFAULT_CONFIG)"""
        merged = merge_configs(DEFAULT_CONFIG, config)
        return cls(
            max_solve_tries=int(merged['solver']['max_solve_tries']),
            probe_tolerance=float(merged['probing']['tolerance']),
            max_error=float(merged['evaluation']['max_error']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Configuration Helpers
# =============================================================================


def get_default_config() -> Dict[str, Any]:
    """Get a copy of the default configuration"""
    return copy.deepcopy(DEFAULT_CONFIG)


def create_config_from_preset(preset: str) -> Dict[str, Any]:
    """
    Create configuration from preset

    Args:
        preset: Preset name ('default', 'thorough')

    Returns:
        Configuration dictionary

    Raises:
        ValueError: If preset is unknown
    """
    if preset not in PRESET_CONFIGS:
        available = ', '.join(PRESET_CONFIGS.keys())
        raise ValueError(f"Unknown preset '{preset}'. Available presets: {available}")

    return merge_configs(DEFAULT_CONFIG, PRESET_CONFIGS[preset])


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configurations, with override taking precedence

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def validate_config(config: Dict[str, Any]) -> Dict[str, List[str]]:
    """
    Validate configuration and return any issues

    Args:
        config: Configuration to validate

    Returns:
        Dictionary with validation results:
        {
            'errors': [list of error messages],
            'warnings': [list of warning messages]
        }
    """
    errors = []
    warnings = []

    for section in ('solver', 'probing', 'evaluation'):
        if section not in config:
            errors.append(f"Missing required section: {section}")
        elif not isinstance(config[section], dict):
            errors.append(f"'{section}' must be a dictionary")

    solver = config.get('solver', {})
    if isinstance(solver, dict):
        tries = solver.get('max_solve_tries')
        if not isinstance(tries, int) or isinstance(tries, bool) or tries <= 0:
            errors.append("'solver.max_solve_tries' must be a positive integer")
        elif tries == 1:
            warnings.append("A single solve attempt leaves no room for non-convergence")

    probing = config.get('probing', {})
    if isinstance(probing, dict):
        tolerance = probing.get('tolerance')
        if not isinstance(tolerance, (int, float)) or tolerance <= 0:
            errors.append("'probing.tolerance' must be a positive number")
        elif tolerance > 1e-1:
            warnings.append("Probe tolerance above 0.1 may match unrelated solutions")

    evaluation = config.get('evaluation', {})
    if isinstance(evaluation, dict):
        max_error = evaluation.get('max_error')
        if not isinstance(max_error, (int, float)) or max_error <= 0:
            errors.append("'evaluation.max_error' must be a positive number")

    features = config.get('features', {})
    if isinstance(features, dict) and 'num_workers' in features:
        workers = features['num_workers']
        if not isinstance(workers, int) or workers <= 0:
            errors.append("'features.num_workers' must be a positive integer")
    if isinstance(features, dict) and 'feature_extension' in features:
        if not str(features['feature_extension']).startswith('.'):
            errors.append("'features.feature_extension' must start with '.'")

    return {'errors': errors, 'warnings': warnings}


def save_config(config: Dict[str, Any], filepath: str):
    """
    Save configuration to JSON file

    Args:
        config: Configuration to save
        filepath: Output file path
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, 'w') as f:
        json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to: {filepath}")


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from JSON file

    Args:
        filepath: Path to configuration file

    Returns:
        Loaded configuration merged over the defaults

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(filepath, 'r') as f:
        config = json.load(f)

    logger.info(f"Configuration loaded from: {filepath}")
    return merge_configs(DEFAULT_CONFIG, config)


def get_available_presets() -> List[str]:
    """Get list of available preset names"""
    return list(PRESET_CONFIGS.keys())

"""
YAML configuration for the relay tuner.

Loads, validates and (when missing) creates the tuner configuration file,
and builds a RelayFeedbackTuner from it. Only configuration lives in the
file; tuning results are never written back.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger

from .exceptions import ConfigurationError
from .relay_tuner import (
    DEFAULT_NOISE_BAND,
    DEFAULT_OUTPUT_HIGH,
    DEFAULT_OUTPUT_LOW,
    DEFAULT_SAMPLE_TIME_MS,
    DEFAULT_SETPOINT,
    RelayFeedbackTuner,
)
from .timing_base import TimerBase

TUNER_KEYS = ("setpoint", "noise_band", "sample_time_ms", "output_high", "output_low")


def default_config() -> Dict[str, Any]:
    """Create default configuration structure."""
    return {
        "tuner": {
            "setpoint": DEFAULT_SETPOINT,
            "noise_band": DEFAULT_NOISE_BAND,
            "sample_time_ms": DEFAULT_SAMPLE_TIME_MS,
            "output_high": DEFAULT_OUTPUT_HIGH,
            "output_low": DEFAULT_OUTPUT_LOW,
        },
    }


def validate_config(config: Any) -> None:
    """
    Validate configuration structure.

    Only the shape is checked: the section must exist, every key must be
    present and numeric. Value ranges are not enforced.

    Raises:
        ConfigurationError: If the structure is incomplete or malformed
    """
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a mapping")

    if "tuner" not in config:
        raise ConfigurationError("Missing required configuration section: tuner")

    tuner_config = config["tuner"]
    if not isinstance(tuner_config, dict):
        raise ConfigurationError("Configuration section 'tuner' must be a mapping")

    for key in TUNER_KEYS:
        if key not in tuner_config:
            raise ConfigurationError(f"Missing required tuner parameter: {key}")
        value = tuner_config[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(
                f"Tuner parameter '{key}' must be numeric, got {value!r}"
            )


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """Save configuration to YAML file."""
    config_path = Path(config_path)
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False, indent=2)
        logger.info(f"Configuration saved to {config_path}")

    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        raise ConfigurationError(f"Configuration save error: {e}")


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML file or create default.

    Args:
        config_path: Path to the YAML file

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated
    """
    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Configuration file not found, creating default: {config_path}")
        config = default_config()
        save_config(config, config_path)
        return config

    logger.info(f"Loading existing configuration from {config_path}")
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise ConfigurationError(f"Configuration parsing error: {e}")
    except OSError as e:
        logger.error(f"Failed to load configuration: {e}")
        raise ConfigurationError(f"Configuration loading error: {e}")

    validate_config(config)
    return config


def create_tuner(
    config_path: Union[str, Path],
    input_signal: Any,
    output_signal: Any,
    timer: Optional[TimerBase] = None,
) -> RelayFeedbackTuner:
    """
    Build a relay tuner from a configuration file.

    Args:
        config_path: Path to the YAML file (created with defaults if missing)
        input_signal: Slot holding the process variable
        output_signal: Slot receiving the relay output
        timer: Timer implementation for the tuner

    Returns:
        A reset RelayFeedbackTuner
    """
    tuner_config = load_config(config_path)["tuner"]

    tuner = RelayFeedbackTuner(
        input_signal,
        output_signal,
        setpoint=float(tuner_config["setpoint"]),
        noise_band=float(tuner_config["noise_band"]),
        sample_time_ms=int(tuner_config["sample_time_ms"]),
        output_high=float(tuner_config["output_high"]),
        output_low=float(tuner_config["output_low"]),
        timer=timer,
    )
    logger.info(f"Relay tuner created from {config_path}")
    return tuner

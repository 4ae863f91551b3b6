# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup and config
loading, that are used by the driver but do not belong to the physics core.
"""
import copy
import json
import logging
import logging.handlers
import os
from typing import Any, Dict

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. An empty "log_file" disables
#       the file handler.
#   - Side Effects: Configures the root Python logger with a console
#     handler and, if enabled, a rotating file handler.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: DEFAULT_CONFIG overlaid section by section with the file.
#   - Raises FileNotFoundError / json.JSONDecodeError after logging them.

DEFAULT_CONFIG: Dict[str, Any] = {
    "simulation_parameters": {
        "particle_count": 5,
        "ball_diameter": 0.006,
        "seed": None,
    },
    "display": {
        "width_px": 1080,
        "height_px": 1920,
        "xdpi": 420.0,
        "ydpi": 420.0,
        "rotation": 0,
    },
    "run_control": {
        "max_steps": 600,
        "fps": 60,
        "log_throttle_steps": 60,
        "tilt_magnitude": 9.81,
        "tilt_period_s": 4.0,
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/simulation.log",
    },
}


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, unless disabled, a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or '<disabled>'}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file on top of DEFAULT_CONFIG."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    logging.info("Configuration loaded successfully.")
    return config

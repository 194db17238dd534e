# utils.py
"""
Utility functions for the application framework.

This module provides helper functions, such as logging setup and config
loading, that are used across the application but do not belong to the
simulation or rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Any, Dict, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" section holding
#       "level", "format", "log_file" and "loggers" (a mapping of logger
#       name to level, applied after the root level).
#   - Side Effects: Configures the root Python logger with a console
#     handler and a rotating file handler. Creates the log directory.
#
# load_config(path: str, defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
#   - Inputs:
#     - path: JSON file. A relative path that does not exist in the working
#       directory is looked up next to this module.
#     - defaults: section -> dict of fallback values, merged one level deep.
#   - Side Effects: Logs and re-raises FileNotFoundError and
#     json.JSONDecodeError.

# Third-party loggers that flood DEBUG output during JIT compilation.
QUIET_LOGGERS = {'numba': 'WARNING'}


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particles.log')

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(log_level)
    if root.hasHandlers():
        root.handlers.clear()

    formatter = logging.Formatter(log_format)
    handlers = [
        logging.StreamHandler(),
        # 1MB per file, 5 backups.
        logging.handlers.RotatingFileHandler(log_file_path, maxBytes=1024*1024, backupCount=5),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logger_levels = dict(QUIET_LOGGERS)
    logger_levels.update(log_config.get('loggers', {}))
    for name, level in logger_levels.items():
        logging.getLogger(name).setLevel(str(level).upper())

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}, file {log_file_path}.")
    logging.debug(f"Per-logger levels: {logger_levels}")


def _resolve_config_path(path: str) -> str:
    if os.path.isabs(path) or os.path.exists(path):
        return path
    beside_module = os.path.join(os.path.dirname(os.path.abspath(__file__)), path)
    return beside_module if os.path.exists(beside_module) else path


def load_config(path: str, defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Loads a JSON configuration file, filling missing sections from `defaults`."""
    resolved = _resolve_config_path(path)
    logging.info(f"Loading configuration from {resolved}...")
    try:
        with open(resolved, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {resolved}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {resolved}.")
        raise

    for section, values in (defaults or {}).items():
        merged = dict(values)
        merged.update(config.get(section, {}))
        config[section] = merged
    logging.info("Configuration loaded successfully.")
    return config

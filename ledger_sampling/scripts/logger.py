"""Logging setup for the ledger sampling engine.

The dictConfig is read from a TOML file: an explicit path, the file named by
the LEDGER_SAMPLING_LOG_CFG environment variable, or logging_config.toml at
the repository root. The configuration may sit at the top level of the file
or under a [logging] table, so one TOML file can hold both the [sampling]
settings and the logging setup.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Optional, Union

import tomli

PACKAGE_LOGGER = "ledger_sampling"
LOG_CFG_ENV = "LEDGER_SAMPLING_LOG_CFG"
DEFAULT_LOG_CFG = Path(__file__).parent.parent.parent / "logging_config.toml"


def setup_logging(cfg_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Configure the package loggers.

    Returns:
        Path of the configuration applied, or None when no file was found and
        the package logger was silenced with a NullHandler
    """
    cfg_path = Path(cfg_path or os.getenv(LOG_CFG_ENV) or DEFAULT_LOG_CFG)

    if not cfg_path.exists():
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
        package_logger.addHandler(logging.NullHandler())
        return None

    if not cfg_path.is_file():
        raise FileNotFoundError(f"Logging config not found at {cfg_path}")

    with cfg_path.open("rb") as f:
        data = tomli.load(f)

    logging.config.dictConfig(data.get("logging", data))
    logging.getLogger(PACKAGE_LOGGER).debug(f"Logging configured from {cfg_path}")
    return cfg_path

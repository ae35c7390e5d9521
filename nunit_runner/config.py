"""Configuration for the runner client, read from .env files and the environment."""

import logging
import os
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .protocol import RUNNER_PORT

logger = logging.getLogger(__name__)

DEFAULT_PORT = RUNNER_PORT
DEFAULT_OUTPUT_DIR = "."

CONFIG_KEYS = ['RUNNER_PORT', 'RUNNER_READ_TIMEOUT', 'RUNNER_OUTPUT_DIR', 'RUNNER_OPEN_REPORT']


def load_config() -> dict:
    """Load config from environment variables and .env file.

    Environment variables take precedence over .env file values.
    Only the first .env file found is read.
    """
    paths = [
        os.environ.get('NUNIT_RUNNER_CONFIG'),
        Path.cwd() / '.env',
        Path(__file__).parent.parent / '.env',
    ]
    config = {}
    for p in paths:
        if p and Path(p).is_file():
            try:
                for line in Path(p).read_text().splitlines():
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        config[key.strip()] = value.strip()
            except OSError as e:
                logger.warning(f"Could not read config file {p}: {e}")
                continue
            logger.debug(f"Loaded config from {p}")
            break

    for key in CONFIG_KEYS:
        env_value = os.environ.get(key)
        if env_value is not None:
            config[key] = env_value

    return config


def get_runner_port() -> int:
    value = load_config().get('RUNNER_PORT', '')
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        raise ConfigError(f"RUNNER_PORT must be an integer, got {value!r}")
    if not 0 < port < 65536:
        raise ConfigError(f"RUNNER_PORT out of range: {port}")
    return port


def get_read_timeout() -> Optional[float]:
    """Per-read socket timeout in seconds, or None to block forever."""
    value = load_config().get('RUNNER_READ_TIMEOUT', '')
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(f"RUNNER_READ_TIMEOUT must be a number, got {value!r}")
    return timeout if timeout > 0 else None


def get_output_dir() -> Path:
    output_dir = load_config().get('RUNNER_OUTPUT_DIR') or DEFAULT_OUTPUT_DIR
    return Path(output_dir).expanduser()


def get_open_report() -> bool:
    value = load_config().get('RUNNER_OPEN_REPORT', 'true')
    return value.strip().lower() not in ('0', 'false', 'no', 'off')

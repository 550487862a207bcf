"""Global configuration: constants, settings and logging setup."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Directory holding per-project settings
CONFIG_DIR = ".regcheck"
CONFIG_FILENAME = "config.json"

# All known configuration keys with defaults
CONFIG_KEYS: dict[str, dict[str, str]] = {
    "REGCHECK_ENV": {"default": "development", "description": "Environment profile"},
    "REGCHECK_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "REGCHECK_JURISDICTION": {"default": "TW", "description": "Default jurisdiction"},
    "REGCHECK_REFERENCE_TABLES": {
        "default": "",
        "description": "Path to a JSON reference-table document",
    },
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "REGCHECK_ENV": "development",
        "REGCHECK_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "REGCHECK_ENV": "production",
        "REGCHECK_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "REGCHECK_ENV": "testing",
        "REGCHECK_LOG_LEVEL": "DEBUG",
        "REGCHECK_REFERENCE_TABLES": "",
    },
}


def load_config(project_path: str | Path = ".") -> dict[str, str]:
    """Return the merged settings for the project at *project_path*.

    Layers, lowest precedence first: key defaults, the ``REGCHECK_ENV``
    profile, ``.regcheck/config.json``, ``.env``, then the process
    environment.  Only keys listed in ``CONFIG_KEYS`` are kept.  A relative
    ``REGCHECK_REFERENCE_TABLES`` path is resolved against *project_path*.
    """
    root = Path(project_path)
    config: dict[str, str] = {key: info["default"] for key, info in CONFIG_KEYS.items()}

    env_name = os.environ.get("REGCHECK_ENV", config["REGCHECK_ENV"])
    layers = (
        _PROFILES.get(env_name, {}),
        _read_json_settings(root / CONFIG_DIR / CONFIG_FILENAME),
        _read_dotenv(root / ".env"),
        {key: os.environ[key] for key in CONFIG_KEYS if key in os.environ},
    )
    for layer in layers:
        for key, value in layer.items():
            if key in CONFIG_KEYS:
                config[key] = value
            else:
                logger.debug("Ignoring unknown setting %s", key)

    tables = config["REGCHECK_REFERENCE_TABLES"]
    if tables and not Path(tables).is_absolute():
        config["REGCHECK_REFERENCE_TABLES"] = str(root / tables)
    return config


def _read_json_settings(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read settings from %s", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Settings in %s must be a JSON object", path)
        return {}
    return {str(k): str(v) for k, v in data.items()}


def _read_dotenv(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines; ``export`` prefixes and quotes are stripped."""
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.removeprefix("export ").split("=", 1)
        values[key.strip()] = value.strip().strip("'\"")
    return values


def configure_logging(level: str | int | None = None) -> None:
    """Configure the ``regcheck`` logger hierarchy.

    *level* defaults to ``REGCHECK_LOG_LEVEL`` from the environment.
    """
    if level is None:
        level = os.environ.get("REGCHECK_LOG_LEVEL", CONFIG_KEYS["REGCHECK_LOG_LEVEL"]["default"])
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    pkg_logger = logging.getLogger("regcheck")
    pkg_logger.setLevel(level)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        pkg_logger.addHandler(handler)

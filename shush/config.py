"""Load the Sensu API location (api, timeout) from YAML."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml

from .client import DEFAULT_TIMEOUT
from .errors import ConfigurationError

DEFAULT_API_URL = "http://127.0.0.1:4567"
DEFAULT_CONFIG_LOCATIONS = [
    "/etc/shush/shush.yaml",
    str(Path.home() / ".shush" / "shush.yaml"),
]

ENV_REF = re.compile(r"\$\{([^}]*)\}")

logger = logging.getLogger(__name__)


def substitute_env(value: str) -> str:
    """Expand ${VAR} references; unset variables are an error."""
    def repl(match):
        name = match.group(1)
        if name not in os.environ:
            raise ConfigurationError(f"Variable {name} is not present in the environment")
        return os.environ[name]

    if "${" in ENV_REF.sub("", value):
        raise ConfigurationError(f"Unterminated variable reference in {value!r}")
    return ENV_REF.sub(repl, value)


def check_timeout(timeout: float) -> float:
    """Reject timeouts requests would refuse."""
    if not timeout > 0:
        raise ConfigurationError(f"Timeout must be a positive number of seconds, got {timeout}")
    return timeout


def _read(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path} must be a mapping")
    return data


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load config (api, timeout) from the first YAML file found."""
    cfg: Dict[str, Any] = {"api": DEFAULT_API_URL, "timeout": DEFAULT_TIMEOUT}

    if path:
        p = Path(path).expanduser()
        if not p.is_file():
            raise ConfigurationError(f"Config file {p} does not exist")
        try:
            data = _read(p)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read config {p}: {e}") from e
    else:
        data = None
        for loc in DEFAULT_CONFIG_LOCATIONS:
            p = Path(loc).expanduser()
            if not p.is_file():
                continue
            try:
                data = _read(p)
                break
            except (OSError, yaml.YAMLError, ConfigurationError) as e:
                logger.error("Failed to read config %s: %s", p, e)
        if data is None:
            logger.warning("No config found; using %s", DEFAULT_API_URL)
            return cfg

    api = data.get("api")
    if api:
        api = substitute_env(str(api))
        parsed = urlparse(api)
        if parsed.scheme and parsed.netloc:
            cfg["api"] = api.rstrip("/")
        else:
            logger.error("Invalid 'api' in %s: %s (ignored)", p, api)

    timeout = data.get("timeout")
    if timeout is not None:
        try:
            cfg["timeout"] = check_timeout(float(timeout))
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid 'timeout' in {p}: {timeout!r}")

    logger.debug("Loaded config from %s", p)
    return cfg

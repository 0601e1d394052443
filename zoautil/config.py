"""
Configuration — loads settings from .zoautil.yaml, environment variables,
and built-in defaults (in that priority order: env > YAML > defaults).
"""

import os

import yaml


_DEFAULTS = {
    "zoau_home": "",
    "poll_timeout": 10.0,
    "encoding": "",
    "lock": False,
    "log_dir": ".zoautil/logs",
}

# Config file search locations
_CONFIG_FILENAMES = [".zoautil.yaml", ".zoautil.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Runtime configuration for the command wrappers.

    Settings are resolved in priority order:
    1. Environment variables
    2. .zoautil.yaml config file
    3. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        self.ZOAU_HOME = _get("ZOAU_HOME", "zoau_home", _DEFAULTS["zoau_home"])
        self.POLL_TIMEOUT = _get("ZOAUTIL_POLL_TIMEOUT", "poll_timeout",
                                 _DEFAULTS["poll_timeout"], cast=float)
        self.ENCODING = _get("ZOAUTIL_ENCODING", "encoding",
                             _DEFAULTS["encoding"])
        self.LOCK = _get_bool("ZOAUTIL_LOCK", "lock", _DEFAULTS["lock"])
        self.LOG_DIR = _get("ZOAUTIL_LOG_DIR", "log_dir", _DEFAULTS["log_dir"])

    @property
    def bin_dir(self) -> str | None:
        """Directory holding the utility binaries, or None to use PATH."""
        if not self.ZOAU_HOME:
            return None
        return os.path.join(self.ZOAU_HOME, "bin")

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)

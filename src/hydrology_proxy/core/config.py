"""
Configuration module for the hydrology proxy.

Loads built-in defaults, an optional JSON file and environment variables.
The resulting configuration is read once at startup and injected into the
clients that need it.
"""

import copy
import json
import os
from typing import Dict, Any, List, Optional
from pathlib import Path

from . import constants


DEFAULT_CONFIG: Dict[str, Any] = {
    "upstream": {
        "base_url": constants.DATA_RODS_BASE_URL,
        "timeout": 30,
        "max_retries": 0,
        "verify_ssl": True,
        "user_agent": constants.USER_AGENT,
        "use_real_data": True,
    },
    "authentication": {
        "username": None,
        "password": None,
    },
    "services": {
        "giovanni_url": constants.GIOVANNI_BASE_URL,
        "worldview_url": constants.WORLDVIEW_BASE_URL,
        "earthdata_search_url": constants.EARTHDATA_SEARCH_URL,
        "cptec_url": constants.CPTEC_BASE_URL,
    },
    "server": {
        "host": "0.0.0.0",
        "port": constants.DEFAULT_PORT,
        "cors_origins": list(constants.DEFAULT_CORS_ORIGINS),
    },
    "proxy": {
        "base_url": constants.DEFAULT_PROXY_URL,
        "health_timeout_ms": constants.DEFAULT_HEALTH_TIMEOUT_MS,
    },
    "processing": {
        "max_workers": 8,
        "default_days": 7,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'. Only an explicitly named file
                        is required to exist.
        """
        self._file_required = bool(config_file or os.getenv("CONFIG_FILE"))
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._load_config()
        self._override_from_env()
        self._validate_config()
        self.freeze()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            if self._file_required:
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
            return

        with open(config_path, "r", encoding="utf-8") as f:
            file_config = json.load(f)

        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file must contain a JSON object: {self.config_file}")

        self._config = _deep_merge(self._config, file_config)

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        if os.getenv("DATA_RODS_BASE_URL"):
            self._config["upstream"]["base_url"] = os.getenv("DATA_RODS_BASE_URL")

        if os.getenv("API_TIMEOUT"):
            try:
                self._config["upstream"]["timeout"] = float(os.getenv("API_TIMEOUT", ""))
            except ValueError:
                raise ValueError(f"Invalid API_TIMEOUT: {os.getenv('API_TIMEOUT')}")

        if os.getenv("USE_REAL_NASA_DATA"):
            self._config["upstream"]["use_real_data"] = _parse_bool(os.getenv("USE_REAL_NASA_DATA", ""))

        # Authentication
        if os.getenv("NASA_USERNAME"):
            self._config["authentication"]["username"] = os.getenv("NASA_USERNAME")

        if os.getenv("NASA_PASSWORD"):
            self._config["authentication"]["password"] = os.getenv("NASA_PASSWORD")

        # Server / client side
        if os.getenv("PORT"):
            try:
                self._config["server"]["port"] = int(os.getenv("PORT", ""))
            except ValueError:
                raise ValueError(f"Invalid PORT: {os.getenv('PORT')}")

        if os.getenv("PROXY_URL"):
            self._config["proxy"]["base_url"] = os.getenv("PROXY_URL")

    def _validate_config(self) -> None:
        """Validate value ranges and credential pairing."""
        errors: List[str] = []

        if not self.upstream_base_url:
            errors.append("upstream.base_url must not be empty")
        if not isinstance(self.upstream_timeout, (int, float)) or self.upstream_timeout <= 0:
            errors.append("upstream.timeout must be a positive number")
        if not isinstance(self.upstream_max_retries, int) or self.upstream_max_retries < 0:
            errors.append("upstream.max_retries must be a non-negative integer")
        if not isinstance(self.server_port, int) or not 1 <= self.server_port <= 65535:
            errors.append("server.port must be an integer between 1 and 65535")
        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            errors.append("processing.max_workers must be a positive integer")
        if not isinstance(self.default_days, int) or self.default_days < 1:
            errors.append("processing.default_days must be a positive integer")
        if not isinstance(self.health_timeout_ms, (int, float)) or self.health_timeout_ms <= 0:
            errors.append("proxy.health_timeout_ms must be a positive number")

        # Credentials are optional, but only as a pair
        if bool(self.auth_username) != bool(self.auth_password):
            errors.append("authentication requires both username and password, or neither")

        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'upstream.base_url')
            default: Default value if key not found

        Returns:
            Configuration value (a copy for nested structures)
        """
        keys = key.split(".")
        value: Any = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return copy.deepcopy(value)

    @property
    def upstream_base_url(self) -> str:
        """Get Data Rods base URL."""
        return self.get("upstream.base_url", "")

    @property
    def upstream_timeout(self) -> float:
        """Get upstream timeout in seconds."""
        return self.get("upstream.timeout", 30)

    @property
    def upstream_max_retries(self) -> int:
        """Get transport-level retry attempts (0 keeps one attempt per request)."""
        return self.get("upstream.max_retries", 0)

    @property
    def upstream_verify_ssl(self) -> bool:
        return self.get("upstream.verify_ssl", True)

    @property
    def upstream_user_agent(self) -> str:
        return self.get("upstream.user_agent", constants.USER_AGENT)

    @property
    def use_real_data(self) -> bool:
        """Whether the real upstream is contacted at all."""
        return bool(self.get("upstream.use_real_data", True))

    @property
    def auth_username(self) -> Optional[str]:
        return self.get("authentication.username")

    @property
    def auth_password(self) -> Optional[str]:
        return self.get("authentication.password")

    @property
    def has_credentials(self) -> bool:
        return bool(self.auth_username and self.auth_password)

    @property
    def giovanni_url(self) -> str:
        return self.get("services.giovanni_url", constants.GIOVANNI_BASE_URL)

    @property
    def worldview_url(self) -> str:
        return self.get("services.worldview_url", constants.WORLDVIEW_BASE_URL)

    @property
    def earthdata_search_url(self) -> str:
        return self.get("services.earthdata_search_url", constants.EARTHDATA_SEARCH_URL)

    @property
    def cptec_url(self) -> str:
        return self.get("services.cptec_url", constants.CPTEC_BASE_URL)

    @property
    def server_host(self) -> str:
        return self.get("server.host", "0.0.0.0")

    @property
    def server_port(self) -> int:
        return self.get("server.port", constants.DEFAULT_PORT)

    @property
    def cors_origins(self) -> List[str]:
        return self.get("server.cors_origins", list(constants.DEFAULT_CORS_ORIGINS))

    @property
    def proxy_base_url(self) -> str:
        """Get proxy base URL used by the client-side service."""
        return self.get("proxy.base_url", constants.DEFAULT_PROXY_URL)

    @property
    def health_timeout_ms(self) -> float:
        return self.get("proxy.health_timeout_ms", constants.DEFAULT_HEALTH_TIMEOUT_MS)

    @property
    def max_workers(self) -> int:
        """Get maximum concurrent upstream fetches per bulk request."""
        return self.get("processing.max_workers", 8)

    @property
    def default_days(self) -> int:
        return self.get("processing.default_days", 7)

    def __setattr__(self, name: str, value: Any) -> None:
        # Attributes are fixed once __init__ has finished
        if getattr(self, "_frozen", False):
            raise AttributeError(f"Config is read-only; cannot set {name!r}")
        super().__setattr__(name, value)

    def freeze(self) -> "Config":
        """Mark the configuration read-only. Called at the end of __init__."""
        super().__setattr__("_frozen", True)
        return self

    def __repr__(self) -> str:
        return (
            f"Config(file={self.config_file}, real_data={self.use_real_data}, "
            f"credentials={'yes' if self.has_credentials else 'no'})"
        )

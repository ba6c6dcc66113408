"""
Settings for the Repair Planner.

Values are resolved in this order (first hit wins):
1. explicit overrides passed to PlannerSettings (tests, CLI)
2. environment variables (optionally loaded from .env)
3. config/base.yaml
4. built-in defaults

Usage:
    from config import get_settings

    settings = get_settings()
    settings.validate()  # raises ConfigurationError when MONGO_URI etc. are missing
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

from services.error_handlers import ConfigurationError
from services.logger_singleton import LoggerSingleton

logger = LoggerSingleton.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "base.yaml"

# env var -> (yaml dot path, default)
_SETTINGS = {
    "MONGO_URI": ("mongo.uri", None),
    "MONGO_DB_NAME": ("mongo.database", None),
    "TECHNICIANS_COLLECTION": ("mongo.collections.technicians", "Technicians"),
    "PARTS_COLLECTION": ("mongo.collections.parts", "PartsInventory"),
    "WORK_ORDERS_COLLECTION": ("mongo.collections.work_orders", "WorkOrders"),
    "OPENAI_API_KEY": ("openai.api_key", None),
    "OPENAI_BASE_URL": ("openai.base_url", None),
    "REPAIR_PLANNER_MODEL": ("openai.model", "gpt-4o-mini"),
    "CORS_ORIGINS": ("http.cors_origins", None),
}

REQUIRED_SETTINGS = ("MONGO_URI", "OPENAI_API_KEY", "REPAIR_PLANNER_MODEL")


class PlannerSettings:
    """Connection, collection and model settings for one planner process"""

    def __init__(self, overrides: Optional[Dict[str, Any]] = None, config_path: Optional[Path] = None):
        use_dotenv = os.getenv("USE_DOTENV", "true").lower() == "true"
        if use_dotenv:
            load_dotenv()

        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.config = self._load_config(self.config_path)
        overrides = overrides or {}

        values = {}
        for env_name, (yaml_key, default) in _SETTINGS.items():
            if env_name in overrides:
                values[env_name] = overrides[env_name]
            elif os.getenv(env_name):
                values[env_name] = os.getenv(env_name)
            else:
                values[env_name] = self.get(yaml_key, default)
        self._values = values

        logger.debug(f"Settings loaded from {self.config_path}: model={self.model}, database={self.mongo_db_name}")

    def _load_config(self, path: Path) -> Dict[str, Any]:
        """Load YAML config file"""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return {}

        with open(path, 'r') as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        return config or {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a YAML config value by dot-notation key (e.g. "mongo.collections.parts").
        """
        value = self.config
        for k in key.split('.'):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

            if value is None:
                return default

        return value

    # ==========================================
    # Accessors
    # ==========================================

    @property
    def mongo_uri(self) -> Optional[str]:
        return self._values["MONGO_URI"]

    @property
    def mongo_db_name(self) -> Optional[str]:
        return self._values["MONGO_DB_NAME"]

    @property
    def technicians_collection(self) -> str:
        return self._values["TECHNICIANS_COLLECTION"]

    @property
    def parts_collection(self) -> str:
        return self._values["PARTS_COLLECTION"]

    @property
    def work_orders_collection(self) -> str:
        return self._values["WORK_ORDERS_COLLECTION"]

    @property
    def openai_api_key(self) -> Optional[str]:
        return self._values["OPENAI_API_KEY"]

    @property
    def openai_base_url(self) -> Optional[str]:
        return self._values["OPENAI_BASE_URL"]

    @property
    def model(self) -> str:
        return self._values["REPAIR_PLANNER_MODEL"]

    @property
    def cors_origins(self) -> list[str]:
        """Comma-separated in the environment, a list in YAML"""
        origins = self._values["CORS_ORIGINS"]
        if not origins:
            return []
        if isinstance(origins, str):
            origins = origins.split(",")
        return [origin.strip() for origin in origins if origin and origin.strip()]

    def missing_settings(self) -> list[str]:
        return [name for name in REQUIRED_SETTINGS if not self._values.get(name)]

    def validate(self) -> "PlannerSettings":
        """Fail fast when required connection or model settings are absent"""
        missing = self.missing_settings()
        if missing:
            raise ConfigurationError(
                f"One or more required configuration values are missing: {', '.join(missing)}"
            )
        return self


# ==========================================
# Global Instance
# ==========================================

_settings_instance: Optional[PlannerSettings] = None


def get_settings() -> PlannerSettings:
    """Get the process-wide PlannerSettings instance"""
    global _settings_instance

    if _settings_instance is None:
        _settings_instance = PlannerSettings()

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings_instance
    _settings_instance = None

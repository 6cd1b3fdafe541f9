"""
Configuration management with schema validation.
Settings come from an optional YAML file with ${VAR:default} substitution,
then a few direct environment overrides.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .exceptions import ConfigError
from .logger import get_logger

logger = get_logger(__name__)

# Load environment variables
load_dotenv()

DEFAULT_SETTINGS_FILE = Path(os.getenv("CHIRPY_SETTINGS", "config/settings.yaml"))


class AppSettings(BaseModel):
    name: str = "Chirpy"
    version: str = "1.0.0"
    environment: str = "development"


class StorageSettings(BaseModel):
    path: str = "database.json"


class AuthSettings(BaseModel):
    jwt_secret: str = ""
    issuer: str = "chirpy"
    session_ttl_seconds: int = Field(default=3600, gt=0)
    renewal_ttl_days: int = Field(default=60, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)


class PostSettings(BaseModel):
    max_length: int = Field(default=140, gt=0)
    banned_words: List[str] = Field(default_factory=lambda: ["kerfuffle", "sharbert", "fornax"])


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class WebSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    static_dir: Optional[str] = None


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    posts: PostSettings = Field(default_factory=PostSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    web: WebSettings = Field(default_factory=WebSettings)


class ConfigManager:
    """Loads Settings from YAML and the environment"""

    def __init__(self, settings_path: Union[str, Path, None] = None):
        self.explicit = settings_path is not None
        self.settings_path = Path(settings_path) if settings_path is not None else DEFAULT_SETTINGS_FILE
        self._settings: Optional[Settings] = None

    def _substitute_env_vars(self, value: Any) -> Any:
        """Recursively substitute environment variables"""
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return os.getenv(var_name.strip(), default.strip())
                else:
                    return os.getenv(var_expr, value)
        elif isinstance(value, dict):
            return {k: self._substitute_env_vars(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._substitute_env_vars(item) for item in value]
        return value

    def _apply_env_overrides(self, data: Dict[str, Any]) -> Dict[str, Any]:
        overrides = {
            ("auth", "jwt_secret"): os.getenv("JWT_SECRET"),
            ("storage", "path"): os.getenv("CHIRPY_DB_PATH"),
            ("logging", "level"): os.getenv("CHIRPY_LOG_LEVEL"),
        }
        for (section, key), value in overrides.items():
            if value:
                data.setdefault(section, {})
                data[section][key] = value
        return data

    def load_settings(self) -> Settings:
        """Load and validate settings"""
        raw_data: Dict[str, Any] = {}
        if self.settings_path.exists():
            try:
                with open(self.settings_path, "r", encoding="utf-8") as f:
                    raw_data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to read settings from {self.settings_path}: {e}") from e
            if not isinstance(raw_data, dict):
                raise ConfigError(f"Settings file {self.settings_path} must contain a mapping")
        elif self.explicit:
            raise ConfigError(f"Settings file not found: {self.settings_path}")
        else:
            logger.debug("No settings file, using defaults", path=str(self.settings_path))

        processed_data = self._apply_env_overrides(self._substitute_env_vars(raw_data))
        try:
            self._settings = Settings(**processed_data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e
        return self._settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            return self.load_settings()
        return self._settings

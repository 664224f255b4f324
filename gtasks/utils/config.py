"""
Configuration management
"""
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel


# ============================================
# CONFIGURATION DEFAULTS
# ============================================

class ConfigDefaults:
    """Default configuration values as constants"""

    # Google Tasks API
    TASKS_BASE_URL = "https://tasks.googleapis.com/tasks/v1"
    TASKS_USER_ID = "me"
    TASKS_SCOPE = "https://www.googleapis.com/auth/tasks"

    # OAuth
    TOKEN_URI = "https://oauth2.googleapis.com/token"

    # HTTP
    HTTP_TIMEOUT_SECONDS = 30.0

    # Logging defaults
    LOGGING_LEVEL_INFO = "INFO"

    # Config file defaults
    CONFIG_PATH_DEFAULT = "config/gtasks.yaml"


# Environment variables consulted for fields the YAML file leaves unset.
# Several names per field: the first non-empty one wins.
ENV_FIELDS: Dict[str, List[str]] = {
    "base_url": ["GOOGLE_TASKS_BASE_URL"],
    "user_id": ["GOOGLE_TASKS_USER_ID"],
    "client_id": ["GOOGLE_TASKS_CLIENT_ID", "GOOGLE_CLIENT_ID"],
    "client_secret": ["GOOGLE_TASKS_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET"],
    "refresh_token": ["GOOGLE_TASKS_REFRESH_TOKEN", "GOOGLE_REFRESH_TOKEN"],
    "access_token": ["GOOGLE_TASKS_ACCESS_TOKEN"],
    "token_uri": ["GOOGLE_TASKS_TOKEN_URI"],
    "scopes": ["GOOGLE_TASKS_SCOPES"],
    "timeout": ["GOOGLE_TASKS_TIMEOUT"],
    "log_level": ["GOOGLE_TASKS_LOG_LEVEL", "LOG_LEVEL"],
}


# ============================================
# CONFIGURATION MODELS
# ============================================

class TasksSettings(BaseModel):
    """Google Tasks client configuration"""
    base_url: str = ConfigDefaults.TASKS_BASE_URL
    user_id: str = ConfigDefaults.TASKS_USER_ID

    # OAuth (refresh-token flow; a bare access token also works until it expires)
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    refresh_token: Optional[str] = None
    access_token: Optional[str] = None
    token_uri: str = ConfigDefaults.TOKEN_URI
    scopes: List[str] = [ConfigDefaults.TASKS_SCOPE]

    timeout: float = ConfigDefaults.HTTP_TIMEOUT_SECONDS
    log_level: str = ConfigDefaults.LOGGING_LEVEL_INFO

    def auth_options(self) -> Dict[str, Any]:
        """Options mapping understood by the token provider's ``configure``."""
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": self.refresh_token,
            "access_token": self.access_token,
            "token_uri": self.token_uri,
            "scopes": list(self.scopes),
        }


def load_config(config_path: Optional[str] = None) -> TasksSettings:
    """
    Load configuration from an optional YAML file and environment variables.

    Values from the YAML file win; environment variables only fill the
    fields the file does not set.
    """
    load_dotenv()

    path = Path(config_path or os.getenv("GOOGLE_TASKS_CONFIG", ConfigDefaults.CONFIG_PATH_DEFAULT))
    config_dict: Dict[str, Any] = {}
    if path.exists():
        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
        if not isinstance(config_dict, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
    elif config_path:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    config_dict = _replace_env_vars(config_dict)

    for field_name, env_names in ENV_FIELDS.items():
        if config_dict.get(field_name) not in (None, ""):
            continue
        value = _first_env(*env_names)
        if value is None:
            continue
        if field_name == "scopes":
            config_dict[field_name] = [s for s in value.replace(",", " ").split() if s]
        else:
            config_dict[field_name] = value

    # Unresolved ${VAR} placeholders mean "not configured"
    config_dict = {k: v for k, v in config_dict.items() if not _is_placeholder(v)}

    return TasksSettings(**config_dict)


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip() != "":
            return value.strip()
    return None


def _is_placeholder(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("${") and value.endswith("}")


def _replace_env_vars(obj: Any) -> Any:
    """
    Recursively replace ${VAR} placeholders with environment variables.
    """
    if isinstance(obj, dict):
        return {k: _replace_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif _is_placeholder(obj):
        env_value = os.getenv(obj[2:-1])
        if env_value:
            return env_value
        return obj
    return obj

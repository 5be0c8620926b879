import os
from typing import Any, Dict

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATABASE_URL = "sqlite://data/knowledge_base.sqlite3"
DEFAULT_CONFIG_PATH = "config/config.yaml"


class Config(BaseSettings):
    database_url: str = DEFAULT_DATABASE_URL
    export_dir: str = "exports"
    log_level: str = "INFO"
    log_path: str = "logs/knowledge_base.log"

    model_config = SettingsConfigDict(env_prefix="KB_", env_file=".env", extra="ignore")


def _load_yaml_config() -> Dict[str, Any]:
    config_path = os.getenv("KB_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    if not os.path.exists(config_path):
        return {}

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}
    return data.get("knowledge_base") or {}


def load_config() -> Config:
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)

    file_settings = _load_yaml_config()

    # precedence: env -> config file -> default
    values: Dict[str, Any] = {}
    for field in Config.model_fields:
        env_value = os.getenv(f"KB_{field.upper()}")
        if env_value:
            values[field] = env_value
        elif file_settings.get(field) is not None:
            values[field] = file_settings[field]

    return Config(**values)

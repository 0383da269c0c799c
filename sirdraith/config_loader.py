from __future__ import annotations
from pathlib import Path
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field
import yaml

logger = logging.getLogger(__name__)


class MongoConfig(BaseModel):
    url: str = Field(default="mongodb://localhost:27017")
    root_username: str | None = None
    root_password: str | None = None
    auth_source: str = Field(default="admin")
    timeout_ms: int = Field(default=10000)


class AppUserConfig(BaseModel):
    user: str = Field(default="sir_draith_user")
    password: str = Field(default="sir_draith_password")
    database: str = Field(default="sir_draith")


class Settings(BaseModel):
    mongo: MongoConfig = Field(default_factory=MongoConfig)
    app: AppUserConfig = Field(default_factory=AppUserConfig)


# (section, field) -> environment variable
ENV_VARS: dict[tuple[str, str], str] = {
    ("app", "user"): "MONGO_APP_USER",
    ("app", "password"): "MONGO_APP_PASSWORD",
    ("app", "database"): "MONGO_DATABASE",
    ("mongo", "url"): "MONGODB_URL",
    ("mongo", "root_username"): "MONGO_INITDB_ROOT_USERNAME",
    ("mongo", "root_password"): "MONGO_INITDB_ROOT_PASSWORD",
    ("mongo", "auth_source"): "MONGODB_AUTH_SOURCE",
    ("mongo", "timeout_ms"): "MONGODB_TIMEOUT_MS",
}


def _load_yaml(path: str | os.PathLike) -> dict:
    p = Path(path)
    if not p.exists():
        logger.warning(f"Config file {p} does not exist; using environment and defaults")
        return {}
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _env_overrides() -> dict:
    overrides: dict[str, dict] = {}
    for (section, field), var in ENV_VARS.items():
        # empty counts as unset
        value = os.getenv(var)
        if value:
            overrides.setdefault(section, {})[field] = value
    return overrides


def load_settings(config_path: str = "config.yaml") -> Settings:
    load_dotenv(override=False)

    data = _load_yaml(config_path)
    env = _env_overrides()

    # Merge shallowly; env wins over file, file over model defaults
    merged = {
        **data,
        "mongo": {**(data.get("mongo") or {}), **env.get("mongo", {})},
        "app": {**(data.get("app") or {}), **env.get("app", {})},
    }
    return Settings(**merged)

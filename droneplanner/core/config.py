#!/usr/bin/env python3
import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


CONFIG_FILEPATH = os.getenv(
    "DRONEPLANNER_CONFIG",
    str(Path(__file__).resolve().parent.parent / "config" / "config.yaml"),
)


def load_yaml_config(path: str = CONFIG_FILEPATH) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r") as file:
        return yaml.safe_load(file) or {}


config = load_yaml_config()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    # Runtime
    ENV: str = config.get("ENV", "development")
    DEBUG: bool = config.get("DEBUG", False)
    LOG_LEVEL: str = config.get("LOG_LEVEL", "INFO")
    HOST: str = config.get("HOST", "0.0.0.0")
    PORT: int = config.get("PORT", 8080)

    # Database
    DATABASE_URL: str = config.get("DATABASE_URL", "sqlite+aiosqlite:///./drone_planner.db")
    DB_TIMEOUT_S: float = config.get("DB_TIMEOUT_S", 10)
    CREATE_TABLES: bool = config.get("CREATE_TABLES", True)

    # Auth
    JWT_SECRET: str = config.get("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = config.get("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_HOURS: int = config.get("ACCESS_TOKEN_EXPIRE_HOURS", 24)

    # CORS
    FRONTEND_URL: str = config.get("FRONTEND_URL", "http://localhost:5173")

    # TimeZoneDB
    TIMEZONEDB_API_KEY: str = config.get("TIMEZONEDB_API_KEY", "")
    TIMEZONEDB_URL: str = config.get("TIMEZONEDB_URL", "http://api.timezonedb.com/v2.1/get-time-zone")
    TIMEZONE_TIMEOUT_S: float = config.get("TIMEZONE_TIMEOUT_S", 5)
    TIMEZONE_CACHE_TTL_HOURS: float = config.get("TIMEZONE_CACHE_TTL_HOURS", 24)


@lru_cache
def get_settings() -> Settings:
    return Settings()

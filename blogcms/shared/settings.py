import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Mapping, Optional

from blogcms.specs.common.errors import ConfigurationError

LOGICAL_CONTAINERS = ("posts", "categories", "labels")


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer", details={"value": raw}) from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}", details={"value": value})
    return value


@dataclass(frozen=True)
class Settings:
    """Connection and tuning settings, read from the environment."""

    database_name: str
    connection_string: Optional[str] = None
    endpoint: Optional[str] = None
    key: Optional[str] = None
    container_names: Dict[str, str] = field(default_factory=dict)
    retry_total: int = 3
    posts_page_size: int = 100
    tag_sync_max_attempts: int = 5

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        connection_string = env.get("COSMOS_DB_CONNECTION_STRING") or None
        endpoint = env.get("COSMOS_DB_ENDPOINT") or None
        database_name = env.get("COSMOS_DB_NAME")

        if not connection_string and not endpoint:
            raise ConfigurationError(
                "Missing Cosmos DB connection string or endpoint",
                details={"expected": ["COSMOS_DB_CONNECTION_STRING", "COSMOS_DB_ENDPOINT"]},
            )
        if not database_name:
            raise ConfigurationError("Missing Cosmos DB database name", details={"expected": ["COSMOS_DB_NAME"]})

        container_names = {
            name: env.get(f"COSMOS_DB_CONTAINER_{name.upper()}") or name
            for name in LOGICAL_CONTAINERS
        }
        return cls(
            database_name=database_name,
            connection_string=connection_string,
            endpoint=endpoint,
            key=env.get("COSMOS_DB_KEY") or None,
            container_names=container_names,
            retry_total=_int_env(env, "COSMOS_DB_RETRY_TOTAL", 3, minimum=0),
            posts_page_size=_int_env(env, "POSTS_PAGE_SIZE", 100),
            tag_sync_max_attempts=_int_env(env, "TAG_SYNC_MAX_ATTEMPTS", 5),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings for long-lived hosts"""
    return Settings.from_env()

"""Configuration management for tasknotify."""

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tasknotify.filters import FilterConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TASKNOTIFY_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5032)
    log_level: str = Field(default="INFO")

    # Deployment root, used for task lookup, delivery and links
    root_url: str = Field(default="http://localhost:8080")
    http_timeout: float = Field(default=30.0)

    # Routing keys
    route_prefix: str = Field(default="route")
    route_namespace: str | None = Field(default=None)

    # Suppression
    ignore_task_reason_resolved: list[str] = Field(default_factory=lambda: ["canceled"])
    filter_config: str = Field(default="notify.yaml")

    @property
    def filter_config_path(self) -> Path:
        return Path(self.filter_config)

    def default_filter_config(self) -> FilterConfig:
        return FilterConfig(ignore_task_reason_resolved=frozenset(self.ignore_task_reason_resolved))


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_filter_config(config_path: str | Path, default: FilterConfig | None = None) -> FilterConfig:
    """Load suppression configuration from YAML file.

    An empty file yields default, or the model defaults when none is given.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Filter config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not data and default is not None:
        return default
    return FilterConfig.model_validate(data)

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TASKSHARE_", env_file=".env", extra="ignore")

    app_name: str = "taskshare"

    # Shared directory every participant points at (usually a network mount)
    workdir: Path = Path(".")

    # Shared files, relative to workdir
    task_file: str = "task.txt"
    process_file: str = "process.txt"
    barrier1_file: str = "barrier1.lock"
    barrier2_file: str = "barrier2.lock"
    share_lock_file: str = "share.lock"

    # Rendezvous timing (seconds)
    barrier1_wait: float = Field(default=0.5, gt=0)
    barrier2_wait: float = Field(default=0.1, gt=0)
    poll_period: float = Field(default=0.1, gt=0)

    # An existing task list younger than this is treated as still in use
    freshness_floor: float = Field(default=30.0, ge=0)

    # Relaxes the freshness guard and promotes round diagnostics to INFO
    debug: bool = False

    # Observability
    log_level: str = "INFO"
    log_json: bool = False
    enable_metrics: bool = True
    metrics_file: Path | None = None


settings = Settings()

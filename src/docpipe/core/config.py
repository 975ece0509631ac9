"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class ExecutorConfig(BaseSettings):
    """Pipeline executor behaviour."""

    model_config = {"env_prefix": "DOCPIPE_EXECUTOR_"}

    copy_output: bool = True  # deep-copy results so callers can't alias the input
    trace_stages: bool = False  # log per-stage counts at INFO instead of DEBUG


class StorageConfig(BaseSettings):
    """Where collections are loaded from."""

    model_config = {"env_prefix": "DOCPIPE_STORAGE_"}

    backend: Literal["file", "s3"] = "file"
    data_dir: str = "data"
    collection: str = "users"
    bucket: str = "docpipe-collections"
    prefix: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "DOCPIPE_"}

    environment: Literal["dev", "test", "prod"] = "dev"
    log_level: str = "INFO"
    log_format: Literal["simple", "detailed", "json"] = "simple"

    executor: ExecutorConfig = ExecutorConfig()
    storage: StorageConfig = StorageConfig()

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldcount.table.freq import INITIAL_BUCKETS


class ScanConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target_key: str = "model"
    table: Literal["dict", "chained"] = "dict"
    initial_buckets: int = Field(default=INITIAL_BUCKETS, gt=0)
    descend: bool = False
    progress: bool = True
    progress_interval: float = Field(default=5.0, ge=0.0)
    chunk_size: int = Field(default=1 << 16, gt=0)
    log_level: str = "INFO"

    @field_validator("target_key")
    @classmethod
    def _non_empty_key(cls, value: str) -> str:
        if not value:
            raise ValueError("target_key must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"unknown log level {value!r}")
        return value.upper()


def load_config(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config {path} must be a mapping, got {type(cfg).__name__}")
    return cfg


def merge_config(cfg: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(cfg)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def resolve_config(path: str | Path | None, overrides: dict[str, Any] | None = None) -> ScanConfig:
    cfg = load_config(path) if path else {}
    return ScanConfig.model_validate(merge_config(cfg, overrides or {}))

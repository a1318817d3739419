"""Configuration schema and loader for the perspective crop engine."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from perspective_crop.geometry import DEFAULT_EPSILON


class EngineConfig(BaseModel):
    interpolation: Literal["bilinear", "nearest"] = "bilinear"
    winding: Literal["as_given", "strict", "auto"] = "as_given"
    epsilon: float = Field(DEFAULT_EPSILON, gt=0.0, lt=1.0)
    workers: int = Field(1, ge=1)
    rows_per_band: int = Field(64, ge=1)

    @field_validator("interpolation", "winding", mode="before")
    @classmethod
    def lowercase(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value


class OutputConfig(BaseModel):
    width: int = Field(300, gt=0)
    height: int = Field(200, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field("INFO")
    output: str = Field("stdout")

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


class CropConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> CropConfig:
    """Load configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as handle:
        raw: Dict[str, object] = yaml.safe_load(handle) or {}
    return CropConfig.model_validate(raw)

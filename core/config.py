from typing import Any

import tomli
from pydantic import BaseModel, field_validator

from core.types import resolve_verbosity


class SessionConfig(BaseModel):
    verbosity: int | float | str | None = None
    precision: int = 6
    clamp_floor: float = 0.0

    @field_validator("verbosity")
    @classmethod
    def _known_verbosity(cls, value: Any) -> Any:
        # ConfigurationError is a ValueError, so pydantic reports it as a ValidationError
        resolve_verbosity(value)
        return value

    @field_validator("clamp_floor")
    @classmethod
    def _floor_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("clamp_floor must be 0 or greater, offsets are never negative")
        return value

    @field_validator("precision")
    @classmethod
    def _precision_range(cls, value: int) -> int:
        if not 0 <= value <= 9:
            raise ValueError("precision must be between 0 and 9 decimal places")
        return value


class VizConfig(BaseModel):
    width: int = 80


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    log_file: str | None = None


class Config(BaseModel):
    session: SessionConfig = SessionConfig()
    viz: VizConfig = VizConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: str = "config/default.toml") -> Config:
    """Load config from TOML file, validate with Pydantic."""
    with open(path, "rb") as f:
        data = tomli.load(f)
    return Config(**data)

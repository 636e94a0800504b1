import logging
import yaml
from copy import deepcopy
from pathlib import Path
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, ValidationError, field_validator

from .http.urls import parse_base_url


class TimeoutConfig(BaseModel):
    connect: float = Field(10.0, gt=0)
    read: float = Field(30.0, gt=0)


class TransportConfig(BaseModel):
    max_workers: int = Field(4, ge=1)
    timeout: TimeoutConfig = TimeoutConfig()


class LogConfig(BaseModel):
    logs_dir: str = "logs"
    console_level: str = "INFO"

    @field_validator("console_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


class EvidenceConfig(BaseModel):
    enabled: bool = True
    logs_dir: str = "logs"
    body_sample_bytes: int = Field(2048, ge=0)


class ServiceConfig(BaseModel):
    base_url: Optional[str] = None
    transport: TransportConfig = TransportConfig()
    log: LogConfig = LogConfig()
    evidence: EvidenceConfig = EvidenceConfig()

    @field_validator("base_url", mode="before")
    @classmethod
    def _parse_base_url(cls, value):
        # A bad base URL means "no base URL", the same as on the client itself.
        return parse_base_url(value)


def _load_yaml_mapping(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Error parsing YAML config: {exc}")

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file at {path} must contain a mapping at the top level.")
    return data


def _deep_merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: str) -> ServiceConfig:
    """
    Load YAML config, merge it with defaults, validate with Pydantic, and return a typed config object.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found at: {config_path}")

    default_config = _load_yaml_mapping(get_default_config_path())
    user_config = _load_yaml_mapping(path)
    merged_config = _deep_merge_dicts(default_config, user_config)

    try:
        return ServiceConfig(**merged_config)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed: {e}")


def get_default_config_path() -> Path:
    """Returns the absolute path to the default config file."""
    root_dir = Path(__file__).parent.parent
    return root_dir / "config" / "default.yaml"

"""Client configuration with YAML support."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field, field_validator

from auth.session import AUTH_TOKEN_KEY
from query.schemas import BaseSchema
from store.repository import DEFAULT_NAMESPACE, ErrorPolicy


class ClientConfig(BaseSchema):
    """Where the data layer keeps its collections and how it reports failures."""

    # "sqlite" persists to db_path; "memory" lives as long as the process
    backend: Literal["sqlite", "memory"] = "sqlite"
    db_path: str = "data/logiwms.db"

    namespace: str = DEFAULT_NAMESPACE
    token_key: str = AUTH_TOKEN_KEY

    error_policy: ErrorPolicy = ErrorPolicy.LOG

    # Only honoured by the memory backend
    quota_bytes: int | None = Field(default=None, ge=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def log_level_upper(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json")


def load_config(yaml_path: str | Path) -> ClientConfig:
    """Load client configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        ClientConfig instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or has bad field values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data or not isinstance(data, dict):
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return ClientConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_config(config: ClientConfig, yaml_path: str | Path) -> None:
    """Save client configuration to YAML file.

    Args:
        config: ClientConfig to save
        yaml_path: Path where to save YAML file
    """
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.to_dict()

    with open(yaml_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)

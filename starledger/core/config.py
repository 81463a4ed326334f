"""starledger.core.config

Three config surfaces only:
1) `config/default.yaml`
2) `config/user.yaml` (optional overlay, deep-merged)
3) Environment variables (`STARLEDGER_`, nested with `__`)

Everything else is derived.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from starledger.core.chain import DEFAULT_GENESIS_MARKER
from starledger.core.exceptions import ConfigError
from starledger.core.gate import DEFAULT_CHALLENGE_WINDOW_SECONDS, DEFAULT_DELIMITER, DEFAULT_DOMAIN_TAG


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


class OwnershipConfig(BaseModel):
    """Challenge format and lifetime. The domain tag must not contain the delimiter."""

    challenge_window_seconds: int = DEFAULT_CHALLENGE_WINDOW_SECONDS
    delimiter: str = DEFAULT_DELIMITER
    domain_tag: str = DEFAULT_DOMAIN_TAG

    @field_validator("challenge_window_seconds")
    @classmethod
    def window_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("challenge_window_seconds must be >= 1")
        return v

    @field_validator("delimiter")
    @classmethod
    def delimiter_is_one_char(cls, v: str) -> str:
        if len(v) != 1 or v.isalnum() or v.isspace():
            raise ValueError("delimiter must be a single non-alphanumeric, non-space character")
        return v

    @field_validator("domain_tag", mode="after")
    @classmethod
    def tag_must_not_contain_delimiter(cls, v: str, info) -> str:
        if not v:
            raise ValueError("domain_tag must not be empty")
        delimiter = info.data.get("delimiter", DEFAULT_DELIMITER)
        if delimiter in v:
            raise ValueError(f"domain_tag must not contain the delimiter {delimiter!r}")
        return v


class ChainConfig(BaseModel):
    genesis_marker: str = DEFAULT_GENESIS_MARKER


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def level_is_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


class ApiConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    auth_token: str = ""


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    config_dir: Path = Path("config")

    ownership: OwnershipConfig = Field(default_factory=OwnershipConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    model_config = {"env_prefix": "STARLEDGER_", "env_nested_delimiter": "__"}

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        raw = _load_yaml(path)

        user = path.parent / "user.yaml"
        if path.name != "user.yaml" and user.exists():
            raw = _deep_merge(raw, _load_yaml(user))

        raw.setdefault("config_dir", path.parent)
        try:
            return cls(**raw)
        except ValueError as e:
            raise ConfigError(f"Invalid config in {path}: {e}") from e

    @classmethod
    def from_repo_defaults(cls, repo_root: Path | None = None) -> Config:
        root = repo_root or Path.cwd()
        return cls.from_yaml(root / "config" / "default.yaml")


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data

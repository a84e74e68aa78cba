"""
Ledger configuration.

Pydantic models for wiring a ledger from a YAML file (``ledger.yaml``).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from rewardledger.constants import DEFAULT_LEDGER_ACCOUNT
from rewardledger.exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ledger.yaml"


class PullSettings(BaseModel):
    """Drip window to configure at startup."""

    source: str = Field(..., description="Funding account the drip is drawn from")
    start_at: int = Field(..., ge=0, description="Window start (unix seconds)")
    end_at: int = Field(..., ge=0, description="Window end (unix seconds)")
    amount: int = Field(..., ge=0, description="Total to draw over the window, base units")

    @model_validator(mode="after")
    def _window_not_empty(self) -> "PullSettings":
        if self.end_at <= self.start_at:
            raise ValueError("end_at must be after start_at")
        return self


class LedgerConfig(BaseModel):
    """Top-level ledger configuration."""

    ledger_account: str = Field(default=DEFAULT_LEDGER_ACCOUNT)
    admin: str = Field(..., description="Identity allowed to configure the ledger")
    registry_id: str = Field(default="barn", description="Identity of the stake registry")
    token_symbol: str = Field(default="REWARD")
    log_level: str = Field(default="WARNING")
    pull: Optional[PullSettings] = None

    @field_validator("admin", "registry_id", "ledger_account")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level


def load_config(path: Path) -> LedgerConfig:
    """Load a ledger configuration from a YAML file.

    Args:
        path: Path to the config file or a directory containing one.

    Raises:
        InvalidConfigurationError: If the file is missing or invalid.
    """
    if path.is_dir():
        path = path / CONFIG_FILENAME
    if not path.exists():
        raise InvalidConfigurationError(f"Config not found: {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        config = LedgerConfig(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as exc:
        raise InvalidConfigurationError(f"Failed to load config: {exc}") from exc
    logger.debug("Loaded ledger config from %s", path)
    return config

"""
Accrual state models.

The three pieces of ledger state: the global multiplier, the pull
window and the per-user checkpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rewardledger.exceptions import InvalidConfigurationError


class GlobalAccrualState(BaseModel):
    """Cumulative reward-per-unit-stake and the last observed balance."""

    model_config = ConfigDict(validate_assignment=True)

    current_multiplier: int = Field(default=0, ge=0)
    balance_before: int = Field(default=0, ge=0)


class PullConfig(BaseModel):
    """Linear drip of the reward token from an external funding account.

    ``source`` of ``None`` means pulling is disabled.
    """

    model_config = ConfigDict(validate_assignment=True)

    source: Optional[str] = None
    start_at: int = Field(default=0, ge=0)
    end_at: int = Field(default=0, ge=0)
    total_amount: int = Field(default=0, ge=0)
    last_pull_ts: int = Field(default=0, ge=0)

    @property
    def enabled(self) -> bool:
        return self.source is not None

    @property
    def duration(self) -> int:
        return self.end_at - self.start_at

    @classmethod
    def disabled(cls) -> "PullConfig":
        return cls()

    @classmethod
    def create(
        cls,
        source: Optional[str],
        start_at: int,
        end_at: int,
        total_amount: int,
    ) -> "PullConfig":
        """Build a fresh window with the pull clock reset to *start_at*.

        Raises:
            InvalidConfigurationError: If an enabled window is empty or
                reversed, or the amount is negative.
        """
        if source is None:
            return cls.disabled()
        if end_at <= start_at:
            raise InvalidConfigurationError(
                f"Pull window end ({end_at}) must be after start ({start_at})"
            )
        if total_amount < 0 or start_at < 0:
            raise InvalidConfigurationError("Pull amount and start must be non-negative")
        return cls(
            source=source,
            start_at=start_at,
            end_at=end_at,
            total_amount=total_amount,
            last_pull_ts=start_at,
        )


class UserAccrualRecord(BaseModel):
    """Per-participant checkpoint and settled-but-unpaid reward."""

    model_config = ConfigDict(validate_assignment=True)

    multiplier_checkpoint: int = Field(default=0, ge=0)
    owed: int = Field(default=0, ge=0)


class ClaimRecord(BaseModel):
    """Result of a successful claim."""

    user: str
    amount: int = Field(gt=0)
    claimed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LedgerSnapshot(BaseModel):
    """Read-only export of everything the ledger owns."""

    ledger_account: str
    current_multiplier: int
    balance_before: int
    pull: PullConfig
    users: dict[str, UserAccrualRecord] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _checkpoints_behind_multiplier(self) -> "LedgerSnapshot":
        for user, record in self.users.items():
            if record.multiplier_checkpoint > self.current_multiplier:
                raise ValueError(f"checkpoint of {user} is ahead of the global multiplier")
        return self


class MaintenanceReport(BaseModel):
    """Outcome of one pull-then-acknowledge step."""

    pulled: int = 0
    acknowledged: int = 0
    current_multiplier: int = 0

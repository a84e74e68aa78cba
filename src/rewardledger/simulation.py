"""
Scenario replay.

Wires a ledger to in-memory collaborators and replays a timed list of
stake changes, deposits and claims against it. Used by the CLI and by
tests that want a whole-system view.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from rewardledger.accrual.ledger import RewardLedger
from rewardledger.capabilities import Credential
from rewardledger.collaborators import InMemoryRewardToken, InMemoryStakeRegistry
from rewardledger.config import LedgerConfig
from rewardledger.constants import CAPABILITY_ADMIN
from rewardledger.exceptions import InvalidConfigurationError, RewardLedgerError

logger = logging.getLogger(__name__)


class StepOp(str, enum.Enum):
    """Scenario operations."""

    STAKE = "stake"
    UNSTAKE = "unstake"
    DEPOSIT = "deposit"
    CLAIM = "claim"
    ACK = "ack"
    MAINTAIN = "maintain"


class ScenarioStep(BaseModel):
    at: int = Field(..., ge=0, description="Timestamp the step runs at")
    op: StepOp
    user: Optional[str] = None
    amount: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_arguments(self) -> "ScenarioStep":
        if self.op in (StepOp.STAKE, StepOp.UNSTAKE, StepOp.CLAIM) and not self.user:
            raise ValueError(f"{self.op.value} needs a user")
        if self.op in (StepOp.STAKE, StepOp.UNSTAKE, StepOp.DEPOSIT) and self.amount <= 0:
            raise ValueError(f"{self.op.value} needs a positive amount")
        return self


class Scenario(BaseModel):
    """A ledger configuration plus the steps to replay."""

    config: LedgerConfig
    source_balance: int = Field(
        default=0, ge=0, description="Minted to the pull source and approved for the ledger"
    )
    steps: list[ScenarioStep] = Field(default_factory=list)

    @model_validator(mode="after")
    def _steps_in_time_order(self) -> "Scenario":
        times = [s.at for s in self.steps]
        if times != sorted(times):
            raise ValueError("steps must be ordered by 'at'")
        return self


class ParticipantSummary(BaseModel):
    user: str
    stake: int
    owed: int
    claimable: int
    claimed: int


class StepFailure(BaseModel):
    index: int
    op: StepOp
    error: str
    message: str


class SimulationResult(BaseModel):
    final_time: int
    current_multiplier: int
    ledger_balance: int
    participants: list[ParticipantSummary]
    failures: list[StepFailure] = Field(default_factory=list)


class SimulationClock:
    """Settable clock handed to the ledger."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def build_ledger(
    config: LedgerConfig,
    clock: SimulationClock,
) -> tuple[RewardLedger, InMemoryRewardToken, InMemoryStakeRegistry]:
    """Create a ledger wired to fresh in-memory collaborators."""
    logging.getLogger("rewardledger").setLevel(config.log_level)
    token = InMemoryRewardToken(config.token_symbol)
    registry = InMemoryStakeRegistry(config.registry_id)
    ledger = RewardLedger(
        token,
        registry,
        admin=config.admin,
        registry_id=config.registry_id,
        ledger_account=config.ledger_account,
        clock=clock,
    )
    registry.attach(ledger)
    if config.pull is not None:
        admin = Credential.create(config.admin, [CAPABILITY_ADMIN])
        ledger.setup_pull_token(
            admin, config.pull.source, config.pull.start_at, config.pull.end_at, config.pull.amount
        )
    return ledger, token, registry


def load_scenario(path: Path) -> Scenario:
    """Load a scenario from YAML.

    Raises:
        InvalidConfigurationError: If the file is missing or invalid.
    """
    if not path.exists():
        raise InvalidConfigurationError(f"Scenario not found: {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return Scenario(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as exc:
        raise InvalidConfigurationError(f"Failed to load scenario: {exc}") from exc


def run_scenario(scenario: Scenario) -> SimulationResult:
    """Replay *scenario* and summarize every participant.

    Ledger errors raised by a step (e.g. nothing to claim) are recorded as
    failures and the replay continues.
    """
    clock = SimulationClock(scenario.steps[0].at if scenario.steps else 0)
    ledger, token, registry = build_ledger(scenario.config, clock)

    pull = scenario.config.pull
    if pull is not None and scenario.source_balance:
        token.mint(pull.source, scenario.source_balance)
        token.approve(pull.source, ledger.ledger_account, scenario.source_balance)

    users: list[str] = []
    claimed: dict[str, int] = {}
    failures: list[StepFailure] = []

    for index, step in enumerate(scenario.steps):
        clock.now = step.at
        if step.user and step.user not in users:
            users.append(step.user)
        try:
            if step.op is StepOp.STAKE:
                registry.deposit(step.user, step.amount)
            elif step.op is StepOp.UNSTAKE:
                registry.withdraw(step.user, step.amount)
            elif step.op is StepOp.DEPOSIT:
                token.mint(ledger.ledger_account, step.amount)
            elif step.op is StepOp.CLAIM:
                record = ledger.claim(Credential.participant(step.user))
                claimed[step.user] = claimed.get(step.user, 0) + record.amount
            elif step.op is StepOp.ACK:
                ledger.ack_funds()
            elif step.op is StepOp.MAINTAIN:
                ledger.maintain()
        except RewardLedgerError as exc:
            logger.info("Step %d (%s) failed: %s", index, step.op.value, exc)
            failures.append(
                StepFailure(index=index, op=step.op, error=type(exc).__name__, message=str(exc))
            )

    participants = [
        ParticipantSummary(
            user=user,
            stake=registry.stake_of(user),
            owed=ledger.owed(user),
            claimable=ledger.claimable_reward(user),
            claimed=claimed.get(user, 0),
        )
        for user in users
    ]
    return SimulationResult(
        final_time=clock.now,
        current_multiplier=ledger.current_multiplier,
        ledger_balance=token.balance_of(ledger.ledger_account),
        participants=participants,
        failures=failures,
    )

"""
Accrual Engine

Multiplier-based lazy reward accrual: a linear pull scheduler, a funds
acknowledger feeding one global multiplier, and O(1) per-user
settlement and claims.
"""

from .acknowledger import FundsAcknowledger
from .fixedpoint import checked_sub, mul_div, scale_down, scale_up
from .ledger import RewardLedger
from .models import (
    ClaimRecord,
    GlobalAccrualState,
    LedgerSnapshot,
    MaintenanceReport,
    PullConfig,
    UserAccrualRecord,
)
from .pull import PullScheduler, pull_progress
from .settlement import SettlementEngine

__all__ = [
    "RewardLedger",
    "PullScheduler",
    "pull_progress",
    "FundsAcknowledger",
    "SettlementEngine",
    "ClaimRecord",
    "GlobalAccrualState",
    "LedgerSnapshot",
    "MaintenanceReport",
    "PullConfig",
    "UserAccrualRecord",
    "checked_sub",
    "mul_div",
    "scale_down",
    "scale_up",
]

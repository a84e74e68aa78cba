"""
Reward Ledger - Continuous reward accrual for staked participants

Distributes an inflow of a reward token pro rata to stake held in an
external registry, with O(1) settlement per participant and an optional
linear drip from a funding account.

Version: 1.0.0
"""

__version__ = "1.0.0"

# Accrual engine
from .accrual import (
    RewardLedger,
    PullScheduler,
    FundsAcknowledger,
    SettlementEngine,
    ClaimRecord,
    GlobalAccrualState,
    LedgerSnapshot,
    MaintenanceReport,
    PullConfig,
    UserAccrualRecord,
)

# Collaborators
from .collaborators import (
    RewardToken,
    StakeRegistry,
    InMemoryRewardToken,
    InMemoryStakeRegistry,
)

from .capabilities import Credential
from .config import LedgerConfig, PullSettings, load_config
from .constants import SCALE

# Exceptions
from .exceptions import (
    RewardLedgerError,
    AuthorizationError,
    NothingToClaimError,
    InvalidConfigurationError,
    ArithmeticUnderflowError,
    TransferError,
)

__all__ = [
    "__version__",

    # Accrual
    "RewardLedger",
    "PullScheduler",
    "FundsAcknowledger",
    "SettlementEngine",
    "ClaimRecord",
    "GlobalAccrualState",
    "LedgerSnapshot",
    "MaintenanceReport",
    "PullConfig",
    "UserAccrualRecord",

    # Collaborators
    "RewardToken",
    "StakeRegistry",
    "InMemoryRewardToken",
    "InMemoryStakeRegistry",

    # Configuration
    "Credential",
    "LedgerConfig",
    "PullSettings",
    "load_config",
    "SCALE",

    # Exceptions
    "RewardLedgerError",
    "AuthorizationError",
    "NothingToClaimError",
    "InvalidConfigurationError",
    "ArithmeticUnderflowError",
    "TransferError",
]

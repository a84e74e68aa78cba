# Copyright (c) Reward-Ledger Contributors. All rights reserved.
# Licensed under the MIT License.
"""Centralized exception hierarchy for the reward ledger.

All ledger exceptions inherit from RewardLedgerError, enabling
consistent error handling across collaborators, the CLI and core modules.
"""


class RewardLedgerError(Exception):
    """Base exception for all reward ledger errors."""


class AuthorizationError(RewardLedgerError):
    """Caller does not hold the capability required by the operation."""


class NothingToClaimError(RewardLedgerError):
    """Raised when a claim finds no owed reward for the caller."""


class InvalidConfigurationError(RewardLedgerError):
    """Rejected configuration (pull window, registry wiring, config files)."""


class ArithmeticUnderflowError(RewardLedgerError, ArithmeticError):
    """A non-negative accumulator would have gone below zero."""


class TransferError(RewardLedgerError):
    """The reward token reported a failed transfer."""


__all__ = [
    "RewardLedgerError",
    "AuthorizationError",
    "NothingToClaimError",
    "InvalidConfigurationError",
    "ArithmeticUnderflowError",
    "TransferError",
]

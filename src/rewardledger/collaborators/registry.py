"""
In-Memory Stake Registry.

A minimal "Barn": tracks stake per user and settles the user on the
attached ledger before every stake change.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from rewardledger.capabilities import Credential
from rewardledger.constants import CAPABILITY_REGISTRY
from rewardledger.exceptions import ArithmeticUnderflowError

if TYPE_CHECKING:
    from rewardledger.accrual.ledger import RewardLedger

logger = logging.getLogger(__name__)


class InMemoryStakeRegistry:
    """Dictionary-backed stake registry.

    Args:
        registry_id: Identity the ledger knows this registry by.
    """

    def __init__(self, registry_id: str = "barn") -> None:
        self.registry_id = registry_id
        self.credential = Credential.create(registry_id, [CAPABILITY_REGISTRY])
        self._stakes: dict[str, int] = {}
        self._total = 0
        self._ledger: Optional["RewardLedger"] = None

    def attach(self, ledger: "RewardLedger") -> None:
        """Notify *ledger* of every subsequent stake change."""
        self._ledger = ledger

    def total_staked(self) -> int:
        return self._total

    def stake_of(self, user: str) -> int:
        return self._stakes.get(user, 0)

    def deposit(self, user: str, amount: int) -> int:
        """Add *amount* to the stake of *user* and return the new stake."""
        if amount <= 0:
            raise ValueError("deposit amount must be positive")
        self._notify(user)
        self._stakes[user] = self.stake_of(user) + amount
        self._total += amount
        logger.debug("Stake of %s raised to %d", user, self._stakes[user])
        return self._stakes[user]

    def withdraw(self, user: str, amount: int) -> int:
        """Remove *amount* from the stake of *user* and return the new stake."""
        if amount <= 0:
            raise ValueError("withdraw amount must be positive")
        if amount > self.stake_of(user):
            raise ArithmeticUnderflowError(
                f"withdraw of {amount} exceeds stake {self.stake_of(user)} of {user}"
            )
        self._notify(user)
        self._stakes[user] -= amount
        self._total -= amount
        logger.debug("Stake of %s lowered to %d", user, self._stakes[user])
        return self._stakes[user]

    def _notify(self, user: str) -> None:
        if self._ledger is not None:
            self._ledger.register_user_action(self.credential, user)

"""
In-Memory Reward Token.

Simple balance/allowance bookkeeping for development, simulation and
testing. Transfer hooks let a test re-enter the ledger mid-transfer.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)

TransferHook = Callable[[str, str, int], None]


class InMemoryRewardToken:
    """Dictionary-backed fungible token.

    Transfers return ``False`` on insufficient balance or allowance, the
    way a non-reverting token reports failure.
    """

    def __init__(self, symbol: str = "REWARD") -> None:
        self.symbol = symbol
        self._balances: dict[str, int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)
        self._hooks: list[TransferHook] = []
        self.total_supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, account: str, amount: int) -> None:
        """Create *amount* new tokens in *account*."""
        if amount < 0:
            raise ValueError("mint amount must be non-negative")
        self._balances[account] += amount
        self.total_supply += amount

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            raise ValueError("allowance must be non-negative")
        self._allowances[(owner, spender)] = amount
        return True

    def add_transfer_hook(self, hook: TransferHook) -> None:
        """Call *hook(sender, recipient, amount)* after every transfer."""
        self._hooks.append(hook)

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(sender) < amount:
            logger.debug("Transfer of %d from %s rejected: insufficient balance", amount, sender)
            return False
        self._move(sender, recipient, amount)
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        if amount < 0 or self.allowance(owner, spender) < amount:
            logger.debug("transfer_from %s by %s rejected: allowance", owner, spender)
            return False
        if self.balance_of(owner) < amount:
            logger.debug("transfer_from %s rejected: insufficient balance", owner)
            return False
        self._allowances[(owner, spender)] -= amount
        self._move(owner, recipient, amount)
        return True

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        self._balances[sender] -= amount
        self._balances[recipient] += amount
        for hook in list(self._hooks):
            hook(sender, recipient, amount)

"""
Funds Acknowledger.

Turns observed growth of the ledger's token balance into multiplier
growth. How the balance grew (pull, direct deposit) does not matter.
"""

from __future__ import annotations

import logging

from rewardledger.collaborators.protocols import RewardToken, StakeRegistry

from .fixedpoint import checked_sub, scale_up
from .models import GlobalAccrualState

logger = logging.getLogger(__name__)


class FundsAcknowledger:
    """Folds balance deltas into the global multiplier."""

    def __init__(self, token: RewardToken, ledger_account: str) -> None:
        self._token = token
        self._account = ledger_account

    def held_balance(self) -> int:
        return self._token.balance_of(self._account)

    def ack(self, state: GlobalAccrualState, registry: StakeRegistry) -> int:
        """Acknowledge new funds and return the amount folded in.

        A flat or shrinking balance only rebases ``balance_before``. With
        no stake at all nothing is touched, so the growth is picked up once
        stake appears.
        """
        balance_now = self.held_balance()
        if balance_now == 0 or balance_now <= state.balance_before:
            state.balance_before = balance_now
            return 0

        total_staked = registry.total_staked()
        if total_staked == 0:
            logger.debug("No stake; deferring %d of new funds", balance_now - state.balance_before)
            return 0

        diff = checked_sub(balance_now, state.balance_before, "balance delta")
        state.current_multiplier = state.current_multiplier + scale_up(diff, total_staked)
        state.balance_before = balance_now
        logger.debug(
            "Acknowledged %d over %d staked; multiplier now %d",
            diff, total_staked, state.current_multiplier,
        )
        return diff

"""
User Settlement Engine.

O(1) per-user accrual: the reward since the last checkpoint is the
user's stake times the multiplier growth since that checkpoint.
"""

from __future__ import annotations

from .fixedpoint import checked_sub, scale_down
from .models import GlobalAccrualState, UserAccrualRecord


class SettlementEngine:
    """Computes and books per-user accrual against the global multiplier."""

    @staticmethod
    def pending(state: GlobalAccrualState, record: UserAccrualRecord, stake: int) -> int:
        """Reward accrued since the checkpoint, without booking it."""
        growth = checked_sub(
            state.current_multiplier, record.multiplier_checkpoint, "multiplier growth"
        )
        return scale_down(stake, growth)

    def settle(self, state: GlobalAccrualState, record: UserAccrualRecord, stake: int) -> int:
        """Book pending reward into ``owed`` and move the checkpoint.

        Returns:
            The amount added to ``owed``.
        """
        pending = self.pending(state, record, stake)
        if pending:
            record.owed = record.owed + pending
        record.multiplier_checkpoint = state.current_multiplier
        return pending

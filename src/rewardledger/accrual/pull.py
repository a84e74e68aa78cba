"""
Pull Scheduler.

Draws a configured total from a funding account linearly over a fixed
window. The draw only moves tokens into the ledger account; folding them
into the multiplier is left to the funds acknowledger.
"""

from __future__ import annotations

import logging

from rewardledger.collaborators.protocols import RewardToken
from rewardledger.constants import SCALE
from rewardledger.exceptions import TransferError

from .fixedpoint import checked_sub, mul_div
from .models import PullConfig

logger = logging.getLogger(__name__)


def pull_progress(total_amount: int, start_at: int, end_at: int, now: int) -> int:
    """Cumulative amount a single pull from *start_at* to *now* would draw."""
    config = PullConfig.create("preview", start_at, end_at, total_amount)
    return PullScheduler.amount_due(config, now)


class PullScheduler:
    """Executes the linear drip for one ledger account."""

    def __init__(self, token: RewardToken, ledger_account: str) -> None:
        self._token = token
        self._account = ledger_account

    @staticmethod
    def amount_due(config: PullConfig, now: int) -> int:
        """Amount a pull at *now* would draw, without drawing it."""
        if not config.enabled or now < config.start_at:
            return 0
        cap = min(now, config.end_at)
        if config.last_pull_ts >= cap:
            return 0
        elapsed = checked_sub(cap, config.last_pull_ts, "pull elapsed")
        share = mul_div(elapsed, SCALE, config.duration)
        return mul_div(config.total_amount, share, SCALE)

    def pull(self, config: PullConfig, now: int) -> int:
        """Draw whatever is due at *now* and advance the pull clock.

        Returns:
            The amount drawn; 0 when nothing was due.

        The clock advances before the draw, so a pull re-entering from a
        token hook finds nothing due.

        Raises:
            TransferError: If the token refuses the draw. The pull clock is
                restored.
        """
        if not config.enabled or now < config.start_at:
            return 0
        if config.last_pull_ts >= min(now, config.end_at):
            return 0

        amount = self.amount_due(config, now)
        previous = config.last_pull_ts
        config.last_pull_ts = now
        if amount > 0 and not self._token.transfer_from(
            self._account, config.source, self._account, amount
        ):
            config.last_pull_ts = previous
            raise TransferError(
                f"Pull of {amount} from '{config.source}' was refused by the token"
            )

        logger.debug("Pulled %d from %s at %d", amount, config.source, now)
        return amount

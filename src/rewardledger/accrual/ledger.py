# Copyright (c) Reward-Ledger Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Reward Ledger

Service facade owning all accrual state. Every state-changing entry
point runs the maintenance step (pull, then acknowledge) before its own
logic, and runs under one re-entrant lock so pull, acknowledgement and
settlement are serialized as a single unit.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from rewardledger.capabilities import Credential, require
from rewardledger.collaborators.protocols import RewardToken, StakeRegistry
from rewardledger.constants import (
    CAPABILITY_ADMIN,
    CAPABILITY_REGISTRY,
    DEFAULT_LEDGER_ACCOUNT,
)
from rewardledger.events import (
    EVENT_ADMIN_TRANSFERRED,
    EVENT_FUNDS_ACKNOWLEDGED,
    EVENT_PULL_CONFIGURED,
    EVENT_PULL_EXECUTED,
    EVENT_REGISTRY_CHANGED,
    EVENT_REWARD_CLAIMED,
    Event,
    EventBus,
    InMemoryEventBus,
)
from rewardledger.exceptions import (
    AuthorizationError,
    InvalidConfigurationError,
    NothingToClaimError,
    TransferError,
)
from rewardledger.observability import MetricsCollector

from .acknowledger import FundsAcknowledger
from .models import (
    ClaimRecord,
    GlobalAccrualState,
    LedgerSnapshot,
    MaintenanceReport,
    PullConfig,
    UserAccrualRecord,
)
from .pull import PullScheduler
from .settlement import SettlementEngine

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _wall_clock() -> int:
    return int(time.time())


class RewardLedger:
    """
    Lazy reward-accrual ledger.

    Distributes every increase of the ledger account's token balance to
    stakers pro rata, through a single global multiplier and per-user
    checkpoints, without ever iterating over users.

    Args:
        token: Reward token collaborator.
        registry: Stake registry collaborator.
        admin: Identity allowed to configure the ledger.
        registry_id: Identity the registry presents when notifying stake
            changes.
        ledger_account: Account holding the ledger's reward balance.
        clock: Returns the current timestamp in whole seconds.
        event_bus: Receives claim and funding events.
        metrics: Prometheus collector; a private one is created if omitted.
    """

    def __init__(
        self,
        token: RewardToken,
        registry: StakeRegistry,
        admin: str,
        registry_id: str,
        *,
        ledger_account: str = DEFAULT_LEDGER_ACCOUNT,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        if not admin or not registry_id:
            raise InvalidConfigurationError("admin and registry_id are required")

        self._token = token
        self._registry = registry
        self._admin = admin
        self._registry_id = registry_id
        self._account = ledger_account
        self._clock = clock or _wall_clock
        self.event_bus = event_bus or InMemoryEventBus()
        self.metrics = metrics or MetricsCollector()

        self._state = GlobalAccrualState()
        self._pull_config = PullConfig.disabled()
        self._users: dict[str, UserAccrualRecord] = {}

        self._puller = PullScheduler(token, ledger_account)
        self._acknowledger = FundsAcknowledger(token, ledger_account)
        self._settlement = SettlementEngine()

        self._lock = threading.RLock()
        self._journals: list[dict[str, Optional[UserAccrualRecord]]] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def ledger_account(self) -> str:
        return self._account

    @property
    def admin(self) -> str:
        return self._admin

    @property
    def registry_id(self) -> str:
        return self._registry_id

    @property
    def current_multiplier(self) -> int:
        return self._state.current_multiplier

    @property
    def balance_before(self) -> int:
        return self._state.balance_before

    @property
    def pull_config(self) -> PullConfig:
        return self._pull_config.model_copy()

    def user_record(self, user: str) -> UserAccrualRecord:
        """Copy of the stored record of *user* (all zeros if never seen)."""
        record = self._users.get(user)
        return record.model_copy() if record else UserAccrualRecord()

    def owed(self, user: str) -> int:
        return self.user_record(user).owed

    def pending_without_settling(self, user: str) -> int:
        """Reward accrued since the last checkpoint of *user*, not yet booked."""
        record = self._users.get(user) or UserAccrualRecord()
        return SettlementEngine.pending(
            self._state, record, self._registry.stake_of(user)
        )

    def claimable_reward(self, user: str) -> int:
        """Owed plus pending reward of *user*. Does not mutate state."""
        with self._lock:
            return self.owed(user) + self.pending_without_settling(user)

    def pull_amount_due(self, now: Optional[int] = None) -> int:
        """Amount the next pull would draw at *now* (defaults to the clock)."""
        return PullScheduler.amount_due(
            self._pull_config, self._clock() if now is None else now
        )

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                ledger_account=self._account,
                current_multiplier=self._state.current_multiplier,
                balance_before=self._state.balance_before,
                pull=self._pull_config.model_copy(),
                users={u: r.model_copy() for u, r in self._users.items()},
            )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def maintain(self) -> MaintenanceReport:
        """Run the pull scheduler, then acknowledge any new funds.

        Each half commits on its own: a completed draw has already moved
        tokens, so the advanced pull clock is kept even if the
        acknowledgement fails afterwards.
        """
        with self._lock:
            pulled = self._puller.pull(self._pull_config, self._clock())
            if pulled:
                self.metrics.record_pull(pulled)
                self._emit(EVENT_PULL_EXECUTED, {"source": self._pull_config.source, "amount": pulled})
            acknowledged = self._ack()
            return MaintenanceReport(
                pulled=pulled,
                acknowledged=acknowledged,
                current_multiplier=self._state.current_multiplier,
            )

    def ack_funds(self) -> int:
        """Fold any growth of the held balance into the multiplier.

        Returns:
            The amount acknowledged (0 on flat or shrinking balance, or
            while nobody is staked).
        """
        with self._lock:
            return self._ack()

    def _ack(self) -> int:
        acknowledged = self._acknowledger.ack(self._state, self._registry)
        self.metrics.record_ack(acknowledged, self._state.current_multiplier)
        if acknowledged:
            self._emit(
                EVENT_FUNDS_ACKNOWLEDGED,
                {"amount": acknowledged, "multiplier": self._state.current_multiplier},
            )
        return acknowledged

    # ------------------------------------------------------------------
    # Settlement and claims
    # ------------------------------------------------------------------

    def register_user_action(self, credential: Credential, user: str) -> int:
        """Settle *user* ahead of a stake change. Registry only.

        Returns:
            The amount booked into the user's owed balance.
        """
        require(credential, CAPABILITY_REGISTRY, self._registry_id)
        with self._lock:
            self.maintain()
            with self._transaction("register_user_action"):
                return self._settle(user)

    def settle(self, user: str) -> int:
        """Run maintenance and settle *user*; returns the amount booked."""
        with self._lock:
            self.maintain()
            with self._transaction("settle"):
                return self._settle(user)

    def claim(self, credential: Credential) -> ClaimRecord:
        """Settle the credential holder and pay out everything owed.

        Owed is zeroed before the transfer, so a claim re-entering from a
        token hook sees nothing to claim.

        Raises:
            AuthorizationError: If the credential is revoked or expired.
            NothingToClaimError: If nothing is owed after settlement.
            TransferError: If the token refuses the payout; the settlement
                and the zeroing are rolled back.
        """
        if not credential.is_valid():
            raise AuthorizationError(f"Credential {credential.credential_id} is not valid")
        user = credential.holder

        with self._lock:
            self.maintain()
            with self._transaction("claim"):
                self._settle(user)
                record = self._record_for_update(user)
                amount = record.owed
                if amount == 0:
                    raise NothingToClaimError(f"Nothing to claim for '{user}'")

                record.owed = 0
                if not self._token.transfer(self._account, user, amount):
                    raise TransferError(f"Payout of {amount} to '{user}' was refused by the token")

                # rebase balance_before onto the reduced balance
                self._ack()

            self.metrics.record_claim(amount)
            self._emit(EVENT_REWARD_CLAIMED, {"user": user, "amount": amount})
            logger.info("Paid %d to %s", amount, user)
            return ClaimRecord(user=user, amount=amount)

    def _settle(self, user: str) -> int:
        record = self._record_for_update(user)
        return self._settlement.settle(self._state, record, self._registry.stake_of(user))

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def setup_pull_token(
        self,
        credential: Credential,
        source: Optional[str],
        start_at: int,
        end_at: int,
        amount: int,
    ) -> PullConfig:
        """Replace the pull window. ``source=None`` disables pulling.

        Whatever the previous window still owes is drawn and acknowledged
        first. If the previous source refuses that draw, the outstanding
        amount is abandoned and the window is replaced anyway.
        """
        require(credential, CAPABILITY_ADMIN, self._admin)
        config = PullConfig.create(source, start_at, end_at, amount)
        with self._lock:
            self._maintain_before_reconfigure("setup_pull_token")
            self._pull_config = config
            logger.info(
                "Pull configured: source=%s window=[%d, %d] amount=%d",
                source, config.start_at, config.end_at, config.total_amount,
            )
            self._emit(EVENT_PULL_CONFIGURED, config.model_dump())
            return config.model_copy()

    def set_registry(
        self,
        credential: Credential,
        registry: StakeRegistry,
        registry_id: str,
    ) -> None:
        """Replace the stake registry. New funds are acknowledged first."""
        require(credential, CAPABILITY_ADMIN, self._admin)
        if not registry_id:
            raise InvalidConfigurationError("registry_id is required")
        with self._lock:
            self._maintain_before_reconfigure("set_registry")
            self._registry = registry
            self._registry_id = registry_id
            logger.info("Stake registry replaced by %s", registry_id)
            self._emit(EVENT_REGISTRY_CHANGED, {"registry_id": registry_id})

    def transfer_admin(self, credential: Credential, new_admin: str) -> None:
        """Hand the admin role to *new_admin*."""
        require(credential, CAPABILITY_ADMIN, self._admin)
        if not new_admin:
            raise InvalidConfigurationError("new admin is required")
        with self._lock:
            previous, self._admin = self._admin, new_admin
            logger.info("Admin transferred from %s to %s", previous, new_admin)
            self._emit(EVENT_ADMIN_TRANSFERRED, {"previous": previous, "admin": new_admin})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _maintain_before_reconfigure(self, operation: str) -> None:
        # a broken funding source must not lock the admin out
        try:
            self.maintain()
        except TransferError as exc:
            self.metrics.record_failure(operation, exc)
            logger.warning("%s: abandoning outstanding pull: %s", operation, exc)
            self._ack()

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Restore every user record touched inside the block on failure."""
        journal: dict[str, Optional[UserAccrualRecord]] = {}
        self._journals.append(journal)
        try:
            yield
        except Exception as exc:
            for user, before in journal.items():
                if before is None:
                    self._users.pop(user, None)
                else:
                    self._users[user] = before
            self.metrics.record_failure(operation, exc)
            logger.debug("%s rolled back: %s", operation, exc)
            raise
        finally:
            self._journals.pop()

    def _record_for_update(self, user: str) -> UserAccrualRecord:
        record = self._users.get(user)
        for journal in self._journals:
            if user not in journal:
                journal[user] = record.model_copy() if record else None
        if record is None:
            record = self._users[user] = UserAccrualRecord()
        return record

    def _emit(self, event_type: str, payload: dict) -> None:
        self.event_bus.emit(Event(event_type=event_type, source=self._account, payload=payload))

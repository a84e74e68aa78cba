"""
Collaborator interfaces.

The ledger never moves tokens or tracks stake itself; it talks to these
two protocols.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RewardToken(Protocol):
    """Fungible reward asset."""

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool: ...


@runtime_checkable
class StakeRegistry(Protocol):
    """Source of truth for stake (the "Barn")."""

    def total_staked(self) -> int: ...

    def stake_of(self, user: str) -> int: ...

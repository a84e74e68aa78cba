"""Tests for the in-memory token and stake registry."""

import pytest

from rewardledger.collaborators import (
    InMemoryRewardToken,
    InMemoryStakeRegistry,
    RewardToken,
    StakeRegistry,
)
from rewardledger.exceptions import ArithmeticUnderflowError


class TestInMemoryRewardToken:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryRewardToken(), RewardToken)

    def test_transfer(self):
        token = InMemoryRewardToken()
        token.mint("a", 10)
        assert token.transfer("a", "b", 4)
        assert token.balance_of("a") == 6
        assert token.balance_of("b") == 4
        assert token.total_supply == 10

    def test_transfer_insufficient(self):
        token = InMemoryRewardToken()
        token.mint("a", 1)
        assert not token.transfer("a", "b", 2)
        assert token.balance_of("a") == 1

    def test_transfer_from_uses_allowance(self):
        token = InMemoryRewardToken()
        token.mint("owner", 10)
        token.approve("owner", "spender", 6)

        assert token.transfer_from("spender", "owner", "dest", 5)
        assert token.allowance("owner", "spender") == 1
        assert not token.transfer_from("spender", "owner", "dest", 2)
        assert token.balance_of("dest") == 5

    def test_transfer_from_insufficient_balance(self):
        token = InMemoryRewardToken()
        token.approve("owner", "spender", 6)
        assert not token.transfer_from("spender", "owner", "dest", 5)
        assert token.allowance("owner", "spender") == 6

    def test_hooks_see_transfers(self):
        token = InMemoryRewardToken()
        token.mint("a", 3)
        seen = []
        token.add_transfer_hook(lambda s, r, amt: seen.append((s, r, amt)))
        token.transfer("a", "b", 2)
        assert seen == [("a", "b", 2)]

    def test_negative_mint_rejected(self):
        with pytest.raises(ValueError):
            InMemoryRewardToken().mint("a", -1)


class _RecordingLedger:
    def __init__(self, registry):
        self.registry = registry
        self.calls = []

    def register_user_action(self, credential, user):
        # the stake must still be the old one when the ledger is notified
        self.calls.append((credential.holder, user, self.registry.stake_of(user)))


class TestInMemoryStakeRegistry:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStakeRegistry(), StakeRegistry)

    def test_deposit_and_withdraw(self):
        registry = InMemoryStakeRegistry()
        registry.deposit("alice", 10)
        registry.deposit("bob", 5)
        registry.withdraw("alice", 4)
        assert registry.stake_of("alice") == 6
        assert registry.total_staked() == 11

    def test_over_withdraw(self):
        registry = InMemoryStakeRegistry()
        registry.deposit("alice", 1)
        with pytest.raises(ArithmeticUnderflowError):
            registry.withdraw("alice", 2)
        assert registry.stake_of("alice") == 1

    @pytest.mark.parametrize("amount", [0, -3])
    def test_non_positive_amounts(self, amount):
        registry = InMemoryStakeRegistry()
        with pytest.raises(ValueError):
            registry.deposit("alice", amount)
        with pytest.raises(ValueError):
            registry.withdraw("alice", amount)

    def test_ledger_notified_before_change(self):
        registry = InMemoryStakeRegistry("barn")
        ledger = _RecordingLedger(registry)
        registry.attach(ledger)

        registry.deposit("alice", 10)
        registry.withdraw("alice", 3)

        assert ledger.calls == [("barn", "alice", 0), ("barn", "alice", 10)]

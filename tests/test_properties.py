"""Property-based tests for accrual invariants.

Uses Hypothesis to check monotonicity, conservation, checkpoint and
claim correctness, and pull linearity over random inputs.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from rewardledger import (
    Credential,
    InMemoryRewardToken,
    InMemoryStakeRegistry,
    PullConfig,
    PullScheduler,
    RewardLedger,
)
from rewardledger.constants import SCALE
from rewardledger.exceptions import NothingToClaimError
from rewardledger.simulation import SimulationClock


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

users = st.sampled_from(["alice", "bob", "carol", "dave"])
stakes = st.integers(min_value=1, max_value=10**24)
amounts = st.integers(min_value=0, max_value=10**30)

operation = st.one_of(
    st.tuples(st.just("stake"), users, stakes),
    st.tuples(st.just("unstake"), users, stakes),
    st.tuples(st.just("fund"), st.just(""), amounts),
    st.tuples(st.just("claim"), users, st.just(0)),
    st.tuples(st.just("settle"), users, st.just(0)),
)


def _ledger():
    token = InMemoryRewardToken()
    registry = InMemoryStakeRegistry("barn")
    ledger = RewardLedger(token, registry, admin="ops", registry_id="barn", clock=SimulationClock(0))
    registry.attach(ledger)
    return ledger, token, registry


def _apply(ledger, token, registry, op, user, amount):
    if op == "stake":
        registry.deposit(user, amount)
    elif op == "unstake":
        held = registry.stake_of(user)
        if held:
            registry.withdraw(user, min(amount, held))
    elif op == "fund":
        token.mint(ledger.ledger_account, amount)
    elif op == "claim":
        try:
            ledger.claim(Credential.participant(user))
        except NothingToClaimError:
            pass
    elif op == "settle":
        ledger.settle(user)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

class TestMonotonicity:
    @given(ops=st.lists(operation, max_size=30))
    @settings(max_examples=100, deadline=None)
    def test_multiplier_never_decreases(self, ops):
        ledger, token, registry = _ledger()
        previous = ledger.current_multiplier
        for op, user, amount in ops:
            _apply(ledger, token, registry, op, user, amount)
            assert ledger.current_multiplier >= previous
            previous = ledger.current_multiplier


class TestSolvency:
    @given(ops=st.lists(operation, max_size=30))
    @settings(max_examples=100, deadline=None)
    def test_claimable_never_exceeds_holdings(self, ops):
        ledger, token, registry = _ledger()
        for op, user, amount in ops:
            _apply(ledger, token, registry, op, user, amount)
        ledger.ack_funds()
        total = sum(ledger.claimable_reward(u) for u in ("alice", "bob", "carol", "dave"))
        assert total <= token.balance_of(ledger.ledger_account)


class TestConservation:
    @given(
        stake_map=st.dictionaries(users, stakes, min_size=1),
        deposit=amounts,
    )
    @settings(max_examples=200, deadline=None)
    def test_rounding_loss_is_bounded(self, stake_map, deposit):
        ledger, token, registry = _ledger()
        for user, stake in stake_map.items():
            registry.deposit(user, stake)
        token.mint(ledger.ledger_account, deposit)
        ledger.ack_funds()

        total_stake = sum(stake_map.values())
        distributed = sum(ledger.claimable_reward(u) for u in stake_map)
        assert distributed <= deposit
        assert distributed >= deposit - len(stake_map) - total_stake // SCALE - 1


class TestCheckpoint:
    @given(stake=stakes, deposits=st.lists(amounts, min_size=1, max_size=5))
    @settings(max_examples=100, deadline=None)
    def test_nothing_pending_after_settle(self, stake, deposits):
        ledger, token, registry = _ledger()
        registry.deposit("alice", stake)
        for deposit in deposits:
            token.mint(ledger.ledger_account, deposit)
            ledger.settle("alice")
            assert ledger.pending_without_settling("alice") == 0


class TestClaimCorrectness:
    @given(stake=stakes, deposit=st.integers(min_value=1, max_value=10**30))
    @settings(max_examples=100, deadline=None)
    def test_claim_pays_observed_claimable(self, stake, deposit):
        ledger, token, registry = _ledger()
        registry.deposit("alice", stake)
        token.mint(ledger.ledger_account, deposit)
        ledger.ack_funds()

        expected = ledger.claimable_reward("alice")
        if expected == 0:
            return
        record = ledger.claim(Credential.participant("alice"))
        assert record.amount == expected
        assert ledger.owed("alice") == 0
        assert token.balance_of("alice") == expected


class TestPullLinearity:
    @given(
        total=st.integers(min_value=0, max_value=10**27),
        duration=st.integers(min_value=1, max_value=10**6),
        cuts=st.lists(st.floats(min_value=0.0, max_value=1.5), max_size=10),
    )
    @settings(max_examples=100, deadline=None)
    def test_cumulative_draw_bounded_by_total(self, total, duration, cuts):
        token = InMemoryRewardToken()
        token.mint("treasury", total)
        token.approve("treasury", "rewards", total)
        scheduler = PullScheduler(token, "rewards")
        config = PullConfig.create("treasury", 0, duration, total)

        times = sorted(int(c * duration) for c in cuts) + [2 * duration]
        drawn = 0
        for t in times:
            drawn += scheduler.pull(config, t)
            assert drawn <= total

        pulls = len(times)
        assert drawn >= total - pulls * (total // SCALE + 2)

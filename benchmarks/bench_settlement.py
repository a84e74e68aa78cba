"""Settlement benchmarks for the reward ledger.

Measures settle and claim latency against ledgers with growing numbers
of participants. Latency should stay flat: settlement never iterates
over users.

Usage:
    python benchmarks/bench_settlement.py
"""

import json
import statistics
import time

from rewardledger import Credential, InMemoryRewardToken, InMemoryStakeRegistry, RewardLedger
from rewardledger.constants import SCALE
from rewardledger.simulation import SimulationClock

ITERATIONS = 1_000
WARMUP = 50
POPULATIONS = (10, 1_000, 10_000)


def _percentile(data: list[float], pct: float) -> float:
    s = sorted(data)
    idx = int(len(s) * pct / 100)
    return s[min(idx, len(s) - 1)]


def _bench(fn, n: int = ITERATIONS, warmup: int = WARMUP) -> dict:
    for _ in range(warmup):
        fn()
    times: list[float] = []
    for _ in range(n):
        start = time.perf_counter()
        fn()
        times.append((time.perf_counter() - start) * 1_000)
    mean = statistics.mean(times)
    return {
        "iterations": n,
        "mean_ms": mean,
        "p50_ms": _percentile(times, 50),
        "p99_ms": _percentile(times, 99),
        "ops_per_sec": 1_000 / mean if mean > 0 else float("inf"),
    }


def _populated_ledger(participants: int):
    token = InMemoryRewardToken()
    registry = InMemoryStakeRegistry("barn")
    ledger = RewardLedger(token, registry, admin="ops", registry_id="barn", clock=SimulationClock(0))
    registry.attach(ledger)
    for i in range(participants):
        registry.deposit(f"user-{i}", (i % 7 + 1) * SCALE)
    return ledger, token, registry


def bench_settle(participants: int, n: int = ITERATIONS) -> dict:
    """Settle latency with new funds arriving before every call."""
    ledger, token, _ = _populated_ledger(participants)

    def settle():
        token.mint(ledger.ledger_account, 10**6)
        ledger.settle("user-0")

    return {"participants": participants, **_bench(settle, n=n)}


def bench_claim(participants: int, n: int = ITERATIONS) -> dict:
    """Claim latency: settle plus payout."""
    ledger, token, _ = _populated_ledger(participants)
    credential = Credential.participant("user-0")

    def claim():
        token.mint(ledger.ledger_account, 10**6)
        ledger.claim(credential)

    return {"participants": participants, **_bench(claim, n=n)}


def run_all(populations=POPULATIONS, n: int = ITERATIONS) -> dict:
    return {
        "settle": [bench_settle(p, n) for p in populations],
        "claim": [bench_claim(p, n) for p in populations],
    }


if __name__ == "__main__":
    print(json.dumps(run_all(), indent=2))

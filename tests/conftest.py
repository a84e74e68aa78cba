"""Shared fixtures for reward ledger tests."""

import pytest

from rewardledger import (
    Credential,
    InMemoryRewardToken,
    InMemoryStakeRegistry,
    RewardLedger,
)
from rewardledger.constants import CAPABILITY_ADMIN
from rewardledger.simulation import SimulationClock

ADMIN = "did:example:ops"
REGISTRY_ID = "barn"
LEDGER_ACCOUNT = "rewards"


@pytest.fixture
def clock():
    return SimulationClock(0)


@pytest.fixture
def token():
    return InMemoryRewardToken()


@pytest.fixture
def registry():
    return InMemoryStakeRegistry(REGISTRY_ID)


@pytest.fixture
def ledger(token, registry, clock):
    ledger = RewardLedger(
        token,
        registry,
        admin=ADMIN,
        registry_id=REGISTRY_ID,
        ledger_account=LEDGER_ACCOUNT,
        clock=clock,
    )
    registry.attach(ledger)
    return ledger


@pytest.fixture
def admin():
    return Credential.create(ADMIN, [CAPABILITY_ADMIN])

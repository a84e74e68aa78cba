"""Reward token and stake registry collaborators."""

from .protocols import RewardToken, StakeRegistry
from .registry import InMemoryStakeRegistry
from .token import InMemoryRewardToken, TransferHook

__all__ = [
    "RewardToken",
    "StakeRegistry",
    "InMemoryRewardToken",
    "InMemoryStakeRegistry",
    "TransferHook",
]

# Copyright (c) Reward-Ledger Contributors. All rights reserved.
# Licensed under the MIT License.
"""Shared constants for the reward ledger."""

# Fixed-point scale for multipliers and pull shares
SCALE_DECIMALS = 18
SCALE = 10**SCALE_DECIMALS

# Capability strings
CAPABILITY_ADMIN = "ledger:admin"
CAPABILITY_REGISTRY = "ledger:registry"

DEFAULT_LEDGER_ACCOUNT = "rewards"

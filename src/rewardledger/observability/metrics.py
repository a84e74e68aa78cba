"""
Prometheus Metrics Integration.

Provides metrics collection and export for the reward ledger.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest


class MetricsCollector:
    """
    Prometheus metrics collector for the reward ledger.

    Exposes metrics:
    - rewardledger_claims_total
    - rewardledger_claimed_amount_total
    - rewardledger_pulled_amount_total
    - rewardledger_acknowledged_amount_total
    - rewardledger_current_multiplier
    - rewardledger_operation_failures_total{operation="...", error="..."}

    Each collector owns its own registry so several ledgers can live in
    one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.claims_total = Counter(
            "rewardledger_claims_total",
            "Total number of successful claims",
            registry=self.registry,
        )
        self.claimed_amount = Counter(
            "rewardledger_claimed_amount_total",
            "Reward paid out through claims, in base units",
            registry=self.registry,
        )
        self.pulled_amount = Counter(
            "rewardledger_pulled_amount_total",
            "Reward drawn from the pull source, in base units",
            registry=self.registry,
        )
        self.acknowledged_amount = Counter(
            "rewardledger_acknowledged_amount_total",
            "Balance growth folded into the multiplier, in base units",
            registry=self.registry,
        )
        self.current_multiplier = Gauge(
            "rewardledger_current_multiplier",
            "Cumulative reward per unit of stake, scaled",
            registry=self.registry,
        )
        self.operation_failures = Counter(
            "rewardledger_operation_failures_total",
            "Ledger operations that failed or abandoned an external draw",
            ["operation", "error"],
            registry=self.registry,
        )

    def record_claim(self, amount: int) -> None:
        self.claims_total.inc()
        self.claimed_amount.inc(amount)

    def record_pull(self, amount: int) -> None:
        if amount > 0:
            self.pulled_amount.inc(amount)

    def record_ack(self, amount: int, multiplier: int) -> None:
        if amount > 0:
            self.acknowledged_amount.inc(amount)
        self.current_multiplier.set(multiplier)

    def record_failure(self, operation: str, error: Exception) -> None:
        self.operation_failures.labels(
            operation=operation, error=type(error).__name__
        ).inc()

    def export(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)

"""Command-line interface for the reward ledger."""

"""Bank feed vs. internal ledger reconciliation."""

__version__ = "0.1.0"

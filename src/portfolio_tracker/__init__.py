"""Multi-account portfolio tracker: ledger engine with cache/remote synchronization."""

__version__ = "0.1.0"

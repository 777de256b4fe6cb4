"""Stock Ledger: product catalog, movement ledger and effective stock."""

__version__ = "0.1.0"

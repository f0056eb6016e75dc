"""Owner-controlled task ledger."""

__version__ = "0.1.0"

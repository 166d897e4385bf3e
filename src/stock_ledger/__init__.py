"""Stock ledger and valuation engine."""

__version__ = "1.0.0"

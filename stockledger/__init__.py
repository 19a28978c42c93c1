"""Stock ledger and kitting feasibility engine."""

__version__ = "1.0.0"

"""Finance backend for a creative agency: ledger, fixed accounts and reports."""

__version__ = "0.1.0"

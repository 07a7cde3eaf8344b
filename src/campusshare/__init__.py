"""Campus resource sharing: lending ledger and owner chat, stored locally."""

__version__ = "0.1.0"

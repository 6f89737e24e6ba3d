"""Wallet bookkeeping for Spaces: addresses, export, schema, events, coins and planning."""

__version__ = "0.0.7"

__all__ = [
    "address",
    "bech32",
    "builder",
    "coins",
    "export",
    "schema",
    "tx_event",
]
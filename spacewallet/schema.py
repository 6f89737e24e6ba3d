"""Outpoint types and versioned schema migration for the wallet database."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from itertools import islice
from typing import Sequence

SCHEMAS_TABLE_NAME = "spaces_schemas"

_U32_MAX = 0xFFFFFFFF
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, order=True)
class OutPoint:
    """A transaction output reference; ``txid`` is in display hex."""

    txid: str
    vout: int

    def __post_init__(self) -> None:
        if len(self.txid) != 64 or not set(self.txid) <= _HEX_DIGITS:
            raise ValueError("txid must be 64 hex characters")
        if not 0 <= self.vout <= _U32_MAX:
            raise ValueError("vout out of range")
        object.__setattr__(self, "txid", self.txid.lower())

    @classmethod
    def parse(cls, text: str) -> "OutPoint":
        """Parse the ``txid:vout`` form."""
        if len(text) > 75:
            raise ValueError("outpoint string too long")
        txid, separator, vout = text.partition(":")
        if not separator:
            raise ValueError("outpoint is missing ':'")
        if not vout.isdigit() or not vout.isascii():
            raise ValueError("vout must be a decimal number")
        if len(vout) > 1 and vout.startswith("0"):
            raise ValueError("vout is not canonical")
        number = int(vout)
        if number > _U32_MAX:
            raise ValueError("vout out of range")
        return cls(txid, number)

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"


@dataclass(frozen=True)
class TxOut:
    """A transaction output: an amount in satoshis and its script."""

    value: int
    script_pubkey: bytes

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("output value must not be negative")
        object.__setattr__(self, "script_pubkey", bytes(self.script_pubkey))


def _init_schemas_table(connection: sqlite3.Connection) -> None:
    strict = " STRICT" if sqlite3.sqlite_version_info >= (3, 37, 0) else ""
    connection.execute(
        f"CREATE TABLE IF NOT EXISTS {SCHEMAS_TABLE_NAME}"
        f"( name TEXT PRIMARY KEY NOT NULL, version INTEGER NOT NULL ){strict}"
    )


def schema_version(connection: sqlite3.Connection, schema_name: str) -> int | None:
    """The recorded version of ``schema_name``, or None if it was never migrated."""
    row = connection.execute(
        f"SELECT version FROM {SCHEMAS_TABLE_NAME} WHERE name=:name",
        {"name": schema_name},
    ).fetchone()
    return None if row is None else int(row[0])


def _set_schema_version(connection: sqlite3.Connection, schema_name: str, version: int) -> None:
    connection.execute(
        f"REPLACE INTO {SCHEMAS_TABLE_NAME}(name, version) VALUES(:name, :version)",
        {"name": schema_name, "version": version},
    )


def migrate_schema(
    connection: sqlite3.Connection,
    schema_name: str,
    versioned_scripts: Sequence[Sequence[str]],
) -> None:
    """Run every script newer than the recorded version, in the caller's transaction."""
    _init_schemas_table(connection)
    current = schema_version(connection, schema_name)
    start = 0 if current is None else current + 1
    for version, script in islice(enumerate(versioned_scripts), start, None):
        _set_schema_version(connection, schema_name, version)
        for statement in script:
            connection.execute(statement)
"""Wallet transaction events and their storage in the wallet database."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .schema import OutPoint, TxOut, migrate_schema

TX_EVENTS_TABLE_NAME = "spaces_tx_events"
TX_EVENTS_SCHEMA_NAME = "spaces_tx_events_schema"

_EVENT_COLUMNS = "type, space, previous_spaceout, details"


class TxEventKind(Enum):
    """What a wallet transaction did; values are the stored names."""

    COMMIT = "commit"
    BIDOUT = "bidout"
    OPEN = "open"
    SCRIPT = "script"
    BID = "bid"
    REGISTER = "register"
    TRANSFER = "transfer"
    RENEW = "renew"
    SEND = "send"
    FEE_BUMP = "fee-bump"
    BUY = "buy"

    @classmethod
    def parse(cls, text: str) -> "TxEventKind":
        """Parse the stored name of an event kind."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError("invalid event kind") from None

    @property
    def json_name(self) -> str:
        """The name used in JSON output."""
        return self.name.lower()

    def __str__(self) -> str:
        return self.value


def _details_json(details: dict[str, Any]) -> str:
    return json.dumps(details, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


@dataclass
class TxEvent:
    """One event recorded against a wallet transaction."""

    kind: TxEventKind
    space: str | None = None
    previous_spaceout: OutPoint | None = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form with the details flattened into the event."""
        data: dict[str, Any] = {"type": self.kind.json_name}
        if self.space is not None:
            data["space"] = self.space
        if self.previous_spaceout is not None:
            data["previous_spaceout"] = str(self.previous_spaceout)
        if self.details is not None:
            data.update(self.details)
        return data


def _event_from_row(kind: str, space, previous_spaceout, details) -> TxEvent:
    return TxEvent(
        kind=TxEventKind.parse(kind),
        space=space,
        previous_spaceout=None if previous_spaceout is None else OutPoint.parse(previous_spaceout),
        details=None if details is None else json.loads(details),
    )


class TxEventStore:
    """Reads and writes transaction events on an open SQLite connection.

    Writes happen in the connection's current transaction; the caller commits.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def init_tables(self) -> None:
        """Create or migrate the events table."""
        strict = " STRICT" if sqlite3.sqlite_version_info >= (3, 37, 0) else ""
        schema_v0 = [
            f"CREATE TABLE {TX_EVENTS_TABLE_NAME} ( "
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "txid TEXT NOT NULL, "
            "type TEXT NOT NULL, "
            "space TEXT, "
            "previous_spaceout TEXT, "
            "details TEXT, "
            "created_at INTEGER NOT NULL DEFAULT (strftime('%s','now'))"
            f"){strict};"
        ]
        migrate_schema(self.connection, TX_EVENTS_SCHEMA_NAME, [schema_v0])

    def insert(
        self,
        txid: str,
        kind: TxEventKind,
        space: str | None = None,
        previous_spaceout: OutPoint | None = None,
        details: dict[str, Any] | None = None,
    ) -> int:
        """Record an event and return its row id."""
        cursor = self.connection.execute(
            f"INSERT INTO {TX_EVENTS_TABLE_NAME} (txid, type, space, previous_spaceout, details) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                txid,
                str(kind),
                space,
                None if previous_spaceout is None else str(previous_spaceout),
                None if details is None else _details_json(details),
            ),
        )
        return int(cursor.lastrowid)

    def _events(self, where: str, params: Iterable[Any]) -> list[TxEvent]:
        rows = self.connection.execute(
            f"SELECT {_EVENT_COLUMNS} FROM {TX_EVENTS_TABLE_NAME} WHERE {where}",
            tuple(params),
        )
        return [_event_from_row(*row) for row in rows]

    def all(self, txid: str) -> list[TxEvent]:
        """Every event of a transaction."""
        return self._events("txid = ?", [txid])

    def bids(self, space: str) -> list[TxEvent]:
        """Every bid event on a space."""
        return self._events("type = 'bid' AND space = ?", [space])

    def filter_bids(self, txids: list[str]) -> list[tuple[str, OutPoint]]:
        """The given transactions that are bids on a foreign output, with that output."""
        if not txids:
            return []
        placeholders = ",".join("?" for _ in txids)
        rows = self.connection.execute(
            f"SELECT txid, previous_spaceout FROM {TX_EVENTS_TABLE_NAME} "
            f"WHERE previous_spaceout IS NOT NULL AND type = 'bid' AND txid IN ({placeholders})",
            tuple(txids),
        )
        results = []
        for txid, previous in rows:
            try:
                results.append((txid, OutPoint.parse(previous)))
            except ValueError:
                continue
        return results

    def all_bid_txs(self, txid: str) -> TxEvent | None:
        """The first bid event of a transaction, if any."""
        events = self._events("type = 'bid' AND txid = ?", [txid])
        return events[0] if events else None

    def get_signing_info(self, txid: str, script_pubkey: bytes) -> bytes | None:
        """Raw signing info of the commitment in ``txid`` paying to ``script_pubkey``."""
        for event in self._events("type = 'commit' AND txid = ?", [txid]):
            if event.details is None:
                raise ValueError("commit event has no signing details")
            try:
                committed = bytes.fromhex(event.details["script_pubkey"])
                signing_info = bytes.fromhex(event.details["signing_info"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError("malformed signing details") from exc
            if committed == bytes(script_pubkey):
                return signing_info
        return None

    def get_latest_events(self) -> list[tuple[str, TxEvent]]:
        """The latest bid or open event per space over the last two weeks, newest first."""
        rows = self.connection.execute(
            f"SELECT txid, {_EVENT_COLUMNS} FROM {TX_EVENTS_TABLE_NAME} "
            "WHERE id IN ("
            f" SELECT MAX(id) FROM {TX_EVENTS_TABLE_NAME}"
            " WHERE type IN ('bid', 'open')"
            " AND created_at >= strftime('%s', 'now', '-14 days')"
            " GROUP BY space"
            ") ORDER BY id DESC"
        )
        return [(txid, _event_from_row(*rest)) for txid, *rest in rows]


@dataclass
class TxRecord:
    """A transaction together with the events it produces and foreign prevouts."""

    tx: Any
    events: list[TxEvent] = field(default_factory=list)
    txouts: list[tuple[OutPoint, TxOut]] = field(default_factory=list)

    def add_fee_bump(self) -> None:
        self.events.append(TxEvent(TxEventKind.FEE_BUMP))

    def add_transfer(self, space: str, script_pubkey: bytes) -> None:
        self.events.append(
            TxEvent(TxEventKind.TRANSFER, space, details={"script_pubkey": bytes(script_pubkey).hex()})
        )

    def add_renew(self, space: str, script_pubkey: bytes) -> None:
        self.events.append(
            TxEvent(TxEventKind.RENEW, space, details={"script_pubkey": bytes(script_pubkey).hex()})
        )

    def add_bidout(self, count: int) -> None:
        self.events.append(TxEvent(TxEventKind.BIDOUT, details={"count": count}))

    def add_send(self, amount: int, to_space: str | None, script_pubkey: bytes) -> None:
        details: dict[str, Any] = {}
        if to_space is not None:
            details["recipient_space"] = to_space
        details["recipient_script_pubkey"] = bytes(script_pubkey).hex()
        details["amount"] = amount
        self.events.append(TxEvent(TxEventKind.SEND, details=details))

    def add_commitment(self, space: str, reveal_script_pubkey: bytes, signing_info: bytes) -> None:
        """Record a commitment; add one for every space it affects."""
        self.events.append(
            TxEvent(
                TxEventKind.COMMIT,
                space,
                details={
                    "script_pubkey": bytes(reveal_script_pubkey).hex(),
                    "signing_info": bytes(signing_info).hex(),
                },
            )
        )

    def add_open(self, space: str, initial_bid: int) -> None:
        self.events.append(TxEvent(TxEventKind.OPEN, space, details={"initial_bid": initial_bid}))

    def add_execute(self, space: str, reveal_input_index: int) -> None:
        """Record a script execution; add one for every space it affects."""
        self.events.append(TxEvent(TxEventKind.SCRIPT, space, details={"n": reveal_input_index}))

    def add_bid(
        self,
        space: str,
        previous_bid: int,
        amount: int,
        previous_outpoint: OutPoint | None = None,
        previous_txout: TxOut | None = None,
    ) -> None:
        """Record a bid; a foreign previous output is kept so fees can be computed."""
        if previous_outpoint is not None:
            if previous_txout is None:
                raise ValueError("a foreign previous outpoint needs its txout")
            self.txouts.append((previous_outpoint, previous_txout))
        self.events.append(
            TxEvent(
                TxEventKind.BID,
                space,
                previous_spaceout=previous_outpoint,
                details={"current_bid": amount, "previous_bid": previous_bid},
            )
        )
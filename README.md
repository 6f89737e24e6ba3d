# spacewallet

Wallet-side bookkeeping for Spaces, which are names auctioned and owned on
Bitcoin. The package has no runtime dependencies. It uses plain Python
values throughout: satoshi amounts are integers, and scripts and witness
programs are `bytes`.

## Modules

- **`spacewallet.bech32`** handles Bech32 and Bech32m for witness programs.
  - `encode(hrp, witness_version, program, upper)` builds an address.
  - `decode(address)` returns `(hrp, witness_version, program)`.
  - `find_bech32_prefix(text)` returns the part before the last `1`.
  - Invalid input raises `Bech32Error`, which is a `ValueError`.
- **`spacewallet.address`** covers space addresses.
  - `Network` lists `BITCOIN`, `TESTNET`, `SIGNET` and `REGTEST`.
  - `SpaceAddress.parse(text)` accepts the `bcs`, `tbs` and `bcrts` prefixes, in all lower case or all upper case.
  - `SpaceAddress.encode(upper)` writes the address again.
  - `SpaceAddress.script_pubkey()` gives the output script it pays to.
  - Errors raise `AddressError`.
- **`spacewallet.export`** covers `WalletExport`, the JSON form of a descriptor wallet.
  - The JSON fields are `descriptor`, `blockheight` and `label`.
  - `from_descriptors(external, internal, label, blockheight)` strips the `#checksum` from each descriptor. It requires the internal descriptor to be the external one with `/0/*` replaced by `/1/*`.
  - `change_descriptor()` makes that replacement.
  - Conversion to and from JSON is `to_json` and `from_json`. `remove_checksum` is exported as well.
- **`spacewallet.schema`** provides the `OutPoint` and `TxOut` value types and schema migration.
  - `OutPoint` is written as `txid:vout`; `OutPoint.parse` reads that form.
  - `migrate_schema(connection, name, scripts)` runs each versioned list of SQL statements newer than the version recorded in the `spaces_schemas` table.
  - `schema_version(connection, name)` reads the recorded version.
- **`spacewallet.tx_event`** records what each wallet transaction did.
  - `TxEventKind` lists the kinds: commit, bidout, open, script, bid, register, transfer, renew, send, fee-bump and buy.
  - `TxEventStore` keeps events in an `sqlite3` database. Its queries are `all`, `bids`, `filter_bids`, `all_bid_txs`, `get_signing_info` and `get_latest_events`. `get_latest_events` returns the newest bid or open event per space from the last 14 days.
  - `TxRecord` collects events while a transaction is being built, through `add_bid`, `add_open`, `add_commitment` and the other `add_*` methods.
- **`spacewallet.coins`** holds coin bookkeeping helpers.
  - The dust markers `magic_dust`, `connector_dust` and `space_dust` end a value in 2, 4 or 6. `is_connector_dust` and `is_space_dust` test for them.
  - `magic_lock_time(median_time)` gives a timestamp lock time that ends in 222.
  - `filter_spendable` drops outputs that are excluded, at or below the 1200-sat dust threshold, or unconfirmed when `confirmed_only` is set.
  - `order_selection` puts the required inputs first.
  - `compute_balance` returns a `Balance` from which dust has been removed.
  - `tap_key_spend_weight()` gives the weight of a taproot key-path spend.
- **`spacewallet.builder`** turns requests into transactions.
  - `Builder` gathers open, bid, register, transfer, send and execute requests.
  - `Builder.plan(available_bidouts, next_space_address)` returns the operations in build order. One `PrepareOp` bundles opens, executes, transfers, sends and new bid outputs. Each `BidRequest` follows it.
  - `auction_output_count`, `minimum_bid` and `burn_amount` implement the rules for bid outputs and bids.

## Examples

```python
from spacewallet.address import Network, SpaceAddress

address = SpaceAddress(Network.REGTEST, 1, bytes(32))
text = address.encode()                 # "bcrts1p..."
assert SpaceAddress.parse(text) == address
script = address.script_pubkey()        # b"\x51\x20" + 32 zero bytes
```

`TxEventStore` writes inside the connection's current transaction, so the
caller has to commit:

```python
import sqlite3
from spacewallet.tx_event import TxEventKind, TxEventStore

connection = sqlite3.connect("wallet.db")
store = TxEventStore(connection)
store.init_tables()
txid = "00" * 32
store.insert(txid, TxEventKind.BID, "@example", None, {"current_bid": 1000})
connection.commit()
events = store.all(txid)
recent = store.get_latest_events()
```

```python
from spacewallet.builder import Builder

operations = (
    Builder()
    .fee_rate(2.0)
    .add_open("@example", 1000)
    .plan(available_bidouts=[], next_space_address=lambda: address)
)
# operations[0] is a PrepareOp with one open and 3 bid outputs to create
```

```python
from spacewallet.coins import is_space_dust, space_dust

assert space_dust(660) == 666 and is_space_dust(666)
```

## What the package does not do

- It does not hold keys, create Schnorr signatures or verify them.
- It does not sign Nostr events, sign listings or sign reveal scripts.
- It does not build, sign or broadcast Bitcoin transactions. `Builder.plan` says which operations to build, but it does not build them.
- It does not find bid outputs in a wallet's unspent outputs.
- It does not sync with a node or keep track of the chain.
- It has no command-line program and no server. It is used as a library.

## Running the tests

Install the package with its `test` extra and run `pytest` from the project
root.
"""Coin bookkeeping: special dust values, lock times, spendable selection and balances."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .schema import OutPoint, TxOut

_U32_MAX = 0xFFFFFFFF

# Lock times below this value are block heights, not timestamps.
LOCK_TIME_THRESHOLD = 500_000_000

# Outputs at or below this value are never used to fund transactions,
# so outputs that may carry a space are not spent by accident.
DUST_THRESHOLD = 1200

# Virtual size of a taproot key-path spend witness.
_TAP_KEY_SPEND_VBYTES = 66
_WITNESS_SCALE_FACTOR = 4


class Keychain(Enum):
    """Which derivation chain of the wallet an output belongs to."""

    EXTERNAL = "external"
    INTERNAL = "internal"


@dataclass(frozen=True)
class WalletUtxo:
    """An unspent output owned by the wallet."""

    outpoint: OutPoint
    txout: TxOut
    keychain: Keychain
    confirmed: bool
    derivation_index: int = 0

    @property
    def value(self) -> int:
        return self.txout.value


@dataclass(frozen=True)
class Balance:
    """Spendable balance and the figures it is derived from, in satoshis."""

    balance: int
    confirmed: int
    trusted_pending: int
    dust: int


def _check_amount(amount: int) -> int:
    if amount < 0:
        raise ValueError("amount must not be negative")
    return amount


def magic_lock_time(median_time: int) -> int:
    """A timestamp lock time ending in 222 that marks trackable space transactions."""
    median = min(median_time, _U32_MAX)
    magic = median - (median % 1000) - (1000 - 222)
    if magic < LOCK_TIME_THRESHOLD:
        raise ValueError(f"median time {median_time} gives no valid timestamp lock time")
    return magic


def magic_dust(amount: int) -> int:
    """Round ``amount`` down to tens and end it in 2."""
    amount = _check_amount(amount)
    return amount - amount % 10 + 2


def connector_dust(amount: int) -> int:
    """Round ``amount`` down to tens and end it in 4."""
    amount = _check_amount(amount)
    return amount - amount % 10 + 4


def is_connector_dust(amount: int) -> bool:
    return amount % 10 == 4


def space_dust(amount: int) -> int:
    """Round ``amount`` down to tens and end it in 6, marking an output as a space."""
    amount = _check_amount(amount)
    return amount - amount % 10 + 6


def is_space_dust(amount: int) -> bool:
    return amount % 10 == 6


def tap_key_spend_weight() -> int:
    """Satisfaction weight, in weight units, of a taproot key-path spend."""
    return _TAP_KEY_SPEND_VBYTES * _WITNESS_SCALE_FACTOR


def filter_spendable(
    utxos: Iterable[WalletUtxo],
    excluded: Iterable[OutPoint] = (),
    confirmed_only: bool = False,
) -> list[WalletUtxo]:
    """Outputs usable for funding: above dust, not excluded, confirmed if required."""
    excluded_set = set(excluded)
    return [
        utxo
        for utxo in utxos
        if (not confirmed_only or utxo.confirmed)
        and utxo.value > DUST_THRESHOLD
        and utxo.outpoint not in excluded_set
    ]


def order_selection(required: Iterable, selected: Iterable) -> list:
    """Required inputs first, in order, followed by the other selected inputs."""
    required_list = list(required)
    extra = [item for item in selected if item not in required_list]
    return required_list + extra


def compute_balance(unspent: Iterable[WalletUtxo], confirmed: int, trusted_pending: int) -> Balance:
    """Balance minus dust held in confirmed or trusted pending outputs."""
    dust = sum(
        utxo.value
        for utxo in unspent
        if (utxo.confirmed or utxo.keychain is Keychain.INTERNAL)
        and utxo.value <= DUST_THRESHOLD
    )
    total = confirmed + trusted_pending
    if dust > total:
        raise ValueError("dust exceeds confirmed and trusted pending balance")
    return Balance(
        balance=total - dust,
        confirmed=confirmed,
        trusted_pending=trusted_pending,
        dust=dust,
    )
import pytest

from spacewallet.coins import (
    DUST_THRESHOLD,
    Balance,
    Keychain,
    WalletUtxo,
    compute_balance,
    connector_dust,
    filter_spendable,
    is_connector_dust,
    is_space_dust,
    magic_dust,
    magic_lock_time,
    order_selection,
    space_dust,
    tap_key_spend_weight,
)
from spacewallet.schema import OutPoint, TxOut

TXID_A = "aa" * 32
TXID_B = "bb" * 32


def utxo(txid, vout, value, keychain=Keychain.INTERNAL, confirmed=True):
    return WalletUtxo(OutPoint(txid, vout), TxOut(value, b"\x51\x20" + b"\x01" * 32), keychain, confirmed)


@pytest.mark.parametrize("median", [1_700_000_000, 1_700_000_999, 1_234_567_890])
def test_magic_lock_time_ends_in_222(median):
    lock = magic_lock_time(median)
    assert lock % 1000 == 222
    assert median - 2000 < lock < median


def test_magic_lock_time_clamps_to_u32():
    assert magic_lock_time(2**40) == magic_lock_time(0xFFFFFFFF)


def test_magic_lock_time_rejects_small_times():
    with pytest.raises(ValueError):
        magic_lock_time(100)


@pytest.mark.parametrize("amount", [0, 546, 1000, 1099, 33333])
def test_dust_markers(amount):
    assert magic_dust(amount) % 10 == 2
    assert is_connector_dust(connector_dust(amount))
    assert is_space_dust(space_dust(amount))
    assert not is_space_dust(connector_dust(amount))
    assert amount - 10 < space_dust(amount) <= amount + 6


def test_negative_dust_rejected():
    with pytest.raises(ValueError):
        space_dust(-1)


def test_tap_key_spend_weight():
    assert tap_key_spend_weight() == 264


def test_filter_spendable_drops_dust_excluded_and_unconfirmed():
    big = utxo(TXID_A, 0, 5000)
    dust = utxo(TXID_A, 1, DUST_THRESHOLD)
    excluded = utxo(TXID_A, 2, 9000)
    pending = utxo(TXID_B, 0, 7000, confirmed=False)
    items = [big, dust, excluded, pending]
    assert filter_spendable(items, [excluded.outpoint]) == [big, pending]
    assert filter_spendable(items, [excluded.outpoint], confirmed_only=True) == [big]


def test_order_selection_puts_required_first():
    result = order_selection(["r1", "r2"], ["x", "r2", "y", "r1"])
    assert result == ["r1", "r2", "x", "y"]


def test_compute_balance_subtracts_trusted_dust():
    unspent = [
        utxo(TXID_A, 0, 546, Keychain.INTERNAL, confirmed=False),
        utxo(TXID_A, 1, 600, Keychain.EXTERNAL, confirmed=True),
        utxo(TXID_A, 2, 546, Keychain.EXTERNAL, confirmed=False),
        utxo(TXID_B, 0, 5000, Keychain.EXTERNAL, confirmed=True),
    ]
    result = compute_balance(unspent, 5600, 546)
    assert result.dust == 546 + 600
    assert result.balance == 5600 + 546 - result.dust
    assert isinstance(result, Balance) and result.confirmed == 5600


def test_compute_balance_rejects_negative():
    with pytest.raises(ValueError):
        compute_balance([utxo(TXID_A, 0, 1000)], 0, 0)
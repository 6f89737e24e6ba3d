import pytest

from spacewallet.address import Network, SpaceAddress
from spacewallet.builder import (
    EXTRA_BIDOUTS,
    BidRequest,
    Builder,
    CoinTransfer,
    ExecuteRequest,
    OpenRequest,
    PrepareOp,
    SpaceTransfer,
    auction_output_count,
    burn_amount,
    minimum_bid,
)


def _address(fill: int) -> SpaceAddress:
    return SpaceAddress(Network.REGTEST, 1, bytes([fill]) * 32)


def _no_address():
    raise AssertionError("no fresh address expected")


def test_plan_requires_fee_rate():
    with pytest.raises(ValueError, match="fee_rate is required"):
        Builder().add_open("example", 1000).plan([], _no_address)


def test_empty_builder_plans_nothing():
    assert Builder().fee_rate(1).plan([], _no_address) == []


def test_sends_only_need_no_bidouts():
    send = CoinTransfer(5000, _address(1))
    ops = Builder().fee_rate(2).add_send(send).plan([], _no_address)
    assert ops == [PrepareOp(sends=[send], bidouts=None)]


def test_open_without_bidouts_creates_extra():
    ops = Builder().fee_rate(2).add_open("example", 1000).plan([], _no_address)
    assert len(ops) == 1
    prepare = ops[0]
    assert prepare.opens == [OpenRequest("example", 1000)]
    assert prepare.bidouts - 1 == EXTRA_BIDOUTS


def test_open_with_available_bidouts_creates_none():
    ops = Builder().fee_rate(2).add_open("example", 1000).plan(["bidout"], _no_address)
    assert ops == [PrepareOp(opens=[OpenRequest("example", 1000)], bidouts=None)]


def test_requested_bidouts_too_few():
    builder = Builder().fee_rate(2).bidouts(0).add_open("a", 1).add_open("b", 1)
    with pytest.raises(ValueError, match="exceeds currently available"):
        builder.plan(["one"], _no_address)


def test_requested_bidouts_honoured_without_requests():
    ops = Builder().fee_rate(2).bidouts(5).plan([], _no_address)
    assert ops == [PrepareOp(bidouts=5)]


def test_bids_only_run_in_stack_order():
    builder = Builder().fee_rate(2).add_bid("first", 100).add_bid("second", 200)
    ops = builder.plan(["x", "y"], _no_address)
    assert ops == [BidRequest("second", 200), BidRequest("first", 100)]


def test_bids_without_bidouts_prepare_first():
    builder = Builder().fee_rate(2).add_bid("first", 100).add_bid("second", 200)
    ops = builder.plan([], _no_address)
    assert isinstance(ops[0], PrepareOp)
    assert ops[0].bidouts - 2 == EXTRA_BIDOUTS
    assert ops[1:] == [BidRequest("second", 200), BidRequest("first", 100)]


def test_register_uses_fresh_address_only_when_missing():
    fresh = _address(7)
    given = _address(8)
    calls = []

    def next_address():
        calls.append(1)
        return fresh

    builder = (
        Builder()
        .fee_rate(2)
        .add_register("space-a")
        .add_transfer(SpaceTransfer("space-b", given))
        .add_register("space-c", given)
    )
    ops = builder.plan([], next_address)
    assert len(calls) == 1
    assert ops[0].transfers == [
        SpaceTransfer("space-a", fresh),
        SpaceTransfer("space-b", given),
        SpaceTransfer("space-c", given),
    ]


def test_execute_request_keeps_context():
    transfer = SpaceTransfer("space-a", _address(3))
    ops = Builder().fee_rate(1).add_execute([transfer], b"script").plan([], _no_address)
    assert ops[0].executes == [ExecuteRequest((transfer,), b"script")]


def test_bidouts_must_fit_a_byte():
    with pytest.raises(ValueError):
        Builder().bidouts(256)


def test_force_flag_is_kept():
    assert Builder().force(True).is_forced is True


def test_auction_output_count_none_when_enough():
    assert auction_output_count(0, 0, None) is None
    assert auction_output_count(2, 5, None) is None


def test_auction_output_count_adds_extra():
    assert auction_output_count(4, 1, None) - (4 - 1) == EXTRA_BIDOUTS


def test_minimum_bid_force_allows_equal():
    assert minimum_bid(1000, True) == 1000
    assert minimum_bid(1000, False) - minimum_bid(1000, True) == 1


def test_burn_amount_open_burns_everything():
    assert burn_amount(None, 1234) == 1234


def test_burn_amount_of_a_raise():
    assert burn_amount(1000, 1500) == 500


def test_burn_amount_below_minimum():
    with pytest.raises(ValueError, match="Minimum bid is"):
        burn_amount(1000, 1000)


def test_burn_amount_forced_equal_bid_burns_nothing():
    assert burn_amount(1000, 1000, force=True) == 0
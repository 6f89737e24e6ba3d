"""Planning of wallet transactions from a batch of space and coin requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Sized, Union

from .address import SpaceAddress

# A few more bid outputs are always created for future transactions.
EXTRA_BIDOUTS = 2

_U8_MAX = 0xFF


def _check_amount(amount: int) -> int:
    if amount < 0:
        raise ValueError("amount must not be negative")
    return amount


@dataclass(frozen=True)
class OpenRequest:
    """Open an auction for ``name`` with an initial bid."""

    name: str
    initial_amount: int


@dataclass(frozen=True)
class BidRequest:
    """Bid ``amount`` on the space held in ``space``."""

    space: Any
    amount: int


@dataclass(frozen=True)
class RegisterRequest:
    """Register a won space, to ``to`` or a fresh wallet space address."""

    space: Any
    to: SpaceAddress | None = None


@dataclass(frozen=True)
class SpaceTransfer:
    """Move the space held in ``space`` to ``recipient``."""

    space: Any
    recipient: SpaceAddress


@dataclass(frozen=True)
class CoinTransfer:
    """Send ``amount`` satoshis to ``recipient``."""

    amount: int
    recipient: Any


@dataclass(frozen=True)
class ExecuteRequest:
    """Run a space script against the spaces in ``context``."""

    context: tuple[SpaceTransfer, ...]
    script: Any


@dataclass
class PrepareOp:
    """One transaction bundling commitments, transfers, sends and new bid outputs."""

    opens: list[OpenRequest] = field(default_factory=list)
    executes: list[ExecuteRequest] = field(default_factory=list)
    transfers: list[SpaceTransfer] = field(default_factory=list)
    sends: list[CoinTransfer] = field(default_factory=list)
    bidouts: int | None = None


Operation = Union[PrepareOp, BidRequest]


def auction_output_count(required: int, available: int, requested: int | None) -> int | None:
    """How many bid outputs to create, or None when none are needed."""
    if requested is None:
        if required > available:
            return required - available + EXTRA_BIDOUTS
        return None
    if required > available + requested:
        raise ValueError(
            f"number of required bidouts {required} exceeds currently "
            f"available {available} + requested {requested}"
        )
    return requested


def minimum_bid(total_burned: int, force: bool = False) -> int:
    """The least a new bid may be, given what the space has burned so far."""
    return total_burned if force else total_burned + 1


def burn_amount(previous_total_burned: int | None, amount: int, force: bool = False) -> int:
    """What a bid of ``amount`` burns; an open (no previous bid) burns it all."""
    _check_amount(amount)
    if previous_total_burned is None:
        return amount
    least = minimum_bid(previous_total_burned, force)
    if amount < least:
        raise ValueError(f"Minimum bid is {least} sats")
    return amount - previous_total_burned


class Builder:
    """Collects requests and plans the transactions that carry them out."""

    def __init__(self) -> None:
        self.requests: list[Any] = []
        self._fee_rate: float | None = None
        self._bidouts: int | None = None
        self._force = False

    def fee_rate(self, fee_rate: float) -> "Builder":
        if fee_rate < 0:
            raise ValueError("fee rate must not be negative")
        self._fee_rate = fee_rate
        return self

    def force(self, force: bool) -> "Builder":
        """Allow otherwise invalid transactions; meant for testing only."""
        self._force = force
        return self

    def bidouts(self, count: int) -> "Builder":
        """Create exactly ``count`` bid outputs."""
        if not 0 <= count <= _U8_MAX:
            raise ValueError("bidout count must fit in one byte")
        self._bidouts = count
        return self

    @property
    def is_forced(self) -> bool:
        return self._force

    def add_open(self, name: str, initial_amount: int) -> "Builder":
        self.requests.append(OpenRequest(name, _check_amount(initial_amount)))
        return self

    def add_bid(self, space: Any, amount: int) -> "Builder":
        self.requests.append(BidRequest(space, _check_amount(amount)))
        return self

    def add_register(self, space: Any, to: SpaceAddress | None = None) -> "Builder":
        self.requests.append(RegisterRequest(space, to))
        return self

    def add_transfer(self, request: SpaceTransfer) -> "Builder":
        self.requests.append(request)
        return self

    def add_send(self, request: CoinTransfer) -> "Builder":
        _check_amount(request.amount)
        self.requests.append(request)
        return self

    def add_execute(self, spaces, script: Any) -> "Builder":
        self.requests.append(ExecuteRequest(tuple(spaces), script))
        return self

    def plan(
        self,
        available_bidouts: Sized,
        next_space_address: Callable[[], SpaceAddress],
    ) -> list[Operation]:
        """The operations to run, in the order they are to be built.

        ``available_bidouts`` are the wallet's unused bid outputs and
        ``next_space_address`` supplies recipients for registrations without one.
        """
        if self._fee_rate is None:
            raise ValueError("fee_rate is required")

        required = sum(
            isinstance(request, (OpenRequest, BidRequest)) for request in self.requests
        )
        available = len(available_bidouts) if required > 0 else 0
        auction_outputs = auction_output_count(required, available, self._bidouts)

        prepare = PrepareOp(bidouts=auction_outputs)
        bids: list[BidRequest] = []
        for request in self.requests:
            if isinstance(request, OpenRequest):
                prepare.opens.append(request)
            elif isinstance(request, BidRequest):
                bids.append(request)
            elif isinstance(request, RegisterRequest):
                recipient = request.to if request.to is not None else next_space_address()
                prepare.transfers.append(SpaceTransfer(request.space, recipient))
            elif isinstance(request, CoinTransfer):
                prepare.sends.append(request)
            elif isinstance(request, SpaceTransfer):
                prepare.transfers.append(request)
            elif isinstance(request, ExecuteRequest):
                prepare.executes.append(request)

        # Operations are taken from a stack: bids are pushed first, the
        # preparing transaction last, so it is built first.
        stack: list[Operation] = list(bids)
        if (
            prepare.opens
            or prepare.transfers
            or prepare.sends
            or prepare.executes
            or auction_outputs is not None
        ):
            stack.append(prepare)
        return stack[::-1]
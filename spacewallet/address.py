"""Space addresses: taproot-style witness programs with an 's' suffixed prefix."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import bech32


class Network(Enum):
    """Bitcoin networks a wallet can operate on."""

    BITCOIN = "bitcoin"
    TESTNET = "testnet"
    SIGNET = "signet"
    REGTEST = "regtest"

    @property
    def hrp(self) -> str:
        """The bech32 prefix of ordinary addresses on this network."""
        return _HRPS[self]

    @property
    def space_hrp(self) -> str:
        """The bech32 prefix of space addresses on this network."""
        return self.hrp + "s"


_HRPS = {
    Network.BITCOIN: "bc",
    Network.TESTNET: "tb",
    Network.SIGNET: "tb",
    Network.REGTEST: "bcrt",
}

# Upper or lower case is allowed, but not mixed case.
_SPACE_PREFIXES = {
    "bcs": Network.BITCOIN,
    "BCS": Network.BITCOIN,
    "tbs": Network.TESTNET,
    "TBS": Network.TESTNET,
    "bcrts": Network.REGTEST,
    "BCRTS": Network.REGTEST,
}


class AddressError(ValueError):
    """Raised when text is not a valid space address."""


@dataclass(frozen=True)
class SpaceAddress:
    """A witness program paired with the network it belongs to."""

    network: Network
    witness_version: int
    program: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "program", bytes(self.program))
        if not 0 <= self.witness_version <= 16:
            raise AddressError(f"invalid witness version {self.witness_version}")
        if not 2 <= len(self.program) <= 40:
            raise AddressError(f"invalid witness program length {len(self.program)}")
        if self.witness_version == 0 and len(self.program) not in (20, 32):
            raise AddressError(f"invalid segwit v0 program length {len(self.program)}")

    @classmethod
    def parse(cls, text: str) -> "SpaceAddress":
        """Parse a bech32 space address such as ``bcs1...``."""
        network = _SPACE_PREFIXES.get(bech32.find_bech32_prefix(text))
        if network is None:
            raise AddressError("not a space address: no data for a known space prefix")
        try:
            _, version, program = bech32.decode(text)
        except bech32.Bech32Error as exc:
            raise AddressError(str(exc)) from exc
        return cls(network, version, program)

    def script_pubkey(self) -> bytes:
        """The output script paying to this witness program."""
        opcode = 0 if self.witness_version == 0 else 0x50 + self.witness_version
        return bytes([opcode, len(self.program)]) + self.program

    def encode(self, upper: bool = False) -> str:
        """Render the address in lower case, or upper case if asked."""
        return bech32.encode(self.network.space_hrp, self.witness_version, self.program, upper)

    def __str__(self) -> str:
        return self.encode()
"""Bech32 and Bech32m encoding of segwit-style witness programs."""

from __future__ import annotations

from enum import IntEnum

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
MAX_LENGTH = 90

_CHARSET_INDEX = {char: index for index, char in enumerate(CHARSET)}
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_CHECKSUM_LENGTH = 6


class Bech32Error(ValueError):
    """Raised when a string is not a valid segwit bech32 encoding."""


class Variant(IntEnum):
    """Checksum constants of the two bech32 variants."""

    BECH32 = 1
    BECH32M = 0x2BC830A3


def _variant_for(witness_version: int) -> Variant:
    return Variant.BECH32 if witness_version == 0 else Variant.BECH32M


def _polymod(values: list[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATOR):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _create_checksum(hrp: str, data: list[int], variant: Variant) -> list[int]:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * _CHECKSUM_LENGTH) ^ variant
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(_CHECKSUM_LENGTH)]


def _convert_bits(data, from_bits: int, to_bits: int, pad: bool) -> list[int]:
    accumulator = 0
    bits = 0
    out: list[int] = []
    max_value = (1 << to_bits) - 1
    max_accumulator = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise Bech32Error("value out of range for bit conversion")
        accumulator = ((accumulator << from_bits) | value) & max_accumulator
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((accumulator >> bits) & max_value)
    if pad:
        if bits:
            out.append((accumulator << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (accumulator << (to_bits - bits)) & max_value:
        raise Bech32Error("invalid padding")
    return out


def _check_hrp(hrp: str) -> None:
    if not hrp:
        raise Bech32Error("empty human-readable part")
    if any(not 33 <= ord(c) <= 126 for c in hrp):
        raise Bech32Error("invalid character in human-readable part")


def _check_program(witness_version: int, program: bytes) -> None:
    if not 0 <= witness_version <= 16:
        raise Bech32Error(f"invalid witness version {witness_version}")
    if not 2 <= len(program) <= 40:
        raise Bech32Error(f"invalid witness program length {len(program)}")
    if witness_version == 0 and len(program) not in (20, 32):
        raise Bech32Error(f"invalid segwit v0 program length {len(program)}")


def encode(hrp: str, witness_version: int, program: bytes, upper: bool = False) -> str:
    """Encode a witness program under ``hrp``, in lower or upper case."""
    hrp = hrp.lower()
    _check_hrp(hrp)
    if not 0 <= witness_version <= 16:
        raise Bech32Error(f"invalid witness version {witness_version}")
    data = [witness_version, *_convert_bits(bytes(program), 8, 5, True)]
    checksum = _create_checksum(hrp, data, _variant_for(witness_version))
    text = hrp + "1" + "".join(CHARSET[d] for d in data + checksum)
    return text.upper() if upper else text


def decode(address: str) -> tuple[str, int, bytes]:
    """Decode a segwit address into (lower-case hrp, witness version, program)."""
    if len(address) > MAX_LENGTH:
        raise Bech32Error("address too long")
    if any(not 33 <= ord(c) <= 126 for c in address):
        raise Bech32Error("invalid character in address")
    if address.lower() != address and address.upper() != address:
        raise Bech32Error("mixed case address")
    text = address.lower()
    separator = text.rfind("1")
    if separator < 1:
        raise Bech32Error("missing human-readable part or separator")
    if separator + 1 + _CHECKSUM_LENGTH >= len(text):
        raise Bech32Error("no data after separator")
    hrp = text[:separator]
    try:
        data = [_CHARSET_INDEX[c] for c in text[separator + 1:]]
    except KeyError as exc:
        raise Bech32Error(f"invalid data character {exc.args[0]!r}") from None
    residue = _polymod(_hrp_expand(hrp) + data)
    payload = data[:-_CHECKSUM_LENGTH]
    witness_version = payload[0]
    if witness_version > 16:
        raise Bech32Error(f"invalid witness version {witness_version}")
    if residue != _variant_for(witness_version):
        raise Bech32Error("invalid checksum")
    program = bytes(_convert_bits(payload[1:], 5, 8, False))
    _check_program(witness_version, program)
    return hrp, witness_version, program


def find_bech32_prefix(text: str) -> str:
    """Return the part before the last '1', or the whole text if there is none."""
    separator = text.rfind("1")
    return text if separator < 0 else text[:separator]
"""Wallet export in the descriptor/blockheight/label JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass


def remove_checksum(descriptor: str) -> str:
    """Strip the ``#checksum`` suffix from a descriptor."""
    body, separator, _ = descriptor.partition("#")
    if not separator:
        raise ValueError("descriptor has no checksum")
    return body


@dataclass
class WalletExport:
    """An exported wallet: its external descriptor, rescan height and label."""

    descriptor: str
    blockheight: int
    label: str

    @classmethod
    def from_descriptors(
        cls, external: str, internal: str, label: str, blockheight: int
    ) -> "WalletExport":
        """Build an export, requiring the change descriptor to follow the /1/* path."""
        export = cls(remove_checksum(external), blockheight, label)
        if export.change_descriptor() != remove_checksum(internal):
            raise ValueError("Incompatible change descriptor")
        return export

    def change_descriptor(self) -> str | None:
        """The internal descriptor derived from the external one, if any."""
        replaced = self.descriptor.replace("/0/*", "/1/*")
        return replaced if replaced != self.descriptor else None

    def to_json(self) -> str:
        return json.dumps(
            {"descriptor": self.descriptor, "blockheight": self.blockheight, "label": self.label},
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, text: str) -> "WalletExport":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("wallet export must be a JSON object")
        for name in ("descriptor", "blockheight", "label"):
            if name not in data:
                raise ValueError(f"missing field `{name}`")
        descriptor, blockheight, label = data["descriptor"], data["blockheight"], data["label"]
        if not isinstance(descriptor, str) or not isinstance(label, str):
            raise ValueError("descriptor and label must be strings")
        if isinstance(blockheight, bool) or not isinstance(blockheight, int) or not (
            0 <= blockheight <= 0xFFFFFFFF
        ):
            raise ValueError("blockheight must be a 32-bit unsigned integer")
        return cls(descriptor, blockheight, label)

    def __str__(self) -> str:
        return self.to_json()
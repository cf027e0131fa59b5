"""
Data models for account source output.

RawAccount is the unit every decoder works on: an address and its raw data
buffer. MemcmpFilter mirrors the getProgramAccounts memcmp filter.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

from solders.pubkey import Pubkey


@dataclass(frozen=True)
class RawAccount:
    """An on-chain account: address plus raw data bytes."""

    address: Pubkey
    data: bytes

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "RawAccount":
        """Build from a getProgramAccounts result item ({pubkey, account: {data}})."""
        return cls(
            address=Pubkey.from_string(item["pubkey"]),
            data=raw_bytes_from_account_data(item["account"]["data"]),
        )


@dataclass(frozen=True)
class MemcmpFilter:
    """Match accounts whose data holds exactly ``bytes_`` at ``offset``."""

    offset: int
    bytes_: bytes

    @classmethod
    def for_pubkey(cls, offset: int, pubkey: Pubkey) -> "MemcmpFilter":
        return cls(offset=offset, bytes_=bytes(pubkey))

    def matches(self, data: bytes) -> bool:
        end = self.offset + len(self.bytes_)
        return end <= len(data) and data[self.offset:end] == self.bytes_

    def to_rpc(self) -> dict[str, Any]:
        """RPC form: memcmp bytes are base58; 32-byte values encode like a Pubkey."""
        if len(self.bytes_) == 32:
            encoded = str(Pubkey.from_bytes(self.bytes_))
            return {"memcmp": {"offset": self.offset, "bytes": encoded}}
        return {
            "memcmp": {
                "offset": self.offset,
                "bytes": base64.b64encode(self.bytes_).decode("ascii"),
                "encoding": "base64",
            }
        }


def raw_bytes_from_account_data(data: object) -> bytes:
    """
    Normalize RPC account.data to bytes.

    Handles ["<base64>", "base64"], a bare base64 string, and raw bytes.
    Raises ValueError for anything else.
    """
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return base64.b64decode(data)
    if isinstance(data, (list, tuple)) and data and isinstance(data[0], str):
        encoding = data[1] if len(data) > 1 else "base64"
        if encoding != "base64":
            raise ValueError(f"Unsupported account data encoding: {encoding}")
        return base64.b64decode(data[0])
    raise ValueError(f"Unrecognized account data: {type(data).__name__}")

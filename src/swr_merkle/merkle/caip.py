"""
CAIP-2 chain identifiers.

On-chain, chain identifiers are stored as the keccak256 hash of the CAIP-2
string so every entry half is a fixed 32-byte value:

    bytes32 chainId = keccak256(bytes("eip155:8453"))

Only the EVM (`eip155`) namespace converts to and from numeric chain ids.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from eth_utils import encode_hex, keccak

from swr_merkle.protocol.errors import InvalidEntryError


# Namespace: [-a-z0-9]{3,8}, reference: [-_a-zA-Z0-9]{1,32}
_CAIP2_RE = re.compile(r"^[-a-z0-9]{3,8}:[-_a-zA-Z0-9]{1,32}$")

EIP155_NAMESPACE = "eip155"


@dataclass(frozen=True)
class ParsedCAIP2:
    namespace: str
    reference: str


def to_caip2(chain_id: int) -> str:
    """Build the `eip155:<id>` identifier for an EVM chain id."""
    if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id < 0:
        raise InvalidEntryError(f"Invalid chain ID: {chain_id!r}")
    return f"{EIP155_NAMESPACE}:{chain_id}"


def parse_caip2(caip2: str) -> Optional[ParsedCAIP2]:
    if not isinstance(caip2, str) or not _CAIP2_RE.match(caip2):
        return None
    namespace, reference = caip2.split(":", 1)
    return ParsedCAIP2(namespace=namespace, reference=reference)


def is_valid_caip2(value: str) -> bool:
    return parse_caip2(value) is not None


def caip2_to_numeric_chain_id(caip2: str) -> Optional[int]:
    parsed = parse_caip2(caip2)
    if parsed is None or parsed.namespace != EIP155_NAMESPACE:
        return None
    if not parsed.reference.isdigit():
        return None
    return int(parsed.reference)


def compute_caip2_hash(caip2: str) -> str:
    """keccak256 of the UTF-8 bytes of a CAIP-2 string, as 0x hex."""
    return encode_hex(keccak(text=caip2))


def chain_id_to_bytes32(chain_id: int) -> str:
    """
    Convert an EIP-155 chain id to its on-chain bytes32 form.

    chain_id_to_bytes32(8453)
    # => '0x43b48883ef7be0f98fe7f98fafb2187e42caab4063697b32816f95e09d69b3ec'
    """
    return compute_caip2_hash(to_caip2(chain_id))


def caip2_to_bytes32(caip2: str) -> str:
    if caip2_to_numeric_chain_id(caip2) is None:
        raise InvalidEntryError(f"Unsupported or invalid CAIP-2 format: {caip2}")
    return compute_caip2_hash(caip2)


def truncate_chain_id_hash(full_hash: str) -> int:
    """Top 64 bits of a bytes32 chain hash, as stored by the hub contract."""
    return int(full_hash, 16) >> 192

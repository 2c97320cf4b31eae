"""
Merkle leaf computation.

Leaves follow the OpenZeppelin StandardMerkleTree format used by the
registry contracts:

    leaf = keccak256(keccak256(abi.encode(value1, value2)))

Internal nodes are hashed once, so the double hash keeps a leaf from ever
being accepted as an internal node (second-preimage protection).
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple, Union

from eth_utils import (
    decode_hex,
    encode_hex,
    int_to_big_endian,
    is_0x_prefixed,
    is_hex_address,
    is_hexstr,
    keccak,
    to_canonical_address,
)

from swr_merkle.merkle.caip import chain_id_to_bytes32
from swr_merkle.protocol.errors import InvalidEntryError


# ===========================================================================
# Leaf encodings
# ===========================================================================


ADDRESS_BYTES32: Tuple[str, str] = ("address", "bytes32")
BYTES32_BYTES32: Tuple[str, str] = ("bytes32", "bytes32")

SUPPORTED_TYPES = frozenset({"address", "bytes32", "uint256"})

_WORD = 32
_UINT256_MAX = 2**256 - 1

HexValue = Union[str, bytes]


def validate_leaf_encoding(leaf_encoding: Sequence[str]) -> Tuple[str, ...]:
    encoding = tuple(leaf_encoding)
    if len(encoding) != 2:
        raise InvalidEntryError(
            f"Leaf encoding must name exactly two types, got {list(encoding)}"
        )
    for type_name in encoding:
        if type_name not in SUPPORTED_TYPES:
            raise InvalidEntryError(f"Unsupported leaf type: {type_name!r}")
    return encoding


# ===========================================================================
# ABI encoding
# ===========================================================================


def _encode_address(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        raw = bytes(value)
    elif isinstance(value, str) and is_0x_prefixed(value) and is_hex_address(value):
        raw = to_canonical_address(value)
    else:
        raise InvalidEntryError(f"Invalid address: {value!r}")
    return b"\x00" * (_WORD - len(raw)) + raw


def _encode_bytes32(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif (
        isinstance(value, str)
        and len(value) == 2 + 2 * _WORD
        and is_0x_prefixed(value)
        and is_hexstr(value)
    ):
        raw = decode_hex(value)
    else:
        raise InvalidEntryError(f"Invalid bytes32 value: {value!r}")
    if len(raw) != _WORD:
        raise InvalidEntryError(f"bytes32 value must be 32 bytes, got {len(raw)}: {value!r}")
    return raw


def _encode_uint256(value: Any) -> bytes:
    if isinstance(value, bool):
        raise InvalidEntryError(f"Invalid uint256 value: {value!r}")
    try:
        if isinstance(value, int):
            number = value
        elif isinstance(value, str) and is_0x_prefixed(value) and is_hexstr(value):
            number = int(value, 16)
        elif isinstance(value, str) and value.isdecimal() and value.isascii():
            number = int(value)
        else:
            raise InvalidEntryError(f"Invalid uint256 value: {value!r}")
    except ValueError as e:
        raise InvalidEntryError(f"Invalid uint256 value: {value!r}") from e
    if number < 0 or number > _UINT256_MAX:
        raise InvalidEntryError(f"uint256 value out of range: {value!r}")
    raw = int_to_big_endian(number)
    return b"\x00" * (_WORD - len(raw)) + raw


_ENCODERS = {
    "address": _encode_address,
    "bytes32": _encode_bytes32,
    "uint256": _encode_uint256,
}


def abi_encode(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """
    ABI-encode static values, one 32-byte word each (Solidity `abi.encode`).
    """
    if len(types) != len(values):
        raise InvalidEntryError(
            f"Expected {len(types)} values for {list(types)}, got {len(values)}"
        )
    for type_name in types:
        if type_name not in SUPPORTED_TYPES:
            raise InvalidEntryError(f"Unsupported ABI type: {type_name!r}")
    return b"".join(_ENCODERS[t](v) for t, v in zip(types, values))


# ===========================================================================
# Hash functions
# ===========================================================================


def leaf_hash(value: Sequence[Any], leaf_encoding: Sequence[str]) -> bytes:
    """Raw 32-byte leaf for a value tuple."""
    return keccak(keccak(abi_encode(leaf_encoding, value)))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two nodes in ascending order.

    Sorted pairs let a proof omit left/right position metadata.
    """
    if a <= b:
        return keccak(a + b)
    return keccak(b + a)


def compute_leaf(
    value1: HexValue,
    value2: HexValue,
    leaf_encoding: Sequence[str] = BYTES32_BYTES32,
) -> str:
    """
    Compute the leaf for any two-value entry.

    Defaults to `(bytes32, bytes32)`, the generic registry tuple.
    """
    return encode_hex(leaf_hash((value1, value2), leaf_encoding))


def compute_wallet_leaf(address: str, chain_id: HexValue) -> str:
    return compute_leaf(address, chain_id, ADDRESS_BYTES32)


def compute_transaction_leaf(tx_hash: HexValue, chain_id: HexValue) -> str:
    return compute_leaf(tx_hash, chain_id, BYTES32_BYTES32)


def compute_contract_leaf(address: str, chain_id: HexValue) -> str:
    return compute_leaf(address, chain_id, ADDRESS_BYTES32)


def compute_transaction_leaf_from_chain_id(tx_hash: HexValue, chain_id: int) -> str:
    """Same as compute_transaction_leaf, taking a numeric EIP-155 chain id."""
    return compute_transaction_leaf(tx_hash, chain_id_to_bytes32(chain_id))

"""
Leaf-order sorting for registry batches.

The registry contracts verify batches with sorted-pair proofs and expect the
parallel arrays of `registerBatch` to arrive in ascending leaf order. Callers
must submit the sorted arrays, not their original input order:

    arrays = get_sorted_arrays(entries)
    registry.registerBatch(root, chain_id, arrays.primary_values, arrays.chain_ids)
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from swr_merkle.merkle.leaf import leaf_hash, validate_leaf_encoding
from swr_merkle.merkle.models import (
    ContractEntry,
    RegistryEntry,
    SortedArrays,
    TransactionEntry,
    WalletEntry,
    entry_kind_of,
)
from swr_merkle.protocol.enums import EntryKind
from swr_merkle.protocol.errors import InvalidEntryError


def sort_values(
    values: Sequence[Sequence[Any]],
    leaf_encoding: Sequence[str],
) -> List[Tuple[int, Tuple[Any, ...], bytes]]:
    """
    Hash and sort raw value tuples.

    Returns (value_index, value, leaf) triples ordered by leaf as a big-endian
    unsigned integer. The sort is stable, so equal leaves keep input order.
    """
    encoding = validate_leaf_encoding(leaf_encoding)
    hashed = [
        (index, tuple(value), leaf_hash(value, encoding))
        for index, value in enumerate(values)
    ]
    hashed.sort(key=lambda item: item[2])
    return hashed


def sort_entries(
    entries: Sequence[RegistryEntry],
    kind: Optional[EntryKind] = None,
) -> List[RegistryEntry]:
    """
    Return a new list with entries in ascending leaf order.

    Raises:
        InvalidEntryError: If the batch mixes entry kinds, is not of `kind`,
            or holds a malformed value
    """
    entries = list(entries)
    if not entries:
        return []
    actual = entry_kind_of(entries)
    if kind is not None and actual != kind:
        raise InvalidEntryError(f"Expected {kind.value} entries, got {actual.value}")
    ordered = sort_values([e.value for e in entries], entries[0].leaf_encoding)
    return [entries[index] for index, _, _ in ordered]


def sort_wallet_entries(entries: Sequence[WalletEntry]) -> List[WalletEntry]:
    return sort_entries(entries, EntryKind.WALLET)


def sort_transaction_entries(entries: Sequence[TransactionEntry]) -> List[TransactionEntry]:
    return sort_entries(entries, EntryKind.TRANSACTION)


def sort_contract_entries(entries: Sequence[ContractEntry]) -> List[ContractEntry]:
    return sort_entries(entries, EntryKind.CONTRACT)


def get_sorted_arrays(
    entries: Sequence[RegistryEntry],
    kind: Optional[EntryKind] = None,
) -> SortedArrays:
    """Sort entries and split them into the contract's parallel arrays."""
    sorted_entries = sort_entries(entries, kind)
    return SortedArrays(
        sorted_entries=sorted_entries,
        primary_values=[e.primary for e in sorted_entries],
        chain_ids=[e.chain_id for e in sorted_entries],
    )


def get_sorted_wallet_arrays(entries: Sequence[WalletEntry]) -> SortedArrays:
    return get_sorted_arrays(entries, EntryKind.WALLET)


def get_sorted_transaction_arrays(entries: Sequence[TransactionEntry]) -> SortedArrays:
    return get_sorted_arrays(entries, EntryKind.TRANSACTION)


def get_sorted_contract_arrays(entries: Sequence[ContractEntry]) -> SortedArrays:
    return get_sorted_arrays(entries, EntryKind.CONTRACT)

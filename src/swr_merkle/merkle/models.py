"""
Registry entry and result types.

Every registry shares the same leaf shape, a primary value plus a chain
identifier hash:

- WalletEntry       (address, chainId)  -> ("address", "bytes32")
- TransactionEntry  (txHash, chainId)   -> ("bytes32", "bytes32")
- ContractEntry     (address, chainId)  -> ("address", "bytes32")

Values are stored exactly as supplied; checksum casing is preserved and only
normalized when entries are compared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Sequence, Tuple, Type

from swr_merkle.merkle.leaf import ADDRESS_BYTES32, BYTES32_BYTES32
from swr_merkle.protocol.enums import EntryKind
from swr_merkle.protocol.errors import InvalidEntryError

if TYPE_CHECKING:
    from swr_merkle.merkle.tree import StandardMerkleTree


# ===========================================================================
# Entries
# ===========================================================================


def same_value(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Case-insensitive equality of two (primary, chainId) pairs."""
    return len(a) == len(b) and all(
        str(x).lower() == str(y).lower() for x, y in zip(a, b)
    )


class RegistryEntry:
    """Common interface of the three entry variants."""

    kind: ClassVar[EntryKind]
    leaf_encoding: ClassVar[Tuple[str, str]]
    primary_field: ClassVar[str]

    chain_id: str

    @property
    def primary(self) -> str:
        raise NotImplementedError

    @property
    def value(self) -> Tuple[str, str]:
        return (self.primary, self.chain_id)

    def matches(self, primary: str, chain_id: str) -> bool:
        return same_value(self.value, (primary, chain_id))

    def to_dict(self) -> Dict[str, Any]:
        return {self.primary_field: self.primary, "chainId": self.chain_id}


@dataclass(frozen=True)
class WalletEntry(RegistryEntry):
    """
    Entry for the Stolen Wallet Registry.

    Attributes:
        address: Wallet address (any hex casing)
        chain_id: CAIP-2 chain identifier as bytes32 hash
    """
    address: str
    chain_id: str

    kind: ClassVar[EntryKind] = EntryKind.WALLET
    leaf_encoding: ClassVar[Tuple[str, str]] = ADDRESS_BYTES32
    primary_field: ClassVar[str] = "address"

    @property
    def primary(self) -> str:
        return self.address

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WalletEntry":
        return cls(address=data["address"], chain_id=data["chainId"])


@dataclass(frozen=True)
class TransactionEntry(RegistryEntry):
    """
    Entry for the Stolen Transaction Registry.

    Attributes:
        tx_hash: Transaction hash
        chain_id: CAIP-2 chain identifier as bytes32 hash
    """
    tx_hash: str
    chain_id: str

    kind: ClassVar[EntryKind] = EntryKind.TRANSACTION
    leaf_encoding: ClassVar[Tuple[str, str]] = BYTES32_BYTES32
    primary_field: ClassVar[str] = "txHash"

    @property
    def primary(self) -> str:
        return self.tx_hash

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionEntry":
        return cls(tx_hash=data["txHash"], chain_id=data["chainId"])


@dataclass(frozen=True)
class ContractEntry(RegistryEntry):
    """
    Entry for the Fraudulent Contract Registry.

    Attributes:
        address: Contract address
        chain_id: CAIP-2 chain identifier as bytes32 hash
    """
    address: str
    chain_id: str

    kind: ClassVar[EntryKind] = EntryKind.CONTRACT
    leaf_encoding: ClassVar[Tuple[str, str]] = ADDRESS_BYTES32
    primary_field: ClassVar[str] = "address"

    @property
    def primary(self) -> str:
        return self.address

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractEntry":
        return cls(address=data["address"], chain_id=data["chainId"])


ENTRY_TYPES: Dict[EntryKind, Type[RegistryEntry]] = {
    EntryKind.WALLET: WalletEntry,
    EntryKind.TRANSACTION: TransactionEntry,
    EntryKind.CONTRACT: ContractEntry,
}


def entry_type_for(kind: EntryKind) -> Type[RegistryEntry]:
    return ENTRY_TYPES[EntryKind(kind)]


def entry_kind_of(entries: List[RegistryEntry]) -> EntryKind:
    """
    Return the single kind shared by a batch.

    Raises:
        InvalidEntryError: If the batch mixes kinds or holds foreign objects
    """
    kinds = set()
    for entry in entries:
        if not isinstance(entry, RegistryEntry):
            raise InvalidEntryError(f"Not a registry entry: {entry!r}")
        kinds.add(entry.kind)
    if len(kinds) != 1:
        raise InvalidEntryError(
            f"A batch must hold one entry kind, got {sorted(k.value for k in kinds)}"
        )
    return kinds.pop()


# ===========================================================================
# Results
# ===========================================================================


@dataclass
class SortedArrays:
    """
    Parallel arrays in leaf order, ready for a `registerBatch` call.

    Attributes:
        sorted_entries: Entries in ascending leaf order
        primary_values: Addresses or transaction hashes, same order
        chain_ids: Chain identifier hashes, same order
    """
    sorted_entries: List[RegistryEntry]
    primary_values: List[str]
    chain_ids: List[str]


@dataclass
class MerkleTreeResult:
    """
    Result of building a tree for one batch.

    Attributes:
        root: Merkle root (0x hex)
        tree: The immutable tree
        entries: Entries in caller order
        sorted_entries: Entries in ascending leaf order
        leaf_count: Number of leaves
    """
    root: str
    tree: "StandardMerkleTree"
    entries: List[RegistryEntry]
    sorted_entries: List[RegistryEntry]
    leaf_count: int


@dataclass(frozen=True)
class RegisterBatchArgs:
    """
    Arguments of `registerBatch(root, chainId, primaryValues[], chainIds[])`.
    """
    root: str
    chain_id: str
    primary_values: Tuple[str, ...]
    chain_ids: Tuple[str, ...]

    def as_call_args(self) -> Tuple[str, str, List[str], List[str]]:
        return (self.root, self.chain_id, list(self.primary_values), list(self.chain_ids))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "chainId": self.chain_id,
            "primaryValues": list(self.primary_values),
            "chainIds": list(self.chain_ids),
        }

from .merkle import (
    WalletEntry,
    TransactionEntry,
    ContractEntry,
    StandardMerkleTree,
    MerkleTreeResult,
    compute_leaf,
    sort_entries,
    get_sorted_arrays,
    build,
    get_proof,
    verify_proof,
    serialize_tree,
    deserialize_tree,
)
from .merkle.caip import chain_id_to_bytes32, caip2_to_bytes32
from .protocol import (
    EntryKind,
    MerkleError,
    EmptyBatchError,
    BatchTooLargeError,
    NotFoundError,
    FormatError,
    InvalidEntryError,
    DuplicateLeafError,
)

__version__ = "0.1.0"

__all__ = [
    "WalletEntry",
    "TransactionEntry",
    "ContractEntry",
    "StandardMerkleTree",
    "MerkleTreeResult",
    "compute_leaf",
    "sort_entries",
    "get_sorted_arrays",
    "build",
    "get_proof",
    "verify_proof",
    "serialize_tree",
    "deserialize_tree",
    "chain_id_to_bytes32",
    "caip2_to_bytes32",
    "EntryKind",
    "MerkleError",
    "EmptyBatchError",
    "BatchTooLargeError",
    "NotFoundError",
    "FormatError",
    "InvalidEntryError",
    "DuplicateLeafError",
]

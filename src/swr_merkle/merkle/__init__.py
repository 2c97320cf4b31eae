"""
Merkle batch proofs for the fraud registries.

Key concepts:
- OpenZeppelin standard leaves (double keccak over ABI-encoded pairs)
- Ascending leaf order for gas-optimized batch registration
- Sorted-pair internal nodes, so proofs carry no side metadata
- `standard-v1` dump/load shared with the CLI and web client
"""

from swr_merkle.merkle.leaf import (
    ADDRESS_BYTES32,
    BYTES32_BYTES32,
    abi_encode,
    compute_leaf,
    compute_wallet_leaf,
    compute_transaction_leaf,
    compute_contract_leaf,
    compute_transaction_leaf_from_chain_id,
    hash_pair,
)

from swr_merkle.merkle.models import (
    RegistryEntry,
    WalletEntry,
    TransactionEntry,
    ContractEntry,
    SortedArrays,
    MerkleTreeResult,
    RegisterBatchArgs,
)

from swr_merkle.merkle.sort import (
    sort_entries,
    sort_wallet_entries,
    sort_transaction_entries,
    sort_contract_entries,
    get_sorted_arrays,
    get_sorted_wallet_arrays,
    get_sorted_transaction_arrays,
    get_sorted_contract_arrays,
)

from swr_merkle.merkle.tree import (
    StandardMerkleTree,
    build,
    build_wallet_tree,
    build_transaction_tree,
    build_contract_tree,
    registration_args,
)

from swr_merkle.merkle.proof import (
    InclusionProof,
    get_proof,
    get_wallet_proof,
    get_transaction_proof,
    get_contract_proof,
    get_inclusion_proof,
    process_proof,
    verify_proof,
)

from swr_merkle.merkle.serialize import (
    dump,
    load,
    serialize_tree,
    deserialize_tree,
)

__all__ = [
    # Leaves
    "ADDRESS_BYTES32",
    "BYTES32_BYTES32",
    "abi_encode",
    "compute_leaf",
    "compute_wallet_leaf",
    "compute_transaction_leaf",
    "compute_contract_leaf",
    "compute_transaction_leaf_from_chain_id",
    "hash_pair",
    # Entries and results
    "RegistryEntry",
    "WalletEntry",
    "TransactionEntry",
    "ContractEntry",
    "SortedArrays",
    "MerkleTreeResult",
    "RegisterBatchArgs",
    # Sorting
    "sort_entries",
    "sort_wallet_entries",
    "sort_transaction_entries",
    "sort_contract_entries",
    "get_sorted_arrays",
    "get_sorted_wallet_arrays",
    "get_sorted_transaction_arrays",
    "get_sorted_contract_arrays",
    # Trees
    "StandardMerkleTree",
    "build",
    "build_wallet_tree",
    "build_transaction_tree",
    "build_contract_tree",
    "registration_args",
    # Proofs
    "InclusionProof",
    "get_proof",
    "get_wallet_proof",
    "get_transaction_proof",
    "get_contract_proof",
    "get_inclusion_proof",
    "process_proof",
    "verify_proof",
    # Serialization
    "dump",
    "load",
    "serialize_tree",
    "deserialize_tree",
]

"""
Merkle proof retrieval and verification.

Lookups compare both entry fields case-insensitively, so a checksummed
address finds the entry stored in lowercase and vice versa. A correct
primary value on the wrong chain is still "not found".

Verification mirrors the on-chain check: fold the leaf with each sibling
using sorted-pair hashing and compare against the root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple, Union

from eth_utils import decode_hex, encode_hex

from swr_merkle.merkle.models import RegistryEntry, same_value
from swr_merkle.merkle.tree import StandardMerkleTree, fold_proof
from swr_merkle.protocol.errors import InvalidEntryError, NotFoundError

logger = logging.getLogger(__name__)

Target = Union[RegistryEntry, Tuple[str, str]]


# ===========================================================================
# Inclusion Proof
# ===========================================================================


@dataclass
class InclusionProof:
    """
    Proof that one entry is part of a batch root.

    Attributes:
        value: The entry value as stored in the tree
        leaf: Leaf hash of the value
        proof: Sibling hashes from leaf to root
        root: Root the proof resolves to
        tree_index: Position of the leaf in the node array
    """
    value: Tuple[Any, ...]
    leaf: str
    proof: List[str]
    root: str
    tree_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": list(self.value),
            "leaf": self.leaf,
            "proof": list(self.proof),
            "root": self.root,
            "treeIndex": self.tree_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InclusionProof":
        return cls(
            value=tuple(data["value"]),
            leaf=data["leaf"],
            proof=list(data["proof"]),
            root=data["root"],
            tree_index=data["treeIndex"],
        )

    def verify(self) -> bool:
        return verify_proof(self.root, self.leaf, self.proof)


# ===========================================================================
# Lookup
# ===========================================================================


def _target_fields(target: Target) -> Tuple[str, str]:
    if isinstance(target, RegistryEntry):
        return target.value
    if isinstance(target, (tuple, list)) and len(target) == 2:
        primary, chain_id = target
        if isinstance(primary, str) and isinstance(chain_id, str):
            return primary, chain_id
    raise InvalidEntryError(f"Proof target must be an entry or (primary, chainId): {target!r}")


def find_value_index(tree: StandardMerkleTree, target: Target) -> int:
    """
    Locate a target in the tree by value.

    Raises:
        NotFoundError: If no stored value matches both fields
    """
    primary, chain_id = _target_fields(target)

    for i, value in tree.entries():
        if same_value(value, (primary, chain_id)):
            return i

    raise NotFoundError(f"Entry not found: {primary} on chain {chain_id}")


def get_proof(tree: StandardMerkleTree, target_entry: Target) -> List[str]:
    """
    Return the sibling path for an entry.

    Args:
        tree: A built or loaded tree
        target_entry: A registry entry or a (primary, chainId) tuple

    Returns:
        Sibling hashes from leaf to root; empty for a single-leaf tree

    Raises:
        NotFoundError: If the entry is not in the tree
    """
    index = find_value_index(tree, target_entry)
    proof = tree.proof_at(index)
    logger.debug("Proof for value %d: %d siblings", index, len(proof))
    return proof


def get_wallet_proof(tree: StandardMerkleTree, address: str, chain_id: str) -> List[str]:
    return get_proof(tree, (address, chain_id))


def get_transaction_proof(tree: StandardMerkleTree, tx_hash: str, chain_id: str) -> List[str]:
    return get_proof(tree, (tx_hash, chain_id))


def get_contract_proof(tree: StandardMerkleTree, address: str, chain_id: str) -> List[str]:
    return get_proof(tree, (address, chain_id))


def get_inclusion_proof(tree: StandardMerkleTree, target_entry: Target) -> InclusionProof:
    """Same lookup as get_proof, returning the full self-verifiable proof."""
    index = find_value_index(tree, target_entry)
    return InclusionProof(
        value=tree.values[index].value,
        leaf=encode_hex(tree.leaf_at(index)),
        proof=tree.proof_at(index),
        root=tree.root,
        tree_index=tree.values[index].tree_index,
    )


# ===========================================================================
# Verification
# ===========================================================================


def process_proof(leaf: str, proof: Sequence[str]) -> str:
    """Root reached by folding `leaf` with each proof element in order."""
    return encode_hex(fold_proof(decode_hex(leaf), [decode_hex(p) for p in proof]))


def verify_proof(root: str, leaf: str, proof: Sequence[str]) -> bool:
    """
    Check a proof the way the registry contract does.

    Returns:
        True if the proof resolves to `root`
    """
    try:
        return process_proof(leaf, proof) == root.lower()
    except (ValueError, TypeError):
        return False

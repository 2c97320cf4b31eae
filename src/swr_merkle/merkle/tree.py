"""
Standard Merkle tree for registry batches.

Trees are built once from a fixed batch and never modified. The layout is
the one used by OpenZeppelin's StandardMerkleTree, which the registry
contracts and the web client both rely on:

- leaves are sorted ascending before construction
- nodes live in a flat array; index 0 is the root, the children of node i
  are 2i+1 and 2i+2
- leaf k (in sorted order) is stored at index len(tree) - 1 - k
- internal nodes use sorted-pair hashing

The array layout fixes how an odd node is carried: it is never duplicated,
it pairs with a node from a higher level instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from eth_utils import encode_hex

from swr_merkle.core.settings import get_settings
from swr_merkle.merkle.caip import chain_id_to_bytes32
from swr_merkle.merkle.leaf import hash_pair, leaf_hash, validate_leaf_encoding
from swr_merkle.merkle.models import (
    ContractEntry,
    MerkleTreeResult,
    RegisterBatchArgs,
    RegistryEntry,
    TransactionEntry,
    WalletEntry,
    entry_kind_of,
)
from swr_merkle.merkle.sort import sort_values
from swr_merkle.protocol.enums import EntryKind, ErrorCode
from swr_merkle.protocol.errors import (
    BatchTooLargeError,
    DuplicateLeafError,
    EmptyBatchError,
    FormatError,
    InvalidEntryError,
    MerkleError,
)

logger = logging.getLogger(__name__)


# ===========================================================================
# Array layout
# ===========================================================================


def _left_child(i: int) -> int:
    return 2 * i + 1


def _right_child(i: int) -> int:
    return 2 * i + 2


def _parent(i: int) -> int:
    return (i - 1) // 2


def _sibling(i: int) -> int:
    return i + 1 if i % 2 else i - 1


def _is_tree_node(tree: Sequence[bytes], i: int) -> bool:
    return 0 <= i < len(tree)


def _is_leaf_node(tree: Sequence[bytes], i: int) -> bool:
    return _is_tree_node(tree, i) and not _is_tree_node(tree, _left_child(i))


def make_merkle_tree(leaves: Sequence[bytes]) -> List[bytes]:
    """
    Lay out a complete tree for leaves that are already sorted.

    Raises:
        EmptyBatchError: If there are no leaves
    """
    if len(leaves) == 0:
        raise EmptyBatchError()

    tree: List[bytes] = [b""] * (2 * len(leaves) - 1)

    for i, leaf in enumerate(leaves):
        tree[len(tree) - 1 - i] = leaf

    for i in range(len(tree) - 1 - len(leaves), -1, -1):
        tree[i] = hash_pair(tree[_left_child(i)], tree[_right_child(i)])

    return tree


def is_valid_merkle_tree(tree: Sequence[bytes]) -> bool:
    """Check node sizes and that every internal node hashes its children."""
    for i, node in enumerate(tree):
        if not isinstance(node, bytes) or len(node) != 32:
            return False
        left = _left_child(i)
        right = _right_child(i)
        if right >= len(tree):
            # A node with exactly one child cannot occur in this layout
            if left < len(tree):
                return False
        elif node != hash_pair(tree[left], tree[right]):
            return False
    return len(tree) > 0


def _as_stored(item: Any) -> Any:
    """Raw byte values are kept as 0x hex so trees stay serializable."""
    if isinstance(item, (bytes, bytearray)):
        return encode_hex(bytes(item))
    return item


def fold_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """Rebuild a root from a leaf and its sibling path."""
    current = leaf
    for sibling in proof:
        current = hash_pair(current, sibling)
    return current


# ===========================================================================
# Standard Merkle Tree
# ===========================================================================


@dataclass(frozen=True)
class IndexedValue:
    """A caller value and the array index of its leaf."""
    value: Tuple[Any, ...]
    tree_index: int


@dataclass(frozen=True)
class StandardMerkleTree:
    """
    Immutable Merkle tree over two-value entries.

    Attributes:
        tree: Node hashes in array layout (index 0 is the root)
        values: Caller values in input order with their leaf positions
        leaf_encoding: ABI types of the two values
    """
    tree: Tuple[bytes, ...]
    values: Tuple[IndexedValue, ...]
    leaf_encoding: Tuple[str, ...]

    @classmethod
    def of(
        cls,
        values: Sequence[Sequence[Any]],
        leaf_encoding: Sequence[str],
        *,
        max_batch_size: Optional[int] = None,
        allow_duplicates: Optional[bool] = None,
    ) -> "StandardMerkleTree":
        """
        Build a tree from raw value tuples.

        Args:
            values: Two-value tuples, in any order
            leaf_encoding: ABI types, e.g. ("address", "bytes32")
            max_batch_size: Entry ceiling (defaults to settings)
            allow_duplicates: Accept equal leaves (defaults to settings)

        Raises:
            EmptyBatchError: If values is empty
            BatchTooLargeError: If values exceeds the ceiling
            DuplicateLeafError: If two values hash to the same leaf
            InvalidEntryError: If a value cannot be encoded
        """
        values = [tuple(_as_stored(x) for x in v) for v in values]
        if len(values) == 0:
            raise EmptyBatchError()

        settings = get_settings().merkle
        limit = settings.max_batch_size if max_batch_size is None else max_batch_size
        if len(values) > limit:
            raise BatchTooLargeError(len(values), limit)

        if allow_duplicates is None:
            allow_duplicates = not settings.reject_duplicate_leaves

        encoding = validate_leaf_encoding(leaf_encoding)
        hashed = sort_values(values, encoding)

        for previous, current in zip(hashed, hashed[1:]):
            if previous[2] == current[2]:
                if not allow_duplicates:
                    raise DuplicateLeafError(encode_hex(current[2]))
                logger.warning(
                    "Duplicate leaf %s at values %d and %d",
                    encode_hex(current[2]), previous[0], current[0],
                )

        nodes = make_merkle_tree([leaf for _, _, leaf in hashed])

        tree_indices = [0] * len(values)
        for leaf_index, (value_index, _, _) in enumerate(hashed):
            tree_indices[value_index] = len(nodes) - 1 - leaf_index

        result = cls(
            tree=tuple(nodes),
            values=tuple(
                IndexedValue(value=value, tree_index=tree_indices[i])
                for i, value in enumerate(values)
            ),
            leaf_encoding=encoding,
        )
        logger.debug("Built tree: %d leaves, root=%s", result.leaf_count, result.root)
        return result

    @property
    def root(self) -> str:
        return encode_hex(self.tree[0])

    @property
    def leaf_count(self) -> int:
        return len(self.values)

    def entries(self) -> Iterator[Tuple[int, Tuple[Any, ...]]]:
        """Iterate (value_index, value) in input order."""
        for i, indexed in enumerate(self.values):
            yield i, indexed.value

    def leaf_at(self, value_index: int) -> bytes:
        self._check_value_index(value_index)
        return self.tree[self.values[value_index].tree_index]

    def sorted_indices(self) -> List[int]:
        """Value indices in ascending leaf order."""
        return sorted(
            range(len(self.values)),
            key=lambda i: self.values[i].tree_index,
            reverse=True,
        )

    def proof_at(self, value_index: int) -> List[str]:
        """
        Sibling path for the value at `value_index`, leaf to root.

        Raises:
            MerkleError: If the stored tree cannot prove its own value
        """
        self._check_value_index(value_index)
        index = self.values[value_index].tree_index
        if not _is_leaf_node(self.tree, index):
            raise MerkleError(f"Index is not a leaf: {index}", ErrorCode.INTERNAL_ERROR)

        leaf = self.tree[index]
        proof: List[bytes] = []
        while index > 0:
            proof.append(self.tree[_sibling(index)])
            index = _parent(index)

        if fold_proof(leaf, proof) != self.tree[0]:
            raise MerkleError("Unable to prove value", ErrorCode.INTERNAL_ERROR)

        return [encode_hex(node) for node in proof]

    def validate(self) -> None:
        """
        Check that the nodes form a valid tree and every value sits on its leaf.

        Raises:
            FormatError: On any inconsistency
        """
        if not is_valid_merkle_tree(self.tree):
            raise FormatError("Merkle tree is invalid")

        for i, indexed in enumerate(self.values):
            if not _is_leaf_node(self.tree, indexed.tree_index):
                raise FormatError(f"Value {i} does not point at a leaf: {indexed.tree_index}")
            try:
                expected = leaf_hash(indexed.value, self.leaf_encoding)
            except InvalidEntryError as e:
                raise FormatError(f"Value {i} cannot be encoded: {e}") from e
            if expected != self.tree[indexed.tree_index]:
                raise FormatError(f"Merkle tree does not contain the expected value {i}")

    def _check_value_index(self, value_index: int) -> None:
        if value_index < 0 or value_index >= len(self.values):
            raise IndexError(f"Invalid value index: {value_index}")


# ===========================================================================
# Batch building
# ===========================================================================


def build(
    entries: Sequence[RegistryEntry],
    *,
    kind: Optional[EntryKind] = None,
    max_batch_size: Optional[int] = None,
    allow_duplicates: Optional[bool] = None,
) -> MerkleTreeResult:
    """
    Build the tree for one batch of typed entries.

    Entries are sorted internally, so the root does not depend on the order
    the caller supplies them in.

    Raises:
        EmptyBatchError: If entries is empty
        BatchTooLargeError: If entries exceeds the ceiling
        DuplicateLeafError: If two entries produce the same leaf
        InvalidEntryError: If entries mix kinds or hold malformed values
    """
    entries = list(entries)
    if len(entries) == 0:
        raise EmptyBatchError()

    actual = entry_kind_of(entries)
    if kind is not None and actual != kind:
        raise InvalidEntryError(f"Expected {kind.value} entries, got {actual.value}")

    tree = StandardMerkleTree.of(
        [e.value for e in entries],
        entries[0].leaf_encoding,
        max_batch_size=max_batch_size,
        allow_duplicates=allow_duplicates,
    )

    return MerkleTreeResult(
        root=tree.root,
        tree=tree,
        entries=entries,
        sorted_entries=[entries[i] for i in tree.sorted_indices()],
        leaf_count=tree.leaf_count,
    )


def build_wallet_tree(entries: Sequence[WalletEntry], **kwargs: Any) -> MerkleTreeResult:
    return build(entries, kind=EntryKind.WALLET, **kwargs)


def build_transaction_tree(entries: Sequence[TransactionEntry], **kwargs: Any) -> MerkleTreeResult:
    return build(entries, kind=EntryKind.TRANSACTION, **kwargs)


def build_contract_tree(entries: Sequence[ContractEntry], **kwargs: Any) -> MerkleTreeResult:
    return build(entries, kind=EntryKind.CONTRACT, **kwargs)


def registration_args(
    result: MerkleTreeResult,
    reporting_chain_id: Union[int, str],
) -> RegisterBatchArgs:
    """
    Assemble `registerBatch` arguments from a built batch.

    `reporting_chain_id` is an EIP-155 number or an already hashed bytes32.
    """
    if isinstance(reporting_chain_id, int):
        reporting_chain_id = chain_id_to_bytes32(reporting_chain_id)
    return RegisterBatchArgs(
        root=result.root,
        chain_id=reporting_chain_id,
        primary_values=tuple(e.primary for e in result.sorted_entries),
        chain_ids=tuple(e.chain_id for e in result.sorted_entries),
    )

"""
Tests for tree construction.
"""

import dataclasses

import pytest
from eth_utils import encode_hex

from swr_merkle.merkle.leaf import compute_wallet_leaf
from swr_merkle.merkle.models import ContractEntry, MerkleTreeResult, TransactionEntry, WalletEntry
from swr_merkle.merkle.proof import get_proof
from swr_merkle.merkle.serialize import deserialize_tree, serialize_tree
from swr_merkle.merkle.tree import (
    StandardMerkleTree,
    build,
    build_contract_tree,
    build_transaction_tree,
    build_wallet_tree,
    is_valid_merkle_tree,
    make_merkle_tree,
    registration_args,
)
from swr_merkle.protocol.enums import ErrorCode
from swr_merkle.protocol.errors import (
    BatchTooLargeError,
    DuplicateLeafError,
    EmptyBatchError,
    InvalidEntryError,
)

from conftest import (
    ADDRESS_1,
    ADDRESS_2,
    ADDRESS_3,
    CHAIN_BASE,
    CHAIN_MAINNET,
    TX_HASH_1,
    TX_HASH_2,
    make_addresses,
    reference_leaf,
    reference_pair,
)


class TestStandardVector:
    def test_openzeppelin_readme_root(self):
        """Root published with OpenZeppelin's merkle-tree library."""
        values = [
            ["0x1111111111111111111111111111111111111111", "5000000000000000000"],
            ["0x2222222222222222222222222222222222222222", "2500000000000000000"],
        ]
        tree = StandardMerkleTree.of(values, ["address", "uint256"])
        assert tree.root == "0xd4dee0beab2d53f2cc83e567171bd2820e49898130a22622b10ead383e90bd77"


class TestBuild:
    """Tests for build()."""

    def test_single_entry(self):
        """A single-entry root is the leaf itself."""
        entry = WalletEntry(ADDRESS_1, CHAIN_BASE)
        result = build([entry])

        assert result.root == compute_wallet_leaf(ADDRESS_1, CHAIN_BASE)
        assert result.leaf_count == 1
        assert result.entries == [entry]
        assert result.sorted_entries == [entry]

    def test_two_entries_root(self):
        entries = [WalletEntry(ADDRESS_1, CHAIN_BASE), WalletEntry(ADDRESS_2, CHAIN_MAINNET)]
        result = build(entries)

        expected = reference_pair(
            reference_leaf(ADDRESS_1, CHAIN_BASE),
            reference_leaf(ADDRESS_2, CHAIN_MAINNET),
        )
        assert result.root == encode_hex(expected)
        assert result.leaf_count == 2

    def test_three_entries_carry_odd_leaf(self):
        """The largest leaf pairs with the hash of the two smaller ones."""
        addresses = [ADDRESS_1, ADDRESS_2, ADDRESS_3]
        l0, l1, l2 = sorted(reference_leaf(a, CHAIN_BASE) for a in addresses)

        result = build([WalletEntry(a, CHAIN_BASE) for a in addresses])

        assert result.root == encode_hex(reference_pair(reference_pair(l0, l1), l2))

    def test_five_entries_layout(self):
        addresses = make_addresses(5)
        l0, l1, l2, l3, l4 = sorted(reference_leaf(a, CHAIN_BASE) for a in addresses)

        result = build([WalletEntry(a, CHAIN_BASE) for a in addresses])

        expected = reference_pair(
            reference_pair(reference_pair(l0, l1), l4),
            reference_pair(l2, l3),
        )
        assert result.root == encode_hex(expected)

    def test_deterministic(self):
        entries = [WalletEntry(ADDRESS_1, CHAIN_BASE), WalletEntry(ADDRESS_2, CHAIN_MAINNET)]
        assert build(entries).root == build(entries).root

    def test_root_independent_of_input_order(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(7)]
        assert build(entries).root == build(list(reversed(entries))).root

    def test_different_entries_different_root(self):
        assert build([WalletEntry(ADDRESS_1, CHAIN_BASE)]).root != build([WalletEntry(ADDRESS_2, CHAIN_BASE)]).root

    def test_sorted_entries_in_leaf_order(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(6)]
        result = build(entries)

        leaves = [int(compute_wallet_leaf(e.address, e.chain_id), 16) for e in result.sorted_entries]
        assert leaves == sorted(leaves)
        assert result.entries == entries

    def test_empty_batch(self):
        with pytest.raises(EmptyBatchError) as exc:
            build([])
        assert exc.value.code == ErrorCode.EMPTY_BATCH
        assert "zero entries" in str(exc.value)

    def test_batch_too_large(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(4)]
        with pytest.raises(BatchTooLargeError) as exc:
            build(entries, max_batch_size=3)
        assert exc.value.count == 4
        assert exc.value.limit == 3

    def test_batch_ceiling_from_settings(self, monkeypatch):
        monkeypatch.setenv("SWR_MERKLE_MAX_BATCH_SIZE", "2")
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(3)]
        with pytest.raises(BatchTooLargeError):
            build(entries)

    def test_batch_at_ceiling_allowed(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(3)]
        assert build(entries, max_batch_size=3).leaf_count == 3

    def test_duplicate_leaf_rejected(self):
        entries = [WalletEntry(ADDRESS_1, CHAIN_BASE), WalletEntry(ADDRESS_1, CHAIN_BASE)]
        with pytest.raises(DuplicateLeafError):
            build(entries)

    def test_duplicate_differing_only_in_case_rejected(self):
        entries = [
            WalletEntry(ADDRESS_3, CHAIN_BASE),
            WalletEntry("0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266", CHAIN_BASE),
        ]
        with pytest.raises(DuplicateLeafError):
            build(entries)

    def test_duplicates_allowed_when_configured(self):
        entries = [WalletEntry(ADDRESS_1, CHAIN_BASE), WalletEntry(ADDRESS_1, CHAIN_BASE)]
        result = build(entries, allow_duplicates=True)
        assert result.leaf_count == 2

    def test_same_address_other_chain_is_not_duplicate(self):
        entries = [WalletEntry(ADDRESS_1, CHAIN_BASE), WalletEntry(ADDRESS_1, CHAIN_MAINNET)]
        assert build(entries).leaf_count == 2

    def test_mixed_kinds_rejected(self):
        with pytest.raises(InvalidEntryError):
            build([WalletEntry(ADDRESS_1, CHAIN_BASE), TransactionEntry(TX_HASH_1, CHAIN_BASE)])

    def test_invalid_value_rejected(self):
        with pytest.raises(InvalidEntryError):
            build([WalletEntry("0xnotanaddress", CHAIN_BASE)])


class TestKindBuilders:
    def test_transaction_tree(self):
        result = build_transaction_tree([
            TransactionEntry(TX_HASH_1, CHAIN_BASE),
            TransactionEntry(TX_HASH_2, CHAIN_MAINNET),
        ])
        assert result.tree.leaf_encoding == ("bytes32", "bytes32")
        assert result.leaf_count == 2

    def test_contract_tree(self):
        result = build_contract_tree([ContractEntry(ADDRESS_1, CHAIN_BASE)])
        assert result.tree.leaf_encoding == ("address", "bytes32")

    def test_wallet_builder_rejects_contracts(self):
        with pytest.raises(InvalidEntryError):
            build_wallet_tree([ContractEntry(ADDRESS_1, CHAIN_BASE)])


class TestTreeLayout:
    def test_node_count(self):
        tree = build([WalletEntry(a, CHAIN_BASE) for a in make_addresses(5)]).tree
        assert len(tree.tree) == 9

    def test_tree_indices_point_at_leaves(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(4)]
        tree = build(entries).tree

        for i, entry in enumerate(entries):
            assert encode_hex(tree.leaf_at(i)) == compute_wallet_leaf(entry.address, entry.chain_id)
            assert tree.values[i].tree_index >= len(entries) - 1

    def test_values_keep_input_order(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(4)]
        tree = build(entries).tree
        assert [value for _, value in tree.entries()] == [e.value for e in entries]

    def test_make_merkle_tree_empty(self):
        with pytest.raises(EmptyBatchError):
            make_merkle_tree([])

    def test_built_tree_is_valid(self):
        tree = build([WalletEntry(a, CHAIN_BASE) for a in make_addresses(6)]).tree
        assert is_valid_merkle_tree(tree.tree)
        tree.validate()

    def test_immutable(self):
        tree = build([WalletEntry(ADDRESS_1, CHAIN_BASE)]).tree
        with pytest.raises(dataclasses.FrozenInstanceError):
            tree.tree = ()


class TestRegistrationArgs:
    def test_arrays_in_sorted_order(self):
        entries = [WalletEntry(a, CHAIN_BASE) for a in make_addresses(3)]
        result = build(entries)
        args = registration_args(result, 8453)

        assert args.root == result.root
        assert args.chain_id == CHAIN_BASE
        assert list(args.primary_values) == [e.address for e in result.sorted_entries]
        assert list(args.chain_ids) == [CHAIN_BASE] * 3

    def test_call_args_shape(self):
        result = build([WalletEntry(ADDRESS_1, CHAIN_MAINNET)])
        root, chain_id, primaries, chain_ids = registration_args(result, CHAIN_MAINNET).as_call_args()
        assert (root, chain_id, primaries, chain_ids) == (result.root, CHAIN_MAINNET, [ADDRESS_1], [CHAIN_MAINNET])


class TestRawByteValues:
    """Byte values are stored as 0x hex."""

    @pytest.fixture
    def tree(self):
        return StandardMerkleTree.of(
            [(b"\x11" * 32, b"\x22" * 32), (b"\x33" * 32, b"\x22" * 32)],
            ["bytes32", "bytes32"],
        )

    def test_stored_as_hex(self, tree):
        assert tree.values[0].value == ("0x" + "11" * 32, "0x" + "22" * 32)

    def test_same_root_as_hex_input(self, tree):
        hex_tree = StandardMerkleTree.of(
            [("0x" + "11" * 32, "0x" + "22" * 32), ("0x" + "33" * 32, "0x" + "22" * 32)],
            ["bytes32", "bytes32"],
        )
        assert tree.root == hex_tree.root

    def test_serializable_and_provable(self, tree):
        restored = deserialize_tree(serialize_tree(tree))
        proof = get_proof(restored, ("0x" + "11" * 32, "0x" + "22" * 32))

        assert restored.root == tree.root
        assert len(proof) == 1


class TestMerkleTreeResult:
    def test_sorted_entries_and_leaf_count_required(self):
        tree = build([WalletEntry(ADDRESS_1, CHAIN_BASE)]).tree
        with pytest.raises(TypeError):
            MerkleTreeResult(root=tree.root, tree=tree, entries=[])

"""
Tests for CAIP-2 chain identifiers.
"""

import pytest

from swr_merkle.merkle.caip import (
    ParsedCAIP2,
    caip2_to_bytes32,
    caip2_to_numeric_chain_id,
    chain_id_to_bytes32,
    compute_caip2_hash,
    is_valid_caip2,
    parse_caip2,
    to_caip2,
    truncate_chain_id_hash,
)
from swr_merkle.protocol.errors import InvalidEntryError

from conftest import CHAIN_BASE, CHAIN_MAINNET


class TestChainIdHash:
    @pytest.mark.parametrize("chain_id,expected", [
        (8453, CHAIN_BASE),
        (1, CHAIN_MAINNET),
        (10, "0x83153bb1dd0a48bb74b01b90ac672ee6185cc64877b9c948eec5e4e5f11585f0"),
        (42161, "0x1fca116f439fa7af0604ced8c7a6239cdcabb5070838cbc80cdba0089733e472"),
        (31337, "0x318e51c37247d03bad135571413b06a083591bcc680967d80bf587ac928cf369"),
    ])
    def test_known_chains(self, chain_id, expected):
        assert chain_id_to_bytes32(chain_id) == expected

    def test_hash_of_caip2_string(self):
        assert compute_caip2_hash("eip155:8453") == CHAIN_BASE

    def test_caip2_to_bytes32(self):
        assert caip2_to_bytes32("eip155:1") == CHAIN_MAINNET

    @pytest.mark.parametrize("value", ["solana:mainnet", "eip155:abc", "8453", ""])
    def test_caip2_to_bytes32_rejects(self, value):
        with pytest.raises(InvalidEntryError):
            caip2_to_bytes32(value)

    @pytest.mark.parametrize("value", [-1, True, "8453"])
    def test_to_caip2_rejects(self, value):
        with pytest.raises(InvalidEntryError):
            to_caip2(value)


class TestParse:
    def test_parse(self):
        assert parse_caip2("eip155:8453") == ParsedCAIP2(namespace="eip155", reference="8453")

    def test_non_evm_namespace_parses(self):
        assert parse_caip2("solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp") is not None

    @pytest.mark.parametrize("value", ["eip155", "EIP155:1", "ab:1", "eip155:", ":1", None])
    def test_invalid(self, value):
        assert parse_caip2(value) is None
        assert not is_valid_caip2(value)

    def test_numeric_chain_id(self):
        assert caip2_to_numeric_chain_id("eip155:42161") == 42161
        assert caip2_to_numeric_chain_id("solana:mainnet") is None
        assert caip2_to_numeric_chain_id("eip155:main") is None


class TestTruncate:
    def test_top_64_bits(self):
        assert truncate_chain_id_hash(CHAIN_BASE) == 0x43b48883ef7be0f9

    def test_fits_uint64(self):
        assert truncate_chain_id_hash("0x" + "ff" * 32) == 2**64 - 1

import pytest
from eth_utils import keccak

from swr_merkle.core.settings import get_settings


ADDRESS_1 = "0x742d35cc6634c0532925a3b844bc454e83c4b3a1"
ADDRESS_2 = "0x1234567890123456789012345678901234567890"
ADDRESS_3 = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
TX_HASH_1 = "0xabcdef1234567890abcdef1234567890abcdef1234567890abcdef1234567890"
TX_HASH_2 = "0x1234567890abcdef1234567890abcdef1234567890abcdef1234567890abcdef"

# keccak256("eip155:8453") and keccak256("eip155:1"), as stored on-chain
CHAIN_BASE = "0x43b48883ef7be0f98fe7f98fafb2187e42caab4063697b32816f95e09d69b3ec"
CHAIN_MAINNET = "0x38b2caf37cccf00b6fbc0feb1e534daf567950e4d48066d0e3669028fe5f83e6"


def reference_leaf(primary: str, chain_id: str) -> bytes:
    """Leaf computed by hand: keccak(keccak(word(primary) || chain_id))."""
    raw = bytes.fromhex(primary[2:])
    word = b"\x00" * (32 - len(raw)) + raw
    return keccak(keccak(word + bytes.fromhex(chain_id[2:])))


def reference_pair(a: bytes, b: bytes) -> bytes:
    return keccak(min(a, b) + max(a, b))


def make_addresses(count: int):
    return ["0x" + format(i + 1, "040x") for i in range(count)]


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; reset around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""
Tree dump/load in the `standard-v1` format.

The document is the one written by OpenZeppelin's StandardMerkleTree.dump()
and read by StandardMerkleTree.load(), so trees stored by the CLI, the web
client and this package are interchangeable:

    {
      "format": "standard-v1",
      "leafEncoding": ["address", "bytes32"],
      "tree": ["0x<root>", "0x<node>", ...],
      "values": [{"value": ["0x...", "0x..."], "treeIndex": 2}, ...]
    }

`serialize_tree` renders it with two-space indentation, matching
JSON.stringify(dump, null, 2) byte for byte.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from eth_utils import decode_hex, encode_hex, is_0x_prefixed, is_hexstr

from swr_merkle.merkle.leaf import validate_leaf_encoding
from swr_merkle.merkle.tree import IndexedValue, StandardMerkleTree
from swr_merkle.protocol.errors import FormatError, InvalidEntryError

logger = logging.getLogger(__name__)

FORMAT_TAG = "standard-v1"


def dump(tree: StandardMerkleTree) -> Dict[str, Any]:
    return {
        "format": FORMAT_TAG,
        "leafEncoding": list(tree.leaf_encoding),
        "tree": [encode_hex(node) for node in tree.tree],
        "values": [
            {"value": list(indexed.value), "treeIndex": indexed.tree_index}
            for indexed in tree.values
        ],
    }


def _decode_node(node: Any, index: int) -> bytes:
    if not isinstance(node, str) or not is_0x_prefixed(node) or not is_hexstr(node):
        raise FormatError(f"Tree node {index} is not a hex string: {node!r}")
    try:
        raw = decode_hex(node)
    except ValueError as e:
        raise FormatError(f"Tree node {index} is not valid hex: {node!r}") from e
    if len(raw) != 32:
        raise FormatError(f"Tree node {index} is {len(raw)} bytes, expected 32")
    return raw


def _decode_values(raw_values: Any) -> List[IndexedValue]:
    if not isinstance(raw_values, list):
        raise FormatError("'values' must be a list")

    values: List[IndexedValue] = []
    for i, item in enumerate(raw_values):
        if not isinstance(item, dict):
            raise FormatError(f"Value {i} must be an object")
        value = item.get("value")
        tree_index = item.get("treeIndex")
        if not isinstance(value, list):
            raise FormatError(f"Value {i} has no 'value' list")
        if isinstance(tree_index, bool) or not isinstance(tree_index, int):
            raise FormatError(f"Value {i} has no integer 'treeIndex'")
        values.append(IndexedValue(value=tuple(value), tree_index=tree_index))
    return values


def load(data: Dict[str, Any]) -> StandardMerkleTree:
    """
    Rebuild a tree from a dumped document and validate it.

    Raises:
        FormatError: If the document is malformed, has another format tag,
            or describes an inconsistent tree
    """
    if not isinstance(data, dict):
        raise FormatError("Serialized tree must be a JSON object")

    fmt = data.get("format")
    if fmt != FORMAT_TAG:
        raise FormatError(f"Unknown format '{fmt}'")

    for key in ("leafEncoding", "tree", "values"):
        if key not in data:
            raise FormatError(f"Serialized tree is missing '{key}'")

    leaf_encoding = data["leafEncoding"]
    if not isinstance(leaf_encoding, list) or not all(isinstance(t, str) for t in leaf_encoding):
        raise FormatError("'leafEncoding' must be a list of type names")
    try:
        encoding = validate_leaf_encoding(leaf_encoding)
    except InvalidEntryError as e:
        raise FormatError(str(e)) from e

    nodes = data["tree"]
    if not isinstance(nodes, list) or len(nodes) == 0:
        raise FormatError("'tree' must be a non-empty list")

    values = _decode_values(data["values"])
    if len(values) == 0:
        raise FormatError("'values' must not be empty")

    tree = StandardMerkleTree(
        tree=tuple(_decode_node(node, i) for i, node in enumerate(nodes)),
        values=tuple(values),
        leaf_encoding=encoding,
    )
    tree.validate()

    logger.debug("Loaded tree: %d leaves, root=%s", tree.leaf_count, tree.root)
    return tree


def serialize_tree(tree: StandardMerkleTree) -> str:
    """Serialize a tree for storage or transport."""
    return json.dumps(dump(tree), indent=2)


def deserialize_tree(text: str) -> StandardMerkleTree:
    """
    Parse and validate a serialized tree.

    Raises:
        FormatError: On malformed JSON or an invalid document
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise FormatError(f"Serialized tree is not valid JSON: {e}") from e
    return load(data)

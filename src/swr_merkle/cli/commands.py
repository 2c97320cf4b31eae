"""
CLI commands for swr-merkle.

Commands:
    swr-merkle build <file> --kind wallet       Build a batch tree, print root and sorted arrays
    swr-merkle proof <tree> --value V --chain-id C   Proof for one entry of a stored tree
    swr-merkle inspect <tree>                   Validate a stored tree and list its entries
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from swr_merkle.cli.files import parse_entries_file, resolve_chain_id
from swr_merkle.core.settings import get_settings
from swr_merkle.merkle.proof import get_inclusion_proof
from swr_merkle.merkle.serialize import deserialize_tree, serialize_tree
from swr_merkle.merkle.tree import build
from swr_merkle.protocol.enums import EntryKind

logger = logging.getLogger(__name__)


def cmd_build(args) -> None:
    """Build the tree for an entry file."""
    settings = get_settings()
    kind = EntryKind(args.kind)
    default_chain_id = args.chain_id if args.chain_id is not None else settings.merkle.default_chain_id

    entries = parse_entries_file(args.file, kind, default_chain_id)
    logger.info("Loaded %d %s entries from %s", len(entries), kind.value, args.file)

    result = build(entries, kind=kind)
    primary_values = [e.primary for e in result.sorted_entries]
    chain_ids = [e.chain_id for e in result.sorted_entries]

    tree_file = None
    if args.tree_out:
        tree_file = Path(args.tree_out)
        tree_file.parent.mkdir(parents=True, exist_ok=True)
        tree_file.write_text(serialize_tree(result.tree), encoding="utf-8")
        logger.info("Wrote tree to %s", tree_file)

    summary = {
        "kind": kind.value,
        "root": result.root,
        "leafCount": result.leaf_count,
        "primaryValues": primary_values,
        "chainIds": chain_ids,
        "treeFile": str(tree_file) if tree_file else None,
    }

    if args.output == "json":
        print(json.dumps(summary, indent=2))
        return

    print(f"Merkle root:        {summary['root']}")
    print(f"Entries:            {summary['leafCount']}")
    if tree_file:
        print(f"Tree file:          {tree_file}")
    print()
    print(f"{'#':<5} {entries[0].primary_field.upper():<68} CHAIN ID")
    print("-" * 140)
    for i, (primary, chain_id) in enumerate(zip(primary_values, chain_ids)):
        print(f"{i:<5} {primary:<68} {chain_id}")


def cmd_proof(args) -> None:
    """Print the proof for one entry of a stored tree."""
    settings = get_settings()
    tree = deserialize_tree(Path(args.tree_file).read_text(encoding="utf-8"))
    chain_id = resolve_chain_id(args.chain_id, settings.merkle.default_chain_id)

    proof = get_inclusion_proof(tree, (args.value, chain_id))

    if args.output == "json":
        print(json.dumps(proof.to_dict(), indent=2))
        return

    _print_fields({
        "Merkle root": proof.root,
        "Leaf": proof.leaf,
        "Tree index": proof.tree_index,
        "Proof length": len(proof.proof),
    })
    for i, sibling in enumerate(proof.proof):
        print(f"  [{i}] {sibling}")


def cmd_inspect(args) -> None:
    """Validate a stored tree and list its entries in leaf order."""
    tree = deserialize_tree(Path(args.tree_file).read_text(encoding="utf-8"))

    if args.output == "json":
        print(json.dumps({
            "root": tree.root,
            "leafCount": tree.leaf_count,
            "leafEncoding": list(tree.leaf_encoding),
            "values": [list(tree.values[i].value) for i in tree.sorted_indices()],
        }, indent=2))
        return

    _print_fields({
        "Merkle root": tree.root,
        "Entries": tree.leaf_count,
        "Leaf encoding": ", ".join(tree.leaf_encoding),
    })
    print()
    for i in tree.sorted_indices():
        value = tree.values[i].value
        print(f"{tree.values[i].tree_index:<6} {value[0]}  {value[1]}")


def _print_fields(fields: Dict[str, Any]) -> None:
    for label, value in fields.items():
        print(f"{label + ':':<20}{value}")

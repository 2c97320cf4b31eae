from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from swr_merkle.cli.commands import cmd_build, cmd_inspect, cmd_proof
from swr_merkle.core.settings import get_settings
from swr_merkle.protocol.enums import EntryKind
from swr_merkle.protocol.errors import MerkleError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swr-merkle",
        description="Merkle batch tooling for the fraud registries",
    )
    sub = parser.add_subparsers(dest="command")

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument(
        "--output", choices=["table", "json"], default="table", help="Output format"
    )

    # build
    p_build = sub.add_parser("build", parents=[output], help="Build a batch tree from an entry file")
    p_build.add_argument("file", help="JSON or CSV entry file")
    p_build.add_argument(
        "--kind",
        choices=[k.value for k in EntryKind],
        default=EntryKind.WALLET.value,
        help="Registry the entries belong to",
    )
    p_build.add_argument(
        "--chain-id", type=int, default=None, help="EIP-155 chain id for rows without chainId"
    )
    p_build.add_argument("--tree-out", default=None, help="Write the serialized tree here")
    p_build.set_defaults(func=cmd_build)

    # proof
    p_proof = sub.add_parser("proof", parents=[output], help="Get the proof for one entry")
    p_proof.add_argument("tree_file", help="Serialized tree (standard-v1)")
    p_proof.add_argument("--value", required=True, help="Address or transaction hash")
    p_proof.add_argument(
        "--chain-id", default=None, help="EIP-155 id, CAIP-2 string or bytes32 hash"
    )
    p_proof.set_defaults(func=cmd_proof)

    # inspect
    p_inspect = sub.add_parser("inspect", parents=[output], help="Validate and list a stored tree")
    p_inspect.add_argument("tree_file", help="Serialized tree (standard-v1)")
    p_inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=get_settings().runtime.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        args.func(args)
    except MerkleError as e:
        print(f"Error [{e.code.value}]: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

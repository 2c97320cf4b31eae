"""
Entry file parsing for the CLI.

Accepted formats:
    .json  a list of objects, e.g. [{"address": "0x...", "chainId": 8453}]
    .csv   a header row naming the same columns

`chainId` may be a numeric EIP-155 id (decimal or short 0x hex), a CAIP-2
string ("eip155:8453") or an already
hashed bytes32. Rows without one use the default chain id.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Union

from eth_utils import is_0x_prefixed, is_hexstr

from swr_merkle.merkle.caip import caip2_to_bytes32, chain_id_to_bytes32
from swr_merkle.merkle.leaf import abi_encode
from swr_merkle.merkle.models import RegistryEntry, entry_type_for
from swr_merkle.protocol.enums import EntryKind
from swr_merkle.protocol.errors import InvalidEntryError


def resolve_chain_id(raw: Any, default_chain_id: int) -> str:
    """Turn a file/CLI chain id into its bytes32 form."""
    if raw is None or raw == "":
        return chain_id_to_bytes32(default_chain_id)
    if isinstance(raw, int) and not isinstance(raw, bool):
        return chain_id_to_bytes32(raw)
    if isinstance(raw, str):
        raw = raw.strip()
        if ":" in raw:
            return caip2_to_bytes32(raw)
        if len(raw) == 66:
            abi_encode(["bytes32"], [raw])
            return raw
        if is_0x_prefixed(raw) and is_hexstr(raw) and len(raw) > 2:
            return chain_id_to_bytes32(int(raw, 16))
        if raw.isdecimal() and raw.isascii():
            return chain_id_to_bytes32(int(raw))
    raise InvalidEntryError(f"Invalid chain ID: {raw!r}")


def _read_rows(path: Path) -> List[Dict[str, Any]]:
    ext = path.suffix.lower().lstrip(".")
    content = path.read_text(encoding="utf-8")

    if ext == "json":
        try:
            rows = json.loads(content)
        except ValueError as e:
            raise InvalidEntryError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(rows, list):
            raise InvalidEntryError(f"{path} must contain a JSON list of entries")
        return rows
    if ext == "csv":
        return [row for row in csv.DictReader(content.splitlines()) if any(row.values())]

    raise InvalidEntryError(f"Unsupported file format: {ext or path.name}")


def parse_entries_file(
    path: Union[str, Path],
    kind: EntryKind,
    default_chain_id: int,
) -> List[RegistryEntry]:
    """
    Load typed entries from a JSON or CSV file.

    Raises:
        InvalidEntryError: On an unsupported file type or a malformed row
        OSError: If the file cannot be read
    """
    path = Path(path)
    entry_type = entry_type_for(kind)
    primary_type = entry_type.leaf_encoding[0]

    entries: List[RegistryEntry] = []
    for i, row in enumerate(_read_rows(path)):
        if not isinstance(row, dict):
            raise InvalidEntryError(f"Entry at index {i} must be an object")

        primary = row.get(entry_type.primary_field)
        if isinstance(primary, str):
            primary = primary.strip()
        try:
            abi_encode([primary_type], [primary])
        except InvalidEntryError as e:
            raise InvalidEntryError(
                f"Invalid {entry_type.primary_field} at index {i}: {primary!r}"
            ) from e

        chain_id = resolve_chain_id(row.get("chainId"), default_chain_id)
        entries.append(entry_type.from_dict({entry_type.primary_field: primary, "chainId": chain_id}))

    return entries

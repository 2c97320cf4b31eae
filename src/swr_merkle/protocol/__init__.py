from .enums import EntryKind, ErrorCode
from .errors import (
    MerkleError,
    EmptyBatchError,
    BatchTooLargeError,
    NotFoundError,
    FormatError,
    InvalidEntryError,
    DuplicateLeafError,
)

__all__ = [
    "EntryKind",
    "ErrorCode",
    "MerkleError",
    "EmptyBatchError",
    "BatchTooLargeError",
    "NotFoundError",
    "FormatError",
    "InvalidEntryError",
    "DuplicateLeafError",
]

from typing import Optional
from .enums import ErrorCode


class MerkleError(Exception):
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code or ErrorCode.INTERNAL_ERROR


class EmptyBatchError(MerkleError):
    """Raised when a tree is requested for zero entries."""

    def __init__(self, message: str = "Cannot build tree with zero entries"):
        super().__init__(message, ErrorCode.EMPTY_BATCH)


class BatchTooLargeError(MerkleError):
    """Raised when a batch exceeds the configured entry ceiling."""

    def __init__(self, count: int, limit: int):
        super().__init__(
            f"Batch of {count} entries exceeds the limit of {limit}",
            ErrorCode.BATCH_TOO_LARGE,
        )
        self.count = count
        self.limit = limit


class NotFoundError(MerkleError):
    """Raised when a proof is requested for an entry the tree does not hold."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.NOT_FOUND)


class FormatError(MerkleError):
    """Raised when a serialized tree is corrupt or uses an unknown format."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.FORMAT_ERROR)


class InvalidEntryError(MerkleError):
    """Raised when an entry value cannot be ABI-encoded."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_ENTRY)


class DuplicateLeafError(MerkleError):
    """Raised when two entries hash to the same leaf."""

    def __init__(self, leaf: str):
        super().__init__(f"Duplicate leaf in batch: {leaf}", ErrorCode.DUPLICATE_LEAF)
        self.leaf = leaf

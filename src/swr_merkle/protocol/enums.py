from enum import Enum


class ErrorCode(str, Enum):
    EMPTY_BATCH = "empty_batch"
    BATCH_TOO_LARGE = "batch_too_large"
    NOT_FOUND = "not_found"
    FORMAT_ERROR = "format_error"
    INVALID_ENTRY = "invalid_entry"
    DUPLICATE_LEAF = "duplicate_leaf"
    INTERNAL_ERROR = "internal_error"


class EntryKind(str, Enum):
    WALLET = "wallet"
    TRANSACTION = "transaction"
    CONTRACT = "contract"

"""
Central configuration for swr-merkle.

This module provides a single, typed configuration object that reads from
environment variables (12-factor style) using pydantic-settings.

Usage:

    from swr_merkle.core.settings import get_settings

    settings = get_settings()
    if len(entries) > settings.merkle.max_batch_size:
        ...
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MerkleSettings(BaseSettings):
    """
    Batch-building limits and defaults.

    `max_batch_size` mirrors the gas/size ceiling enforced by the registry
    contracts; a batch above it can never be registered.
    """

    max_batch_size: int = Field(
        default=1000,
        ge=1,
        validation_alias="SWR_MERKLE_MAX_BATCH_SIZE",
        description="Maximum number of entries accepted in one batch.",
    )
    reject_duplicate_leaves: bool = Field(
        default=True,
        validation_alias="SWR_MERKLE_REJECT_DUPLICATES",
        description="Fail batches in which two entries produce the same leaf.",
    )
    default_chain_id: int = Field(
        default=8453,
        ge=0,
        validation_alias="SWR_MERKLE_DEFAULT_CHAIN_ID",
        description="EIP-155 chain id used for entries without a chainId (Base).",
    )

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")


class RuntimeSettings(BaseSettings):
    log_level: str = Field(
        default="INFO",
        validation_alias="SWR_LOG_LEVEL",
        description="Root log level (DEBUG/INFO/WARNING/ERROR).",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v = (v or "INFO").upper()
        if v == "WARN":
            v = "WARNING"
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return "INFO"
        return v

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")


class SWRSettings(BaseSettings):
    """
    Root configuration object.

    Aggregates:
      - Merkle batch limits
      - Runtime (logging)
    """

    merkle: MerkleSettings = Field(default_factory=MerkleSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)

    model_config = SettingsConfigDict(extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> SWRSettings:
    """
    Cached accessor for SWRSettings.

    Call `get_settings.cache_clear()` after changing the environment.
    """
    return SWRSettings()

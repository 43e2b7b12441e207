"""
Central configuration for bulksig.

A single typed settings object read from environment variables (12-factor
style) using pydantic-settings.

Usage:

    from bulksig.core.settings import get_settings

    settings = get_settings()
    context = ChainContext(settings.chain_id, settings.verifying_contract)

Environment variables (all prefixed with BULKSIG_):

    BULKSIG_DOMAIN_NAME         EIP-712 domain name (default "Seaport")
    BULKSIG_DOMAIN_VERSION      EIP-712 domain version (default "1.5")
    BULKSIG_CHAIN_ID            Chain id bound into the domain separator
    BULKSIG_VERIFYING_CONTRACT  Verifying contract address
    BULKSIG_LOG_LEVEL           Package log level (DEBUG/INFO/WARNING/ERROR)
"""

from __future__ import annotations

from functools import lru_cache

from eth_utils import is_address, to_checksum_address
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DOMAIN_NAME = "Seaport"
DEFAULT_DOMAIN_VERSION = "1.5"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BulkSigSettings(BaseSettings):
    """
    Root configuration object for bulksig.
    """

    model_config = SettingsConfigDict(
        env_prefix="BULKSIG_",
        case_sensitive=False,
        extra="ignore",
    )

    domain_name: str = Field(
        default=DEFAULT_DOMAIN_NAME,
        description="EIP-712 domain name used for domain separators.",
    )
    domain_version: str = Field(
        default=DEFAULT_DOMAIN_VERSION,
        description="EIP-712 domain version used for domain separators.",
    )
    chain_id: int = Field(
        default=1,
        description="Chain id bound into the domain separator.",
    )
    verifying_contract: str = Field(
        default="0x0000000000000000000000000000000000000000",
        description="Address of the contract that verifies signatures.",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for the 'bulksig' logger hierarchy.",
    )

    @field_validator("chain_id")
    @classmethod
    def _validate_chain_id(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("BULKSIG_CHAIN_ID must be positive")
        return v

    @field_validator("verifying_contract")
    @classmethod
    def _validate_verifying_contract(cls, v: str) -> str:
        if not is_address(v):
            raise ValueError(f"BULKSIG_VERIFYING_CONTRACT is not an address: {v!r}")
        return to_checksum_address(v)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v = (v or "INFO").upper()
        if v == "WARN":
            v = "WARNING"
        if v not in _LOG_LEVELS:
            raise ValueError(f"BULKSIG_LOG_LEVEL must be one of {_LOG_LEVELS}, got {v!r}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> BulkSigSettings:
    """
    Cached accessor for BulkSigSettings.

    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return BulkSigSettings()

#!/usr/bin/env python3
"""Configuration management for the batch submitter.

This module provides type-safe configuration dataclasses with validation.
Configuration is loaded from environment variables with sensible defaults
where appropriate.
"""

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from web3 import Web3

# Get logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TargetChainConfig:
    """Configuration for the L1 chain hosting the transaction chain contract.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint of the L1 chain
        ctc_address: Checksummed address of the CanonicalTransactionChain contract
    """

    rpc_url: str
    ctc_address: str

    def __post_init__(self) -> None:
        """Validate target chain configuration."""
        if not self.rpc_url:
            raise ValueError("RPC URL is required (RPC_URL)")

        parsed = urlparse(self.rpc_url)
        if parsed.scheme not in ('http', 'https', 'ws', 'wss'):
            raise ValueError(
                f"Invalid RPC URL scheme: {parsed.scheme}. "
                "Expected http, https, ws, or wss"
            )

        if not self.ctc_address:
            raise ValueError(
                "Transaction chain address is required (CTC_ADDRESS)"
            )

        if not Web3.is_address(self.ctc_address):
            raise ValueError(
                f"Invalid transaction chain address: {self.ctc_address}"
            )

        checksummed = Web3.to_checksum_address(self.ctc_address)
        if checksummed != self.ctc_address:
            # Use object.__setattr__ since dataclass is frozen
            object.__setattr__(self, 'ctc_address', checksummed)


@dataclass(frozen=True, slots=True)
class SubmissionConfig:
    """Configuration for batch submission."""
    poll_interval: int = 15  # seconds between checks for a new batch
    gas_limit: int = 9_000_000  # gas attached to each batch transaction
    request_timeout: int = 30  # HTTP request timeout in seconds

    def __post_init__(self) -> None:
        """Validate submission configuration."""
        if self.poll_interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {self.poll_interval}")
        if self.poll_interval > 300:
            raise ValueError(f"Poll interval too long (max 300s), got {self.poll_interval}")

        if self.gas_limit <= 21_000:
            raise ValueError(f"Gas limit too low (min 21000), got {self.gas_limit}")
        if self.gas_limit > 30_000_000:
            raise ValueError(f"Gas limit too high (max 30000000), got {self.gas_limit}")

        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.request_timeout > 120:
            raise ValueError(f"Request timeout too long (max 120s), got {self.request_timeout}")


@dataclass(frozen=True, slots=True)
class SubmitterConfig:
    """Main configuration for the batch submitter.

    Attributes:
        target_chain: Configuration for the L1 chain
        submission: Configuration for batch submission
        batch_spool_dir: Directory polled for batch files
        local_mode: Whether running in local mode (for testing)
        local_private_key: Private key for local mode (optional)
        signer_url: Signer daemon URL or socket path (empty for the default socket)
    """

    target_chain: TargetChainConfig
    submission: SubmissionConfig
    batch_spool_dir: str
    local_mode: bool = False
    local_private_key: str | None = None
    signer_url: str = ""

    def __post_init__(self) -> None:
        """Validate submitter configuration."""
        if not self.batch_spool_dir:
            raise ValueError("Batch spool directory is required (BATCH_SPOOL_DIR)")

        if self.local_mode and not self.local_private_key:
            raise ValueError(
                "Local mode requires LOCAL_PRIVATE_KEY environment variable"
            )

        if self.local_private_key:
            # Should be 64 hex chars, optionally with 0x prefix
            key = self.local_private_key.removeprefix('0x')

            if len(key) != 64:
                raise ValueError(
                    f"Invalid private key length. Expected 64 hex characters, got {len(key)}"
                )

            try:
                int(key, 16)
            except ValueError:
                raise ValueError(
                    "Invalid private key format. Must be hexadecimal"
                ) from None

    @classmethod
    def from_env(cls, local_mode: bool = False) -> "SubmitterConfig":
        """Load configuration from environment variables.

        Args:
            local_mode: Whether to run in local mode (for testing)

        Returns:
            SubmitterConfig instance with loaded values

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        rpc_url = os.environ.get("RPC_URL", "http://localhost:8545")

        ctc_address = os.environ.get("CTC_ADDRESS", "")
        if not ctc_address:
            raise ValueError(
                "CTC_ADDRESS environment variable is required. "
                "This should be the CanonicalTransactionChain contract address."
            )

        target_config = TargetChainConfig(
            rpc_url=rpc_url,
            ctc_address=ctc_address
        )

        submission_config = SubmissionConfig(
            poll_interval=int(os.environ.get("POLL_INTERVAL", "15")),
            gas_limit=int(os.environ.get("GAS_LIMIT", "9000000")),
            request_timeout=int(os.environ.get("REQUEST_TIMEOUT", "30"))
        )

        local_private_key = os.environ.get("LOCAL_PRIVATE_KEY") if local_mode else None

        return cls(
            target_chain=target_config,
            submission=submission_config,
            batch_spool_dir=os.environ.get("BATCH_SPOOL_DIR", "./batches"),
            local_mode=local_mode,
            local_private_key=local_private_key,
            signer_url=os.environ.get("SIGNER_URL", "")
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Batch Submitter Configuration")
        logger.info("=" * 60)

        logger.info("Target Chain:")
        logger.info(f"  RPC URL: {self.target_chain.rpc_url}")
        logger.info(f"  CTC Address: {self.target_chain.ctc_address}")

        logger.info("Submission Settings:")
        logger.info(f"  Poll Interval: {self.submission.poll_interval} seconds")
        logger.info(f"  Gas Limit: {self.submission.gas_limit}")
        logger.info(f"  Request Timeout: {self.submission.request_timeout} seconds")
        logger.info(f"  Batch Spool Dir: {self.batch_spool_dir}")

        logger.info("Submitter Settings:")
        logger.info(f"  Mode: {'LOCAL' if self.local_mode else 'PRODUCTION'}")

        if self.local_mode:
            logger.info("  Local Key: [CONFIGURED]")
        else:
            logger.info(f"  Signer: {self.signer_url or '[DEFAULT SOCKET]'}")

        logger.info("=" * 60)

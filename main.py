#!/usr/bin/env python3
"""Entry point for the sequencer batch submitter service.

This module provides the main entry point for the submitter, which runs in
either production (signer daemon) or local testing mode.
"""

import argparse
import asyncio
import logging
import os
import sys

# Configure logging before any other imports create loggers
def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

# Get logger for this module
logger = logging.getLogger(__name__)

from batch_submitter.config import SubmitterConfig
from batch_submitter.service import SequencerBatchService


async def main() -> None:
    """Main entry point for the sequencer batch submitter.

    Parses startup arguments, loads configuration from environment,
    and runs the service that submits pending batches.

    Raises:
        SystemExit: On configuration or runtime errors
    """
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Sequencer Batch Submitter - Append L2 transaction batches to the canonical transaction chain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  RPC_URL               - RPC endpoint for the L1 chain (default: http://localhost:8545)
  CTC_ADDRESS           - CanonicalTransactionChain contract address
  BATCH_SPOOL_DIR       - Directory polled for batch files (default: ./batches)
  POLL_INTERVAL         - Seconds between spool checks (default: 15)
  GAS_LIMIT             - Gas limit per batch transaction (default: 9000000)
  SIGNER_URL            - Signer daemon URL or socket path (production mode)
  LOCAL_PRIVATE_KEY     - Private key for local mode (required with --local)
  LOG_LEVEL             - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument(
        "--local",
        action="store_true",
        default=False,
        help="Run in local mode, signing with LOCAL_PRIVATE_KEY (for testing)"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    args: argparse.Namespace = parser.parse_args()

    setup_logging(args.log_level)

    if mode_msg := ("(LOCAL MODE)" if args.local else ""):
        logger.info(f"=== Batch Submitter Starting {mode_msg} ===")
    else:
        logger.info("=== Batch Submitter Starting ===")

    service: SequencerBatchService | None = None
    try:
        config: SubmitterConfig = SubmitterConfig.from_env(local_mode=args.local)
        config.log_config()

        service = SequencerBatchService.from_config(config)
        logger.info("Service created, starting main loop...")
        await service.run()

    except ValueError as e:
        # Batch encoding errors are ValueErrors too; they mean a bad batch, not bad config
        logger.error(f"Configuration or batch error: {e}")
        logger.error("Please check your environment variables and pending batches:")
        logger.error("  - RPC_URL: RPC endpoint for the L1 chain")
        logger.error("  - CTC_ADDRESS: CanonicalTransactionChain contract address")
        logger.error("  - BATCH_SPOOL_DIR: Directory polled for batch files")
        if args.local:
            logger.error("  - LOCAL_PRIVATE_KEY: Required for local mode")
        sys.exit(1)

    except KeyboardInterrupt:
        logger.info("\nReceived interrupt signal, shutting down gracefully...")
        if service:
            service.stop()
        sys.exit(0)

    except Exception as e:
        logger.error(f"Fatal Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())

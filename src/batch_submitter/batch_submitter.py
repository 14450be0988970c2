#!/usr/bin/env python3
"""Batch submission to the canonical transaction chain.

This module hands encoded appendSequencerBatch() calldata to the chain,
supporting both local (testing) and production (signer daemon) modes.
"""

import logging
from typing import TYPE_CHECKING, Any

from hexbytes import HexBytes
from web3 import Web3
from web3.types import TxParams, Wei

from .batch_encoder import BatchEncoder
from .models import AppendSequencerBatchParams

if TYPE_CHECKING:
    from .utils.contract_utility import ContractUtility
    from .utils.signer_client import SignerClient

logger = logging.getLogger(__name__)


class BatchSubmitter:
    """Submits sequencer batches to the CanonicalTransactionChain contract."""

    def __init__(
        self,
        contract_util: "ContractUtility",
        signer_client: "SignerClient | None",
        ctc_address: str,
        gas_limit: int = 9_000_000
    ) -> None:
        """
        Initialize the BatchSubmitter.

        Args:
            contract_util: Utility for L1 chain interactions
            signer_client: Signer daemon client (None for local mode)
            ctc_address: Address of the CanonicalTransactionChain contract
            gas_limit: Gas limit attached to each batch transaction
        """
        self.contract_util: ContractUtility = contract_util
        self.signer_client: SignerClient | None = signer_client
        self.ctc_address: str = Web3.to_checksum_address(ctc_address)
        self.gas_limit: int = gas_limit

        if mode := ("signer daemon" if signer_client else "local testing"):
            logger.info(f"BatchSubmitter initialized in {mode} mode")
            logger.info(f"  CTC Address: {self.ctc_address}")

    async def append_sequencer_batch(
        self,
        batch: AppendSequencerBatchParams
    ) -> HexBytes | dict[str, Any]:
        """
        Encode a batch and submit it as appendSequencerBatch() calldata.

        Encoding happens before anything is sent, so a malformed batch
        raises without touching the network.

        Args:
            batch: Batch to submit

        Returns:
            Transaction hash in local mode, the daemon response otherwise

        Raises:
            BatchEncodingError: If the batch cannot be encoded
        """
        calldata = BatchEncoder.encode_append_sequencer_batch_calldata(batch)
        logger.info(f"Submitting {batch} ({len(calldata) // 2 - 1} bytes of calldata)")

        try:
            match self.signer_client:
                case None:
                    logger.info("🔧 LOCAL MODE: Submitting transaction directly")
                    tx_hash: HexBytes = self.contract_util.send_transaction(
                        to=self.ctc_address,
                        data=calldata,
                        gas=self.gas_limit
                    )
                    logger.info(f"✓ Batch transaction sent: {Web3.to_hex(tx_hash)}")
                    return tx_hash

                case signer_client:
                    tx_params: TxParams = {
                        'to': self.ctc_address,
                        'data': calldata,
                        'gas': self.gas_limit,
                        'value': Wei(0)
                    }
                    response = await signer_client.submit_tx(tx_params)
                    logger.info("✓ Batch submitted via signer daemon")
                    return response

        except Exception as e:
            logger.error(f"Error submitting batch starting at {batch.should_start_at_batch}: {e}")
            raise

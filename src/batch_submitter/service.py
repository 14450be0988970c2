"""
Sequencer batch submission service.

This module wires the batch provider, the submitter and the periodic runner
together: every poll interval the service asks the provider for the next
batch and submits it.
"""

import logging

from .batch_provider import BatchProvider, SpoolBatchProvider
from .batch_submitter import BatchSubmitter
from .config import SubmitterConfig
from .utils.contract_utility import ContractUtility
from .utils.scheduled_task import ScheduledTask
from .utils.signer_client import SignerClient

logger = logging.getLogger(__name__)


class SequencerBatchService(ScheduledTask):
    """
    Periodically submits pending sequencer batches.

    After a successful submission the next run starts immediately so that a
    backlog drains without waiting a full poll interval per batch.
    """

    def __init__(
        self,
        submitter: BatchSubmitter,
        provider: BatchProvider,
        poll_interval: float
    ):
        """
        Initialize the service.

        Args:
            submitter: Submitter used to send batches
            provider: Source of batches to submit
            poll_interval: Seconds to wait when no batch is pending
        """
        super().__init__(poll_interval)
        self.submitter = submitter
        self.provider = provider
        self.batches_submitted = 0

    @classmethod
    def from_config(cls, config: SubmitterConfig) -> "SequencerBatchService":
        """
        Create a service with the collaborators described by the configuration.

        Args:
            config: Submitter configuration

        Returns:
            Configured SequencerBatchService instance
        """
        contract_util = ContractUtility(
            rpc_url=config.target_chain.rpc_url,
            secret=config.local_private_key if config.local_mode else "",
            request_timeout=config.submission.request_timeout
        )
        signer_client = None if config.local_mode else SignerClient(
            url=config.signer_url,
            timeout=float(config.submission.request_timeout)
        )

        submitter = BatchSubmitter(
            contract_util=contract_util,
            signer_client=signer_client,
            ctc_address=config.target_chain.ctc_address,
            gas_limit=config.submission.gas_limit
        )
        logger.info(f"Initialized BatchSubmitter in {'local' if config.local_mode else 'signer daemon'} mode")

        return cls(
            submitter=submitter,
            provider=SpoolBatchProvider(config.batch_spool_dir),
            poll_interval=config.submission.poll_interval
        )

    async def run_task(self) -> bool:
        """
        Submit the next pending batch, if any.

        Returns:
            True if a batch was submitted, False if there was nothing to do
        """
        batch = await self.provider.next_batch()
        if batch is None:
            logger.debug("No pending batch")
            return False

        await self.submitter.append_sequencer_batch(batch)
        await self.provider.mark_submitted(batch)

        self.batches_submitted += 1
        logger.info(
            f"Status: {self.batches_submitted} batches submitted, "
            f"last started at {batch.should_start_at_batch}"
        )
        return True

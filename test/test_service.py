#!/usr/bin/env python3
"""Unit tests for the batch submission service and batch providers."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from batch_submitter.batch_provider import SpoolBatchProvider
from batch_submitter.config import SubmissionConfig, SubmitterConfig, TargetChainConfig
from batch_submitter.models import AppendSequencerBatchParams, BatchContext
from batch_submitter.service import SequencerBatchService

CTC_ADDRESS = "0x" + "cd" * 20


@pytest.fixture
def batch():
    """Create a small batch."""
    return AppendSequencerBatchParams(
        should_start_at_batch=3,
        total_elements_to_append=1,
        contexts=[BatchContext(1, 0, 1000, 100)],
        transactions=["0x" + "00" * 92],
    )


@pytest.fixture
def mock_submitter():
    mock = MagicMock()
    mock.append_sequencer_batch = AsyncMock(return_value=b"\x01")
    return mock


@pytest.fixture
def mock_provider():
    mock = MagicMock()
    mock.next_batch = AsyncMock(return_value=None)
    mock.mark_submitted = AsyncMock()
    return mock


class TestSequencerBatchService:
    """Test suite for SequencerBatchService."""

    @pytest.mark.asyncio
    async def test_no_pending_batch(self, mock_submitter, mock_provider):
        service = SequencerBatchService(mock_submitter, mock_provider, poll_interval=15)

        assert await service.run_task() is False
        mock_submitter.append_sequencer_batch.assert_not_called()
        assert service.batches_submitted == 0

    @pytest.mark.asyncio
    async def test_submits_pending_batch(self, mock_submitter, mock_provider, batch):
        """A submitted batch is acknowledged and the next run starts immediately."""
        mock_provider.next_batch = AsyncMock(return_value=batch)
        service = SequencerBatchService(mock_submitter, mock_provider, poll_interval=15)

        assert await service.run_task() is True
        mock_submitter.append_sequencer_batch.assert_called_once_with(batch)
        mock_provider.mark_submitted.assert_called_once_with(batch)
        assert service.batches_submitted == 1

    @pytest.mark.asyncio
    async def test_submission_error_propagates(self, mock_submitter, mock_provider, batch):
        """A failed submission is not acknowledged, so the batch is retried later."""
        mock_provider.next_batch = AsyncMock(return_value=batch)
        mock_submitter.append_sequencer_batch = AsyncMock(side_effect=RuntimeError("rpc down"))
        service = SequencerBatchService(mock_submitter, mock_provider, poll_interval=15)

        with pytest.raises(RuntimeError, match="rpc down"):
            await service.run_task()

        mock_provider.mark_submitted.assert_not_called()
        assert service.batches_submitted == 0

    @patch('batch_submitter.service.SignerClient')
    @patch('batch_submitter.service.ContractUtility')
    def test_from_config_production(self, mock_contract_util_class, mock_signer_class, tmp_path):
        config = SubmitterConfig(
            target_chain=TargetChainConfig(rpc_url="http://localhost:8545", ctc_address=CTC_ADDRESS),
            submission=SubmissionConfig(poll_interval=20, gas_limit=1_000_000),
            batch_spool_dir=str(tmp_path),
            signer_url="/tmp/signer.sock",
        )

        service = SequencerBatchService.from_config(config)

        mock_contract_util_class.assert_called_once_with(
            rpc_url="http://localhost:8545",
            secret="",
            request_timeout=30
        )
        mock_signer_class.assert_called_once_with(url="/tmp/signer.sock", timeout=30.0)
        assert service.submitter.signer_client is mock_signer_class.return_value
        assert service.submitter.gas_limit == 1_000_000
        assert service.period_seconds == 20
        assert isinstance(service.provider, SpoolBatchProvider)

    @patch('batch_submitter.service.SignerClient')
    @patch('batch_submitter.service.ContractUtility')
    def test_from_config_local(self, mock_contract_util_class, mock_signer_class, tmp_path):
        key = "0x" + "1" * 64
        config = SubmitterConfig(
            target_chain=TargetChainConfig(rpc_url="http://localhost:8545", ctc_address=CTC_ADDRESS),
            submission=SubmissionConfig(),
            batch_spool_dir=str(tmp_path),
            local_mode=True,
            local_private_key=key,
        )

        service = SequencerBatchService.from_config(config)

        assert mock_contract_util_class.call_args[1]["secret"] == key
        mock_signer_class.assert_not_called()
        assert service.submitter.signer_client is None


class TestSpoolBatchProvider:
    """Tests for the spool directory batch provider."""

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        provider = SpoolBatchProvider(str(tmp_path / "missing"))

        assert await provider.next_batch() is None

    @pytest.mark.asyncio
    async def test_serves_oldest_file_until_submitted(self, tmp_path, batch):
        (tmp_path / "0002.json").write_text(json.dumps({**batch.to_dict(), "should_start_at_batch": 9}))
        (tmp_path / "0001.json").write_text(json.dumps(batch.to_dict()))
        provider = SpoolBatchProvider(str(tmp_path))

        first = await provider.next_batch()
        assert first == batch
        assert await provider.next_batch() is first  # served again until acknowledged

        await provider.mark_submitted(first)
        assert (tmp_path / "0001.json.submitted").exists()
        assert not (tmp_path / "0001.json").exists()

        second = await provider.next_batch()
        assert second.should_start_at_batch == 9

        await provider.mark_submitted(second)
        assert await provider.next_batch() is None

    @pytest.mark.asyncio
    async def test_mark_unknown_batch_is_ignored(self, tmp_path, batch):
        (tmp_path / "0001.json").write_text(json.dumps(batch.to_dict()))
        provider = SpoolBatchProvider(str(tmp_path))

        await provider.mark_submitted(batch)

        assert (tmp_path / "0001.json").exists()

    @pytest.mark.asyncio
    async def test_invalid_file_raises(self, tmp_path):
        (tmp_path / "0001.json").write_text("{not json")
        provider = SpoolBatchProvider(str(tmp_path))

        with pytest.raises(ValueError):
            await provider.next_batch()

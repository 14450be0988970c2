#!/usr/bin/env python3
"""Tests for the configuration module."""

import logging
import os
import pytest
from unittest.mock import patch

from web3 import Web3

from batch_submitter.config import (
    SubmissionConfig,
    SubmitterConfig,
    TargetChainConfig,
)

CTC_ADDRESS = "0x4200000000000000000000000000000000000005"
LOWERCASE_ADDRESS = "0x85bfe05492afc3d04ff3b2ca6771acf6f853d90d"
PRIVATE_KEY = "0x" + "1" * 64


class TestTargetChainConfig:
    """Tests for TargetChainConfig."""

    def test_valid_config(self):
        config = TargetChainConfig(rpc_url="http://localhost:8545", ctc_address=CTC_ADDRESS)

        assert config.rpc_url == "http://localhost:8545"
        assert config.ctc_address == CTC_ADDRESS

    def test_checksum_address_conversion(self):
        """Lowercase addresses are converted to checksum format."""
        config = TargetChainConfig(rpc_url="https://test.rpc", ctc_address=LOWERCASE_ADDRESS)

        assert config.ctc_address == Web3.to_checksum_address(LOWERCASE_ADDRESS)

    def test_invalid_rpc_url_scheme(self):
        with pytest.raises(ValueError, match="Invalid RPC URL scheme"):
            TargetChainConfig(rpc_url="ftp://invalid.scheme", ctc_address=CTC_ADDRESS)

    def test_missing_rpc_url(self):
        with pytest.raises(ValueError, match="RPC URL is required"):
            TargetChainConfig(rpc_url="", ctc_address=CTC_ADDRESS)

    def test_invalid_address(self):
        with pytest.raises(ValueError, match="Invalid transaction chain address"):
            TargetChainConfig(rpc_url="https://test.rpc", ctc_address="invalid-address")

    def test_missing_address(self):
        with pytest.raises(ValueError, match="Transaction chain address is required"):
            TargetChainConfig(rpc_url="https://test.rpc", ctc_address="")


class TestSubmissionConfig:
    """Tests for SubmissionConfig."""

    def test_defaults(self):
        config = SubmissionConfig()

        assert config.poll_interval == 15
        assert config.gas_limit == 9_000_000
        assert config.request_timeout == 30

    @pytest.mark.parametrize("kwargs,message", [
        ({"poll_interval": 0}, "Poll interval must be positive"),
        ({"poll_interval": 301}, "Poll interval too long"),
        ({"gas_limit": 21_000}, "Gas limit too low"),
        ({"gas_limit": 30_000_001}, "Gas limit too high"),
        ({"request_timeout": 0}, "Request timeout must be positive"),
        ({"request_timeout": 121}, "Request timeout too long"),
    ])
    def test_out_of_range_values(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            SubmissionConfig(**kwargs)


class TestSubmitterConfig:
    """Tests for SubmitterConfig."""

    def _target(self):
        return TargetChainConfig(rpc_url="http://localhost:8545", ctc_address=CTC_ADDRESS)

    def test_local_mode_requires_key(self):
        with pytest.raises(ValueError, match="Local mode requires LOCAL_PRIVATE_KEY"):
            SubmitterConfig(
                target_chain=self._target(),
                submission=SubmissionConfig(),
                batch_spool_dir="./batches",
                local_mode=True,
            )

    def test_invalid_key_length(self):
        with pytest.raises(ValueError, match="Invalid private key length"):
            SubmitterConfig(
                target_chain=self._target(),
                submission=SubmissionConfig(),
                batch_spool_dir="./batches",
                local_mode=True,
                local_private_key="0x1234",
            )

    def test_invalid_key_format(self):
        with pytest.raises(ValueError, match="Invalid private key format"):
            SubmitterConfig(
                target_chain=self._target(),
                submission=SubmissionConfig(),
                batch_spool_dir="./batches",
                local_mode=True,
                local_private_key="0x" + "g" * 64,
            )

    def test_missing_spool_dir(self):
        with pytest.raises(ValueError, match="Batch spool directory is required"):
            SubmitterConfig(
                target_chain=self._target(),
                submission=SubmissionConfig(),
                batch_spool_dir="",
            )

    @patch.dict(os.environ, {
        "RPC_URL": "https://l1.example",
        "CTC_ADDRESS": LOWERCASE_ADDRESS,
        "BATCH_SPOOL_DIR": "/var/spool/batches",
        "POLL_INTERVAL": "5",
        "GAS_LIMIT": "2000000",
        "LOCAL_PRIVATE_KEY": PRIVATE_KEY,
    }, clear=True)
    def test_from_env_local(self):
        config = SubmitterConfig.from_env(local_mode=True)

        assert config.target_chain.rpc_url == "https://l1.example"
        assert config.target_chain.ctc_address == Web3.to_checksum_address(LOWERCASE_ADDRESS)
        assert config.batch_spool_dir == "/var/spool/batches"
        assert config.submission.poll_interval == 5
        assert config.submission.gas_limit == 2_000_000
        assert config.local_mode is True
        assert config.local_private_key == PRIVATE_KEY

    @patch.dict(os.environ, {
        "CTC_ADDRESS": CTC_ADDRESS,
        "LOCAL_PRIVATE_KEY": PRIVATE_KEY,
        "SIGNER_URL": "http://signer:8080",
    }, clear=True)
    def test_from_env_production_ignores_local_key(self):
        config = SubmitterConfig.from_env(local_mode=False)

        assert config.target_chain.rpc_url == "http://localhost:8545"
        assert config.batch_spool_dir == "./batches"
        assert config.local_private_key is None
        assert config.signer_url == "http://signer:8080"

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_missing_address(self):
        with pytest.raises(ValueError, match="CTC_ADDRESS environment variable is required"):
            SubmitterConfig.from_env()

    def test_log_config_masks_key(self, caplog):
        config = SubmitterConfig(
            target_chain=self._target(),
            submission=SubmissionConfig(),
            batch_spool_dir="./batches",
            local_mode=True,
            local_private_key=PRIVATE_KEY,
        )

        with caplog.at_level(logging.INFO):
            config.log_config()

        assert "Local Key: [CONFIGURED]" in caplog.text
        assert PRIVATE_KEY not in caplog.text

import logging

from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.middleware import SignAndSendRawMiddlewareBuilder
from web3.types import TxParams

logger = logging.getLogger(__name__)


class ContractUtility:
    """
    Utility for sending raw-calldata transactions to the L1 chain.

    Can be used in two modes:
    1. Signing mode: Initialize with RPC URL and secret; transactions are signed locally
    2. Read-only mode: Initialize with RPC URL only; sending is refused
    """

    def __init__(self, rpc_url: str, secret: str = "", request_timeout: int = 30) -> None:
        """
        Initialize the ContractUtility.

        Args:
            rpc_url: RPC URL for the network (required)
            secret: Private key for signing transactions (optional - if not provided, read-only mode)
            request_timeout: HTTP request timeout in seconds
        """
        if not rpc_url:
            raise ValueError("RPC URL is required")

        self.rpc_url = rpc_url
        self.w3 = Web3(Web3.HTTPProvider(
            self.rpc_url,
            request_kwargs={'timeout': request_timeout}
        ))

        if secret:
            self._add_signing_middleware(secret)

    def _add_signing_middleware(self, secret: str) -> None:
        """
        Add signing middleware to the existing Web3 instance.

        Args:
            secret: Private key for signing transactions
        """
        account: LocalAccount = Account.from_key(secret)
        self.w3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(account))
        self.w3.eth.default_account = account.address
        logger.debug(f"Signing middleware added for {account.address}")

    def send_transaction(self, to: str, data: str, gas: int) -> HexBytes:
        """
        Send a transaction carrying pre-encoded calldata.

        Args:
            to: Destination contract address
            data: 0x-prefixed calldata
            gas: Gas limit for the transaction

        Returns:
            Transaction hash

        Raises:
            ValueError: If no signing account is configured
        """
        if not self.w3.eth.default_account:
            raise ValueError("Private key is required for sending transactions")

        tx: TxParams = {
            'from': self.w3.eth.default_account,
            'to': Web3.to_checksum_address(to),
            'data': data,
            'gas': gas,
            'gasPrice': self.w3.eth.gas_price,
        }
        return self.w3.eth.send_transaction(tx)

import codecs
import json
import logging
from typing import Any

import cbor2
import httpx
from web3.types import TxParams

logger = logging.getLogger(__name__)


class SignerClient:
    """Client for the signer daemon that holds the sequencer key.

    In production the sequencer key never leaves the daemon: batches are
    handed over as unsigned transactions and the daemon signs and submits
    them.
    """

    SIGNER_SOCKET_PATH: str = "/run/signer-appd.sock"

    def __init__(self, url: str = '', timeout: float = 30.0) -> None:
        """Initialize the signer client.

        Args:
            url: HTTP URL or unix socket path of the daemon (defaults to socket)
            timeout: Request timeout in seconds
        """
        self.url: str = url
        self.timeout: float = timeout

    async def _appd_post(self, path: str, payload: Any) -> Any:
        """Post request to the signer daemon.

        Args:
            path: API endpoint path
            payload: JSON payload to send

        Returns:
            JSON response from the daemon

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        transport: httpx.AsyncHTTPTransport | None = None

        if self.url and not self.url.startswith('http'):
            transport = httpx.AsyncHTTPTransport(uds=self.url)
            logger.debug(f"Using unix domain socket: {self.url}")
        elif not self.url:
            transport = httpx.AsyncHTTPTransport(uds=self.SIGNER_SOCKET_PATH)
            logger.debug(f"Using unix domain socket: {self.SIGNER_SOCKET_PATH}")

        async with httpx.AsyncClient(transport=transport) as client:
            base_url: str = self.url if self.url.startswith('http') else "http://localhost"
            full_url: str = base_url + path
            # Calldata can be large; log the size instead of the body
            logger.debug(f"Posting to {full_url}: {len(json.dumps(payload))} bytes")
            response: httpx.Response = await client.post(full_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

    def _decode_cbor_response(self, response_hex: str) -> dict[str, Any]:
        """
        Decode the hex-encoded CBOR body returned by the daemon.

        Raises:
            ValueError: If the body is not valid hex or CBOR
        """
        try:
            data_bytes: bytes = codecs.decode(response_hex, "hex")
            cbor_result: Any = cbor2.loads(data_bytes)
        except (ValueError, cbor2.CBORDecodeError) as decode_error:
            logger.error(f"CBOR decode error: {decode_error}")
            raise ValueError(f"Undecodable signer response: {response_hex[:64]}") from decode_error

        logger.debug(f"Decoded CBOR: {cbor_result}")
        return cbor_result if isinstance(cbor_result, dict) else {"data": cbor_result}

    async def submit_tx(self, tx: TxParams) -> dict[str, Any]:
        """
        Have the daemon sign and submit a transaction.

        Args:
            tx: Transaction parameters with 'to', 'data', 'gas' and 'value'

        Returns:
            Decoded daemon response, e.g. {"ok": ...}

        Raises:
            RuntimeError: If the daemon reports an error
            httpx.HTTPStatusError: If the request fails
        """
        payload: dict[str, Any] = {
            "tx": {
                "kind": "eth",
                "data": {
                    "gas_limit": tx["gas"],
                    "to": tx["to"].removeprefix("0x"),
                    "value": tx.get("value", 0),
                    "data": tx["data"].removeprefix("0x"),
                },
            },
            "encrypt": False,
        }

        path: str = '/signer/v1/tx/sign-submit'
        response: dict[str, Any] = await self._appd_post(path, payload)
        decoded_response = self._decode_cbor_response(response["data"])

        match decoded_response:
            case {"ok": _}:
                logger.info("Transaction accepted by signer daemon")
                return decoded_response
            case {"error": error_msg}:
                logger.error(f"Signer daemon rejected transaction: {error_msg}")
                raise RuntimeError(f"Signer daemon rejected transaction: {error_msg}")
            case _:
                logger.warning(f"Unknown signer response format: {decoded_response}")
                return decoded_response

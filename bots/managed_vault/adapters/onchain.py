#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Signed transaction helper shared by the web3-backed adapters."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3RPCError

from ..constants import DEFAULT_RECEIPT_TIMEOUT
from ..errors import RevertError, TransactionTimeoutError, classify_error
from ..logging_config import get_logger

logger = get_logger(__name__)


def _rpc_error_fields(error, fallback: str) -> Tuple[str, Optional[str]]:
    """(message, revert data) from a JSON-RPC ``error`` object."""
    if not isinstance(error, dict):
        return fallback, None
    data = error.get("data")
    return str(error.get("message") or fallback), data if isinstance(data, str) else None


class OnchainSender:
    """Builds, signs and confirms transactions from the wrapper's operator account."""

    def __init__(self, w3: Web3, signer, sender: str, receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT):
        self.w3 = w3
        self.signer = signer
        self.sender = Web3.to_checksum_address(sender)
        self.receipt_timeout = receipt_timeout

    def _get_nonce(self) -> int:
        return self.w3.eth.get_transaction_count(self.sender)

    def _fill_fees(self, tx: Dict[str, object]) -> None:
        gas_price = self.w3.eth.gas_price
        tx.setdefault("maxFeePerGas", gas_price)
        tx.setdefault("maxPriorityFeePerGas", gas_price)

    def send(self, function, label: str) -> str:
        """Send ``function`` (a bound contract function) and wait for success.

        Returns:
            Transaction hash as hex string

        Raises:
            ExternalCollaboratorFailure: simulation revert, RPC error,
                reverted receipt or confirmation timeout
        """
        tx_hash: Optional[str] = None
        try:
            tx = function.build_transaction({"from": self.sender, "nonce": self._get_nonce()})
            tx.setdefault("chainId", self.w3.eth.chain_id)
            if "gas" not in tx:
                tx["gas"] = self.w3.eth.estimate_gas(tx)
            if "gasPrice" not in tx:
                self._fill_fees(tx)

            signed = self.signer.sign_transaction(tx)
            raw_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            tx_hash = Web3.to_hex(raw_hash)
            logger.info("%s sent: %s", label, tx_hash)
            receipt = self.w3.eth.wait_for_transaction_receipt(raw_hash, timeout=self.receipt_timeout)
        except ContractLogicError as exc:
            data = exc.data if isinstance(exc.data, str) else None
            raise classify_error(f"{label}: execution reverted: {exc}", data, tx_hash) from exc
        except TimeExhausted as exc:
            raise TransactionTimeoutError(f"{label}: receipt timeout", tx_hash=tx_hash) from exc
        except Web3RPCError as exc:
            response = exc.rpc_response if isinstance(exc.rpc_response, dict) else {}
            message, data = _rpc_error_fields(response.get("error"), exc.message)
            raise classify_error(f"{label}: {message}", data, tx_hash) from exc
        except ValueError as exc:
            # Providers and signers may still raise ValueError({"code": ..., "message": ...})
            message, data = _rpc_error_fields(exc.args[0] if exc.args else None, str(exc))
            raise classify_error(f"{label}: {message}", data, tx_hash) from exc

        if receipt["status"] != 1:
            raise RevertError(f"{label}: transaction reverted", tx_hash=tx_hash)
        return tx_hash

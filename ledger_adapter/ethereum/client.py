"""Ledger Client capability surface and its web3-backed implementation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from eth_utils import to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from .abi import TOKEN_ABI
from .config import LedgerConfig
from .errors import ConfigurationError, ConfirmationTimeoutError, RevertError, SubmissionError
from .models import FeeParams, RawLog, TransactionHandle, TransactionReceipt, TransactionRequest

logger = logging.getLogger(__name__)


class LedgerClient(Protocol):
    @property
    def signer_address(self) -> str:
        ...

    def submit_transaction(self, request: TransactionRequest) -> TransactionHandle:
        ...

    def deploy_contract(
        self, bytecode: str, args: Sequence[object], fees: FeeParams
    ) -> TransactionHandle:
        ...

    def wait_for_receipt(self, handle: TransactionHandle, timeout: float) -> TransactionReceipt:
        ...

    def read_state(self, target: str, function: str, args: Sequence[object] = ()) -> Any:
        ...

    def fetch_logs(self, target: str, from_block: int, to_block: int) -> Sequence[RawLog]:
        ...

    def current_block_height(self) -> int:
        ...


class Web3LedgerClient:
    """Signs locally and broadcasts EIP-1559 transactions through a web3 provider."""

    def __init__(
        self,
        web3: Web3,
        private_key: str,
        chain_id: int,
        abi: Optional[List[Dict[str, object]]] = None,
        poll_latency: float = 0.1,
    ) -> None:
        self._web3 = web3
        self._account = web3.eth.account.from_key("0x" + private_key.removeprefix("0x"))
        self._chain_id = chain_id
        self._abi = abi or TOKEN_ABI
        self._poll_latency = poll_latency

    @classmethod
    def from_config(
        cls, config: LedgerConfig, abi: Optional[List[Dict[str, object]]] = None
    ) -> "Web3LedgerClient":
        web3 = Web3(Web3.HTTPProvider(config.rpc_url))
        if not web3.is_connected():
            raise ConfigurationError(f"RPC endpoint not reachable: {config.rpc_url}")
        remote_chain_id = web3.eth.chain_id
        if remote_chain_id != config.chain_id:
            raise ConfigurationError(
                f"CHAIN_ID {config.chain_id} does not match endpoint chain {remote_chain_id}."
            )
        return cls(
            web3,
            private_key=config.private_key,
            chain_id=config.chain_id,
            abi=abi,
            poll_latency=config.poll_latency,
        )

    @property
    def signer_address(self) -> str:
        return to_checksum_address(self._account.address)

    def submit_transaction(self, request: TransactionRequest) -> TransactionHandle:
        contract = self._contract(request.target)
        try:
            function = contract.functions[request.function](*request.args)
            tx = function.build_transaction(self._tx_fields(request.fees))
        except ContractLogicError as exc:
            raise SubmissionError(f"{request.function} rejected during estimation: {exc}") from exc
        except (Web3Exception, ValueError) as exc:
            raise SubmissionError(f"{request.function} could not be built: {exc}") from exc
        return self._send(tx, label=request.function)

    def deploy_contract(
        self, bytecode: str, args: Sequence[object], fees: FeeParams
    ) -> TransactionHandle:
        factory = self._web3.eth.contract(abi=self._abi, bytecode=bytecode)
        try:
            tx = factory.constructor(*args).build_transaction(self._tx_fields(fees))
        except (Web3Exception, ValueError) as exc:
            raise SubmissionError(f"Deployment could not be built: {exc}") from exc
        return self._send(tx, label="deploy")

    def wait_for_receipt(self, handle: TransactionHandle, timeout: float) -> TransactionReceipt:
        try:
            raw = self._web3.eth.wait_for_transaction_receipt(
                handle.tx_hash, timeout=timeout, poll_latency=self._poll_latency
            )
        except TimeExhausted as exc:
            raise ConfirmationTimeoutError(handle.tx_hash, timeout) from exc

        contract_address = raw.get("contractAddress")
        receipt = TransactionReceipt(
            tx_hash=Web3.to_hex(raw["transactionHash"]),
            block_number=int(raw["blockNumber"]),
            gas_used=int(raw["gasUsed"]),
            status=int(raw["status"]),
            effective_gas_price=int(raw.get("effectiveGasPrice", 0) or 0),
            contract_address=to_checksum_address(contract_address) if contract_address else None,
        )
        logger.info(
            "Receipt %s block=%s gas_used=%s status=%s",
            receipt.tx_hash,
            receipt.block_number,
            receipt.gas_used,
            receipt.status,
        )
        if not receipt.succeeded:
            raise RevertError(f"Transaction {receipt.tx_hash} reverted.", receipt=receipt)
        return receipt

    def read_state(self, target: str, function: str, args: Sequence[object] = ()) -> Any:
        return self._contract(target).functions[function](*args).call()

    def fetch_logs(self, target: str, from_block: int, to_block: int) -> Sequence[RawLog]:
        entries = self._web3.eth.get_logs(
            {
                "address": to_checksum_address(target),
                "fromBlock": from_block,
                "toBlock": to_block,
            }
        )
        return tuple(_to_raw_log(entry) for entry in entries)

    def current_block_height(self) -> int:
        return int(self._web3.eth.block_number)

    def _contract(self, target: str):
        return self._web3.eth.contract(address=to_checksum_address(target), abi=self._abi)

    def _tx_fields(self, fees: FeeParams) -> Dict[str, object]:
        return {
            "from": self._account.address,
            "nonce": self._web3.eth.get_transaction_count(self._account.address, "pending"),
            "chainId": self._chain_id,
            "maxPriorityFeePerGas": fees.max_priority_fee_per_gas,
            "maxFeePerGas": fees.max_fee_per_gas,
        }

    def _send(self, tx: Dict[str, object], label: str) -> TransactionHandle:
        signed = self._account.sign_transaction(tx)
        try:
            tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError) as exc:
            raise SubmissionError(f"{label} rejected by the ledger: {exc}") from exc
        handle = TransactionHandle(tx_hash=Web3.to_hex(tx_hash))
        logger.info("Submitted %s nonce=%s tx=%s", label, tx["nonce"], handle.tx_hash)
        return handle


def _to_raw_log(entry: Any) -> RawLog:
    topics: Tuple[bytes, ...] = tuple(bytes(topic) for topic in entry["topics"])
    return RawLog(
        address=to_checksum_address(entry["address"]),
        topics=topics,
        data=bytes(entry["data"]),
        block_number=int(entry["blockNumber"]),
        transaction_hash=Web3.to_hex(entry["transactionHash"]),
        log_index=int(entry["logIndex"]),
    )

"""Simulate token contract execution in memory without network calls."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from eth_abi import encode
from eth_utils import event_abi_to_log_topic, keccak, to_checksum_address
from web3 import Web3

from .abi import TOKEN_ABI, event_abis
from .errors import ConfirmationTimeoutError, RevertError, SubmissionError
from .models import FeeParams, RawLog, TransactionHandle, TransactionReceipt, TransactionRequest

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEFAULT_ADMIN_ROLE = b"\x00" * 32


class SimulationError(ValueError):
    """Raised when the simulated ledger is asked for something it does not model."""


class _Reverted(Exception):
    pass


@dataclass(frozen=True)
class GasSchedule:
    """Deterministic gas charged per simulated operation, on top of the base cost."""

    base: int = 21_000
    transfer: int = 30_000
    approve: int = 24_000
    transfer_from: int = 36_000
    airdrop_base: int = 8_000
    airdrop_per_recipient: int = 26_000
    pause: int = 26_000
    deploy: int = 1_150_000
    revert: int = 2_000


@dataclass
class _TokenState:
    name: str
    symbol: str
    cap: int
    admin: str
    decimals: int = 18
    total_supply: int = 0
    paused: bool = False
    balances: Dict[str, int] = field(default_factory=dict)
    allowances: Dict[Tuple[str, str], int] = field(default_factory=dict)


@dataclass(frozen=True)
class _Pending:
    handle: TransactionHandle
    sender: str
    nonce: int
    fees: FeeParams
    request: Optional[TransactionRequest] = None
    constructor_args: Tuple[object, ...] = ()


_EVENT_ABIS = {entry["name"]: entry for entry in event_abis(TOKEN_ABI)}
_WRITE_FUNCTIONS = ("transfer", "approve", "transferFrom", "airdrop", "pause", "unpause")


class SimulatedLedger:
    """In-memory ledger executing the token interface with one block per receipt."""

    def __init__(
        self,
        signer_address: str,
        gas_schedule: Optional[GasSchedule] = None,
        base_fee_per_gas: int = Web3.to_wei(1, "gwei"),
        min_priority_fee_per_gas: int = 0,
    ) -> None:
        self._signer = to_checksum_address(signer_address)
        self._gas = gas_schedule or GasSchedule()
        self._base_fee = base_fee_per_gas
        self._min_priority_fee = min_priority_fee_per_gas
        self._block = 0
        self._nonces: Dict[str, int] = {}
        self._pending: Dict[str, _Pending] = {}
        self._mined: Dict[str, TransactionReceipt] = {}
        self._tokens: Dict[str, _TokenState] = {}
        self._logs: List[RawLog] = []
        self.withhold_receipts = False

    @property
    def signer_address(self) -> str:
        return self._signer

    def install_token(
        self,
        initial_mint: int,
        cap: Optional[int] = None,
        name: str = "CampusCredit",
        symbol: str = "CAMP",
    ) -> str:
        """Deploy a token through the normal submit/mine path and return its address."""

        fees = FeeParams(
            max_priority_fee_per_gas=self._min_priority_fee,
            max_fee_per_gas=self._base_fee + self._min_priority_fee,
        )
        cap_value = cap if cap is not None else initial_mint * 2
        handle = self.deploy_contract(
            "0x", (name, symbol, cap_value, self._signer, initial_mint), fees
        )
        receipt = self.wait_for_receipt(handle, timeout=0)
        return receipt.contract_address

    def submit_transaction(self, request: TransactionRequest) -> TransactionHandle:
        target = to_checksum_address(request.target)
        if target not in self._tokens:
            raise SubmissionError(f"No contract deployed at {target}.")
        if request.function not in _WRITE_FUNCTIONS:
            raise SubmissionError(f"Function {request.function} is not a state-changing call.")
        return self._enqueue(request.fees, request=request)

    def deploy_contract(
        self, bytecode: str, args: Sequence[object], fees: FeeParams
    ) -> TransactionHandle:
        if len(args) != 5:
            raise SubmissionError("Constructor expects (name, symbol, cap, admin, initialMint).")
        return self._enqueue(fees, constructor_args=tuple(args))

    def wait_for_receipt(self, handle: TransactionHandle, timeout: float) -> TransactionReceipt:
        if handle.tx_hash in self._mined:
            return self._finish(self._mined[handle.tx_hash])
        pending = self._pending.get(handle.tx_hash)
        if pending is None:
            raise SimulationError(f"Unknown transaction {handle.tx_hash}.")
        if self.withhold_receipts:
            raise ConfirmationTimeoutError(handle.tx_hash, timeout)

        receipt = self._mine(pending)
        del self._pending[handle.tx_hash]
        self._mined[handle.tx_hash] = receipt
        return self._finish(receipt)

    def read_state(self, target: str, function: str, args: Sequence[object] = ()) -> Any:
        token = self._token(target)
        if function == "name":
            return token.name
        if function == "symbol":
            return token.symbol
        if function == "decimals":
            return token.decimals
        if function == "totalSupply":
            return token.total_supply
        if function == "cap":
            return token.cap
        if function == "paused":
            return token.paused
        if function == "balanceOf":
            return token.balances.get(to_checksum_address(args[0]), 0)
        if function == "allowance":
            key = (to_checksum_address(args[0]), to_checksum_address(args[1]))
            return token.allowances.get(key, 0)
        raise SimulationError(f"Unsupported read: {function}")

    def fetch_logs(self, target: str, from_block: int, to_block: int) -> Sequence[RawLog]:
        address = to_checksum_address(target)
        return tuple(
            log
            for log in self._logs
            if log.address == address and from_block <= log.block_number <= to_block
        )

    def current_block_height(self) -> int:
        return self._block

    def _enqueue(
        self,
        fees: FeeParams,
        request: Optional[TransactionRequest] = None,
        constructor_args: Tuple[object, ...] = (),
    ) -> TransactionHandle:
        sender = self._signer
        if any(item.sender == sender for item in self._pending.values()):
            raise SubmissionError(
                f"Nonce conflict: {sender} already has an unconfirmed transaction."
            )
        if fees.max_priority_fee_per_gas < self._min_priority_fee:
            raise SubmissionError("Priority fee below the ledger minimum.")
        if fees.max_fee_per_gas < self._base_fee:
            raise SubmissionError("Max fee below the current base fee.")

        nonce = self._nonces.get(sender, 0)
        self._nonces[sender] = nonce + 1
        tx_hash = "0x" + keccak(f"{sender}:{nonce}".encode("ascii")).hex()
        handle = TransactionHandle(tx_hash=tx_hash)
        self._pending[tx_hash] = _Pending(
            handle=handle,
            sender=sender,
            nonce=nonce,
            fees=fees,
            request=request,
            constructor_args=constructor_args,
        )
        logger.debug("Queued %s nonce=%s", tx_hash, nonce)
        return handle

    def _mine(self, pending: _Pending) -> TransactionReceipt:
        self._block += 1
        price = min(pending.fees.max_fee_per_gas, self._base_fee + pending.fees.max_priority_fee_per_gas)
        contract_address = None
        try:
            if pending.request is None:
                contract_address, logs, gas = self._execute_deploy(pending)
            else:
                logs, gas = self._execute_call(pending.sender, pending.request)
        except _Reverted as exc:
            logger.warning("Simulated revert %s: %s", pending.handle.tx_hash, exc)
            return TransactionReceipt(
                tx_hash=pending.handle.tx_hash,
                block_number=self._block,
                gas_used=self._gas.base + self._gas.revert,
                status=0,
                effective_gas_price=price,
            )

        for index, (address, topics, data) in enumerate(logs):
            self._logs.append(
                RawLog(
                    address=address,
                    topics=topics,
                    data=data,
                    block_number=self._block,
                    transaction_hash=pending.handle.tx_hash,
                    log_index=index,
                )
            )
        return TransactionReceipt(
            tx_hash=pending.handle.tx_hash,
            block_number=self._block,
            gas_used=self._gas.base + gas,
            status=1,
            effective_gas_price=price,
            contract_address=contract_address,
        )

    def _finish(self, receipt: TransactionReceipt) -> TransactionReceipt:
        if not receipt.succeeded:
            raise RevertError(f"Transaction {receipt.tx_hash} reverted.", receipt=receipt)
        return receipt

    def _execute_deploy(self, pending: _Pending):
        name, symbol, cap, admin, initial_mint = pending.constructor_args
        admin = to_checksum_address(admin)
        if int(initial_mint) > int(cap):
            raise _Reverted("initial mint exceeds cap")
        address = to_checksum_address(
            keccak(f"{pending.sender}:{pending.nonce}:create".encode("ascii"))[-20:]
        )
        token = _TokenState(name=str(name), symbol=str(symbol), cap=int(cap), admin=admin)
        self._tokens[address] = token
        logs = [_event_log(address, "RoleGranted", DEFAULT_ADMIN_ROLE, admin, pending.sender)]
        if int(initial_mint):
            _mint(token, admin, int(initial_mint))
            logs.append(_event_log(address, "Transfer", ZERO_ADDRESS, admin, int(initial_mint)))
        return address, logs, self._gas.deploy

    def _execute_call(self, sender: str, request: TransactionRequest):
        address = to_checksum_address(request.target)
        token = self._tokens[address]
        args = request.args
        function = request.function

        if function in ("pause", "unpause"):
            if sender != token.admin:
                raise _Reverted("caller is not admin")
            token.paused = function == "pause"
            event = "Paused" if token.paused else "Unpaused"
            return [_event_log(address, event, sender)], self._gas.pause

        if function == "approve":
            spender, value = to_checksum_address(args[0]), int(args[1])
            token.allowances[(sender, spender)] = value
            return [_event_log(address, "Approval", sender, spender, value)], self._gas.approve

        if token.paused:
            raise _Reverted("token is paused")

        if function == "transfer":
            recipient, value = to_checksum_address(args[0]), int(args[1])
            _move(token, sender, recipient, value)
            return [_event_log(address, "Transfer", sender, recipient, value)], self._gas.transfer

        if function == "transferFrom":
            owner = to_checksum_address(args[0])
            recipient, value = to_checksum_address(args[1]), int(args[2])
            allowed = token.allowances.get((owner, sender), 0)
            if allowed < value:
                raise _Reverted("insufficient allowance")
            _move(token, owner, recipient, value)
            token.allowances[(owner, sender)] = allowed - value
            logs = [_event_log(address, "Transfer", owner, recipient, value)]
            return logs, self._gas.transfer_from

        recipients, amounts = list(args[0]), [int(amount) for amount in args[1]]
        if len(recipients) != len(amounts):
            raise _Reverted("length mismatch")
        if sender != token.admin:
            raise _Reverted("caller is not admin")
        if token.total_supply + sum(amounts) > token.cap:
            raise _Reverted("cap exceeded")
        logs = []
        for recipient, amount in zip(recipients, amounts):
            recipient = to_checksum_address(recipient)
            _mint(token, recipient, amount)
            logs.append(_event_log(address, "Transfer", ZERO_ADDRESS, recipient, amount))
        gas = self._gas.airdrop_base + self._gas.airdrop_per_recipient * len(recipients)
        return logs, gas

    def _token(self, target: str) -> _TokenState:
        address = to_checksum_address(target)
        if address not in self._tokens:
            raise SimulationError(f"No contract deployed at {address}.")
        return self._tokens[address]


def _mint(token: _TokenState, recipient: str, amount: int) -> None:
    token.balances[recipient] = token.balances.get(recipient, 0) + amount
    token.total_supply += amount


def _move(token: _TokenState, sender: str, recipient: str, value: int) -> None:
    balance = token.balances.get(sender, 0)
    if balance < value:
        raise _Reverted("insufficient balance")
    token.balances[sender] = balance - value
    token.balances[recipient] = token.balances.get(recipient, 0) + value


def _event_log(address: str, name: str, *values: object):
    event = _EVENT_ABIS[name]
    topics = [event_abi_to_log_topic(event)]
    data_types: List[str] = []
    data_values: List[object] = []
    for param, value in zip(event["inputs"], values):
        if param["indexed"]:
            topics.append(encode([param["type"]], [value]))
        else:
            data_types.append(param["type"])
            data_values.append(value)
    return address, tuple(topics), encode(data_types, data_values)

"""Ledger adapter models for transaction requests, receipts and raw logs."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union

from web3 import Web3

from .errors import ConfigurationError


@dataclass(frozen=True)
class FeeParams:
    """EIP-1559 fee caps in wei."""

    max_priority_fee_per_gas: int
    max_fee_per_gas: int

    def __post_init__(self) -> None:
        if self.max_priority_fee_per_gas < 0 or self.max_fee_per_gas < 0:
            raise ConfigurationError("Fee parameters must be non-negative.")
        if self.max_fee_per_gas < self.max_priority_fee_per_gas:
            raise ConfigurationError("max_fee_per_gas must be >= max_priority_fee_per_gas.")

    @staticmethod
    def from_gwei(
        priority: Union[int, Decimal, str], max_fee: Union[int, Decimal, str]
    ) -> "FeeParams":
        return FeeParams(
            max_priority_fee_per_gas=Web3.to_wei(priority, "gwei"),
            max_fee_per_gas=Web3.to_wei(max_fee, "gwei"),
        )


@dataclass(frozen=True)
class TransactionRequest:
    target: str
    function: str
    args: Tuple[object, ...]
    fees: FeeParams


@dataclass(frozen=True)
class TransactionHandle:
    tx_hash: str


@dataclass(frozen=True)
class TransactionReceipt:
    tx_hash: str
    block_number: int
    gas_used: int
    status: int
    effective_gas_price: int = 0
    contract_address: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @property
    def cost_wei(self) -> int:
        return self.gas_used * self.effective_gas_price


@dataclass(frozen=True)
class RawLog:
    address: str
    topics: Tuple[bytes, ...]
    data: bytes
    block_number: int
    transaction_hash: str = ""
    log_index: int = 0

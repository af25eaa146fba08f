"""Results produced by orchestrated ledger workflows."""

from dataclasses import dataclass
from typing import Optional, Tuple

from event_decoder.models import DecodedEvent
from gas_accounting.models import GasComparisonReport
from inspector.models import BalanceSnapshot
from ledger_adapter.ethereum.models import TransactionReceipt


@dataclass(frozen=True)
class IndividualRun:
    receipts: Tuple[TransactionReceipt, ...]
    total_gas_used: int


@dataclass(frozen=True)
class ComparisonRun:
    batch_receipt: TransactionReceipt
    individual: IndividualRun
    report: GasComparisonReport


@dataclass(frozen=True)
class DeploymentResult:
    tx_hash: str
    contract_address: str
    block_number: int
    gas_used: int


@dataclass(frozen=True)
class TransferApproveResult:
    before: BalanceSnapshot
    transfer_receipt: TransactionReceipt
    approve_receipt: TransactionReceipt
    allowance: int
    after: BalanceSnapshot


@dataclass(frozen=True)
class EventHistory:
    from_block: int
    to_block: int
    events: Tuple[DecodedEvent, ...]
    token_address: Optional[str] = None

"""Transaction orchestration for batched versus individual token distribution."""

import logging
from typing import List, Optional, Sequence

from distribution.models import DistributionPlan
from distribution.planner import normalize_address, validate_plan
from gas_accounting.engine import compare_receipts
from ledger_adapter.ethereum.client import LedgerClient
from ledger_adapter.ethereum.config import DEFAULT_RECEIPT_TIMEOUT, LedgerConfig
from ledger_adapter.ethereum.errors import LedgerError
from ledger_adapter.ethereum.models import FeeParams, TransactionReceipt, TransactionRequest

from .fees import FeeSchedule
from .models import ComparisonRun, IndividualRun
from .signing import PROCESS_IDENTITY_LOCK, SigningIdentityLock

logger = logging.getLogger(__name__)


class TransactionRunner:
    """Submits one transaction at a time and blocks until its receipt is observed."""

    def __init__(
        self,
        client: LedgerClient,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        identity_lock: Optional[SigningIdentityLock] = None,
    ) -> None:
        self._client = client
        self._receipt_timeout = receipt_timeout
        self._identity_lock = identity_lock or PROCESS_IDENTITY_LOCK

    @property
    def client(self) -> LedgerClient:
        return self._client

    def execute(self, request: TransactionRequest) -> TransactionReceipt:
        with self._identity_lock.hold(self._client.signer_address):
            handle = self._client.submit_transaction(request)
            return self._client.wait_for_receipt(handle, timeout=self._receipt_timeout)

    def deploy(self, bytecode: str, args: Sequence[object], fees: FeeParams) -> TransactionReceipt:
        with self._identity_lock.hold(self._client.signer_address):
            handle = self._client.deploy_contract(bytecode, args, fees)
            return self._client.wait_for_receipt(handle, timeout=self._receipt_timeout)


class TransactionOrchestrator:
    """Runs one distribution plan as a single batch and as per-recipient transfers."""

    def __init__(
        self,
        client: LedgerClient,
        token_address: str,
        fees: Optional[FeeSchedule] = None,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        identity_lock: Optional[SigningIdentityLock] = None,
    ) -> None:
        self._runner = TransactionRunner(client, receipt_timeout, identity_lock)
        self._token = normalize_address(token_address)
        self._fees = fees or FeeSchedule()

    @classmethod
    def from_config(
        cls,
        client: LedgerClient,
        config: LedgerConfig,
        fees: Optional[FeeSchedule] = None,
    ) -> "TransactionOrchestrator":
        return cls(
            client,
            token_address=config.require_token(),
            fees=fees,
            receipt_timeout=config.receipt_timeout,
        )

    def run_batch(self, plan: DistributionPlan) -> TransactionReceipt:
        validate_plan(plan)
        request = TransactionRequest(
            target=self._token,
            function="airdrop",
            args=(list(plan.recipients), list(plan.amounts)),
            fees=self._fees.batch,
        )
        receipt = self._runner.execute(request)
        logger.info(
            "Batch distribution to %s recipients used %s gas in block %s",
            len(plan),
            receipt.gas_used,
            receipt.block_number,
        )
        return receipt

    def run_individual(self, plan: DistributionPlan) -> IndividualRun:
        validate_plan(plan)
        receipts: List[TransactionReceipt] = []
        for position, entry in enumerate(plan.entries, start=1):
            request = TransactionRequest(
                target=self._token,
                function="transfer",
                args=(entry.recipient, entry.amount),
                fees=self._fees.individual,
            )
            try:
                receipt = self._runner.execute(request)
            except LedgerError as exc:
                logger.warning(
                    "Individual transfers aborted at entry %s of %s: %s", position, len(plan), exc
                )
                raise
            receipts.append(receipt)

        total = sum(receipt.gas_used for receipt in receipts)
        logger.info("Individual transfers to %s recipients used %s gas", len(plan), total)
        return IndividualRun(receipts=tuple(receipts), total_gas_used=total)

    def compare(self, plan: DistributionPlan) -> ComparisonRun:
        batch_receipt = self.run_batch(plan)
        individual = self.run_individual(plan)
        report = compare_receipts(batch_receipt, individual.receipts)
        return ComparisonRun(batch_receipt=batch_receipt, individual=individual, report=report)

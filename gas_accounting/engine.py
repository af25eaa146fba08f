"""Pure computation engine comparing batched and individual gas consumption."""

from decimal import Decimal
from typing import Iterable, Sequence

from ledger_adapter.ethereum.models import TransactionReceipt

from .models import GasComparisonReport


class GasAccountingError(ValueError):
    """Raised when consumption values cannot be compared."""


def _validate_gas(value: int, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise GasAccountingError(f"{label} must be an integer.")
    if value < 0:
        raise GasAccountingError(f"{label} must be non-negative.")


def percent_of(saved: int, total: int) -> Decimal:
    """Return ``saved`` as a percentage of ``total``; zero when there is no total."""

    if total == 0:
        return Decimal(0)
    return Decimal(saved) * 100 / Decimal(total)


def compare_gas(
    batched_gas: int,
    individual_gas: Iterable[int],
    batched_cost_wei: int = 0,
    individual_cost_wei: int = 0,
) -> GasComparisonReport:
    individual = tuple(individual_gas)
    _validate_gas(batched_gas, "batched_gas")
    for value in individual:
        _validate_gas(value, "individual_gas")

    individual_total = sum(individual)
    saved = individual_total - batched_gas
    return GasComparisonReport(
        batched_gas=batched_gas,
        individual_gas=individual,
        individual_total=individual_total,
        saved=saved,
        percent_saved=percent_of(saved, individual_total),
        batched_cost_wei=batched_cost_wei,
        individual_cost_wei=individual_cost_wei,
    )


def compare_receipts(
    batch_receipt: TransactionReceipt,
    individual_receipts: Sequence[TransactionReceipt],
) -> GasComparisonReport:
    return compare_gas(
        batch_receipt.gas_used,
        (receipt.gas_used for receipt in individual_receipts),
        batched_cost_wei=batch_receipt.cost_wei,
        individual_cost_wei=sum(receipt.cost_wei for receipt in individual_receipts),
    )

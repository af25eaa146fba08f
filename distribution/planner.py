"""Distribution plan construction with validation ahead of any ledger call."""

from typing import Iterable, Sequence

from eth_utils import is_address, to_checksum_address

from ledger_adapter.ethereum.errors import ConfigurationError

from .models import DistributionEntry, DistributionPlan


class PlanValidationError(ConfigurationError):
    """Raised when a distribution plan violates hard validation rules."""


def normalize_address(value: str) -> str:
    """Return the checksummed form of ``value``."""

    if not isinstance(value, str) or not is_address(value):
        raise PlanValidationError(f"Invalid address: {value!r}")
    return to_checksum_address(value)


def build_plan(recipients: Sequence[str], amounts: Sequence[int]) -> DistributionPlan:
    if len(recipients) != len(amounts):
        raise PlanValidationError(
            f"Recipient count {len(recipients)} does not match amount count {len(amounts)}."
        )
    plan = DistributionPlan(
        entries=tuple(
            DistributionEntry(recipient=normalize_address(recipient), amount=amount)
            for recipient, amount in zip(recipients, amounts)
        )
    )
    validate_plan(plan)
    return plan


def validate_plan(plan: DistributionPlan) -> None:
    if not plan.entries:
        raise PlanValidationError("Plan must include at least one recipient.")
    _validate_amounts(entry.amount for entry in plan.entries)
    for entry in plan.entries:
        if normalize_address(entry.recipient) != entry.recipient:
            raise PlanValidationError(f"Recipient {entry.recipient} is not normalized.")


def _validate_amounts(amounts: Iterable[int]) -> None:
    for amount in amounts:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise PlanValidationError("Amounts must be integer base units.")
        if amount < 0:
            raise PlanValidationError("Amounts must be non-negative.")

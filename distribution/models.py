"""Domain models for token distribution plans."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class DistributionEntry:
    recipient: str
    amount: int


@dataclass(frozen=True)
class DistributionPlan:
    """Ordered (recipient, amount) pairs; a recipient may appear more than once."""

    entries: Tuple[DistributionEntry, ...]

    @property
    def recipients(self) -> Tuple[str, ...]:
        return tuple(entry.recipient for entry in self.entries)

    @property
    def amounts(self) -> Tuple[int, ...]:
        return tuple(entry.amount for entry in self.entries)

    @property
    def total_amount(self) -> int:
        return sum(self.amounts)

    def __len__(self) -> int:
        return len(self.entries)

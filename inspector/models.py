"""Point-in-time token state snapshots."""

from dataclasses import dataclass
from typing import Dict, Tuple

from distribution.units import format_units


@dataclass(frozen=True)
class BalanceSnapshot:
    label: str
    block_number: int
    balances: Tuple[Tuple[str, int], ...]

    def balance(self, address: str) -> int:
        for holder, amount in self.balances:
            if holder == address:
                return amount
        raise KeyError(f"{address} not in snapshot {self.label}")

    def to_dict(self) -> Dict[str, object]:
        return {
            "label": self.label,
            "block_number": self.block_number,
            "balances": {holder: format_units(amount) for holder, amount in self.balances},
        }


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    decimals: int
    total_supply: int
    cap: int

"""Gas comparison report schema."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Tuple

_DISPLAY_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class GasComparisonReport:
    """Batched versus individual resource consumption for one distribution plan."""

    batched_gas: int
    individual_gas: Tuple[int, ...]
    individual_total: int
    saved: int  # Negative when batching costs more.
    percent_saved: Decimal
    batched_cost_wei: int = 0
    individual_cost_wei: int = 0

    @property
    def percent_saved_display(self) -> str:
        return str(self.percent_saved.quantize(_DISPLAY_QUANTUM, rounding=ROUND_HALF_UP))

    @property
    def cost_saved_wei(self) -> int:
        return self.individual_cost_wei - self.batched_cost_wei

    def to_dict(self) -> Dict[str, object]:
        return {
            "batched_gas": self.batched_gas,
            "individual_gas": list(self.individual_gas),
            "individual_total": self.individual_total,
            "saved": self.saved,
            "percent_saved": self.percent_saved_display,
            "batched_cost_wei": self.batched_cost_wei,
            "individual_cost_wei": self.individual_cost_wei,
            "cost_saved_wei": self.cost_saved_wei,
        }

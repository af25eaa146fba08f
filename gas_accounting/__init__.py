from .engine import GasAccountingError, compare_gas, compare_receipts, percent_of
from .models import GasComparisonReport

__all__ = [
    "GasAccountingError",
    "GasComparisonReport",
    "compare_gas",
    "compare_receipts",
    "percent_of",
]

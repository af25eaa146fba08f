from .inspector import BalanceInspector
from .models import BalanceSnapshot, TokenMetadata

__all__ = [
    "BalanceInspector",
    "BalanceSnapshot",
    "TokenMetadata",
]

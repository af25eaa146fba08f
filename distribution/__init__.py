from .models import DistributionEntry, DistributionPlan
from .planner import PlanValidationError, build_plan, normalize_address, validate_plan
from .units import TOKEN_DECIMALS, format_units, parse_units

__all__ = [
    "DistributionEntry",
    "DistributionPlan",
    "PlanValidationError",
    "TOKEN_DECIMALS",
    "build_plan",
    "format_units",
    "normalize_address",
    "parse_units",
    "validate_plan",
]

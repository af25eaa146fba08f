"""Fee classes applied to each kind of transaction."""

from dataclasses import dataclass

from ledger_adapter.ethereum.models import FeeParams

BATCH_FEES = FeeParams.from_gwei(2, 22)
INDIVIDUAL_FEES = FeeParams.from_gwei(2, 22)
DEPLOY_FEES = FeeParams.from_gwei(2, 20)
TRANSFER_FEES = FeeParams.from_gwei(1, 20)
APPROVE_FEES = FeeParams.from_gwei(2, 21)


@dataclass(frozen=True)
class FeeSchedule:
    batch: FeeParams = BATCH_FEES
    individual: FeeParams = INDIVIDUAL_FEES

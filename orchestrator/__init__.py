from .fees import (
    APPROVE_FEES,
    BATCH_FEES,
    DEPLOY_FEES,
    INDIVIDUAL_FEES,
    TRANSFER_FEES,
    FeeSchedule,
)
from .models import (
    ComparisonRun,
    DeploymentResult,
    EventHistory,
    IndividualRun,
    TransferApproveResult,
)
from .orchestrator import TransactionOrchestrator, TransactionRunner
from .signing import PROCESS_IDENTITY_LOCK, SigningIdentityLock
from .workflows import deploy_token, recent_events, transfer_and_approve

__all__ = [
    "APPROVE_FEES",
    "BATCH_FEES",
    "ComparisonRun",
    "DEPLOY_FEES",
    "DeploymentResult",
    "EventHistory",
    "FeeSchedule",
    "INDIVIDUAL_FEES",
    "IndividualRun",
    "PROCESS_IDENTITY_LOCK",
    "SigningIdentityLock",
    "TRANSFER_FEES",
    "TransactionOrchestrator",
    "TransactionRunner",
    "TransferApproveResult",
    "deploy_token",
    "recent_events",
    "transfer_and_approve",
]

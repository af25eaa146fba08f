from .abi import TOKEN_ABI, load_artifact
from .client import LedgerClient, Web3LedgerClient
from .config import DeploymentSettings, LedgerConfig, load_config
from .errors import (
    ConfigurationError,
    ConfirmationTimeoutError,
    DecodeError,
    LedgerError,
    RevertError,
    SubmissionError,
)
from .models import FeeParams, RawLog, TransactionHandle, TransactionReceipt, TransactionRequest
from .simulator import GasSchedule, SimulatedLedger, SimulationError

__all__ = [
    "ConfigurationError",
    "ConfirmationTimeoutError",
    "DecodeError",
    "DeploymentSettings",
    "FeeParams",
    "GasSchedule",
    "LedgerClient",
    "LedgerConfig",
    "LedgerError",
    "RawLog",
    "RevertError",
    "SimulatedLedger",
    "SimulationError",
    "SubmissionError",
    "TOKEN_ABI",
    "TransactionHandle",
    "TransactionReceipt",
    "TransactionRequest",
    "Web3LedgerClient",
    "load_artifact",
    "load_config",
]

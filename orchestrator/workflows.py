"""Single-purpose token workflows: deploy, transfer then approve, and event history."""

import logging
from typing import Optional

from distribution.planner import normalize_address
from distribution.units import TOKEN_DECIMALS, parse_units
from event_decoder.decoder import EventDecoder
from inspector.inspector import BalanceInspector
from ledger_adapter.ethereum.client import LedgerClient
from ledger_adapter.ethereum.config import DEFAULT_RECEIPT_TIMEOUT, DeploymentSettings
from ledger_adapter.ethereum.errors import ConfigurationError, RevertError
from ledger_adapter.ethereum.models import FeeParams, TransactionRequest

from .fees import APPROVE_FEES, DEPLOY_FEES, TRANSFER_FEES
from .models import DeploymentResult, EventHistory, TransferApproveResult
from .orchestrator import TransactionRunner
from .signing import SigningIdentityLock

logger = logging.getLogger(__name__)

DEFAULT_RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
DEFAULT_TRANSFER_AMOUNT = parse_units("100")
DEFAULT_APPROVE_AMOUNT = parse_units("50")
DEFAULT_LOOKBACK = 2000


def deploy_token(
    client: LedgerClient,
    bytecode: str,
    settings: Optional[DeploymentSettings] = None,
    fees: FeeParams = DEPLOY_FEES,
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
    identity_lock: Optional[SigningIdentityLock] = None,
) -> DeploymentResult:
    settings = settings or DeploymentSettings()
    try:
        cap = parse_units(settings.cap, TOKEN_DECIMALS)
        initial_mint = parse_units(settings.initial_mint, TOKEN_DECIMALS)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid token supply setting: {exc}") from exc
    if initial_mint > cap:
        raise ConfigurationError(
            f"Initial mint {settings.initial_mint} exceeds cap {settings.cap}."
        )

    runner = TransactionRunner(client, receipt_timeout, identity_lock)
    args = (settings.name, settings.symbol, cap, client.signer_address, initial_mint)
    receipt = runner.deploy(bytecode, args, fees)
    if not receipt.contract_address:
        raise RevertError(
            f"Deployment {receipt.tx_hash} produced no contract address.", receipt=receipt
        )

    logger.info(
        "Deployed %s (%s) at %s in block %s",
        settings.name,
        settings.symbol,
        receipt.contract_address,
        receipt.block_number,
    )
    return DeploymentResult(
        tx_hash=receipt.tx_hash,
        contract_address=receipt.contract_address,
        block_number=receipt.block_number,
        gas_used=receipt.gas_used,
    )


def transfer_and_approve(
    client: LedgerClient,
    inspector: BalanceInspector,
    recipient: str = DEFAULT_RECIPIENT,
    transfer_amount: int = DEFAULT_TRANSFER_AMOUNT,
    approve_amount: int = DEFAULT_APPROVE_AMOUNT,
    transfer_fees: FeeParams = TRANSFER_FEES,
    approve_fees: FeeParams = APPROVE_FEES,
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
    identity_lock: Optional[SigningIdentityLock] = None,
) -> TransferApproveResult:
    """Transfer to ``recipient``, then approve it as spender, bracketed by snapshots.

    The approve is only submitted after the transfer receipt is observed.
    """
    recipient = normalize_address(recipient)
    for label, amount in (("transfer", transfer_amount), ("approve", approve_amount)):
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ConfigurationError(f"{label} amount must be a non-negative integer.")

    token = inspector.token_address
    holders = (client.signer_address, recipient)
    runner = TransactionRunner(client, receipt_timeout, identity_lock)

    before = inspector.snapshot(holders, label="Before")
    transfer_receipt = runner.execute(
        TransactionRequest(token, "transfer", (recipient, transfer_amount), transfer_fees)
    )
    approve_receipt = runner.execute(
        TransactionRequest(token, "approve", (recipient, approve_amount), approve_fees)
    )
    allowance = inspector.allowance(client.signer_address, recipient)
    after = inspector.snapshot(holders, label="After")

    logger.info(
        "Transfer %s and approve %s confirmed in blocks %s and %s",
        transfer_receipt.tx_hash,
        approve_receipt.tx_hash,
        transfer_receipt.block_number,
        approve_receipt.block_number,
    )
    return TransferApproveResult(
        before=before,
        transfer_receipt=transfer_receipt,
        approve_receipt=approve_receipt,
        allowance=allowance,
        after=after,
    )


def recent_events(
    client: LedgerClient,
    decoder: EventDecoder,
    token_address: str,
    lookback: int = DEFAULT_LOOKBACK,
) -> EventHistory:
    if lookback < 0:
        raise ConfigurationError("lookback must be non-negative.")
    token = normalize_address(token_address)
    latest = client.current_block_height()
    from_block = max(0, latest - lookback)
    logs = client.fetch_logs(token, from_block, latest)
    events = tuple(decoder.decode_logs(logs))
    logger.info("Decoded %s logs for %s in blocks %s..%s", len(events), token, from_block, latest)
    return EventHistory(from_block=from_block, to_block=latest, events=events, token_address=token)

"""Operator CLI for token deployment, distribution and inspection."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from distribution.models import DistributionPlan
from distribution.planner import build_plan, normalize_address
from distribution.units import format_units, parse_units
from event_decoder.decoder import EventDecoder
from event_decoder.models import (
    ApprovalEvent,
    DecodedEvent,
    GenericEvent,
    TransferEvent,
    UnknownEvent,
    event_to_dict,
)
from inspector.inspector import BalanceInspector
from ledger_adapter.ethereum.abi import TOKEN_ABI, load_artifact
from ledger_adapter.ethereum.client import LedgerClient, Web3LedgerClient
from ledger_adapter.ethereum.config import (
    DEFAULT_RECEIPT_TIMEOUT,
    DeploymentSettings,
    load_config,
)
from ledger_adapter.ethereum.errors import ConfigurationError, LedgerError
from ledger_adapter.ethereum.models import TransactionReceipt
from ledger_adapter.ethereum.simulator import SimulatedLedger
from orchestrator.orchestrator import TransactionOrchestrator
from orchestrator.workflows import (
    DEFAULT_LOOKBACK,
    DEFAULT_RECIPIENT,
    deploy_token,
    recent_events,
    transfer_and_approve,
)

from .logging_utils import configure_logging

logger = logging.getLogger(__name__)

SIMULATED_SIGNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
DEFAULT_AIRDROP_RECIPIENTS = (
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
    "0x90F79bf6EB2c4f870365E785982E1f101E93b906",
)
DEFAULT_AIRDROP_AMOUNTS = ("10", "15", "20", "25")


@dataclass(frozen=True)
class _Session:
    client: LedgerClient
    token_address: Optional[str]
    receipt_timeout: float

    def require_token(self) -> str:
        if not self.token_address:
            raise ConfigurationError("TOKEN_ADDRESS is required for this operation.")
        return self.token_address


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="token-ops")
    parser.add_argument("--simulate", action="store_true", help="Run against an in-memory ledger.")
    parser.add_argument("--json", action="store_true", help="Print machine-readable output.")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--env-file", help="Path to a .env file; defaults to ./.env.")
    parser.add_argument("--log-file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy_parser = subparsers.add_parser("deploy")
    deploy_parser.add_argument("--artifact", help="Compiled contract artifact with abi and bytecode.")
    deploy_parser.set_defaults(func=_deploy)

    transfer_parser = subparsers.add_parser("transfer-approve")
    transfer_parser.add_argument("--recipient", default=DEFAULT_RECIPIENT)
    transfer_parser.add_argument("--amount", default="100")
    transfer_parser.add_argument("--approve-amount", default="50")
    transfer_parser.set_defaults(func=_transfer_approve)

    airdrop_parser = subparsers.add_parser("airdrop")
    airdrop_parser.add_argument(
        "--recipient",
        action="append",
        default=[],
        metavar="ADDRESS=AMOUNT",
        help="Repeat per recipient; defaults to a four-recipient plan.",
    )
    airdrop_parser.set_defaults(func=_airdrop)

    logs_parser = subparsers.add_parser("logs")
    logs_parser.add_argument("--lookback", type=int, default=DEFAULT_LOOKBACK)
    logs_parser.set_defaults(func=_logs)

    balance_parser = subparsers.add_parser("balance")
    balance_parser.add_argument("address")
    balance_parser.set_defaults(func=_balance)

    allowance_parser = subparsers.add_parser("allowance")
    allowance_parser.add_argument("owner")
    allowance_parser.add_argument("spender")
    allowance_parser.set_defaults(func=_allowance)

    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        return args.func(args)
    except (ValueError, LedgerError) as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


def _deploy(args: argparse.Namespace) -> int:
    settings = DeploymentSettings.from_env(os.environ)
    if args.artifact:
        abi, bytecode = load_artifact(Path(args.artifact))
    elif args.simulate:
        abi, bytecode = TOKEN_ABI, "0x"
    else:
        raise ConfigurationError("--artifact is required unless --simulate is set.")

    session = _open_session(args, require_token=False, abi=abi)
    result = deploy_token(
        session.client, bytecode, settings, receipt_timeout=session.receipt_timeout
    )

    if args.json:
        _print_json(asdict(result))
        return 0
    print(f"Deploy tx hash: {result.tx_hash}")
    print(f"Deployed contract address: {result.contract_address}")
    print(f"Block number: {result.block_number}")
    print(f"\nCopy this to your .env file:\nTOKEN_ADDRESS={result.contract_address}")
    return 0


def _transfer_approve(args: argparse.Namespace) -> int:
    transfer_amount = parse_units(args.amount)
    approve_amount = parse_units(args.approve_amount)
    session = _open_session(args)
    inspector = BalanceInspector(session.client, session.require_token())
    symbol = inspector.token_metadata().symbol

    result = transfer_and_approve(
        session.client,
        inspector,
        recipient=args.recipient,
        transfer_amount=transfer_amount,
        approve_amount=approve_amount,
        receipt_timeout=session.receipt_timeout,
    )

    if args.json:
        _print_json(
            {
                "before": result.before.to_dict(),
                "transfer": asdict(result.transfer_receipt),
                "approve": asdict(result.approve_receipt),
                "allowance": format_units(result.allowance),
                "after": result.after.to_dict(),
            }
        )
        return 0
    _print_snapshot(result.before.label, result.before.balances, symbol)
    _print_receipt("Transfer", result.transfer_receipt)
    _print_receipt("Approve", result.approve_receipt)
    print(f"Allowance: {format_units(result.allowance)} {symbol}")
    _print_snapshot(result.after.label, result.after.balances, symbol)
    return 0


def _airdrop(args: argparse.Namespace) -> int:
    session = _open_session(args)
    plan = _build_airdrop_plan(args.recipient, session.client.signer_address)
    orchestrator = TransactionOrchestrator(
        session.client,
        session.require_token(),
        receipt_timeout=session.receipt_timeout,
    )
    report = orchestrator.compare(plan).report

    if args.json:
        _print_json(report.to_dict())
        return 0
    print(
        f"Batch airdrop gas: {report.batched_gas}, "
        f"Individual transfers gas: {report.individual_total}, "
        f"Gas saved: {report.percent_saved_display}%"
    )
    return 0


def _logs(args: argparse.Namespace) -> int:
    session = _open_session(args)
    history = recent_events(
        session.client, EventDecoder(), session.require_token(), lookback=args.lookback
    )

    if args.json:
        _print_json(
            {
                "from_block": history.from_block,
                "to_block": history.to_block,
                "events": [event_to_dict(event) for event in history.events],
            }
        )
        return 0
    print(f"Querying events from block {history.from_block} to {history.to_block}...")
    print(f"Found {len(history.events)} events:")
    for event in history.events:
        print(format_event(event))
    return 0


def _balance(args: argparse.Namespace) -> int:
    session = _open_session(args)
    inspector = BalanceInspector(session.client, session.require_token())
    address = normalize_address(args.address)
    balance = inspector.balance_of(address)

    if args.json:
        _print_json({"address": address, "balance": str(balance), "formatted": format_units(balance)})
        return 0
    print(f"{address}: {format_units(balance)}")
    return 0


def _allowance(args: argparse.Namespace) -> int:
    session = _open_session(args)
    inspector = BalanceInspector(session.client, session.require_token())
    owner = normalize_address(args.owner)
    spender = normalize_address(args.spender)
    allowance = inspector.allowance(owner, spender)

    if args.json:
        _print_json(
            {
                "owner": owner,
                "spender": spender,
                "allowance": str(allowance),
                "formatted": format_units(allowance),
            }
        )
        return 0
    print(f"Allowance {owner} -> {spender}: {format_units(allowance)}")
    return 0


def format_event(event: DecodedEvent) -> str:
    if isinstance(event, TransferEvent):
        return (
            f"Block {event.block_number} - Transfer: from={event.from_address}, "
            f"to={event.to_address}, value={event.value}"
        )
    if isinstance(event, ApprovalEvent):
        return (
            f"Block {event.block_number} - Approval: owner={event.owner}, "
            f"spender={event.spender}, value={event.value}"
        )
    if isinstance(event, GenericEvent):
        arguments = ", ".join(f"{key}={_display(value)}" for key, value in event.arguments)
        return f"Block {event.block_number} - {event.name}: {arguments}"
    if isinstance(event, UnknownEvent):
        return f"Block {event.block_number} - Unknown event ({event.reason})"
    raise TypeError(f"Unsupported event type: {type(event).__name__}")


def _open_session(
    args: argparse.Namespace,
    require_token: bool = True,
    abi: Optional[List[Dict[str, object]]] = None,
) -> _Session:
    if args.simulate:
        ledger = SimulatedLedger(SIMULATED_SIGNER)
        token_address = None
        if require_token:
            settings = DeploymentSettings.from_env(os.environ)
            token_address = ledger.install_token(
                initial_mint=parse_units(settings.initial_mint),
                cap=parse_units(settings.cap),
                name=settings.name,
                symbol=settings.symbol,
            )
        return _Session(ledger, token_address, DEFAULT_RECEIPT_TIMEOUT)

    config = load_config(require_token=require_token, dotenv_path=args.env_file)
    logger.info("Connecting to %s at %s", config.chain_name, config.rpc_url)
    client = Web3LedgerClient.from_config(config, abi)
    return _Session(client, config.token_address, config.receipt_timeout)


def _build_airdrop_plan(values: Iterable[str], signer_address: str) -> DistributionPlan:
    pairs = _parse_recipients(values)
    if not pairs:
        recipients = (signer_address,) + DEFAULT_AIRDROP_RECIPIENTS
        pairs = tuple(zip(recipients, DEFAULT_AIRDROP_AMOUNTS))
    recipients = [recipient for recipient, _ in pairs]
    amounts = [parse_units(amount) for _, amount in pairs]
    return build_plan(recipients, amounts)


def _parse_recipients(values: Iterable[str]) -> Tuple[Tuple[str, str], ...]:
    pairs = []
    for raw in values:
        if "=" not in raw:
            raise ValueError("Recipient must be formatted as ADDRESS=AMOUNT.")
        address, amount = raw.split("=", 1)
        if not address or not amount:
            raise ValueError("Recipient address and amount are required.")
        pairs.append((address.strip(), amount.strip()))
    return tuple(pairs)


def _print_receipt(label: str, receipt: TransactionReceipt) -> None:
    print(
        f"{label} - tx hash: {receipt.tx_hash}, block: {receipt.block_number}, "
        f"gas used: {receipt.gas_used}"
    )


def _print_snapshot(label: str, balances: Tuple[Tuple[str, int], ...], symbol: str) -> None:
    (_, signer_balance), (_, recipient_balance) = balances
    print(
        f"{label} - Deployer: {format_units(signer_balance)} {symbol}, "
        f"Recipient: {format_units(recipient_balance)} {symbol}"
    )


def _display(value: object) -> str:
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return str(value)


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    raise SystemExit(main())

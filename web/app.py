"""Local-only read API over a configured token ledger."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Dict, List, Mapping, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from distribution.planner import normalize_address
from distribution.units import format_units
from event_decoder.decoder import EventDecoder
from event_decoder.models import event_to_dict
from gas_accounting.engine import compare_gas
from inspector.inspector import BalanceInspector
from ledger_adapter.ethereum.client import LedgerClient, Web3LedgerClient
from ledger_adapter.ethereum.config import load_config
from ledger_adapter.ethereum.errors import LedgerError
from orchestrator.workflows import DEFAULT_LOOKBACK, recent_events

logger = logging.getLogger(__name__)

_CONTEXT: Dict[str, Optional[object]] = {"client": None, "token_address": None}
_DECODER = EventDecoder()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    if _CONTEXT["client"] is None:
        configure_from_environment()
    yield


app = FastAPI(
    title="Token Ops",
    description="Local-only token inspection API",
    lifespan=_lifespan,
)


class GasReportRequest(BaseModel):
    batched_gas: int
    individual_gas: List[int]


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return JSONResponse({"error": "Remote access disabled."}, status_code=403)
    return await call_next(request)


async def _handle_errors(request: Request, exc: Exception):
    return JSONResponse({"error": str(exc)}, status_code=400)


for _exc_class in (LedgerError, ValueError):
    app.add_exception_handler(_exc_class, _handle_errors)


def configure(client: LedgerClient, token_address: str) -> None:
    """Install the ledger client and token the endpoints read from."""
    _CONTEXT["client"] = client
    _CONTEXT["token_address"] = normalize_address(token_address)


def configure_from_environment(
    environ: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None
) -> None:
    """Connect to the ledger named by RPC_URL, CHAIN_ID, PRIVATE_KEY and TOKEN_ADDRESS."""
    config = load_config(environ, dotenv_path=dotenv_path)
    logger.info("Connecting to %s at %s", config.chain_name, config.rpc_url)
    client = Web3LedgerClient.from_config(config)
    configure(client, config.require_token())


@app.get("/api/status")
def status():
    client, token_address = _require_context()
    metadata = BalanceInspector(client, token_address).token_metadata()
    return {
        "token_address": token_address,
        "signer_address": client.signer_address,
        "block_number": client.current_block_height(),
        "name": metadata.name,
        "symbol": metadata.symbol,
        "decimals": metadata.decimals,
        "total_supply": str(metadata.total_supply),
        "cap": str(metadata.cap),
    }


@app.get("/api/balances/{address}")
def balance(address: str):
    client, token_address = _require_context()
    holder = normalize_address(address)
    amount = BalanceInspector(client, token_address).balance_of(holder)
    return {"address": holder, "balance": str(amount), "formatted": format_units(amount)}


@app.get("/api/allowance")
def allowance(owner: str = Query(...), spender: str = Query(...)):
    client, token_address = _require_context()
    owner_address = normalize_address(owner)
    spender_address = normalize_address(spender)
    amount = BalanceInspector(client, token_address).allowance(owner_address, spender_address)
    return {
        "owner": owner_address,
        "spender": spender_address,
        "allowance": str(amount),
        "formatted": format_units(amount),
    }


@app.get("/api/events")
def events(lookback: int = Query(DEFAULT_LOOKBACK, ge=0)):
    client, token_address = _require_context()
    history = recent_events(client, _DECODER, token_address, lookback=lookback)
    return {
        "token_address": history.token_address,
        "from_block": history.from_block,
        "to_block": history.to_block,
        "events": [event_to_dict(event) for event in history.events],
    }


@app.post("/api/gas-report")
def gas_report(payload: GasReportRequest):
    report = compare_gas(payload.batched_gas, payload.individual_gas)
    return report.to_dict()


def _require_context() -> Tuple[LedgerClient, str]:
    client = _CONTEXT.get("client")
    token_address = _CONTEXT.get("token_address")
    if client is None or not token_address:
        raise HTTPException(status_code=400, detail="Ledger context not configured.")
    return client, token_address


def _reset_state() -> None:
    _CONTEXT["client"] = None
    _CONTEXT["token_address"] = None

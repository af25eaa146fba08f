"""Explicit configuration for ledger workflows, loaded from the environment at the edge."""

from __future__ import annotations

from dataclasses import dataclass
import os
import re
from typing import Mapping, Optional

from dotenv import load_dotenv
from eth_utils import is_address, to_checksum_address

from .errors import ConfigurationError

_PRIVATE_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")

DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_POLL_LATENCY = 0.1


@dataclass(frozen=True)
class LedgerConfig:
    rpc_url: str
    chain_id: int
    private_key: str
    token_address: Optional[str] = None
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    poll_latency: float = DEFAULT_POLL_LATENCY

    @property
    def chain_name(self) -> str:
        return f"didlab-{self.chain_id}"

    def require_token(self) -> str:
        if not self.token_address:
            raise ConfigurationError("TOKEN_ADDRESS is required for this operation.")
        return self.token_address


@dataclass(frozen=True)
class DeploymentSettings:
    name: str = "CampusCredit"
    symbol: str = "CAMP"
    cap: str = "2000000"
    initial_mint: str = "1000000"

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "DeploymentSettings":
        defaults = cls()
        return cls(
            name=environ.get("TOKEN_NAME") or defaults.name,
            symbol=environ.get("TOKEN_SYMBOL") or defaults.symbol,
            cap=environ.get("TOKEN_CAP") or defaults.cap,
            initial_mint=environ.get("TOKEN_INITIAL") or defaults.initial_mint,
        )


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    require_token: bool = True,
    dotenv_path: Optional[str] = None,
) -> LedgerConfig:
    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ

    rpc_url = (environ.get("RPC_URL") or "").strip()
    chain_raw = (environ.get("CHAIN_ID") or "").strip()
    private_key = (environ.get("PRIVATE_KEY") or "").strip()
    if private_key.startswith("0x"):
        private_key = private_key[2:]
    token_raw = (environ.get("TOKEN_ADDRESS") or "").strip()

    missing = []
    if not rpc_url:
        missing.append("RPC_URL")
    if not chain_raw:
        missing.append("CHAIN_ID")
    if not private_key:
        missing.append("PRIVATE_KEY")
    if require_token and not token_raw:
        missing.append("TOKEN_ADDRESS")
    if missing:
        raise ConfigurationError("Missing required environment variables: " + ", ".join(missing))

    try:
        chain_id = int(chain_raw)
    except ValueError as exc:
        raise ConfigurationError(f"CHAIN_ID must be an integer: {chain_raw}") from exc
    if chain_id <= 0:
        raise ConfigurationError("CHAIN_ID must be positive.")

    if not _PRIVATE_KEY_PATTERN.match(private_key):
        raise ConfigurationError("PRIVATE_KEY must be 32 bytes of hex.")

    token_address = None
    if token_raw:
        if not is_address(token_raw):
            raise ConfigurationError(f"TOKEN_ADDRESS is not a valid address: {token_raw}")
        token_address = to_checksum_address(token_raw)

    receipt_timeout = _parse_positive_float(
        environ.get("RECEIPT_TIMEOUT"), "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT
    )

    return LedgerConfig(
        rpc_url=rpc_url,
        chain_id=chain_id,
        private_key=private_key,
        token_address=token_address,
        receipt_timeout=receipt_timeout,
    )


def _parse_positive_float(raw: Optional[str], name: str, default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number: {raw}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive.")
    return value

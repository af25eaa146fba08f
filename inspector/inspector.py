"""Read-only balance and allowance queries against the token contract."""

from typing import Iterable

from distribution.planner import normalize_address
from ledger_adapter.ethereum.client import LedgerClient

from .models import BalanceSnapshot, TokenMetadata


class BalanceInspector:
    """Reads token state; ordering reads around writes is the caller's job."""

    def __init__(self, client: LedgerClient, token_address: str) -> None:
        self._client = client
        self._token = normalize_address(token_address)

    @property
    def token_address(self) -> str:
        return self._token

    def balance_of(self, address: str) -> int:
        return int(self._client.read_state(self._token, "balanceOf", (normalize_address(address),)))

    def allowance(self, owner: str, spender: str) -> int:
        args = (normalize_address(owner), normalize_address(spender))
        return int(self._client.read_state(self._token, "allowance", args))

    def snapshot(self, holders: Iterable[str], label: str) -> BalanceSnapshot:
        block_number = self._client.current_block_height()
        balances = []
        for holder in holders:
            address = normalize_address(holder)
            balances.append((address, self.balance_of(address)))
        return BalanceSnapshot(label=label, block_number=block_number, balances=tuple(balances))

    def token_metadata(self) -> TokenMetadata:
        read = self._client.read_state
        return TokenMetadata(
            name=str(read(self._token, "name")),
            symbol=str(read(self._token, "symbol")),
            decimals=int(read(self._token, "decimals")),
            total_supply=int(read(self._token, "totalSupply")),
            cap=int(read(self._token, "cap")),
        )

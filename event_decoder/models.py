"""Decoded event variants produced from raw token logs."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union


class EventKind(Enum):
    TRANSFER = "Transfer"
    APPROVAL = "Approval"
    GENERIC = "Generic"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class TransferEvent:
    block_number: int
    from_address: str
    to_address: str
    value: int
    transaction_hash: str = ""
    log_index: int = 0

    kind = EventKind.TRANSFER
    name = "Transfer"

    @property
    def args(self) -> Dict[str, object]:
        return {"from": self.from_address, "to": self.to_address, "value": self.value}


@dataclass(frozen=True)
class ApprovalEvent:
    block_number: int
    owner: str
    spender: str
    value: int
    transaction_hash: str = ""
    log_index: int = 0

    kind = EventKind.APPROVAL
    name = "Approval"

    @property
    def args(self) -> Dict[str, object]:
        return {"owner": self.owner, "spender": self.spender, "value": self.value}


@dataclass(frozen=True)
class GenericEvent:
    block_number: int
    name: str
    arguments: Tuple[Tuple[str, object], ...]
    transaction_hash: str = ""
    log_index: int = 0

    kind = EventKind.GENERIC

    @property
    def args(self) -> Dict[str, object]:
        return dict(self.arguments)


@dataclass(frozen=True)
class UnknownEvent:
    block_number: int
    reason: str
    transaction_hash: str = ""
    log_index: int = 0

    kind = EventKind.UNKNOWN
    name = "unknown"

    @property
    def args(self) -> Dict[str, object]:
        return {}


DecodedEvent = Union[TransferEvent, ApprovalEvent, GenericEvent, UnknownEvent]


def event_to_dict(event: DecodedEvent) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "kind": event.kind.value,
        "name": event.name,
        "block_number": event.block_number,
        "transaction_hash": event.transaction_hash,
        "log_index": event.log_index,
        "args": {key: _jsonable(value) for key, value in event.args.items()},
    }
    if isinstance(event, UnknownEvent):
        payload["reason"] = event.reason
    return payload


def _jsonable(value: object) -> object:
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value

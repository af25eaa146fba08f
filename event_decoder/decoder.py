"""Schema-driven decoding of raw token logs into typed event records.

Each log's first topic selects an event from the interface schema. Indexed
parameters are decoded from the remaining topics and the rest from the data
payload. Anything that does not fit the schema becomes an ``UnknownEvent``;
``decode`` never raises.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import event_abi_to_log_topic, to_checksum_address

from ledger_adapter.ethereum.abi import TOKEN_ABI, event_abis
from ledger_adapter.ethereum.errors import DecodeError
from ledger_adapter.ethereum.models import RawLog

from .models import ApprovalEvent, DecodedEvent, GenericEvent, TransferEvent, UnknownEvent

logger = logging.getLogger(__name__)

NO_MATCHING_EVENT = "no matching event signature"
MALFORMED_LOG = "malformed log data"

# Indexed dynamic values are stored as their keccak hash, not the value itself.
_HASHED_WHEN_INDEXED = ("string", "bytes")


class EventDecoder:
    def __init__(self, abi: Optional[List[Dict[str, object]]] = None) -> None:
        self._events: Dict[bytes, Dict[str, object]] = {
            event_abi_to_log_topic(entry): entry for entry in event_abis(abi or TOKEN_ABI)
        }

    @property
    def event_names(self) -> Tuple[str, ...]:
        return tuple(sorted(str(entry["name"]) for entry in self._events.values()))

    def decode(self, log: RawLog) -> DecodedEvent:
        try:
            name, arguments = self._decode_arguments(log)
        except DecodeError as exc:
            logger.debug("Log %s#%s not decoded: %s", log.transaction_hash, log.log_index, exc)
            return UnknownEvent(
                block_number=log.block_number,
                reason=str(exc),
                transaction_hash=log.transaction_hash,
                log_index=log.log_index,
            )
        return _classify(name, arguments, log)

    def decode_logs(self, logs: Iterable[RawLog]) -> Iterator[DecodedEvent]:
        for log in logs:
            yield self.decode(log)

    def _decode_arguments(self, log: RawLog) -> Tuple[str, Tuple[Tuple[str, object], ...]]:
        if not log.topics:
            raise DecodeError(NO_MATCHING_EVENT)
        try:
            topic0 = bytes(log.topics[0])
        except (TypeError, ValueError) as exc:
            raise DecodeError(MALFORMED_LOG) from exc
        event = self._events.get(topic0)
        if event is None:
            raise DecodeError(NO_MATCHING_EVENT)

        inputs = event["inputs"]
        indexed = [param for param in inputs if param.get("indexed")]
        plain = [param for param in inputs if not param.get("indexed")]
        if len(log.topics) - 1 != len(indexed):
            raise DecodeError(NO_MATCHING_EVENT)

        try:
            topic_values = iter(
                [
                    _decode_topic(param["type"], bytes(topic))
                    for param, topic in zip(indexed, log.topics[1:])
                ]
            )
            decoded = abi_decode([param["type"] for param in plain], bytes(log.data))
            data_values = iter(
                [_normalize(param["type"], value) for param, value in zip(plain, decoded)]
            )
        except (DecodingError, ValueError, TypeError) as exc:
            raise DecodeError(MALFORMED_LOG) from exc

        ordered = tuple(
            (str(param["name"]), next(topic_values if param.get("indexed") else data_values))
            for param in inputs
        )
        return str(event["name"]), ordered


def _decode_topic(abi_type: str, topic: bytes) -> object:
    if len(topic) != 32:
        raise ValueError("Topics must be 32 bytes.")
    if abi_type in _HASHED_WHEN_INDEXED or abi_type.endswith("]") or abi_type.startswith("("):
        return topic
    (value,) = abi_decode([abi_type], topic)
    return _normalize(abi_type, value)


def _normalize(abi_type: str, value: object) -> object:
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type == "address[]":
        return tuple(to_checksum_address(item) for item in value)
    return value


def _classify(
    name: str, arguments: Tuple[Tuple[str, object], ...], log: RawLog
) -> DecodedEvent:
    values = tuple(value for _, value in arguments)
    # Positional, so ERC-20 variants with other parameter names still classify.
    if name == "Transfer" and len(values) == 3:
        return TransferEvent(
            block_number=log.block_number,
            from_address=values[0],
            to_address=values[1],
            value=values[2],
            transaction_hash=log.transaction_hash,
            log_index=log.log_index,
        )
    if name == "Approval" and len(values) == 3:
        return ApprovalEvent(
            block_number=log.block_number,
            owner=values[0],
            spender=values[1],
            value=values[2],
            transaction_hash=log.transaction_hash,
            log_index=log.log_index,
        )
    return GenericEvent(
        block_number=log.block_number,
        name=name,
        arguments=arguments,
        transaction_hash=log.transaction_hash,
        log_index=log.log_index,
    )

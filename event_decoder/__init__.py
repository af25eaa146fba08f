from .decoder import MALFORMED_LOG, NO_MATCHING_EVENT, EventDecoder
from .models import (
    ApprovalEvent,
    DecodedEvent,
    EventKind,
    GenericEvent,
    TransferEvent,
    UnknownEvent,
    event_to_dict,
)

__all__ = [
    "ApprovalEvent",
    "DecodedEvent",
    "EventDecoder",
    "EventKind",
    "GenericEvent",
    "MALFORMED_LOG",
    "NO_MATCHING_EVENT",
    "TransferEvent",
    "UnknownEvent",
    "event_to_dict",
]

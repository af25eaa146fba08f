"""Per-identity serialization of submit-and-confirm cycles."""

from contextlib import contextmanager
import threading
from typing import Dict, Iterator


class SigningIdentityLock:
    """Holds one lock per signing address.

    The ledger orders transactions from one identity by a strictly increasing
    sequence number, so a second transaction from the same identity may only
    be submitted once the previous one's receipt has been observed.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, address: str) -> Iterator[None]:
        lock = self._lock_for(address)
        with lock:
            yield

    def is_held(self, address: str) -> bool:
        return self._lock_for(address).locked()

    def _lock_for(self, address: str) -> threading.Lock:
        key = address.lower()
        with self._guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]


PROCESS_IDENTITY_LOCK = SigningIdentityLock()

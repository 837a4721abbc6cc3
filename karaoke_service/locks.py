import threading
from contextlib import contextmanager
from datetime import date
from typing import Dict, Tuple


class _SlotEntry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        # holders plus waiters; the entry is dropped when this reaches zero
        self.users = 0


# One entry per (room_id, day) currently in use
_slot_locks: Dict[Tuple[int, date], _SlotEntry] = {}
_registry_lock = threading.Lock()


def _acquire_entry(key: Tuple[int, date]) -> _SlotEntry:
    with _registry_lock:
        entry = _slot_locks.get(key)
        if entry is None:
            entry = _SlotEntry()
            _slot_locks[key] = entry
        entry.users += 1
        return entry


def _release_entry(key: Tuple[int, date], entry: _SlotEntry) -> None:
    with _registry_lock:
        entry.users -= 1
        if entry.users == 0:
            del _slot_locks[key]


@contextmanager
def slot_lock(room_id: int, day: date):
    """
    Serialize booking writes for one room on one day within this process.

    Used by the booking store so that two requests for the same room and
    day cannot both pass the conflict check before either commits. The
    registry only holds slots that have a holder or a waiter, so it does
    not grow with the number of days ever booked.
    """
    key = (room_id, day)
    entry = _acquire_entry(key)
    try:
        with entry.lock:
            yield
    finally:
        _release_entry(key, entry)

"""
Per-resource mutual exclusion.

``KeyedLock`` hands out one ``threading.Lock`` per key, such as
``("image", "world.png")`` or ``("person", "1")``.  Requests touching
different resources proceed in parallel; requests touching the same
resource are serialized.  Locks are reference counted and dropped from
the registry once nobody holds or waits for them.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterable, Iterator, List, Tuple


class KeyedLock:
    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    def _checkout(self, key: Hashable) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
                self._users[key] = 0
            self._users[key] += 1
            return lock

    def _checkin(self, key: Hashable) -> None:
        with self._registry_lock:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, keys: Iterable[Hashable]) -> Iterator[None]:
        """Acquire the locks for all ``keys`` and release them on exit.

        Keys are de-duplicated and acquired in sorted order so that two
        callers asking for overlapping sets cannot deadlock.
        """
        ordered = sorted(set(keys), key=repr)
        acquired: List[Tuple[Hashable, threading.Lock]] = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                try:
                    lock.acquire()
                except BaseException:
                    self._checkin(key)
                    raise
                acquired.append((key, lock))
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._checkin(key)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)


# Shared by every service that mutates people or images.
resource_locks = KeyedLock()


def person_key(person_id: str) -> tuple:
    return ("person", person_id)


def image_key(image_id: str) -> tuple:
    return ("image", image_id)

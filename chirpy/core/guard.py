"""
Readers-writer lock serializing access to the document.

Any number of readers may hold the guard together; a writer holds it
alone. Waiting writers block new readers so a steady read load cannot
starve them. The guard is in-process only: two servers sharing one file
are not coordinated.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generator


class TransactionGuard:
    """Shared/exclusive lock around whole load-modify-replace units."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_shared(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_shared(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_shared() without a matching acquire")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_exclusive(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_exclusive(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_exclusive() without a matching acquire")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def shared(self) -> Generator[None, None, None]:
        self.acquire_shared()
        try:
            yield
        finally:
            self.release_shared()

    @contextmanager
    def exclusive(self) -> Generator[None, None, None]:
        self.acquire_exclusive()
        try:
            yield
        finally:
            self.release_exclusive()

    @property
    def held_exclusive(self) -> bool:
        return self._writer

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class PendingWrite:
    """
    One mutating call inside `Ledger.transaction()`.

    `height` is the height the write lands at if it is accepted. The ledger
    only moves when the service calls `accept()`; a rejected call leaves it
    where it was.
    """

    def __init__(self, height: int) -> None:
        self.height = height
        self.accepted = False

    def accept(self) -> None:
        self.accepted = True


class Ledger:
    """
    Execution context shared by all registries.

    Supplies the current ledger height used to stamp task completion dates and
    reading timestamps, and serializes mutating calls so that only one write is
    applied at a time.
    """

    def __init__(self, height: int = 0, advance_on_write: bool = True) -> None:
        if height < 0:
            raise ValueError("Ledger height cannot be negative")
        self._height = height
        self._advance_on_write = advance_on_write
        self._lock = threading.RLock()

    @property
    def height(self) -> int:
        return self._height

    # PUBLIC_INTERFACE
    def advance(self, blocks: int = 1) -> int:
        """Move the ledger forward by `blocks` and return the new height."""
        if blocks < 1:
            raise ValueError("Ledger can only advance by a positive number of blocks")
        with self._lock:
            self._height += blocks
            logger.debug("Ledger advanced to height=%d", self._height)
            return self._height

    # PUBLIC_INTERFACE
    @contextmanager
    def transaction(self) -> Iterator[PendingWrite]:
        """
        Serialize one mutating call.

        When advance_on_write is enabled an accepted write is placed in a fresh
        block: the yielded PendingWrite carries height + 1, and the ledger
        moves there only if the write was accepted and the block exited
        without raising.
        """
        with self._lock:
            pending = PendingWrite(self._height + 1 if self._advance_on_write else self._height)
            yield pending
            if pending.accepted and pending.height > self._height:
                self.advance(pending.height - self._height)

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Optional, Type, TypeVar

from municipal_registry.core.ledger import Ledger
from municipal_registry.schemas.common import ErrorCode, Result

E = TypeVar("E", bound=IntEnum)


class BaseService:
    """
    Base class for registry services. Holds the ledger shared by all registries.

    Services keep validation, authorization and status rules, delegating
    storage to repositories. Every mutating method runs inside
    `ledger.transaction()` so writes are applied one at a time, and calls
    `accept()` on the pending write once the record is stored. Rejected calls
    never accept, so they leave the ledger height where it was.
    """

    logger = logging.getLogger(__name__)

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger

    def _reject(self, operation: str, error: ErrorCode, **context) -> Result:
        """Log a rejected call and build the failure result."""
        self.logger.warning(
            "%s rejected: %s (code=%d) %s",
            operation,
            error.name,
            int(error),
            " ".join(f"{k}={v}" for k, v in context.items()),
        )
        return Result.failure(error)


def coerce_enum(enum_cls: Type[E], value: object) -> Optional[E]:
    """Return the enum member for an integer value, or None if it is not one."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None

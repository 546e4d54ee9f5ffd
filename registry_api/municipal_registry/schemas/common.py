from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Error taxonomy shared by all registries."""
    INVALID_ENUM = "invalid_enum"
    NOT_FOUND = "not_found"
    NOT_AUTHORIZED = "not_authorized"
    INVALID_TRANSITION = "invalid_transition"


class ErrorCode(IntEnum):
    """Numeric registry error codes returned to callers."""
    INVALID_TYPE = 1
    INVALID_STATUS = 2
    NOT_AUTHORIZED = 3
    INVALID_TRANSITION = 4
    NOT_FOUND = 404

    @property
    def kind(self) -> ErrorKind:
        return _ERROR_KINDS[self]


_ERROR_KINDS = {
    ErrorCode.INVALID_TYPE: ErrorKind.INVALID_ENUM,
    ErrorCode.INVALID_STATUS: ErrorKind.INVALID_ENUM,
    ErrorCode.NOT_AUTHORIZED: ErrorKind.NOT_AUTHORIZED,
    ErrorCode.INVALID_TRANSITION: ErrorKind.INVALID_TRANSITION,
    ErrorCode.NOT_FOUND: ErrorKind.NOT_FOUND,
}


# PUBLIC_INTERFACE
class Result(BaseModel, Generic[T]):
    """
    Tagged outcome of a registry operation.

    Exactly one of `value` (when ok) or `error` (when not ok) is meaningful.
    """
    ok: bool = Field(..., description="True when the operation was applied")
    value: Optional[T] = Field(default=None, description="Success value (new id, flag or record)")
    error: Optional[ErrorCode] = Field(default=None, description="Registry error code on failure")

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorCode) -> "Result":
        return cls(ok=False, error=error)


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


class CreatedResponse(BaseModel):
    """Identifier allocated by a registration call."""
    id: int = Field(..., ge=1, description="Newly allocated entity id")


class UpdatedResponse(BaseModel):
    """Acknowledgement of an in-place update."""
    updated: bool = Field(True, description="Always true when the update was applied")


class CountResponse(BaseModel):
    """Number of entities ever registered."""
    count: int = Field(..., ge=0)


class LedgerInfo(BaseModel):
    """Current ledger height and the last id issued by each registry counter."""
    height: int = Field(..., ge=0, description="Current ledger height")
    last_asset_id: int = Field(..., ge=0)
    last_task_id: int = Field(..., ge=0)
    last_sensor_reading_id: int = Field(
        ..., ge=0, description="Last id of the counter shared by sensors and readings"
    )


class LedgerAdvance(BaseModel):
    """Request to produce blocks."""
    blocks: int = Field(1, ge=1, le=10_000, description="Number of blocks to advance")


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized API error envelope returned by exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    caller: Optional[str] = Field(default=None, description="Caller identity (if available)")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")

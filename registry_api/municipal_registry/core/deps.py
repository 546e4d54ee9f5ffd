from __future__ import annotations

import logging
from typing import Optional, TypeVar

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from municipal_registry.core.logging import caller_var
from municipal_registry.core.security import decode_token
from municipal_registry.schemas.common import ErrorCode, ErrorKind, Result
from municipal_registry.services.realtime import BroadcastManager
from municipal_registry.services.registry import RegistryState

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Bearer token carrying the caller identity in its 'sub' claim
bearer_scheme = HTTPBearer(auto_error=False)

_KIND_STATUS = {
    ErrorKind.INVALID_ENUM: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
}

_CODE_MESSAGES = {
    ErrorCode.INVALID_TYPE: "Value is not a recognized type or priority",
    ErrorCode.INVALID_STATUS: "Value is not a recognized status",
    ErrorCode.NOT_AUTHORIZED: "Caller is not allowed to modify this record",
    ErrorCode.INVALID_TRANSITION: "Operation not allowed in the record's current status",
    ErrorCode.NOT_FOUND: "Record not found",
}


# PUBLIC_INTERFACE
def get_registry(request: Request) -> RegistryState:
    """Return the registry state attached to the running application."""
    return request.app.state.registry


# PUBLIC_INTERFACE
def get_broadcast_manager(request: Request) -> BroadcastManager:
    """Return the application's WebSocket broadcast manager."""
    return request.app.state.broadcast


# PUBLIC_INTERFACE
async def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolve the caller identity from the Authorization bearer token.

    Raises:
        HTTPException: 401 Unauthorized if the token is missing, invalid or has no subject.
    Returns:
        str: the token's 'sub' claim
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Bearer token is required.")
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    caller_var.set(str(subject))
    return str(subject)


# PUBLIC_INTERFACE
def unwrap(result: Result[T]) -> T:
    """
    Return the success value of a registry result or raise the matching HTTPException.

    The registry error code is carried in the exception detail so that the
    error envelope exposes it to clients.
    """
    if result.ok:
        return result.value
    code = result.error
    raise HTTPException(
        status_code=_KIND_STATUS[code.kind],
        detail={"message": _CODE_MESSAGES[code], "code": int(code), "kind": code.kind.value},
    )


# PUBLIC_INTERFACE
def found(record: Optional[T], label: str) -> T:
    """Return a looked-up record or raise 404 when the registry returned None."""
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return record

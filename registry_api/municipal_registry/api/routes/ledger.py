from __future__ import annotations

from fastapi import APIRouter, Depends

from municipal_registry.core.deps import get_caller, get_registry
from municipal_registry.schemas.common import LedgerAdvance, LedgerInfo
from municipal_registry.services.registry import RegistryState

router = APIRouter(prefix="/ledger", tags=["Ledger"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=LedgerInfo,
    summary="Ledger summary",
    description="Current ledger height and the last id issued by each registry counter.",
)
async def get_ledger(registry: RegistryState = Depends(get_registry)) -> LedgerInfo:
    return registry.summary()


# PUBLIC_INTERFACE
@router.post(
    "/advance",
    response_model=LedgerInfo,
    summary="Advance ledger",
    description="Produce empty blocks, moving the ledger height forward.",
    dependencies=[Depends(get_caller)],
)
async def advance_ledger(
    payload: LedgerAdvance,
    registry: RegistryState = Depends(get_registry),
) -> LedgerInfo:
    registry.ledger.advance(payload.blocks)
    return registry.summary()

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from municipal_registry.core.deps import found, get_caller, get_registry, unwrap
from municipal_registry.schemas.assets import Asset, AssetCreate, AssetStatusUpdate
from municipal_registry.schemas.common import CountResponse, CreatedResponse, UpdatedResponse
from municipal_registry.services.registry import RegistryState

router = APIRouter(prefix="/assets", tags=["Assets"])


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CreatedResponse,
    status_code=201,
    summary="Register asset",
    description="Register an asset owned by the caller. Fails with code 1 for an unknown asset type.",
)
async def register_asset(
    payload: AssetCreate,
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
) -> CreatedResponse:
    result = registry.assets.register_asset(
        caller,
        payload.name,
        payload.asset_type,
        payload.location,
        payload.installation_date,
    )
    return CreatedResponse(id=unwrap(result))


# PUBLIC_INTERFACE
@router.get(
    "/count",
    response_model=CountResponse,
    summary="Asset count",
    description="Number of assets ever registered.",
)
async def get_asset_count(registry: RegistryState = Depends(get_registry)) -> CountResponse:
    return CountResponse(count=registry.assets.get_asset_count())


# PUBLIC_INTERFACE
@router.get(
    "/{asset_id}",
    response_model=Asset,
    summary="Get asset",
    description="Get an asset by id.",
)
async def get_asset(
    asset_id: int = Path(..., ge=0),
    registry: RegistryState = Depends(get_registry),
) -> Asset:
    return found(registry.assets.get_asset(asset_id), "Asset")


# PUBLIC_INTERFACE
@router.patch(
    "/{asset_id}/status",
    response_model=UpdatedResponse,
    summary="Update asset status",
    description="Overwrite the status of an asset. Only the asset owner may do this.",
)
async def update_asset_status(
    payload: AssetStatusUpdate,
    asset_id: int = Path(..., ge=0),
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
) -> UpdatedResponse:
    return UpdatedResponse(updated=unwrap(registry.assets.update_asset_status(caller, asset_id, payload.status)))

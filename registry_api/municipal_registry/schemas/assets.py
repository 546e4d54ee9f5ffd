from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class AssetType(IntEnum):
    ROAD = 1
    BRIDGE = 2
    BUILDING = 3
    UTILITY = 4
    PARK = 5


class AssetStatus(IntEnum):
    ACTIVE = 1
    MAINTENANCE = 2
    INACTIVE = 3
    DEPRECATED = 4


class Asset(BaseModel):
    """Registered infrastructure asset."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Asset id")
    name: str = Field(..., description="Asset name")
    asset_type: AssetType = Field(..., description="Kind of infrastructure")
    location: str = Field(..., description="Free-form location")
    installation_date: int = Field(..., description="Installation timestamp")
    last_maintenance: int = Field(0, description="Last maintenance timestamp, 0 = never")
    status: AssetStatus = Field(AssetStatus.ACTIVE)
    owner: str = Field(..., description="Identity that registered the asset")


class AssetCreate(BaseModel):
    """Register asset payload."""
    name: str = Field(..., description="Asset name")
    asset_type: int = Field(..., description="AssetType value (1-5)")
    location: str = Field(..., description="Free-form location")
    installation_date: int = Field(..., ge=0, description="Installation timestamp")


class AssetStatusUpdate(BaseModel):
    """Update asset status payload."""
    status: int = Field(..., description="AssetStatus value (1-4)")

from __future__ import annotations

from municipal_registry.schemas.assets import Asset, AssetStatus, AssetType
from .base import BaseRepository


class AssetRepository(BaseRepository[Asset]):
    """Repository for infrastructure assets."""

    def create_asset(
        self,
        *,
        name: str,
        asset_type: AssetType,
        location: str,
        installation_date: int,
        owner: str,
    ) -> Asset:
        asset_id = self.next_id()
        asset = Asset(
            id=asset_id,
            name=name,
            asset_type=asset_type,
            location=location,
            installation_date=installation_date,
            last_maintenance=0,
            status=AssetStatus.ACTIVE,
            owner=owner,
        )
        return self.add(asset_id, asset)

    def set_status(self, asset: Asset, status: AssetStatus) -> Asset:
        return self.save(asset.id, asset.model_copy(update={"status": status}))

    def count(self) -> int:
        return self.counter.current

from __future__ import annotations

import logging
from typing import Optional

from municipal_registry.core.ledger import Ledger
from municipal_registry.repositories.assets import AssetRepository
from municipal_registry.schemas.assets import Asset, AssetStatus, AssetType
from municipal_registry.schemas.common import ErrorCode, Result
from municipal_registry.services.base import BaseService, coerce_enum

logger = logging.getLogger(__name__)


class AssetService(BaseService):
    """
    Asset registry.

    Assets are registered by their owner and only the owner may change their
    status. Status changes are free overwrites; there is no transition graph.
    """

    logger = logger

    def __init__(self, ledger: Ledger, repo: Optional[AssetRepository] = None) -> None:
        super().__init__(ledger)
        self.repo = repo if repo is not None else AssetRepository()

    # PUBLIC_INTERFACE
    def register_asset(
        self,
        caller: str,
        name: str,
        asset_type: int,
        location: str,
        installation_date: int,
    ) -> Result[int]:
        """
        Register a new asset owned by the caller.

        Returns:
            Result carrying the new asset id, or INVALID_TYPE when asset_type
            is not an AssetType value.
        """
        with self.ledger.transaction() as write:
            kind = coerce_enum(AssetType, asset_type)
            if kind is None:
                return self._reject("register_asset", ErrorCode.INVALID_TYPE, asset_type=asset_type)
            asset = self.repo.create_asset(
                name=name,
                asset_type=kind,
                location=location,
                installation_date=installation_date,
                owner=caller,
            )
            write.accept()
        logger.info("Registered asset id=%d type=%s owner=%s", asset.id, kind.name, caller)
        return Result.success(asset.id)

    # PUBLIC_INTERFACE
    def update_asset_status(self, caller: str, asset_id: int, new_status: int) -> Result[bool]:
        """Overwrite the status of an asset the caller owns."""
        with self.ledger.transaction() as write:
            status = coerce_enum(AssetStatus, new_status)
            if status is None:
                return self._reject("update_asset_status", ErrorCode.INVALID_STATUS, status=new_status)
            asset = self.repo.get(asset_id)
            if asset is None:
                return self._reject("update_asset_status", ErrorCode.NOT_FOUND, asset_id=asset_id)
            if asset.owner != caller:
                return self._reject("update_asset_status", ErrorCode.NOT_AUTHORIZED, asset_id=asset_id)
            self.repo.set_status(asset, status)
            write.accept()
        logger.info("Asset id=%d status %s -> %s", asset_id, asset.status.name, status.name)
        return Result.success(True)

    # PUBLIC_INTERFACE
    def get_asset(self, asset_id: int) -> Optional[Asset]:
        """Return the asset, or None when the id is unknown."""
        return self.repo.get(asset_id)

    # PUBLIC_INTERFACE
    def get_asset_count(self) -> int:
        """Number of assets ever registered (also the last issued id)."""
        return self.repo.count()

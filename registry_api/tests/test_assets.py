"""Tests for the asset registry service."""

from __future__ import annotations

import pytest

from municipal_registry.schemas.assets import AssetStatus, AssetType
from municipal_registry.schemas.common import ErrorCode, ErrorKind

from .conftest import OTHER, OWNER


class TestRegisterAsset:

    def test_register_basic(self, assets):
        result = assets.register_asset(OWNER, "Main Street Bridge", 2, "Downtown", 1620000000)

        assert result.ok
        assert result.value == 1
        asset = assets.get_asset(1)
        assert asset.name == "Main Street Bridge"
        assert asset.asset_type == AssetType.BRIDGE
        assert asset.location == "Downtown"
        assert asset.installation_date == 1620000000
        assert asset.last_maintenance == 0
        assert asset.status == AssetStatus.ACTIVE
        assert asset.owner == OWNER

    @pytest.mark.parametrize("asset_type", [t.value for t in AssetType])
    def test_every_type_accepted(self, assets, asset_type):
        assert assets.register_asset(OWNER, "Asset", asset_type, "Somewhere", 0).ok

    def test_ids_increase_by_one(self, assets):
        ids = [assets.register_asset(OWNER, f"Asset {t}", t, "L", 0).value for t in (1, 2, 3, 4, 5)]
        assert ids == [1, 2, 3, 4, 5]

    @pytest.mark.parametrize("asset_type", [0, 6, 10, -1])
    def test_invalid_type(self, assets, asset_type):
        result = assets.register_asset(OWNER, "Invalid Asset", asset_type, "Nowhere", 1620000000)

        assert not result.ok
        assert result.error == ErrorCode.INVALID_TYPE
        assert result.error.kind == ErrorKind.INVALID_ENUM
        assert assets.get_asset_count() == 0

    def test_invalid_type_does_not_consume_id(self, assets):
        assets.register_asset(OWNER, "A", 1, "L", 0)
        assets.register_asset(OWNER, "B", 10, "L", 0)
        assert assets.register_asset(OWNER, "C", 3, "L", 0).value == 2


class TestUpdateAssetStatus:

    def test_update_status(self, assets):
        assets.register_asset(OWNER, "City Hall", 3, "Downtown", 1620000000)
        before = assets.get_asset(1)

        result = assets.update_asset_status(OWNER, 1, AssetStatus.MAINTENANCE)

        assert result.ok
        assert result.value is True
        after = assets.get_asset(1)
        assert after.status == AssetStatus.MAINTENANCE
        assert after.model_dump(exclude={"status"}) == before.model_dump(exclude={"status"})

    def test_unknown_asset(self, assets):
        result = assets.update_asset_status(OWNER, 999, AssetStatus.INACTIVE)
        assert result.error == ErrorCode.NOT_FOUND

    def test_not_owner(self, assets):
        assets.register_asset(OWNER, "Park", 5, "North", 0)

        result = assets.update_asset_status(OTHER, 1, AssetStatus.DEPRECATED)

        assert result.error == ErrorCode.NOT_AUTHORIZED
        assert assets.get_asset(1).status == AssetStatus.ACTIVE

    @pytest.mark.parametrize("status", [0, 5, 99])
    def test_invalid_status(self, assets, status):
        assets.register_asset(OWNER, "Road", 1, "East", 0)
        result = assets.update_asset_status(OWNER, 1, status)
        assert result.error == ErrorCode.INVALID_STATUS
        assert assets.get_asset(1).status == AssetStatus.ACTIVE

    def test_invalid_status_checked_before_existence(self, assets):
        assert assets.update_asset_status(OWNER, 999, 9).error == ErrorCode.INVALID_STATUS

    def test_any_status_can_follow_any_other(self, assets):
        assets.register_asset(OWNER, "Utility", 4, "West", 0)
        for status in (AssetStatus.DEPRECATED, AssetStatus.ACTIVE, AssetStatus.INACTIVE):
            assert assets.update_asset_status(OWNER, 1, status).ok
            assert assets.get_asset(1).status == status


class TestReads:

    def test_get_missing_asset(self, assets):
        assert assets.get_asset(1) is None

    def test_count(self, assets):
        assert assets.get_asset_count() == 0
        for n in (1, 2, 3):
            assets.register_asset(OWNER, f"Asset {n}", n, f"Location {n}", 1620000000)
            assert assets.get_asset_count() == n

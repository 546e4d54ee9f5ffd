from __future__ import annotations

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from municipal_registry.api.main import create_app
from municipal_registry.core.ledger import Ledger
from municipal_registry.core.security import create_access_token
from municipal_registry.services.assets import AssetService
from municipal_registry.services.maintenance import MaintenanceService
from municipal_registry.services.registry import RegistryState
from municipal_registry.services.sensors import SensorService

MOCK_HEIGHT = 123456

OWNER = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
OTHER = "ST1SJ3DTE5DN7X54YDH5D64R3BCB6A2AG2ZQ8YPD5"
WORKER = "worker-principal"


@pytest.fixture
def ledger() -> Ledger:
    """Ledger pinned at a fixed height so stamps are predictable."""
    return Ledger(height=MOCK_HEIGHT, advance_on_write=False)


@pytest.fixture
def assets(ledger) -> AssetService:
    return AssetService(ledger)


@pytest.fixture
def maintenance(ledger) -> MaintenanceService:
    return MaintenanceService(ledger)


@pytest.fixture
def sensors(ledger) -> SensorService:
    return SensorService(ledger)


@pytest.fixture
def registry() -> RegistryState:
    """Registry state whose ledger produces one block per write."""
    return RegistryState(ledger=Ledger(height=100, advance_on_write=True))


@pytest.fixture
def client(registry):
    app = create_app(registry=registry)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth() -> Callable[[str], Dict[str, str]]:
    """Build an Authorization header for a caller identity."""

    def _headers(identity: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(identity)}"}

    return _headers

"""
Repository layer for data access.

Each repository owns an append-only record store and the id counter its ids
are drawn from. Repositories assume the caller has already validated the
write and holds the ledger's write lock.
"""

from .assets import AssetRepository  # noqa: F401
from .base import BaseRepository, IdCounter, RecordStore  # noqa: F401
from .maintenance import MaintenanceTaskRepository  # noqa: F401
from .sensors import SensorReadingRepository, SensorRepository  # noqa: F401

"""
API route modules for the registry service.

This package contains subrouters for:
- Assets: registration, status updates and lookups
- Maintenance: task creation, assignment and status workflow
- Sensors: sensor registration and append-only readings
- Ledger: current height and counters

Routers are included from municipal_registry.api.main (under the /api/v1 prefix).
"""

"""
Core application utilities for settings, logging, the ledger and FastAPI dependencies.

This package provides:
- Application-level settings loaded from the environment
- The ledger (height counter and single-writer lock) shared by all registries
- Dependency helpers (caller identity extraction, registry state access)
"""

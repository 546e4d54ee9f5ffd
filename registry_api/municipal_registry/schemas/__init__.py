"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by registry (assets, maintenance, sensors) and also
include common reusable models such as the tagged Result and error envelopes.
"""

from .common import ErrorCode, ErrorKind, MessageResponse, Result  # noqa: F401

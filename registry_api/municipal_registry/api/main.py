from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi import WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from municipal_registry.core.logging import caller_var, configure_logging, correlation_id_var
from municipal_registry.core.security import get_token_subject
from municipal_registry.core.settings import AppSettings, get_app_settings
from municipal_registry.schemas.common import ErrorInfo, ErrorResponse, MessageResponse
from municipal_registry.services.realtime import BroadcastManager
from municipal_registry.services.registry import RegistryState

# Routers
from municipal_registry.api.routes.assets import router as assets_router
from municipal_registry.api.routes.ledger import router as ledger_router
from municipal_registry.api.routes.maintenance import router as maintenance_router
from municipal_registry.api.routes.sensors import router as sensors_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness check."},
    {"name": "Assets", "description": "Infrastructure asset registry."},
    {"name": "Maintenance", "description": "Maintenance tasks scheduled against assets."},
    {"name": "Sensors", "description": "Sensors and their append-only readings."},
    {"name": "Ledger", "description": "Ledger height and registry counters."},
    {
        "name": "WebSocket",
        "description": "WebSocket usage, endpoints, and connection details.",
    },
]


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build a standardized ErrorResponse JSONResponse."""
    err = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        caller=caller_var.get(),
        path=request.url.path,
        method=request.method,
        timestamp=datetime.now(tz=timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json"))


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Global handler for HTTPException to produce a standardized error envelope.

    Registry failures carry a dict detail with the registry code; it is
    exposed under error.details and its message becomes error.message.
    """
    if isinstance(exc.detail, str):
        message, details, error_type = exc.detail, None, "http_error"
    elif isinstance(exc.detail, dict):
        message = str(exc.detail.get("message", "HTTP Error"))
        details = {k: v for k, v in exc.detail.items() if k != "message"}
        error_type = str(details.get("kind", "http_error"))
    else:
        message, details, error_type = "HTTP Error", exc.detail, "http_error"
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=error_type,
        message=message,
        details=details,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Global handler for request validation errors with a standard structure.
    """
    return _build_error_response(
        request=request,
        status_code=422,
        error_type="validation_error",
        message="Request validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return a structured error.
    """
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request=request,
        status_code=500,
        error_type="internal_error",
        message="An unexpected error occurred",
        details=None,
    )


async def request_context_middleware(request: Request, call_next):
    """
    Enrich request context with a correlation_id for logging and error responses.
    Adds 'X-Correlation-ID' to every response.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token_corr = correlation_id_var.set(corr)
    request.state.correlation_id = corr

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token_corr)

    response.headers["X-Correlation-ID"] = corr
    return response


# Build API v1 router
api_v1 = APIRouter(prefix="/api/v1")


# PUBLIC_INTERFACE
@api_v1.get(
    "/health",
    response_model=MessageResponse,
    summary="Health Check",
    tags=["Health"],
)
def health_check() -> MessageResponse:
    """
    Basic liveness health check endpoint.

    Returns:
        MessageResponse: Simple confirmation that the service is running.
    """
    return MessageResponse(message="Healthy")


# PUBLIC_INTERFACE
@api_v1.get(
    "/websocket-info",
    response_model=Dict[str, Any],
    summary="WebSocket Usage Information",
    description="Connection details for the readings WebSocket feed.",
    tags=["WebSocket"],
)
def websocket_info() -> Dict[str, Any]:
    """
    Describe how to connect to WebSocket endpoints in this service.

    Returns:
        JSON object with usage notes and the endpoint's query params and message format.
    """
    return {
        "usage": (
            "Connect with a valid caller JWT as a 'token' query parameter. "
            "Optionally pass a numeric 'sensor_id' to receive readings of a single sensor only; "
            "a non-numeric value closes the socket with code 4400. "
            "Message format is JSON with fields: { type: string, payload: object, at: ISO-8601, caller?: string, channel?: string }."
        ),
        "security": {
            "token": "JWT must contain 'sub' (caller identity).",
        },
        "endpoints": [
            {
                "path": "/ws/readings",
                "summary": "Sensor readings as they are recorded (server push).",
                "query": ["token", "sensor_id?"],
                "messages": {
                    "client_to_server": ["ping"],
                    "server_to_client": ["reading.recorded"],
                },
            }
        ],
        "notes": "WebSocket endpoints are not represented in OpenAPI schema; refer to this endpoint for usage.",
    }


api_v1.include_router(assets_router)
api_v1.include_router(maintenance_router)
api_v1.include_router(sensors_router)
api_v1.include_router(ledger_router)


async def _validate_ws_and_get_caller(websocket: WebSocket) -> str:
    """
    Validate a WebSocket connection by checking the 'token' query param.

    Returns:
        caller identity
    Raises:
        WebSocketDisconnect if invalid.
    """
    token = websocket.query_params.get("token")
    subject = get_token_subject(token) if token else None
    if not subject:
        await websocket.close(code=4401)
        raise WebSocketDisconnect(code=4401)
    return str(subject)


# PUBLIC_INTERFACE
async def ws_readings(websocket: WebSocket):
    """
    WebSocket endpoint streaming recorded sensor readings.

    Security:
      - Query param 'token' must be a valid JWT.
    Query Parameters:
      - sensor_id: Optional sensor id to narrow the feed; a non-numeric value closes
        the connection with code 4400
    Messages:
      - Server -> Client: type='reading.recorded' payload=SensorReading
      - Client -> Server: optional 'ping' to keepalive; other messages ignored.
    """
    await websocket.accept()
    try:
        await _validate_ws_and_get_caller(websocket)
    except WebSocketDisconnect:
        return

    broadcast: BroadcastManager = websocket.app.state.broadcast
    raw_sensor = websocket.query_params.get("sensor_id")
    sensor_id = None
    if raw_sensor is not None:
        if not raw_sensor.isdigit():
            logger.warning("Rejected readings subscription with sensor_id=%r", raw_sensor)
            await websocket.close(code=4400)
            return
        sensor_id = int(raw_sensor)
    topic = broadcast.readings_topic(sensor_id)
    await broadcast.connect(topic, websocket)

    try:
        while True:
            msg = await websocket.receive_text()
            if msg and msg.lower() == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        await broadcast.disconnect(topic, websocket)
    except Exception:
        logger.exception("Error on ws_readings connection")
        await broadcast.disconnect(topic, websocket)
        await websocket.close()


# PUBLIC_INTERFACE
def create_app(settings: Optional[AppSettings] = None, registry: Optional[RegistryState] = None) -> FastAPI:
    """
    Build the FastAPI application with fresh, empty registries.

    Parameters:
        settings: AppSettings to use; loaded from the environment when omitted
        registry: Pre-built registry state (tests inject one with a fixed ledger)
    """
    settings = settings or get_app_settings()
    configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
    )
    application.state.settings = settings
    application.state.registry = registry if registry is not None else RegistryState.from_settings(settings)
    application.state.broadcast = BroadcastManager()

    # CORS - avoid wildcard with credentials
    cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
        logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
        cors_allow_credentials = False

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=cors_allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    application.middleware("http")(request_context_middleware)

    application.add_exception_handler(HTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    application.include_router(api_v1)
    application.add_api_websocket_route("/ws/readings", ws_readings)
    return application


app = create_app()

import json
import os

from municipal_registry.api.main import app

# Get the OpenAPI schema (note: all REST routes are under /api/v1)
openapi_schema = app.openapi()

# Inject non-standard extension with WebSocket endpoint docs
openapi_schema["x-websocket-endpoints"] = [
    {
        "path": "/ws/readings",
        "summary": "Sensor readings as they are recorded",
        "query": ["token", "sensor_id?"],
        "messages": {"client_to_server": ["ping"], "server_to_client": ["reading.recorded"]},
    },
]

# Write to file
output_dir = "interfaces"
os.makedirs(output_dir, exist_ok=True)
output_path = os.path.join(output_dir, "openapi.json")

with open(output_path, "w") as f:
    json.dump(openapi_schema, f, indent=2)

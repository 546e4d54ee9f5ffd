from __future__ import annotations

import asyncio

import logging
from typing import Dict, Optional, Set

from starlette.websockets import WebSocket, WebSocketState

from municipal_registry.schemas.realtime import WsEnvelope
from municipal_registry.schemas.sensors import SensorReading

logger = logging.getLogger(__name__)


class BroadcastManager:
    """
    Simple in-process pub-sub manager for WebSocket topics.

    Topics:
      - readings
      - readings:{sensor_id}
    """

    def __init__(self) -> None:
        self._topics: Dict[str, Set[WebSocket]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._global_lock = asyncio.Lock()

    def _topic_lock(self, topic: str) -> asyncio.Lock:
        if topic not in self._locks:
            self._locks[topic] = asyncio.Lock()
        return self._locks[topic]

    # PUBLIC_INTERFACE
    def readings_topic(self, sensor_id: Optional[int] = None) -> str:
        """Return the readings topic, optionally narrowed to one sensor."""
        if sensor_id is not None:
            return f"readings:{sensor_id}"
        return "readings"

    # PUBLIC_INTERFACE
    async def connect(self, topic: str, websocket: WebSocket) -> None:
        """Add an accepted websocket to topic subscribers."""
        async with self._global_lock:
            subscribers = self._topics.setdefault(topic, set())
            subscribers.add(websocket)
            logger.info("WebSocket connected to topic=%s; subscribers=%d", topic, len(subscribers))

    # PUBLIC_INTERFACE
    async def disconnect(self, topic: str, websocket: WebSocket) -> None:
        """Remove websocket from topic subscribers; a topic left empty is dropped."""
        async with self._global_lock:
            subscribers = self._topics.get(topic)
            if subscribers is None:
                return
            subscribers.discard(websocket)
            logger.info("WebSocket disconnected from topic=%s; subscribers=%d", topic, len(subscribers))
            self._prune(topic)

    def _prune(self, topic: str) -> None:
        # Caller holds the global lock
        if not self._topics.get(topic):
            self._topics.pop(topic, None)
            self._locks.pop(topic, None)

    # PUBLIC_INTERFACE
    def subscriber_count(self, topic: str) -> int:
        return len(self._topics.get(topic, ()))

    # PUBLIC_INTERFACE
    def active_topics(self) -> list[str]:
        """Topics that currently have at least one subscriber."""
        return sorted(self._topics)

    # PUBLIC_INTERFACE
    async def broadcast(self, topic: str, message: dict, exclude: Optional[WebSocket] = None) -> None:
        """
        Broadcast a dict message to all subscribers in the topic.

        Topics nobody subscribed to are skipped without being created.
        """
        if not self._topics.get(topic):
            return
        to_drop: list[WebSocket] = []
        async with self._topic_lock(topic):
            for ws in list(self._topics.get(topic, ())):
                if exclude is not None and ws is exclude:
                    continue
                try:
                    if ws.application_state == WebSocketState.DISCONNECTED or ws.client_state == WebSocketState.DISCONNECTED:
                        to_drop.append(ws)
                        continue
                    await ws.send_json(message)
                except Exception:
                    logger.exception("Failed to send message to websocket; scheduling drop")
                    to_drop.append(ws)
        for ws in to_drop:
            await self.disconnect(topic, ws)

    # PUBLIC_INTERFACE
    async def publish_reading(self, reading: SensorReading, caller: Optional[str] = None) -> None:
        """Publish a recorded reading to the global and the per-sensor topic."""
        env = WsEnvelope(
            type="reading.recorded",
            payload=reading.model_dump(mode="json"),
            caller=caller,
            channel=str(reading.sensor_id),
        ).model_dump(mode="json")
        await self.broadcast(self.readings_topic(), env)
        await self.broadcast(self.readings_topic(reading.sensor_id), env)

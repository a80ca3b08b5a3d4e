"""Kafka publisher for exchange replies."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError
from opentelemetry import trace

from graphbridge.core.config import settings
from graphbridge.core.exceptions import ReplyDeliveryError

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ReplyPublisher:
    """Writes reply documents to Kafka, keyed by the exchange they answer."""

    def __init__(self, bootstrap_servers: Optional[str] = None) -> None:
        self._bootstrap_servers = bootstrap_servers or settings.KAFKA_BOOTSTRAP_SERVERS
        self._producer: Optional[AIOKafkaProducer] = None
        self._lock = asyncio.Lock()

    async def _connect(self) -> AIOKafkaProducer:
        async with self._lock:
            if self._producer is None:
                producer = AIOKafkaProducer(bootstrap_servers=self._bootstrap_servers)
                try:
                    await producer.start()
                except KafkaError as exc:
                    raise ReplyDeliveryError(
                        error_code="REPLY_NOT_DELIVERED",
                        message=f"Kafka producer unavailable: {exc}",
                    ) from exc
                self._producer = producer
            return self._producer

    async def publish(self, topic: str, reply: Dict[str, Any]) -> None:
        """Send `reply` to `topic`; delivery failures raise `ReplyDeliveryError`."""

        producer = await self._connect()
        exchange_id = reply.get("id")
        key = str(exchange_id).encode("utf-8") if exchange_id is not None else None
        encoded = json.dumps(reply).encode("utf-8")

        with tracer.start_as_current_span("graphbridge.reply") as span:
            span.set_attribute("messaging.destination", topic)
            if exchange_id is not None:
                span.set_attribute("messaging.exchange_id", str(exchange_id))
            span.set_attribute("reply.failed", "error" in reply)
            try:
                await producer.send_and_wait(topic, encoded, key=key)
            except KafkaError as exc:
                raise ReplyDeliveryError(
                    error_code="REPLY_NOT_DELIVERED",
                    message=str(exc),
                    details={"exchange_id": exchange_id, "topic": topic},
                ) from exc
        logger.debug("Reply for exchange %s sent to %s", exchange_id, topic)

    async def close(self) -> None:
        async with self._lock:
            if self._producer is not None:
                await self._producer.stop()
                self._producer = None

"""Kafka consumer feeding request messages through the graph producer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Dict, Optional

from aiokafka import AIOKafkaConsumer
from aiokafka.errors import KafkaError

from graphbridge.core.config import settings
from graphbridge.core.exceptions import GraphBridgeError, ReplyDeliveryError
from graphbridge.orchestration.codec import decode_exchange, encode_reply
from graphbridge.orchestration.producer import GraphProducer
from graphbridge.orchestration.publisher import ReplyPublisher

logger = logging.getLogger(__name__)


class ExchangeConsumer:
    """Consumes request messages and publishes the resulting headers as replies."""

    def __init__(
        self,
        producer: GraphProducer,
        publisher: ReplyPublisher,
        *,
        request_topic: Optional[str] = None,
        reply_topic: Optional[str] = None,
    ) -> None:
        self.producer = producer
        self.publisher = publisher
        self.request_topic = request_topic or settings.KAFKA_REQUEST_TOPIC
        self.reply_topic = reply_topic or settings.KAFKA_REPLY_TOPIC
        self._consumer: Optional[AIOKafkaConsumer] = None
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> bool:
        consumer = AIOKafkaConsumer(
            self.request_topic,
            bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
            group_id=settings.KAFKA_GROUP_ID,
            enable_auto_commit=True,
        )
        try:
            await consumer.start()
        except KafkaError as exc:
            logger.error("Failed to start Kafka consumer on %s: %s", self.request_topic, exc)
            return False

        self._consumer = consumer
        self._task = asyncio.create_task(self._consume())
        logger.info("Consuming exchanges from %s", self.request_topic)
        return True

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

        if self._consumer:
            await self._consumer.stop()
            self._consumer = None

    async def wait(self) -> None:
        if self._task:
            await self._task

    async def handle(self, payload: bytes) -> Dict[str, Any]:
        """Process one request payload and publish its reply."""

        try:
            exchange = decode_exchange(payload)
        except GraphBridgeError as exc:
            logger.warning("Dropping undecodable message: %s", exc)
            reply: Dict[str, Any] = {
                "id": None,
                "headers": {},
                "error": {"error_code": exc.error_code, "message": exc.message},
            }
            await self.publisher.publish(self.reply_topic, reply)
            return reply

        try:
            await asyncio.to_thread(self.producer.process, exchange)
            reply = encode_reply(exchange)
        except GraphBridgeError as exc:
            logger.warning("Exchange %s rejected: %s", exchange.exchange_id, exc)
            reply = encode_reply(exchange, exc)
        except Exception as exc:
            logger.exception("Exchange %s failed in the graph store", exchange.exchange_id)
            reply = encode_reply(exchange)
            reply["error"] = {"error_code": "GRAPH_STORE_ERROR", "message": str(exc)}

        await self.publisher.publish(self.reply_topic, reply)
        return reply

    async def _consume(self) -> None:
        assert self._consumer is not None
        try:
            async for message in self._consumer:
                try:
                    await self.handle(message.value)
                except ReplyDeliveryError as exc:
                    logger.error("Reply lost for offset %s: %s", message.offset, exc)
                except Exception:
                    logger.exception("Failed to handle message at offset %s", message.offset)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # pragma: no cover - broker errors
            logger.exception("Kafka consumer encountered an error: %s", exc)

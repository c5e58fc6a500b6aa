"""Kafka producer used to hand notifications to downstream delivery services."""

from __future__ import annotations

import asyncio
import json
import threading
from typing import Any

import structlog
from confluent_kafka import KafkaException, Producer

logger = structlog.get_logger()


class KafkaPublisher:
    """Publishes JSON messages to one topic, keyed by subject."""

    def __init__(self, bootstrap_servers: str, topic: str) -> None:
        self._producer = Producer({"bootstrap.servers": bootstrap_servers})
        self._topic = topic
        self._poll_thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    async def connect(self) -> None:
        """Start background polling for delivery callbacks."""
        if self._poll_thread and self._poll_thread.is_alive():
            return
        self._stop_event.clear()
        self._poll_thread = threading.Thread(
            target=self._poll_loop,
            name="kafka-notification-poll",
            daemon=True,
        )
        self._poll_thread.start()
        logger.info("kafka_producer_started", topic=self._topic)

    async def disconnect(self) -> None:
        """Stop polling and flush whatever is still queued."""
        self._stop_event.set()
        if self._poll_thread:
            self._poll_thread.join(timeout=5)
        await asyncio.to_thread(self._producer.flush, 5)
        logger.info("kafka_producer_stopped")

    async def publish(self, subject: str, payload: dict[str, Any]) -> None:
        """Produce one message and wait for the broker to acknowledge it."""
        await self.connect()

        loop = asyncio.get_running_loop()
        delivered: asyncio.Future[None] = loop.create_future()

        def on_delivery(err: Any, msg: Any) -> None:  # noqa: ANN401
            if err:
                loop.call_soon_threadsafe(delivered.set_exception, KafkaException(err))
                return
            logger.debug(
                "kafka_message_delivered",
                subject=subject,
                partition=msg.partition(),
                offset=msg.offset(),
            )
            loop.call_soon_threadsafe(delivered.set_result, None)

        try:
            self._producer.produce(
                self._topic,
                key=subject,
                value=json.dumps(payload).encode(),
                on_delivery=on_delivery,
            )
            await delivered
        except Exception as exc:
            logger.error("kafka_publish_failed", subject=subject, error=str(exc))
            raise

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            self._producer.poll(0.1)

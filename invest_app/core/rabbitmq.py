import json
import logging

import aio_pika
from aio_pika import ExchangeType, Message
from tenacity import retry, stop_after_attempt, wait_exponential

from .breaker import integrations_breaker
from .settings import settings

logger = logging.getLogger(__name__)


class RabbitMQConnection:
    def __init__(self, url: str):
        self.url = url
        self.connection = None
        self.channel = None
        self.exchange = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @property
    def is_connected(self) -> bool:
        return self.connection is not None and not self.connection.is_closed

    @retry(
        stop=stop_after_attempt(5), wait=wait_exponential(multiplier=2, min=2, max=10)
    )
    async def connect(self):
        if not self.enabled:
            logger.info("RabbitMQ URL not set; domain events will not be published.")
            return
        if not self.is_connected:
            logger.info("Connecting to RabbitMQ...")
            self.connection = await aio_pika.connect_robust(self.url)
            self.channel = await self.connection.channel()
            logger.info("Connected to RabbitMQ.")

    async def declare_exchange_with_dlq(self, exchange_name: str):
        await self.connect()
        if not self.is_connected:
            return None

        dlx = await self.channel.declare_exchange(
            settings.RABBITMQ_DLX, ExchangeType.DIRECT, durable=True
        )
        dlq = await self.channel.declare_queue(settings.RABBITMQ_DLX_QUEUE, durable=True)
        await dlq.bind(dlx, routing_key=settings.RABBITMQ_DLX_QUEUE)

        self.exchange = await self.channel.declare_exchange(
            exchange_name, ExchangeType.TOPIC, durable=True
        )
        logger.info(
            f"Exchange '{exchange_name}' declared with DLQ '{settings.RABBITMQ_DLX_QUEUE}'."
        )
        return self.exchange

    async def publish_json(self, exchange_name: str, routing_key: str, data: dict):
        if not self.is_connected:
            logger.debug(f"Skipped event {routing_key}: broker not connected")
            return False

        async def handler():
            exchange = self.exchange
            if exchange is None or exchange.name != exchange_name:
                exchange = await self.channel.get_exchange(exchange_name)
            message = Message(
                body=json.dumps(data, default=str).encode(),
                content_type="application/json",
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            )
            await exchange.publish(message, routing_key=routing_key)
            logger.info(f"Published message to {exchange_name}:{routing_key}")
            return True

        try:
            return await integrations_breaker.call(handler)
        except Exception as e:
            logger.error(f"Failed to publish {routing_key}: {e}")
            return False

    async def close(self):
        if self.is_connected:
            await self.connection.close()


rabbitmq = RabbitMQConnection(settings.RABBITMQ_URL)

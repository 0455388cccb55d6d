from datetime import datetime, timezone

from core.settings import settings

from .rabbitmq import rabbitmq


async def publish_event(event_name: str, data: dict):
    payload = {
        **data,
        "event": event_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return await rabbitmq.publish_json(
        exchange_name=settings.RABBITMQ_MAIN_EXCHANGE,
        routing_key=event_name,
        data=payload,
    )

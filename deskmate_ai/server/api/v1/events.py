"""
Event Stream Endpoint.

Server-sent events for every notification published on the in-process event
bus: permission requests and chat streaming progress.
"""

import json

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from deskmate_ai.core.logging_config import get_logger
from deskmate_ai.server.services.deps import EventBusDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    summary="Stream Events",
    description="Subscribe to a Server-Sent Events (SSE) stream of runtime notifications.",
)
async def stream_events(request: Request, bus: EventBusDep):
    async def event_generator():
        async with bus.subscribe() as queue:
            while True:
                message = await queue.get()
                if await request.is_disconnected():
                    logger.info("Client disconnected from event stream")
                    break
                yield {"event": message["event"], "data": json.dumps(message["data"])}

    return EventSourceResponse(event_generator(), ping=15)

from fastapi import APIRouter, Depends, WebSocket, status
from starlette.concurrency import run_in_threadpool
from typing import Optional
import asyncio
import logging

from database import get_session_factory
from realtime.collections import COLLECTIONS, get_collection
from realtime.mirror import CollectionMirror

router = APIRouter(tags=["Realtime"])
logger = logging.getLogger("realtime")

@router.get("/ws/collections")
def list_streamable_collections():
    return {
        name: sorted(spec.required_filters)
        for name, spec in COLLECTIONS.items()
    }

@router.websocket("/ws/{collection}")
async def stream_collection(
    websocket: WebSocket,
    collection: str,
    ledger_id: Optional[int] = None,
    session_factory=Depends(get_session_factory),
):
    """
    Stream a tenant collection: one ``{"collection", "items"}`` message with
    the full snapshot on connect and another after every committed change.

    The tenant comes from the X-Tenant-ID header (or a ``tenant_id`` query
    parameter for browsers, which cannot set headers on a WebSocket).
    """
    spec = get_collection(collection)
    tenant_id = (websocket.headers.get("x-tenant-id") or websocket.query_params.get("tenant_id") or "").strip()
    query_values = {"ledger_id": ledger_id}
    filters = {column: query_values.get(param) for param, column in spec.required_filters.items()} if spec else {}

    if spec is None or not tenant_id or any(value is None for value in filters.values()):
        logger.warning(f"Rejected stream for '{collection}' (tenant '{tenant_id}', filters {filters})")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    loop = asyncio.get_running_loop()
    outbox: asyncio.Queue = asyncio.Queue()

    def on_snapshot(items):
        loop.call_soon_threadsafe(outbox.put_nowait, {"collection": collection, "items": items})

    def on_error(error: Exception):
        loop.call_soon_threadsafe(outbox.put_nowait, {"collection": collection, "error": str(error)})

    mirror = CollectionMirror(
        session_factory,
        spec.model,
        tenant_id,
        order_by=spec.order_by(),
        filters=filters,
        serializer=spec.serialize,
        on_snapshot=on_snapshot,
        on_error=on_error,
    )

    async def send_updates():
        try:
            while True:
                message = await outbox.get()
                await websocket.send_json(message)
        except Exception as e:
            logger.warning(f"Sending '{collection}' to tenant {tenant_id} failed: {e}")
            try:
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            except Exception as close_error:
                logger.debug(f"Close after failed send also failed: {close_error}")

    sender = asyncio.create_task(send_updates())
    try:
        await run_in_threadpool(mirror.start)
        logger.info(f"Streaming '{collection}' for tenant {tenant_id}")
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        mirror.stop()
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        logger.info(f"Stopped streaming '{collection}' for tenant {tenant_id}")

# student_hub/services/websocket_manager.py
import asyncio
import logging
from typing import Any, Callable, Dict, List, Set

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from student_hub.core.database import Subscription

logger = logging.getLogger(__name__)

# Takes the snapshot callback, returns the live subscription
Subscribe = Callable[[Callable[[List[BaseModel]], None]], Subscription]


def snapshot_message(stream: str, items: List[BaseModel]) -> Dict[str, Any]:
    return {
        "type": "snapshot",
        "stream": stream,
        "data": [item.model_dump(mode="json", by_alias=True) for item in items],
    }


class WebSocketManager:
    """
    Pushes live query snapshots to WebSocket clients.

    Store callbacks arrive on a background thread; they are handed to the
    connection's event loop through a queue. Every snapshot is the full,
    re-sorted result set, so clients replace their state wholesale.
    """

    def __init__(self):
        # user_id -> open WebSocket connections
        self.active_connections: Dict[str, Set[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.setdefault(user_id, set()).add(websocket)

    def disconnect(self, user_id: str, websocket: WebSocket):
        connections = self.active_connections.get(user_id)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            del self.active_connections[user_id]

    async def stream(self, user_id: str, websocket: WebSocket, stream: str, subscribe: Subscribe):
        """Serve one live query until the client disconnects, then cancel it"""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        def on_snapshot(items: List[BaseModel]):
            message = snapshot_message(stream, items)
            loop.call_soon_threadsafe(queue.put_nowait, message)

        await self.connect(user_id, websocket)
        subscription = subscribe(on_snapshot)
        logger.info(f"Live stream '{stream}' opened for {user_id}")

        sender = asyncio.create_task(self._send_snapshots(websocket, queue))
        receiver = asyncio.create_task(self._wait_for_disconnect(websocket))
        try:
            done, pending = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()
            for task in done:
                if not task.cancelled() and task.exception() and not isinstance(
                    task.exception(), WebSocketDisconnect
                ):
                    logger.error(f"Live stream '{stream}' for {user_id} failed: {task.exception()}")
        finally:
            subscription.cancel()
            self.disconnect(user_id, websocket)
            logger.info(f"Live stream '{stream}' closed for {user_id}")

    @staticmethod
    async def _send_snapshots(websocket: WebSocket, queue: asyncio.Queue):
        while True:
            message = await queue.get()
            await websocket.send_json(message)

    @staticmethod
    async def _wait_for_disconnect(websocket: WebSocket):
        # Clients do not send anything meaningful; reading detects the close
        while True:
            await websocket.receive_text()

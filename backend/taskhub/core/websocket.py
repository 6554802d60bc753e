import asyncio
import logging
from typing import List, Optional, Set, Union

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

Frame = Union[str, bytes]


class Connection:
    """One live peer. Writes are serialised so frames never interleave."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self._send_lock = asyncio.Lock()
        self.closed = False

    async def send(self, message: Frame) -> None:
        async with self._send_lock:
            if isinstance(message, bytes):
                await self.websocket.send_bytes(message)
            else:
                await self.websocket.send_text(message)

    async def receive(self) -> Frame:
        """Next text or binary frame; raises WebSocketDisconnect when the peer goes away."""
        message = await self.websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))
        if message.get("bytes") is not None:
            return message["bytes"]
        return message.get("text") or ""

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.websocket.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self.websocket.close()
        except (RuntimeError, OSError, WebSocketDisconnect):
            # Already closed by the peer or the server
            pass


class BroadcastHub:
    def __init__(self):
        self._connections: Set[Connection] = set()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._connections)

    async def connections(self) -> List[Connection]:
        async with self._lock:
            return list(self._connections)

    async def connect(self, websocket: WebSocket) -> Connection:
        await websocket.accept()
        connection = Connection(websocket)
        async with self._lock:
            self._connections.add(connection)
            count = len(self._connections)
        logger.info("Peer connected (%d live)", count)
        return connection

    async def disconnect(self, connection: Connection) -> None:
        async with self._lock:
            if connection not in self._connections:
                return
            self._connections.discard(connection)
            count = len(self._connections)
        await connection.close()
        logger.info("Peer disconnected (%d live)", count)

    async def broadcast(self, message: Frame, sender: Optional[Connection] = None) -> None:
        """Best-effort send to every registered peer except `sender`."""
        async with self._lock:
            targets = [c for c in self._connections if c is not sender]
        if not targets:
            return
        results = await asyncio.gather(
            *(target.send(message) for target in targets),
            return_exceptions=True,
        )
        for target, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.debug("Dropping peer after failed write: %r", result)
                await self.disconnect(target)

    async def serve(self, websocket: WebSocket) -> None:
        """Register the peer and relay its frames until it goes away."""
        connection = await self.connect(websocket)
        try:
            while True:
                message = await connection.receive()
                await self.broadcast(message, sender=connection)
        except WebSocketDisconnect:
            pass
        except Exception:
            logger.debug("Read failed, dropping peer", exc_info=True)
        finally:
            await self.disconnect(connection)

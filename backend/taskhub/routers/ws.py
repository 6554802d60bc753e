from fastapi import APIRouter, Depends, WebSocket

from taskhub.core.dependencies import get_hub
from taskhub.core.websocket import BroadcastHub

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, hub: BroadcastHub = Depends(get_hub)):
    await hub.serve(websocket)

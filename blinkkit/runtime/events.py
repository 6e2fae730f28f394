from __future__ import annotations
from contextlib import asynccontextmanager
from pydantic import BaseModel, Field
from typing import Optional, Literal, Any, Set, Tuple
import asyncio, logging, time
import websockets

log = logging.getLogger(__name__)

class FrameEvent(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    type: Literal["frame","blink","no_face","skipped"]
    face_detected: bool = True
    status: Literal["Open","Closed"] = "Open"
    blink_count: int = 0
    ear: Optional[float] = None
    left_ear: Optional[float] = None
    right_ear: Optional[float] = None
    below_threshold: Optional[bool] = None

class Broadcaster:
    """Fans each message out to every connected client."""
    def __init__(self):
        self.clients: Set[Any] = set()
        self.address: Optional[Tuple[str, int]] = None

    async def handler(self, websocket):
        self.clients.add(websocket)
        log.info("ws client connected (%d total)", len(self.clients))
        try:
            await websocket.wait_closed()
        finally:
            self.clients.discard(websocket)
            log.info("ws client gone (%d left)", len(self.clients))

    def publish(self, msg: str):
        # never blocks: clients that cannot keep up are skipped by websockets
        if self.clients:
            websockets.broadcast(self.clients, msg)

@asynccontextmanager
async def broadcasting(host="0.0.0.0", port=8765):
    """Serve a Broadcaster for the duration of the block; bind errors raise OSError on entry."""
    hub = Broadcaster()
    async with websockets.serve(hub.handler, host, port) as server:
        hub.address = tuple(server.sockets[0].getsockname()[:2])
        log.info("broadcasting on ws://%s:%d", *hub.address)
        yield hub

async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765,
                       ready: Optional["asyncio.Future[Broadcaster]"]=None):
    """Publish every queued line until cancelled; `ready` receives the hub once listening."""
    async with broadcasting(host, port) as hub:
        if ready is not None: ready.set_result(hub)
        while True:
            hub.publish(await queue.get())

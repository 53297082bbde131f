import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Request

router = APIRouter()


@router.get("/containers")
async def get_container_status(request: Request):
    """Return the latest per-container GPU records."""
    collector = request.app.state.collector
    snapshot = await collector.latest()
    return snapshot.model_dump(by_alias=True, exclude={"devices"})


@router.post("/refresh")
async def refresh_container_status(request: Request):
    """Run a sampling cycle now instead of waiting for the next interval."""
    collector = request.app.state.collector
    snapshot = await collector.run_cycle()
    return snapshot.model_dump(by_alias=True, exclude={"devices"})


@router.get("/devices")
async def get_devices(request: Request):
    """Return the device list parsed in the latest cycle."""
    collector = request.app.state.collector
    snapshot = await collector.latest()
    return {
        "timestamp": snapshot.timestamp,
        "ok": snapshot.ok,
        "devices": [d.model_dump() for d in snapshot.devices],
    }


@router.websocket("/ws")
async def container_status_ws(websocket: WebSocket):
    """Push the latest snapshot every sampling interval."""
    await websocket.accept()
    collector = websocket.app.state.collector

    try:
        while True:
            snapshot = await collector.latest()
            await websocket.send_json({
                "type": "container_status",
                "data": snapshot.model_dump(by_alias=True, exclude={"devices"}),
            })
            await asyncio.sleep(collector.interval)
    except WebSocketDisconnect:
        pass

"""WebSocket connection handler and message router."""

import logging

from fastapi import WebSocket, WebSocketDisconnect

from revolve.api.schemas import (
    ControlPointModel, UpdatePoint, UpdateCurveParams, UpdateRevolutionParams, CanvasFrame,
)
from revolve.config import EXPORT_FORMATS
from revolve.geometry.mesh_export import mesh_to_frontend
from revolve.geometry.session import EditorSession

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages active WebSocket connections."""

    def __init__(self):
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info("Client connected (%d active)", len(self.active_connections))

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info("Client disconnected (%d active)", len(self.active_connections))

    async def send_json(self, websocket: WebSocket, data: dict):
        await websocket.send_json(data)


manager = ConnectionManager()


async def send_error(websocket: WebSocket, code: str, message: str):
    await manager.send_json(websocket, {
        "type": "error",
        "payload": {"code": code, "message": message},
    })


async def send_curve(websocket: WebSocket, session: EditorSession):
    await manager.send_json(websocket, {"type": "curve_update", "payload": session.curve_payload()})


async def handle_websocket(websocket: WebSocket):
    """Main WebSocket endpoint handler. One editor session per connection."""
    await manager.connect(websocket)
    session = EditorSession()

    try:
        while True:
            data = await websocket.receive_json()
            msg_type = data.get("type", "")
            payload = data.get("payload", {})

            try:
                handler = HANDLERS.get(msg_type)
                if handler is None:
                    await send_error(websocket, "UNKNOWN_MESSAGE", f"Unknown type: {msg_type}")
                else:
                    await handler(websocket, session, payload)
            except Exception as e:
                logger.warning("Message %r failed: %s", msg_type, e)
                await send_error(websocket, "HANDLER_ERROR", str(e))

    except WebSocketDisconnect:
        manager.disconnect(websocket)


async def handle_add_point(websocket: WebSocket, session: EditorSession, payload: dict):
    point = ControlPointModel(**payload)
    session.add_point(point.x, point.y, point.w)
    await send_curve(websocket, session)


async def handle_select_point(websocket: WebSocket, session: EditorSession, payload: dict):
    """Canvas press: select the point under the cursor or add one there."""
    session.press(float(payload["x"]), float(payload["y"]))
    await send_curve(websocket, session)


async def handle_move_point(websocket: WebSocket, session: EditorSession, payload: dict):
    if not session.move_selected(float(payload["x"]), float(payload["y"])):
        await send_error(websocket, "NO_SELECTION", "No control point selected")
        return
    await send_curve(websocket, session)


async def handle_release_point(websocket: WebSocket, session: EditorSession, payload: dict):
    session.release()
    await send_curve(websocket, session)


async def handle_update_point(websocket: WebSocket, session: EditorSession, payload: dict):
    update = UpdatePoint(**payload)
    session.update_point(update.index, update.x, update.y, update.w)
    await send_curve(websocket, session)


async def handle_remove_point(websocket: WebSocket, session: EditorSession, payload: dict):
    session.remove_point(int(payload["index"]))
    await send_curve(websocket, session)


async def handle_clear_points(websocket: WebSocket, session: EditorSession, payload: dict):
    session.clear()
    await send_curve(websocket, session)


async def handle_set_curve_params(websocket: WebSocket, session: EditorSession, payload: dict):
    update = UpdateCurveParams(**payload)
    session.set_curve_params(
        curve_type=update.type,
        degree=update.degree,
        resolution=update.resolution,
        step=update.step,
        rational=update.rational,
    )
    await send_curve(websocket, session)


async def handle_set_revolution_params(websocket: WebSocket, session: EditorSession, payload: dict):
    update = UpdateRevolutionParams(**payload)
    session.set_revolution_params(
        axis=update.axis,
        angle=update.angle,
        subdivisions=update.subdivisions,
    )
    if "frame" in payload:
        frame = CanvasFrame(**payload["frame"])
        session.set_frame(frame.width, frame.height)
    await send_curve(websocket, session)


async def handle_generate_surface(websocket: WebSocket, session: EditorSession, payload: dict):
    """Revolve the current curve and send the mesh buffers."""
    if session.generate_surface() is None:
        await send_error(websocket, "INSUFFICIENT_CURVE",
                         "Add control points to generate a surface")
        return
    await manager.send_json(websocket, {
        "type": "mesh_update",
        "payload": {"mesh": mesh_to_frontend(session.mesh), "stats": session.stats()},
    })


async def handle_export(websocket: WebSocket, session: EditorSession, payload: dict):
    """Export the surface (obj/stl/json) or the curve alone (curve)."""
    fmt = payload.get("format", "obj")
    if fmt == "curve":
        content, filename = session.export_curve(), "curve.json"
    elif fmt in EXPORT_FORMATS:
        content = session.export(fmt)
        if content is None:
            await send_error(websocket, "NO_SURFACE", "Generate a surface first")
            return
        filename = f"surface.{fmt}"
    else:
        await send_error(websocket, "HANDLER_ERROR", f"Unknown export format: {fmt}")
        return
    logger.info("Exported %s (%d bytes)", filename, len(content))
    await manager.send_json(websocket, {
        "type": "export_result",
        "payload": {"format": fmt, "filename": filename, "content": content},
    })


HANDLERS = {
    "add_point": handle_add_point,
    "select_point": handle_select_point,
    "move_point": handle_move_point,
    "release_point": handle_release_point,
    "update_point": handle_update_point,
    "remove_point": handle_remove_point,
    "clear_points": handle_clear_points,
    "set_curve_params": handle_set_curve_params,
    "set_revolution_params": handle_set_revolution_params,
    "generate_surface": handle_generate_surface,
    "export": handle_export,
}

"""FastAPI application: curve/surface API, editor WebSocket and the optional frontend."""

import logging
import os

from fastapi import FastAPI, WebSocket
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware

from revolve.api.rest_routes import router as api_router
from revolve.api.ws_handler import handle_websocket
from revolve.config import LOG_LEVEL, LOG_FILE, SERVER_HOST, SERVER_PORT, FRONTEND_DIR
from revolve.logging_config import setup_logging

setup_logging(LOG_LEVEL, LOG_FILE)
logger = logging.getLogger(__name__)

app = FastAPI(title="Revolution Studio")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.websocket("/ws")
async def editor_socket(websocket: WebSocket):
    await handle_websocket(websocket)


# Static mount goes last: it catches every path the API does not
if os.path.isdir(FRONTEND_DIR):
    app.mount("/", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")
    logger.info("Serving frontend from %s", FRONTEND_DIR)
else:
    logger.info("No frontend at %s, serving API only", FRONTEND_DIR)


def run():
    import uvicorn
    uvicorn.run("revolve.main:app", host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    run()

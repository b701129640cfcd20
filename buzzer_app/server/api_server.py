"""FastAPI server exposing the WebSocket push channel and a small status API."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from contextlib import asynccontextmanager
import json
import logging
from typing import Any, AsyncIterator
from uuid import uuid4

from fastapi import Depends, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
import serial
import uvicorn

from buzzer_app.constants.about import APP_NAME, APP_VERSION
from buzzer_app.constants.network_constants import WEBSOCKET_PATH
from buzzer_app.constants.protocol_constants import (
    ACTION_PRESS_BUTTON,
    ERROR_INVALID_FORMAT,
    EVENT_ERROR,
)
from buzzer_app.controller.serial_feed import SerialButtonFeed, find_controller_port
from buzzer_app.core.models import Notification
from buzzer_app.core.quiz_manager import QuizManager
from buzzer_app.core.services.broadcaster import BroadcastCoordinator
from buzzer_app.server.action_dispatcher import ActionDispatcher, ActionError
from buzzer_app.utils.app_settings import AppSettings

logger = logging.getLogger(__name__)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _start_serial_feed(
    settings: AppSettings,
    dispatcher: ActionDispatcher,
    loop: asyncio.AbstractEventLoop,
) -> SerialButtonFeed | None:
    port_path = find_controller_port(settings.serial_port, settings.serial_auto_detect)
    if port_path is None:
        logger.warning("Button controller not available; continuing with WebSocket buzzers only")
        return None

    def forward_press(player_id: int, timestamp: int | float | None) -> None:
        future = asyncio.run_coroutine_threadsafe(
            dispatcher.dispatch(ACTION_PRESS_BUTTON, {"playerId": player_id, "timestamp": timestamp}),
            loop,
        )
        future.add_done_callback(_log_forward_failure)

    feed = SerialButtonFeed(port_path, on_press=forward_press, baud_rate=settings.serial_baud_rate)
    try:
        feed.start()
    except serial.SerialException as exc:
        logger.error("Could not open serial port %s: %s", port_path, exc)
        return None
    return feed


def _log_forward_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.warning("Controller press was not applied: %s", exc)


def create_api_app(quiz_manager: QuizManager, settings: AppSettings | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    settings = settings or AppSettings()
    coordinator = BroadcastCoordinator(quiz_manager)
    dispatcher = ActionDispatcher(quiz_manager, coordinator)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        feed = None
        if settings.serial_enabled:
            feed = _start_serial_feed(settings, dispatcher, asyncio.get_running_loop())
        app.state.serial_feed = feed
        yield
        if feed is not None:
            feed.stop()
            app.state.serial_feed = None

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.quiz_manager = quiz_manager
    app.state.coordinator = coordinator
    app.state.dispatcher = dispatcher
    app.state.serial_feed = None

    async def send_error(client_id: str, code: str, message: str) -> None:
        await coordinator.send_to(client_id, Notification(EVENT_ERROR, {"code": code, "message": message}))

    async def handle_frame(client_id: str, raw: str) -> None:
        try:
            frame: Any = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Client %s sent invalid JSON", client_id)
            await send_error(client_id, ERROR_INVALID_FORMAT, "Message must be valid JSON")
            return
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            logger.warning("Client %s sent a frame without an event name", client_id)
            await send_error(client_id, ERROR_INVALID_FORMAT, "Message must be JSON with an 'event' field")
            return

        logger.debug("Received %s from %s", frame["event"], client_id)
        try:
            await dispatcher.dispatch(frame["event"], frame.get("data"))
        except ActionError as exc:
            await send_error(client_id, exc.code, exc.message)

    @app.websocket(WEBSOCKET_PATH)
    async def quiz_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        client_id = uuid4().hex[:8]
        await coordinator.connect(client_id, websocket)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
                if message.get("text") is not None:
                    await handle_frame(client_id, message["text"])
                else:
                    logger.warning("Client %s sent a binary frame", client_id)
                    await send_error(client_id, ERROR_INVALID_FORMAT, "Messages must be JSON text frames")
        except WebSocketDisconnect:
            logger.info("WebSocket %s closed by client", client_id)
        finally:
            coordinator.disconnect(client_id)

    @app.get("/api/status")
    def get_status(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        feed: SerialButtonFeed | None = app.state.serial_feed
        return {
            "status": "running",
            "state": manager.snapshot(),
            "connectedClients": coordinator.get_connection_count(),
            "serialConnected": feed is not None and feed.connected,
        }

    @app.get("/api/questions")
    def get_questions(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        position, remaining = manager.get_question_set_progress()
        return {
            "questions": [question.to_dict() for question in manager.get_question_set()],
            "position": position,
            "remaining": remaining,
        }

    return app


def run_api_server(quiz_manager: QuizManager, settings: AppSettings) -> None:
    """Run the FastAPI server in the foreground until interrupted."""
    app = create_api_app(quiz_manager, settings)
    config = uvicorn.Config(app=app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    server = uvicorn.Server(config)
    server.run()

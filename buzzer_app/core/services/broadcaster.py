"""Service pushing quiz state to every connected client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Protocol

from buzzer_app.constants.network_constants import BROADCAST_SEND_TIMEOUT_SECONDS
from buzzer_app.core.models import Notification
from buzzer_app.core.quiz_manager import QuizManager

logger = logging.getLogger(__name__)


class ClientChannel(Protocol):
    """Anything that can push a JSON message to one client (e.g. a FastAPI ``WebSocket``)."""

    async def send_json(self, data: Any) -> None: ...


class BroadcastCoordinator:
    """Keeps the set of connected clients and fans notifications out to all of them.

    Each notification is sent to all clients concurrently and the next one
    starts only after every send has finished, so a client never sees an older
    snapshot after a newer one as long as publishes are not interleaved (see
    ``ActionDispatcher``). A client that fails or does not accept a message
    within ``send_timeout`` seconds is dropped.
    """

    def __init__(self, quiz_manager: QuizManager, send_timeout: float = BROADCAST_SEND_TIMEOUT_SECONDS) -> None:
        self._quiz_manager = quiz_manager
        self._send_timeout = send_timeout
        self._clients: dict[str, ClientChannel] = {}

    async def connect(self, client_id: str, channel: ClientChannel) -> None:
        """Register a client and send it the current snapshot (and only to it)."""
        self._clients[client_id] = channel
        logger.info("Client %s connected (%d total)", client_id, len(self._clients))
        await self.send_to(client_id, self._quiz_manager.state_notification())

    def disconnect(self, client_id: str) -> None:
        if self._clients.pop(client_id, None) is not None:
            logger.info("Client %s disconnected (%d remaining)", client_id, len(self._clients))

    async def send_to(self, client_id: str, notification: Notification) -> None:
        channel = self._clients.get(client_id)
        if channel is None:
            logger.warning("Client %s not found; dropping %s", client_id, notification.event)
            return
        if not await self._deliver(client_id, channel, notification.event, notification.to_message()):
            self.disconnect(client_id)

    async def publish(self, notifications: Iterable[Notification]) -> None:
        """Send every notification to every client; failing or slow clients are dropped."""
        for notification in notifications:
            message = notification.to_message()
            clients = list(self._clients.items())
            delivered = await asyncio.gather(
                *(self._deliver(client_id, channel, notification.event, message) for client_id, channel in clients)
            )
            for (client_id, _channel), ok in zip(clients, delivered):
                if not ok:
                    self.disconnect(client_id)
            logger.debug("Broadcast %s to %d clients", notification.event, len(self._clients))

    def get_client_ids(self) -> list[str]:
        return list(self._clients)

    def get_connection_count(self) -> int:
        return len(self._clients)

    async def _deliver(self, client_id: str, channel: ClientChannel, event: str, message: dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(channel.send_json(message), timeout=self._send_timeout)
        except asyncio.TimeoutError:
            logger.error("Client %s did not accept %s within %.1fs", client_id, event, self._send_timeout)
            return False
        except Exception as exc:
            logger.error("Failed to send %s to %s: %s", event, client_id, exc)
            return False
        return True

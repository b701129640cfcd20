"""Reads button presses from the serial button controller.

The controller writes one JSON object per line, for example::

    {"type": "pressedButton", "buttonId": 3, "timestamp": 120443}
    {"type": "systemReady", "timestamp": 12, "version": "1.0.0"}

Older firmware sends ``{"dataType": "buttonPress", "playerId": 3}`` or
``{"player": 3, "order": 1, "timestamp": 120443}`` and a bare ``RESET`` line.
Presses are forwarded to a callback; everything else is only logged. A line
that cannot be parsed is logged and skipped so the feed keeps running.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
import json
import logging
from typing import Callable

import serial
from serial.threaded import LineReader, ReaderThread
from serial.tools import list_ports

from buzzer_app.constants.network_constants import (
    CONTROLLER_MANUFACTURER_HINTS,
    SERIAL_BAUD_RATE,
    SERIAL_READ_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

KIND_PRESS = "press"
KIND_RESET = "reset"
KIND_READY = "systemReady"
KIND_SYSTEM_RESET = "systemReset"
KIND_DEBUG = "debug"
KIND_ERROR = "error"

_PRESS_TYPES = frozenset({"pressedButton", "buttonPress"})
_INFO_TYPES = frozenset({KIND_READY, KIND_SYSTEM_RESET, KIND_DEBUG, KIND_ERROR})

PressCallback = Callable[[int, int | float | None], None]


class ControllerMessageError(ValueError):
    """Raised when a controller line is not a message we understand."""


@dataclass(frozen=True, slots=True)
class ControllerMessage:
    kind: str
    player_id: int | None = None
    timestamp: int | float | None = None
    text: str | None = None


def parse_controller_line(line: str) -> ControllerMessage:
    stripped = line.strip()
    if stripped == "RESET":
        return ControllerMessage(KIND_RESET)
    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as exc:
        raise ControllerMessageError(f"Invalid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ControllerMessageError("Controller message must be a JSON object")

    message_type = data.get("type") or data.get("dataType")
    timestamp = data.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        timestamp = None

    if message_type in _PRESS_TYPES:
        raw_player = data.get("buttonId", data.get("playerId"))
    elif message_type is None and "player" in data:
        raw_player = data["player"]
    elif message_type in _INFO_TYPES:
        text = data.get("message") or data.get("version")
        return ControllerMessage(message_type, timestamp=timestamp, text=str(text) if text else None)
    else:
        raise ControllerMessageError(f"Unsupported controller message type {message_type!r}")

    if isinstance(raw_player, bool) or not isinstance(raw_player, int):
        raise ControllerMessageError(f"Press without a valid player id: {raw_player!r}")
    return ControllerMessage(KIND_PRESS, player_id=raw_player, timestamp=timestamp)


def find_controller_port(preferred: str | None = None, auto_detect: bool = True) -> str | None:
    """Pick the serial port of the button controller.

    ``preferred`` wins when it is present among the available ports. Otherwise,
    with ``auto_detect``, the first port whose manufacturer looks like an
    Arduino or a common USB-serial bridge is used.
    """
    ports = list(list_ports.comports())
    for port in ports:
        logger.info("Serial port available: %s (%s)", port.device, port.manufacturer or "Unknown")

    if preferred:
        if any(port.device == preferred for port in ports):
            return preferred
        logger.warning("Configured serial port %s not found", preferred)

    if not auto_detect:
        return None
    for port in ports:
        manufacturer = port.manufacturer or ""
        if any(hint in manufacturer for hint in CONTROLLER_MANUFACTURER_HINTS):
            logger.info("Button controller detected on %s", port.device)
            return port.device
    logger.warning("No button controller detected")
    return None


class _ControllerLineReader(LineReader):
    """Buffers controller bytes until a newline, however the reads are split."""

    TERMINATOR = b"\n"

    def __init__(self, feed: SerialButtonFeed) -> None:
        super().__init__()
        self._feed = feed

    def handle_line(self, line: str) -> None:
        self._feed.handle_line(line)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            logger.error("Serial port %s failed: %s", self._feed.port_path, exc)
        self.transport = None


class SerialButtonFeed:
    """Background reader turning controller lines into press callbacks."""

    def __init__(
        self,
        port_path: str,
        on_press: PressCallback,
        baud_rate: int = SERIAL_BAUD_RATE,
    ) -> None:
        self._port_path = port_path
        self._on_press = on_press
        self._baud_rate = baud_rate
        self._reader: ReaderThread | None = None

    @property
    def port_path(self) -> str:
        return self._port_path

    @property
    def connected(self) -> bool:
        return self._reader is not None and self._reader.alive and self._reader.serial.is_open

    def handle_line(self, line: str) -> ControllerMessage | None:
        """Process one line; returns the parsed message or ``None`` when it was skipped."""
        if not line.strip():
            return None
        try:
            message = parse_controller_line(line)
        except ControllerMessageError as exc:
            logger.warning("Skipping controller line %r: %s", line.strip(), exc)
            return None

        if message.kind == KIND_PRESS:
            logger.debug("Controller press from player %s", message.player_id)
            self._on_press(message.player_id, message.timestamp)
        elif message.kind == KIND_ERROR:
            logger.error("Controller reported an error: %s", message.text)
        else:
            logger.info("Controller %s %s", message.kind, message.text or "")
        return message

    def start(self, port: serial.SerialBase | None = None) -> None:
        """Start reading on a daemon thread.

        ``port`` may be an already open pyserial port; otherwise ``port_path``
        is opened, which may also be a pyserial URL such as ``loop://``.
        Raises ``serial.SerialException`` when the port cannot be opened.
        """
        if port is None:
            port = serial.serial_for_url(
                self._port_path,
                baudrate=self._baud_rate,
                timeout=SERIAL_READ_TIMEOUT_SECONDS,
            )
        self._reader = ReaderThread(port, partial(_ControllerLineReader, self))
        self._reader.start()
        logger.info("Button controller connected on %s", self._port_path)

    def stop(self) -> None:
        """Stop the reader thread and close the port."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None
            logger.info("Button controller on %s disconnected", self._port_path)

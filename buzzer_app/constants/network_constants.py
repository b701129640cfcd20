"""Network configuration constants for the buzzer server."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3001
DEFAULT_CORS_ORIGINS: tuple[str, ...] = ("http://localhost:3000",)
WEBSOCKET_PATH: str = "/ws"
SERIAL_BAUD_RATE: int = 9600
SERIAL_READ_TIMEOUT_SECONDS: float = 0.5
CONTROLLER_MANUFACTURER_HINTS: tuple[str, ...] = ("Arduino", "CH340", "FTDI")
BROADCAST_SEND_TIMEOUT_SECONDS: float = 2.0

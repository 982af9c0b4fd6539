"""Best-effort detection of a running OpenClaw gateway."""

import logging
import os
import socket

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_HOST = "127.0.0.1"
DEFAULT_GATEWAY_PORT = 18789


def gateway_port_from_env() -> int:
    """Gateway port from $OPENCLAW_GATEWAY_PORT, or the default."""
    value = os.environ.get("OPENCLAW_GATEWAY_PORT")
    if not value:
        return DEFAULT_GATEWAY_PORT
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid OPENCLAW_GATEWAY_PORT={value!r}, using {DEFAULT_GATEWAY_PORT}")
        return DEFAULT_GATEWAY_PORT


def is_gateway_running(
    host: str = DEFAULT_GATEWAY_HOST, port: int = DEFAULT_GATEWAY_PORT, timeout: float = 0.3
) -> bool:
    """Check whether something accepts connections on the gateway port.

    Never raises: any failure to probe is reported as "not running".
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as e:
        logger.debug(f"Gateway probe on {host}:{port} failed: {e}")
        return False

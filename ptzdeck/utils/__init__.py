"""
Utility functions for PtzDeck
"""

import ipaddress
import logging
import os
import sys
from pathlib import Path

from ptzdeck import __version__
from ptzdeck.constants import LoggingConstants, NetworkConstants
from ptzdeck.exceptions import InvalidAddressError


def get_app_data_dir() -> Path:
    """
    Get application data directory.

    Returns:
        Path to application data directory (creates if doesn't exist)
        - Windows: %LOCALAPPDATA%/PtzDeck
        - Unix: ~/.config/PtzDeck
    """
    if os.name == "nt":
        local_app_data: str | None = os.getenv("LOCALAPPDATA")
        if not local_app_data:
            local_app_data = str(Path.home() / "AppData" / "Local")
        app_data = Path(local_app_data) / "PtzDeck"
    else:
        app_data = Path.home() / ".config" / "PtzDeck"

    app_data.mkdir(parents=True, exist_ok=True)
    return app_data


def setup_logging(
    file_logging_enabled: bool = False,
    level: str = LoggingConstants.DEFAULT_LEVEL,
    log_dir: Path | None = None,
) -> Path | None:
    """Configure application logging

    Args:
        file_logging_enabled: If True, logs to file in addition to console
        level: Root log level name
        log_dir: Directory for the log file (defaults to <app data>/logs)

    Returns:
        Path of the log file, or None when logging to console only
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = None
    if file_logging_enabled:
        if log_dir is None:
            log_dir = get_app_data_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LoggingConstants.LOG_FILE_NAME
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    # Reconfigure on every call; settings may change after config is loaded
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LoggingConstants.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.info(f"PtzDeck {__version__} logging configured (level={level})")
    if log_file:
        logger.info(f"Log file: {log_file}")
    return log_file


def validate_address(address: str) -> str:
    """
    Validate an IPv4/IPv6 literal.

    Returns:
        Normalized address string

    Raises:
        InvalidAddressError: address is not an IP literal (host names included)
    """
    try:
        return str(ipaddress.ip_address(str(address).strip()))
    except ValueError as e:
        raise InvalidAddressError(f"Invalid camera address: {address!r}") from e


def validate_port(port: int) -> int:
    """Validate a UDP port number (1-65535)"""
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidAddressError(f"Invalid camera port: {port!r}")
    if not NetworkConstants.PORT_MIN <= port <= NetworkConstants.PORT_MAX:
        raise InvalidAddressError(f"Camera port out of range: {port}")
    return port


# Re-export network_interface module for convenience
from ptzdeck.utils.network_interface import (  # noqa: E402, F401
    NetworkInterface,
    find_interface_for_camera,
    get_network_interfaces,
)

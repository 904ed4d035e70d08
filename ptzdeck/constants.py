"""
Application-wide constants
"""


class NetworkConstants:
    """Network and protocol constants"""

    VISCA_DEFAULT_PORT = 52381
    PORT_MIN = 1
    PORT_MAX = 65535
    MAX_PACKET_LENGTH = 16  # VISCA command packets are 1-16 bytes
    VISCA_OVER_IP_HEADER_LENGTH = 8
    VISCA_OVER_IP_PAYLOAD_COMMAND = 0x0100
    SEQUENCE_MODULUS = 2**32


class LoggingConstants:
    """Logging defaults"""

    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DEFAULT_LEVEL = "INFO"
    LOG_FILE_NAME = "ptzdeck.log"

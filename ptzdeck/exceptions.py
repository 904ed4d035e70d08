"""
Custom exception hierarchy for PtzDeck
"""


class PtzDeckException(Exception):
    """Base exception for all PtzDeck errors"""
    pass


class CameraException(PtzDeckException):
    """Base exception for camera-related errors"""
    pass


class ViscaException(CameraException):
    """VISCA protocol errors"""
    pass


class InvalidAddressError(ViscaException, ValueError):
    """Camera address is not a valid IP literal, or port is out of range"""
    pass


class ViscaCommandError(ViscaException):
    """VISCA command could not be built or decoded"""
    pass


class ViscaConnectionError(ViscaException):
    """VISCA connection failure"""
    pass


class ClosedConnectionError(ViscaConnectionError):
    """Operation attempted on a connection that has been closed"""
    pass


class ViscaSendError(ViscaConnectionError):
    """Datagram could not be transmitted; the connection stays usable"""
    pass


class EndpointMismatchError(ViscaConnectionError):
    """Socket destination diverged from the recorded camera address.

    Raised and handled inside the connection, which rebuilds the endpoint
    before sending. Never reaches callers.
    """

    def __init__(self, expected: tuple, actual: tuple):
        super().__init__(f"Endpoint {actual[0]}:{actual[1]} does not match {expected[0]}:{expected[1]}")
        self.expected = expected
        self.actual = actual


class ConfigException(PtzDeckException):
    """Configuration file errors"""
    pass


class ConfigLoadError(ConfigException):
    """Failed to load configuration"""
    pass


class ConfigSaveError(ConfigException):
    """Failed to save configuration"""
    pass

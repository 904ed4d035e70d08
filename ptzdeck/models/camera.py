"""
Camera identity model
"""

from dataclasses import dataclass

from ptzdeck.constants import NetworkConstants


@dataclass(frozen=True)
class CameraIdentity:
    """
    The logical camera a connection speaks for.

    Owned by the camera registry; connections only read it. When the operator
    edits a camera's VISCA address the registry hands a new identity to
    ``CameraConnection.retarget``.

    Attributes:
        name: User-friendly display name
        address: VISCA IP address
        port: VISCA UDP port
    """

    name: str
    address: str
    port: int = NetworkConstants.VISCA_DEFAULT_PORT

    @property
    def endpoint(self) -> tuple[str, int]:
        return (self.address, self.port)

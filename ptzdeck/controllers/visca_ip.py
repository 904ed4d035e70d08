"""
VISCA-over-IP camera connection using asyncio UDP sends
"""

import asyncio
import logging
import socket
import struct
from enum import Enum

from ptzdeck.constants import NetworkConstants
from ptzdeck.controllers import visca_commands
from ptzdeck.controllers.visca_commands import (
    Command,
    ExposureMode,
    FocusCommand,
    PresetKind,
    ViscaLimits,
    WhiteBalanceMode,
)
from ptzdeck.exceptions import (
    ClosedConnectionError,
    EndpointMismatchError,
    ViscaCommandError,
    ViscaConnectionError,
    ViscaSendError,
)
from ptzdeck.models.camera import CameraIdentity
from ptzdeck.models.config_manager import ControlSettings, ViscaFraming
from ptzdeck.utils import find_interface_for_camera, validate_address, validate_port

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RECONCILING = "reconciling"
    CLOSED = "closed"


class CameraEndpoint:
    """
    One camera's UDP destination and the socket that sends to it.

    The socket is non-blocking and owned exclusively by this endpoint; it is
    never shared between connections.
    """

    def __init__(self, address: str, port: int, bind_to_camera_interface: bool = False):
        self._address = address
        self._port = port
        family = socket.AF_INET6 if ":" in address else socket.AF_INET
        try:
            sock = socket.socket(family, socket.SOCK_DGRAM)
        except OSError as e:
            logger.error(f"Failed to create socket: {e}")
            raise ViscaConnectionError(f"Socket creation failed: {e}") from e

        try:
            sock.setblocking(False)
            if bind_to_camera_interface and family == socket.AF_INET:
                iface = find_interface_for_camera(address)
                if iface is not None:
                    sock.bind((iface.ip, 0))
                    logger.debug(f"Socket for {address}:{port} bound to {iface.ip}")
        except OSError as e:
            sock.close()
            logger.error(f"Failed to configure socket for {address}:{port}: {e}")
            raise ViscaConnectionError(f"Socket setup failed: {e}") from e

        self._socket: socket.socket | None = sock
        logger.debug(f"Socket created for {address}:{port}")

    @property
    def destination(self) -> tuple[str, int]:
        return (self._address, self._port)

    @property
    def socket(self) -> socket.socket | None:
        return self._socket

    @property
    def closed(self) -> bool:
        return self._socket is None

    def verify(self, address: str, port: int) -> None:
        """Raise EndpointMismatchError unless this endpoint sends to (address, port)"""
        if self.destination != (address, port):
            raise EndpointMismatchError(expected=(address, port), actual=self.destination)

    async def send(self, data: bytes) -> None:
        """Send one datagram. Raises OSError on network failure."""
        if self._socket is None:
            raise OSError(f"Socket for {self._address}:{self._port} is closed")
        loop = asyncio.get_running_loop()
        await loop.sock_sendto(self._socket, data, self.destination)

    def close(self) -> None:
        if self._socket is not None:
            try:
                self._socket.close()
                logger.debug(f"Socket closed for {self._address}:{self._port}")
            except OSError as e:
                logger.warning(f"Error closing socket: {e}")
            finally:
                self._socket = None

    def __repr__(self):
        return f"CameraEndpoint({self._address}:{self._port}, closed={self.closed})"


class CameraConnection:
    """
    Intent-level VISCA control for one camera.

    Every intent encodes a packet and sends exactly one datagram to the
    current endpoint. There are no retries and no acknowledgements: a dropped
    move frame is superseded by the next stick update.

    Concurrency:
        Sends and endpoint swaps are serialized by an asyncio.Lock, so packets
        issued in order leave in order. ``update_connection`` waits for an
        in-flight send; the send after it uses the new destination.
    """

    def __init__(
        self,
        address: str,
        port: int | None = None,
        *,
        name: str | None = None,
        settings: ControlSettings | None = None,
    ):
        self._state = ConnectionState.UNINITIALIZED
        self._endpoint: CameraEndpoint | None = None
        self._settings = settings or ControlSettings()
        if port is None:
            port = self._settings.default_port

        address = validate_address(address)
        port = validate_port(port)

        self._address = address
        self._port = port
        self.name = name or address
        self._seq_num = 0
        self._send_lock = asyncio.Lock()
        self._endpoint = self._create_endpoint(address, port)
        self._state = ConnectionState.READY
        logger.info(f"VISCA connection created for {self.name} ({address}:{port})")

    @classmethod
    def from_identity(
        cls, identity: CameraIdentity, settings: ControlSettings | None = None
    ) -> "CameraConnection":
        return cls(identity.address, identity.port, name=identity.name, settings=settings)

    def __del__(self) -> None:
        """Cleanup socket on destruction"""
        if getattr(self, "_endpoint", None) is not None:
            self._endpoint.close()

    async def __aenter__(self) -> "CameraConnection":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self):
        return f"CameraConnection({self.name!r}, {self._address}:{self._port}, {self._state.value})"

    @property
    def address(self) -> str:
        return self._address

    @property
    def port(self) -> int:
        return self._port

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    @property
    def endpoint(self) -> CameraEndpoint | None:
        return self._endpoint

    @property
    def settings(self) -> ControlSettings:
        return self._settings

    def _create_endpoint(self, address: str, port: int) -> CameraEndpoint:
        return CameraEndpoint(address, port, self._settings.bind_to_camera_interface)

    def _ensure_open(self) -> None:
        if self._state is ConnectionState.CLOSED:
            raise ClosedConnectionError(f"Connection to {self.name} ({self._address}:{self._port}) is closed")

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self._state is ConnectionState.CLOSED:
            return
        if self._endpoint is not None:
            self._endpoint.close()
            self._endpoint = None
        self._state = ConnectionState.CLOSED
        logger.info(f"VISCA connection closed for {self.name} ({self._address}:{self._port})")

    async def update_connection(self, new_address: str, new_port: int | None = None) -> bool:
        """
        Point this connection at a new camera address.

        Args:
            new_address: IPv4/IPv6 literal
            new_port: UDP port, defaults to the configured VISCA port

        Returns:
            True if the endpoint was replaced, False if nothing changed

        Raises:
            InvalidAddressError: bad address or port; connection unchanged
            ClosedConnectionError: connection was closed
        """
        self._ensure_open()
        if new_port is None:
            new_port = self._settings.default_port
        address = validate_address(new_address)
        port = validate_port(new_port)

        if not self._send_lock.locked() and (address, port) == (self._address, self._port):
            return False

        async with self._send_lock:
            self._ensure_open()
            # Queued updates ahead of this one may have moved the endpoint
            if (address, port) == (self._address, self._port):
                return False
            endpoint = self._create_endpoint(address, port)
            old_endpoint = self._endpoint
            old_address, old_port = self._address, self._port
            self._address, self._port, self._endpoint = address, port, endpoint
            old_endpoint.close()

        logger.info(f"Updating VISCA connection: {old_address}:{old_port} -> {address}:{port}")
        return True

    async def retarget(self, identity: CameraIdentity) -> bool:
        """Follow the registry's active camera: adopt its address, port and name"""
        changed = await self.update_connection(identity.address, identity.port)
        self.name = identity.name
        return changed

    def _reconcile(self) -> None:
        """Rebuild the endpoint if it no longer sends to the recorded address"""
        try:
            self._endpoint.verify(self._address, self._port)
            if not self._endpoint.closed:
                return
            logger.warning(f"Socket for {self._address}:{self._port} was closed, recreating")
        except EndpointMismatchError as e:
            logger.warning(f"Endpoint mismatch: {e}, recreating")

        self._state = ConnectionState.RECONCILING
        try:
            replacement = self._create_endpoint(self._address, self._port)
            self._endpoint.close()
            self._endpoint = replacement
        finally:
            self._state = ConnectionState.READY

    def _next_seq_num(self) -> int:
        seq = self._seq_num
        self._seq_num = (self._seq_num + 1) % NetworkConstants.SEQUENCE_MODULUS
        return seq

    def _frame(self, packet: bytes) -> bytes:
        """
        Wrap a VISCA packet for the wire.

        VISCA_OVER_IP format:
        [PayloadType:2bytes][PayloadLength:2bytes][SequenceNumber:4bytes][ViscaCommand:Nbytes]
        """
        if self._settings.framing is ViscaFraming.RAW:
            return packet
        header = struct.pack(
            ">HHI",
            NetworkConstants.VISCA_OVER_IP_PAYLOAD_COMMAND,
            len(packet),
            self._next_seq_num(),
        )
        return header + packet

    async def send_packet(self, packet: bytes) -> None:
        """
        Send one encoded VISCA packet.

        Raises:
            ClosedConnectionError: connection was closed
            ViscaSendError: network failure; the connection stays usable
        """
        self._ensure_open()
        async with self._send_lock:
            self._ensure_open()
            self._reconcile()
            try:
                await self._endpoint.send(self._frame(packet))
            except OSError as e:
                logger.error(f"Send error for {self._address}:{self._port}: {e}")
                raise ViscaSendError(f"Send to {self._address}:{self._port} failed: {e}") from e
        logger.debug(f"Sent command to {self._address}: {packet.hex(' ').upper()}")

    async def send_command(self, command: Command) -> None:
        await self.send_packet(visca_commands.encode(command))

    def _pan_speed(self, speed: int | None) -> int:
        return self._settings.pan_speed if speed is None else speed

    def _tilt_speed(self, speed: int | None) -> int:
        return self._settings.tilt_speed if speed is None else speed

    def _zoom_speed(self, speed: int | None) -> int:
        return self._settings.zoom_speed if speed is None else speed

    def _focus_speed(self, speed: int | None) -> int | None:
        return self._settings.focus_speed if speed is None else speed

    # Pan / tilt

    async def pan_left(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.pan_tilt(True, False, False, False, self._pan_speed(speed), 0x00))

    async def pan_right(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.pan_tilt(False, True, False, False, self._pan_speed(speed), 0x00))

    async def tilt_up(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.pan_tilt(False, False, True, False, 0x00, self._tilt_speed(speed)))

    async def tilt_down(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.pan_tilt(False, False, False, True, 0x00, self._tilt_speed(speed)))

    async def _diagonal(self, left: bool, up: bool, pan_speed: int | None, tilt_speed: int | None) -> None:
        await self.send_packet(
            visca_commands.pan_tilt(
                left, not left, up, not up, self._pan_speed(pan_speed), self._tilt_speed(tilt_speed)
            )
        )

    async def pan_tilt_up_left(self, pan_speed: int | None = None, tilt_speed: int | None = None) -> None:
        await self._diagonal(True, True, pan_speed, tilt_speed)

    async def pan_tilt_up_right(self, pan_speed: int | None = None, tilt_speed: int | None = None) -> None:
        await self._diagonal(False, True, pan_speed, tilt_speed)

    async def pan_tilt_down_left(self, pan_speed: int | None = None, tilt_speed: int | None = None) -> None:
        await self._diagonal(True, False, pan_speed, tilt_speed)

    async def pan_tilt_down_right(self, pan_speed: int | None = None, tilt_speed: int | None = None) -> None:
        await self._diagonal(False, False, pan_speed, tilt_speed)

    async def stop(self) -> None:
        """Stop camera movement"""
        await self.send_packet(visca_commands.stop())

    async def home(self) -> None:
        await self.send_packet(visca_commands.home())

    # Zoom

    async def zoom_in(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.zoom(True, False, self._zoom_speed(speed)))

    async def zoom_out(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.zoom(False, True, self._zoom_speed(speed)))

    async def zoom_stop(self) -> None:
        await self.send_packet(visca_commands.zoom_stop())

    # Focus

    async def focus_near(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.focus(FocusCommand.NEAR, self._focus_speed(speed)))

    async def focus_far(self, speed: int | None = None) -> None:
        await self.send_packet(visca_commands.focus(FocusCommand.FAR, self._focus_speed(speed)))

    async def focus_stop(self) -> None:
        await self.send_packet(visca_commands.focus(FocusCommand.STOP))

    async def focus_auto(self) -> None:
        await self.send_packet(visca_commands.focus(FocusCommand.AUTO))

    async def focus_manual(self) -> None:
        await self.send_packet(visca_commands.focus(FocusCommand.MANUAL))

    async def focus_one_push(self) -> None:
        """Trigger one-push autofocus (single AF operation)"""
        await self.send_packet(visca_commands.focus(FocusCommand.ONE_PUSH))

    # White balance

    async def set_white_balance(self, mode: WhiteBalanceMode) -> None:
        await self.send_packet(visca_commands.white_balance(mode))

    async def white_balance_auto(self) -> None:
        await self.set_white_balance(WhiteBalanceMode.AUTO)

    async def white_balance_indoor(self) -> None:
        await self.set_white_balance(WhiteBalanceMode.INDOOR)

    async def white_balance_outdoor(self) -> None:
        await self.set_white_balance(WhiteBalanceMode.OUTDOOR)

    async def white_balance_one_push(self) -> None:
        await self.set_white_balance(WhiteBalanceMode.ONE_PUSH)

    async def white_balance_atw(self) -> None:
        await self.set_white_balance(WhiteBalanceMode.ATW)

    async def white_balance_manual(self) -> None:
        await self.set_white_balance(WhiteBalanceMode.MANUAL)

    async def white_balance_one_push_trigger(self) -> None:
        """Trigger one-push white balance (single WB calibration)"""
        await self.set_white_balance(WhiteBalanceMode.ONE_PUSH_TRIGGER)

    # Exposure

    async def set_exposure(self, mode: ExposureMode) -> None:
        await self.send_packet(visca_commands.exposure(mode))

    async def exposure_full_auto(self) -> None:
        await self.set_exposure(ExposureMode.FULL_AUTO)

    async def exposure_manual(self) -> None:
        await self.set_exposure(ExposureMode.MANUAL)

    async def exposure_shutter_priority(self) -> None:
        await self.set_exposure(ExposureMode.SHUTTER_PRIORITY)

    async def exposure_iris_priority(self) -> None:
        await self.set_exposure(ExposureMode.IRIS_PRIORITY)

    async def exposure_bright(self) -> None:
        await self.set_exposure(ExposureMode.BRIGHT)

    # Presets

    async def _preset(self, kind: PresetKind, slot: int) -> None:
        if isinstance(slot, bool) or not isinstance(slot, int):
            raise ViscaCommandError(f"Invalid preset slot: {slot!r}")
        if slot < ViscaLimits.PRESET_MIN or slot > ViscaLimits.PRESET_MAX:
            raise ViscaCommandError(
                f"Invalid preset number: {slot} (must be {ViscaLimits.PRESET_MIN}-{ViscaLimits.PRESET_MAX})"
            )
        logger.info(f"[{self._address}] Preset {kind.name.lower()} #{slot}")
        await self.send_packet(visca_commands.preset(kind, slot))

    async def preset_set(self, slot: int) -> None:
        """Store current position to camera memory slot"""
        await self._preset(PresetKind.SET, slot)

    async def preset_recall(self, slot: int) -> None:
        await self._preset(PresetKind.RECALL, slot)

    async def preset_reset(self, slot: int) -> None:
        await self._preset(PresetKind.RESET, slot)

"""
VISCA protocol command table and encoder

Every function here is pure: it turns a control intent into the exact byte
sequence a VISCA camera expects. No validation is done; callers clamp speeds
before encoding (values outside 0-255 make ``bytes.fromhex`` raise ValueError).
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

from ptzdeck.exceptions import ViscaCommandError

COMMAND_HEADER = 0x81
COMMAND_TERMINATOR = 0xFF


class ViscaCommands:
    """VISCA command string templates"""

    # PTZ Movement Commands
    PAN_TILT = "81 01 06 01 {pan_speed:02X} {tilt_speed:02X} {pan_dir:02X} {tilt_dir:02X} FF"
    HOME = "81 01 06 04 FF"

    # Zoom Commands
    ZOOM = "81 01 04 07 {value:02X} FF"  # 2p=tele, 3p=wide, p: 0-7
    ZOOM_STOP = "81 01 04 07 00 FF"

    # Focus Commands
    FOCUS_DRIVE = "81 01 04 08 {value:02X} FF"  # 02=far, 03=near, 2p/3p variable
    FOCUS_STOP = "81 01 04 08 00 FF"
    FOCUS_AUTO = "81 01 04 38 02 FF"
    FOCUS_MANUAL = "81 01 04 38 03 FF"
    FOCUS_ONE_PUSH = "81 01 04 18 01 FF"

    # Exposure Commands
    EXPOSURE_MODE = "81 01 04 39 {mode:02X} FF"  # 00=Auto, 03=Manual, 0A=Shutter, 0B=Iris, 0D=Bright

    # White Balance Commands
    WHITE_BALANCE_MODE = "81 01 04 35 {mode:02X} FF"  # 00=Auto, 01=Indoor, 02=Outdoor, 03=OnePush, 04=ATW, 05=Manual
    WHITE_BALANCE_ONE_PUSH_TRIGGER = "81 01 04 10 05 FF"

    # Preset Commands
    PRESET = "81 01 04 3F {kind:02X} {slot:02X} FF"  # kind: 00=reset, 01=set, 02=recall


class ViscaLimits:
    """VISCA protocol limits and ranges"""

    PAN_SPEED_MIN = 0x01
    PAN_SPEED_MAX = 0x18  # 24 decimal
    TILT_SPEED_MIN = 0x01
    TILT_SPEED_MAX = 0x18
    DEFAULT_PAN_SPEED = 0x0C
    DEFAULT_TILT_SPEED = 0x0C

    ZOOM_SPEED_MIN = 0
    ZOOM_SPEED_MAX = 7
    DEFAULT_ZOOM_SPEED = 4
    FOCUS_SPEED_MIN = 0
    FOCUS_SPEED_MAX = 7

    PRESET_MIN = 0
    PRESET_MAX = 254


class PanDirection(IntEnum):
    LEFT = 0x01
    RIGHT = 0x02
    STOP = 0x03


class TiltDirection(IntEnum):
    UP = 0x01
    DOWN = 0x02
    STOP = 0x03


class FocusCommand(Enum):
    """Focus intents"""

    NEAR = "near"
    FAR = "far"
    STOP = "stop"
    AUTO = "auto"
    MANUAL = "manual"
    ONE_PUSH = "one_push"


class WhiteBalanceMode(Enum):
    """White balance intents"""

    AUTO = 0
    INDOOR = 1
    OUTDOOR = 2
    ONE_PUSH = 3
    ATW = 4
    MANUAL = 5
    ONE_PUSH_TRIGGER = 6


class ExposureMode(Enum):
    """Exposure mode intents"""

    FULL_AUTO = 0
    MANUAL = 1
    SHUTTER_PRIORITY = 2
    IRIS_PRIORITY = 3
    BRIGHT = 4


class PresetKind(IntEnum):
    """Memory sub-command byte"""

    RESET = 0x00
    SET = 0x01
    RECALL = 0x02


WHITE_BALANCE_CODES = {
    WhiteBalanceMode.AUTO: 0x00,
    WhiteBalanceMode.INDOOR: 0x01,
    WhiteBalanceMode.OUTDOOR: 0x02,
    WhiteBalanceMode.ONE_PUSH: 0x03,
    WhiteBalanceMode.ATW: 0x04,
    WhiteBalanceMode.MANUAL: 0x05,
}

EXPOSURE_CODES = {
    ExposureMode.FULL_AUTO: 0x00,
    ExposureMode.MANUAL: 0x03,
    ExposureMode.SHUTTER_PRIORITY: 0x0A,
    ExposureMode.IRIS_PRIORITY: 0x0B,
    ExposureMode.BRIGHT: 0x0D,
}


def _to_bytes(command: str) -> bytes:
    # "81 01 06 01" -> b'\x81\x01\x06\x01'
    return bytes.fromhex(command.replace(" ", ""))


def pan_tilt(
    left: bool,
    right: bool,
    up: bool,
    down: bool,
    pan_speed: int = ViscaLimits.DEFAULT_PAN_SPEED,
    tilt_speed: int = ViscaLimits.DEFAULT_TILT_SPEED,
) -> bytes:
    """
    Pan/tilt drive command.

    Opposite flags resolve to the later-checked one: right beats left,
    down beats up. Real cameras depend on this exact behavior.
    """
    pan_dir = PanDirection.STOP
    if left:
        pan_dir = PanDirection.LEFT
    if right:
        pan_dir = PanDirection.RIGHT

    tilt_dir = TiltDirection.STOP
    if up:
        tilt_dir = TiltDirection.UP
    if down:
        tilt_dir = TiltDirection.DOWN

    return _to_bytes(
        ViscaCommands.PAN_TILT.format(
            pan_speed=pan_speed, tilt_speed=tilt_speed, pan_dir=pan_dir, tilt_dir=tilt_dir
        )
    )


def zoom(zoom_in: bool, zoom_out: bool, speed: int = ViscaLimits.DEFAULT_ZOOM_SPEED) -> bytes:
    """Variable zoom; zoom-out wins when both flags are set"""
    value = 0x00
    if zoom_in:
        value = 0x20 | speed
    if zoom_out:
        value = 0x30 | speed
    return _to_bytes(ViscaCommands.ZOOM.format(value=value))


def stop() -> bytes:
    """Stop pan/tilt movement"""
    return pan_tilt(False, False, False, False)


def home() -> bytes:
    return _to_bytes(ViscaCommands.HOME)


def zoom_stop() -> bytes:
    return _to_bytes(ViscaCommands.ZOOM_STOP)


def preset(kind: PresetKind, slot: int) -> bytes:
    return _to_bytes(ViscaCommands.PRESET.format(kind=kind, slot=slot))


def preset_set(slot: int) -> bytes:
    """Store current position into camera memory slot"""
    return preset(PresetKind.SET, slot)


def preset_recall(slot: int) -> bytes:
    """Recall camera memory slot"""
    return preset(PresetKind.RECALL, slot)


def preset_reset(slot: int) -> bytes:
    """Clear camera memory slot"""
    return preset(PresetKind.RESET, slot)


def focus(mode: FocusCommand, speed: int | None = None) -> bytes:
    """
    Focus command.

    NEAR/FAR use the standard-speed drive bytes (03/02) unless a speed is
    given, in which case the variable form 3p/2p is sent.
    """
    if mode is FocusCommand.FAR:
        value = 0x02 if speed is None else 0x20 | speed
        return _to_bytes(ViscaCommands.FOCUS_DRIVE.format(value=value))
    if mode is FocusCommand.NEAR:
        value = 0x03 if speed is None else 0x30 | speed
        return _to_bytes(ViscaCommands.FOCUS_DRIVE.format(value=value))
    if mode is FocusCommand.STOP:
        return _to_bytes(ViscaCommands.FOCUS_STOP)
    if mode is FocusCommand.AUTO:
        return _to_bytes(ViscaCommands.FOCUS_AUTO)
    if mode is FocusCommand.MANUAL:
        return _to_bytes(ViscaCommands.FOCUS_MANUAL)
    if mode is FocusCommand.ONE_PUSH:
        return _to_bytes(ViscaCommands.FOCUS_ONE_PUSH)
    raise ViscaCommandError(f"Unknown focus command: {mode!r}")


def white_balance(mode: WhiteBalanceMode) -> bytes:
    if mode is WhiteBalanceMode.ONE_PUSH_TRIGGER:
        return _to_bytes(ViscaCommands.WHITE_BALANCE_ONE_PUSH_TRIGGER)
    code = WHITE_BALANCE_CODES.get(mode)
    if code is None:
        raise ViscaCommandError(f"Unknown white balance mode: {mode!r}")
    return _to_bytes(ViscaCommands.WHITE_BALANCE_MODE.format(mode=code))


def exposure(mode: ExposureMode) -> bytes:
    code = EXPOSURE_CODES.get(mode)
    if code is None:
        raise ViscaCommandError(f"Unknown exposure mode: {mode!r}")
    return _to_bytes(ViscaCommands.EXPOSURE_MODE.format(mode=code))


# Command values: one frozen dataclass per intent variant


@dataclass(frozen=True)
class PanTilt:
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    pan_speed: int = ViscaLimits.DEFAULT_PAN_SPEED
    tilt_speed: int = ViscaLimits.DEFAULT_TILT_SPEED


@dataclass(frozen=True)
class Zoom:
    zoom_in: bool = False
    zoom_out: bool = False
    speed: int = ViscaLimits.DEFAULT_ZOOM_SPEED


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class Home:
    pass


@dataclass(frozen=True)
class ZoomStop:
    pass


@dataclass(frozen=True)
class FocusMove:
    mode: FocusCommand
    speed: int | None = None


@dataclass(frozen=True)
class WhiteBalance:
    mode: WhiteBalanceMode


@dataclass(frozen=True)
class Exposure:
    mode: ExposureMode


@dataclass(frozen=True)
class PresetOp:
    kind: PresetKind
    slot: int


Command = PanTilt | Zoom | Stop | Home | ZoomStop | FocusMove | WhiteBalance | Exposure | PresetOp


def encode(command: Command) -> bytes:
    """Encode any Command value"""
    if isinstance(command, PanTilt):
        return pan_tilt(
            command.left,
            command.right,
            command.up,
            command.down,
            command.pan_speed,
            command.tilt_speed,
        )
    if isinstance(command, Zoom):
        return zoom(command.zoom_in, command.zoom_out, command.speed)
    if isinstance(command, Stop):
        return stop()
    if isinstance(command, Home):
        return home()
    if isinstance(command, ZoomStop):
        return zoom_stop()
    if isinstance(command, FocusMove):
        return focus(command.mode, command.speed)
    if isinstance(command, WhiteBalance):
        return white_balance(command.mode)
    if isinstance(command, Exposure):
        return exposure(command.mode)
    if isinstance(command, PresetOp):
        return preset(command.kind, command.slot)
    raise ViscaCommandError(f"Unsupported command: {command!r}")


_PRESET_PREFIX = bytes([COMMAND_HEADER, 0x01, 0x04, 0x3F])


def decode_preset(packet: bytes) -> PresetOp:
    """Recover the preset operation from a memory command packet"""
    if len(packet) != 7 or not packet.startswith(_PRESET_PREFIX) or packet[-1] != COMMAND_TERMINATOR:
        raise ViscaCommandError(f"Not a preset packet: {packet.hex(' ').upper()}")
    try:
        kind = PresetKind(packet[4])
    except ValueError as e:
        raise ViscaCommandError(f"Unknown preset sub-command: {packet[4]:02X}") from e
    return PresetOp(kind=kind, slot=packet[5])

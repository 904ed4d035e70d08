import pytest

from ptzdeck.constants import NetworkConstants
from ptzdeck.controllers import visca_commands
from ptzdeck.controllers.visca_commands import COMMAND_HEADER, COMMAND_TERMINATOR
from ptzdeck.controllers.visca_commands import (
    Exposure,
    ExposureMode,
    FocusCommand,
    FocusMove,
    Home,
    PanTilt,
    PresetKind,
    PresetOp,
    Stop,
    WhiteBalance,
    WhiteBalanceMode,
    Zoom,
    ZoomStop,
)
from ptzdeck.exceptions import ViscaCommandError


def hexbytes(text: str) -> bytes:
    return bytes.fromhex(text.replace(" ", ""))


@pytest.mark.parametrize("pan_speed", [0x01, 0x0C, 0x18])
@pytest.mark.parametrize("tilt_speed", [0x01, 0x07, 0x18])
def test_pan_tilt_layout_keeps_speeds_verbatim(pan_speed, tilt_speed):
    packet = visca_commands.pan_tilt(True, False, False, True, pan_speed, tilt_speed)

    assert len(packet) == 9
    assert packet[0] == 0x81
    assert packet[-1] == 0xFF
    assert packet[:4] == hexbytes("81 01 06 01")
    assert packet[4] == pan_speed
    assert packet[5] == tilt_speed
    assert packet[6:8] == hexbytes("01 02")


@pytest.mark.parametrize(
    "flags, directions",
    [
        ((True, False, False, False), "01 03"),
        ((False, True, False, False), "02 03"),
        ((False, False, True, False), "03 01"),
        ((False, False, False, True), "03 02"),
        ((True, False, True, False), "01 01"),
        ((False, True, False, True), "02 02"),
        ((False, False, False, False), "03 03"),
    ],
)
def test_pan_tilt_direction_bytes(flags, directions):
    packet = visca_commands.pan_tilt(*flags, 0x05, 0x06)
    assert packet == hexbytes(f"81 01 06 01 05 06 {directions} FF")


def test_opposite_pan_flags_right_wins():
    packet = visca_commands.pan_tilt(True, True, False, False)
    assert packet[6] == 0x02


def test_opposite_tilt_flags_down_wins():
    packet = visca_commands.pan_tilt(False, False, True, True)
    assert packet[7] == 0x02


@pytest.mark.parametrize("speed", range(0, 8))
def test_opposite_zoom_flags_out_wins(speed):
    packet = visca_commands.zoom(True, True, speed)
    assert packet[4] == 0x30 | speed


def test_zoom_bytes():
    assert visca_commands.zoom(True, False, 4) == hexbytes("81 01 04 07 24 FF")
    assert visca_commands.zoom(False, True, 7) == hexbytes("81 01 04 07 37 FF")
    assert visca_commands.zoom(False, False, 7) == hexbytes("81 01 04 07 00 FF")


def test_stop_matches_idle_pan_tilt_regardless_of_history():
    idle = visca_commands.pan_tilt(False, False, False, False)
    visca_commands.pan_tilt(True, False, True, False, 0x18, 0x18)
    visca_commands.zoom(True, False, 7)

    assert visca_commands.stop() == idle
    assert visca_commands.stop() == hexbytes("81 01 06 01 0C 0C 03 03 FF")


def test_fixed_commands():
    assert visca_commands.home() == hexbytes("81 01 06 04 FF")
    assert visca_commands.zoom_stop() == hexbytes("81 01 04 07 00 FF")


def test_out_of_range_speed_byte_is_emitted_verbatim():
    packet = visca_commands.pan_tilt(True, False, False, False, 0x30, 0x00)
    assert packet[4] == 0x30
    assert packet[5] == 0x00


def test_speed_outside_byte_range_raises_value_error():
    with pytest.raises(ValueError):
        visca_commands.pan_tilt(True, False, False, False, 0x100, 0x01)


def test_preset_table_is_distinct_and_decodes():
    packets = {}
    for kind in PresetKind:
        for slot in range(4):
            packet = visca_commands.preset(kind, slot)
            assert len(packet) == 7
            assert packet[0] == 0x81
            assert packet[-1] == 0xFF
            packets[packet] = (kind, slot)

            decoded = visca_commands.decode_preset(packet)
            assert decoded == PresetOp(kind=kind, slot=slot)
            assert packet[4] == kind
            assert packet[5] & 0x0F == slot

    assert len(packets) == 12


def test_preset_helpers():
    assert visca_commands.preset_set(1) == hexbytes("81 01 04 3F 01 01 FF")
    assert visca_commands.preset_recall(2) == hexbytes("81 01 04 3F 02 02 FF")
    assert visca_commands.preset_reset(3) == hexbytes("81 01 04 3F 00 03 FF")


@pytest.mark.parametrize(
    "packet",
    [
        hexbytes("81 01 04 07 00 FF"),
        hexbytes("81 01 04 3F 05 01 FF"),
        hexbytes("81 01 04 3F 01 01 00"),
    ],
)
def test_decode_preset_rejects_other_packets(packet):
    with pytest.raises(ViscaCommandError):
        visca_commands.decode_preset(packet)


@pytest.mark.parametrize(
    "mode, speed, expected",
    [
        (FocusCommand.FAR, None, "81 01 04 08 02 FF"),
        (FocusCommand.NEAR, None, "81 01 04 08 03 FF"),
        (FocusCommand.FAR, 5, "81 01 04 08 25 FF"),
        (FocusCommand.NEAR, 5, "81 01 04 08 35 FF"),
        (FocusCommand.STOP, None, "81 01 04 08 00 FF"),
        (FocusCommand.AUTO, None, "81 01 04 38 02 FF"),
        (FocusCommand.MANUAL, None, "81 01 04 38 03 FF"),
        (FocusCommand.ONE_PUSH, None, "81 01 04 18 01 FF"),
    ],
)
def test_focus_table(mode, speed, expected):
    assert visca_commands.focus(mode, speed) == hexbytes(expected)


@pytest.mark.parametrize(
    "mode, expected",
    [
        (WhiteBalanceMode.AUTO, "81 01 04 35 00 FF"),
        (WhiteBalanceMode.INDOOR, "81 01 04 35 01 FF"),
        (WhiteBalanceMode.OUTDOOR, "81 01 04 35 02 FF"),
        (WhiteBalanceMode.ONE_PUSH, "81 01 04 35 03 FF"),
        (WhiteBalanceMode.ATW, "81 01 04 35 04 FF"),
        (WhiteBalanceMode.MANUAL, "81 01 04 35 05 FF"),
        (WhiteBalanceMode.ONE_PUSH_TRIGGER, "81 01 04 10 05 FF"),
    ],
)
def test_white_balance_table(mode, expected):
    assert visca_commands.white_balance(mode) == hexbytes(expected)


@pytest.mark.parametrize(
    "mode, expected",
    [
        (ExposureMode.FULL_AUTO, "81 01 04 39 00 FF"),
        (ExposureMode.MANUAL, "81 01 04 39 03 FF"),
        (ExposureMode.SHUTTER_PRIORITY, "81 01 04 39 0A FF"),
        (ExposureMode.IRIS_PRIORITY, "81 01 04 39 0B FF"),
        (ExposureMode.BRIGHT, "81 01 04 39 0D FF"),
    ],
)
def test_exposure_table(mode, expected):
    assert visca_commands.exposure(mode) == hexbytes(expected)


def test_encode_dispatches_every_variant():
    assert visca_commands.encode(PanTilt(left=True, pan_speed=3, tilt_speed=0)) == visca_commands.pan_tilt(
        True, False, False, False, 3, 0
    )
    assert visca_commands.encode(Zoom(zoom_in=True, speed=2)) == hexbytes("81 01 04 07 22 FF")
    assert visca_commands.encode(Stop()) == visca_commands.stop()
    assert visca_commands.encode(Home()) == visca_commands.home()
    assert visca_commands.encode(ZoomStop()) == visca_commands.zoom_stop()
    assert visca_commands.encode(FocusMove(FocusCommand.AUTO)) == hexbytes("81 01 04 38 02 FF")
    assert visca_commands.encode(WhiteBalance(WhiteBalanceMode.ATW)) == hexbytes("81 01 04 35 04 FF")
    assert visca_commands.encode(Exposure(ExposureMode.MANUAL)) == hexbytes("81 01 04 39 03 FF")
    assert visca_commands.encode(PresetOp(PresetKind.RECALL, 2)) == hexbytes("81 01 04 3F 02 02 FF")


def test_encode_rejects_unknown_command():
    with pytest.raises(ViscaCommandError):
        visca_commands.encode("pan left")


def test_command_table_has_no_collisions():
    commands = [
        Stop(),
        Home(),
        ZoomStop(),
        Zoom(zoom_in=True, speed=4),
        Zoom(zoom_out=True, speed=4),
        *[FocusMove(mode) for mode in FocusCommand],
        *[WhiteBalance(mode) for mode in WhiteBalanceMode],
        *[Exposure(mode) for mode in ExposureMode],
        *[PresetOp(kind, slot) for kind in PresetKind for slot in range(4)],
    ]
    packets = [visca_commands.encode(command) for command in commands]

    assert len(set(packets)) == len(commands)
    for packet in packets:
        assert 1 <= len(packet) <= NetworkConstants.MAX_PACKET_LENGTH
        assert packet[0] == COMMAND_HEADER
        assert packet[-1] == COMMAND_TERMINATOR

import logging

import pytest

from ptzdeck.exceptions import InvalidAddressError
from ptzdeck.utils import setup_logging, validate_address, validate_port


@pytest.mark.parametrize(
    "address, expected",
    [
        ("192.168.1.100", "192.168.1.100"),
        (" 10.0.0.5 ", "10.0.0.5"),
        ("::1", "::1"),
        ("FE80::0001", "fe80::1"),
    ],
)
def test_validate_address_normalizes(address, expected):
    assert validate_address(address) == expected


@pytest.mark.parametrize("address", ["not-an-ip", "", "256.1.1.1", "camera.local", None])
def test_validate_address_rejects(address):
    with pytest.raises(InvalidAddressError):
        validate_address(address)


def test_invalid_address_error_is_value_error():
    with pytest.raises(ValueError):
        validate_address("nope")


@pytest.mark.parametrize("port", [1, 52381, 65535])
def test_validate_port_accepts(port):
    assert validate_port(port) == port


@pytest.mark.parametrize("port", [0, 65536, -1, "52381", True, 5.0])
def test_validate_port_rejects(port):
    with pytest.raises(InvalidAddressError):
        validate_port(port)


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_writes_log_file(tmp_path, restore_root_logging):
    log_file = setup_logging(file_logging_enabled=True, level="DEBUG", log_dir=tmp_path)

    logging.getLogger("ptzdeck.test").debug("camera 10.0.0.5 ready")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "ptzdeck.log"
    content = log_file.read_text(encoding="utf-8")
    assert "camera 10.0.0.5 ready" in content
    assert " - ptzdeck.test - DEBUG - " in content


def test_setup_logging_console_only_returns_none(restore_root_logging):
    assert setup_logging() is None
    assert logging.getLogger().level == logging.INFO

"""CRC checks and the serial link shared by the referee reader and UI senders."""

import logging

import serial

logger = logging.getLogger(__name__)

CRC8_INIT = 0xFF
CRC16_INIT = 0xFFFF
DEFAULT_PORT = "/dev/usbReferee"
DEFAULT_BAUDRATE = 115200


def _build_table(poly: int, count: int = 256) -> tuple:
    table = []
    for value in range(count):
        crc = value
        for _ in range(8):
            crc = (crc >> 1) ^ poly if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC8_TABLE = _build_table(0x8C)
_CRC16_TABLE = _build_table(0x8408)


def get_crc8(data, init: int = CRC8_INIT) -> int:
    """CRC-8 of ``data`` starting from ``init``."""
    crc = init & 0xFF
    for byte in bytes(data):
        crc = _CRC8_TABLE[crc ^ byte]
    return crc


def verify_crc8(data) -> bool:
    """True when the last byte of ``data`` is the CRC-8 of the bytes before it."""
    data = bytes(data)
    if len(data) <= 2:
        return False
    return get_crc8(data[:-1]) == data[-1]


def append_crc8(data) -> bytes:
    """Return ``data`` with its last byte replaced by the CRC-8 of the rest."""
    data = bytes(data)
    if len(data) <= 2:
        return data
    return data[:-1] + bytes([get_crc8(data[:-1])])


def get_crc16(data, init: int = CRC16_INIT) -> int:
    """CRC-16 of ``data`` starting from ``init``."""
    crc = init & 0xFFFF
    for byte in bytes(data):
        crc = (crc >> 8) ^ _CRC16_TABLE[(crc ^ byte) & 0xFF]
    return crc


def verify_crc16(data) -> bool:
    """True when the last two bytes of ``data`` hold its CRC-16, low byte first."""
    data = bytes(data)
    if len(data) <= 2:
        return False
    crc = get_crc16(data[:-2])
    return data[-2] == crc & 0xFF and data[-1] == (crc >> 8) & 0xFF


def append_crc16(data) -> bytes:
    """Return ``data`` with its last two bytes replaced by the CRC-16 of the rest."""
    data = bytes(data)
    if len(data) <= 2:
        return data
    crc = get_crc16(data[:-2])
    return data[:-2] + bytes([crc & 0xFF, (crc >> 8) & 0xFF])


class Base:
    """Robot identity and referee serial port shared between components."""

    def __init__(self, serial_port=None):
        self.serial = serial_port
        self.client_id = 0
        self.robot_id = 0
        self.capacity_recent_mode = 0
        self.capacity_expect_mode = 0
        self.robot_color = ""
        self.referee_data_is_online = False

    def init_serial(self, port: str = DEFAULT_PORT, baudrate: int = DEFAULT_BAUDRATE) -> None:
        """Configure and open the serial port; a failure is logged, not raised."""
        if self.serial is None:
            self.serial = serial.Serial()
        self.serial.port = port
        self.serial.baudrate = baudrate
        self.serial.timeout = 0.05
        if self.serial.is_open:
            return
        try:
            self.serial.open()
        except serial.SerialException:
            logger.error("Cannot open referee port")

    def _is_open(self) -> bool:
        return self.serial is not None and self.serial.is_open

    def write(self, data) -> int:
        """Write ``data`` to the port; nothing is sent while it is closed."""
        if not self._is_open():
            return 0
        written = self.serial.write(bytes(data))
        return len(data) if written is None else written

    def read_available(self) -> bytes:
        """Read every byte waiting on the port, or nothing when it is closed."""
        if not self._is_open():
            return b""
        waiting = self.serial.in_waiting
        if not waiting:
            return b""
        return bytes(self.serial.read(waiting))
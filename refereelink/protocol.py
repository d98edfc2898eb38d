"""Referee serial protocol: command ids, enumerations and packed wire structures."""

import struct
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import ClassVar

SOF = 0xA5
HEADER_LENGTH = 5
CMD_ID_LENGTH = 2
TAIL_LENGTH = 2
FRAME_LENGTH = 128
UNPACK_BUFFER_LENGTH = 256


class RefereeCmdId(IntEnum):
    GAME_STATUS_CMD = 0x0001
    GAME_RESULT_CMD = 0x0002
    GAME_ROBOT_HP_CMD = 0x0003
    DART_STATUS_CMD = 0x0004
    ICRA_ZONE_STATUS_CMD = 0x0005
    FIELD_EVENTS_CMD = 0x0101
    SUPPLY_PROJECTILE_ACTION_CMD = 0x0102
    REFEREE_WARNING_CMD = 0x0104
    DART_REMAINING_CMD = 0x0105
    ROBOT_STATUS_CMD = 0x0201
    POWER_HEAT_DATA_CMD = 0x0202
    ROBOT_POS_CMD = 0x0203
    BUFF_CMD = 0x0204
    AERIAL_ROBOT_ENERGY_CMD = 0x0205
    ROBOT_HURT_CMD = 0x0206
    SHOOT_DATA_CMD = 0x0207
    BULLET_REMAINING_CMD = 0x0208
    ROBOT_RFID_STATUS_CMD = 0x0209
    DART_CLIENT_CMD = 0x020A
    ROBOTS_POS_CMD = 0x020B
    RADAR_MARK_CMD = 0x020C
    INTERACTIVE_DATA_CMD = 0x0301
    CUSTOM_CONTROLLER_CMD = 0x0302
    TARGET_POS_CMD = 0x0303
    ROBOT_COMMAND_CMD = 0x0304
    CLIENT_MAP_CMD = 0x0305
    CUSTOM_CLIENT_CMD = 0x0306
    MAP_SENTRY_CMD = 0x0307
    POWER_MANAGEMENT_SAMPLE_AND_STATUS_DATA_CMD = 0x8301
    POWER_MANAGEMENT_INITIALIZATION_EXCEPTION_CMD = 0x8302
    POWER_MANAGEMENT_SYSTEM_EXCEPTION_CMD = 0x8303
    POWER_MANAGEMENT_PROCESS_STACK_OVERFLOW_CMD = 0x8304
    POWER_MANAGEMENT_UNKNOWN_EXCEPTION_CMD = 0x8305


class DataCmdId(IntEnum):
    ROBOT_INTERACTIVE_CMD_MIN = 0x0200
    ROBOT_INTERACTIVE_CMD_MAX = 0x02FF
    CLIENT_GRAPH_DELETE_CMD = 0x0100
    CLIENT_GRAPH_SINGLE_CMD = 0x0101
    CLIENT_GRAPH_DOUBLE_CMD = 0x0102
    CLIENT_GRAPH_FIVE_CMD = 0x0103
    CLIENT_GRAPH_SEVEN_CMD = 0x0104
    CLIENT_CHARACTER_CMD = 0x0110
    CURRENT_SENTRY_POSITION_CMD = 0x0200


class RobotId(IntEnum):
    RED_HERO = 1
    RED_ENGINEER = 2
    RED_STANDARD_3 = 3
    RED_STANDARD_4 = 4
    RED_STANDARD_5 = 5
    RED_AERIAL = 6
    RED_SENTRY = 7
    RED_RADAR = 9
    RED_OUTPOST = 10
    RED_BASE = 11
    BLUE_HERO = 101
    BLUE_ENGINEER = 102
    BLUE_STANDARD_3 = 103
    BLUE_STANDARD_4 = 104
    BLUE_STANDARD_5 = 105
    BLUE_AERIAL = 106
    BLUE_SENTRY = 107
    BLUE_RADAR = 109
    BLUE_OUTPOST = 110
    BLUE_BASE = 111


class ClientId(IntEnum):
    RED_HERO_CLIENT = 0x0101
    RED_ENGINEER_CLIENT = 0x0102
    RED_STANDARD_3_CLIENT = 0x0103
    RED_STANDARD_4_CLIENT = 0x0104
    RED_STANDARD_5_CLIENT = 0x0105
    RED_AERIAL_CLIENT = 0x0106
    BLUE_HERO_CLIENT = 0x0165
    BLUE_ENGINEER_CLIENT = 0x0166
    BLUE_STANDARD_3_CLIENT = 0x0167
    BLUE_STANDARD_4_CLIENT = 0x0168
    BLUE_STANDARD_5_CLIENT = 0x0169
    BLUE_AERIAL_CLIENT = 0x016A


class GraphOperation(IntEnum):
    ADD = 1
    UPDATE = 2
    DELETE = 3


class GraphColor(IntEnum):
    MAIN_COLOR = 0
    YELLOW = 1
    GREEN = 2
    ORANGE = 3
    PURPLE = 4
    PINK = 5
    CYAN = 6
    BLACK = 7
    WHITE = 8


class GraphType(IntEnum):
    LINE = 0
    RECTANGLE = 1
    CIRCLE = 2
    ELLIPSE = 3
    ARC = 4
    STRING = 7


class SentryIntention(IntEnum):
    ATTACK_IN = 1
    DEFEND_IN = 2
    MOVE_TO = 3


class PowerManagementStateMachine(IntEnum):
    CHARGE = 0
    BOOST = 1
    NORMAL = 2
    ALL_OFF = 3


class PowerManagementProtectionInfo(IntEnum):
    NO_PROBLEM = 0
    HIGH_CURRENT = 1
    REFEREE_POWER_DOWN = 2
    REFEREE_DISCONNECT = 3


class PowerManagementResetReason(IntEnum):
    POWER_ON = 1
    EXTERNAL_BUTTON = 2
    SOFT = 3
    INDEPENDENT_WATCHDOG = 4
    WINDOW_WATCHDOG = 5
    LOW_VOLTAGE = 6
    UNKNOWN = 7


class PowerManagementTopology(IntEnum):
    PASS_THROUGH = 0
    CHARGE_AND_BOOST = 1
    SWITCHES_ALL_OFF = 2


def _unpack(fmt: struct.Struct, data: bytes, what: str) -> tuple:
    if len(data) < fmt.size:
        raise ValueError(f"{what} needs {fmt.size} bytes, got {len(data)}")
    return fmt.unpack_from(bytes(data))


_FRAME_HEADER = struct.Struct("<BHBB")
_INTERACTIVE_HEADER = struct.Struct("<HHH")
_GRAPH_CONFIG = struct.Struct("<3sIII")


@dataclass
class FrameHeader:
    """The five-byte header that opens every referee frame."""

    SIZE: ClassVar[int] = _FRAME_HEADER.size

    sof: int = SOF
    data_length: int = 0
    seq: int = 0
    crc_8: int = 0

    def pack(self) -> bytes:
        return _FRAME_HEADER.pack(self.sof, self.data_length, self.seq, self.crc_8)

    @classmethod
    def from_bytes(cls, data) -> "FrameHeader":
        return cls(*_unpack(_FRAME_HEADER, data, "frame header"))


@dataclass
class InteractiveDataHeader:
    """Header of the robot interaction payload (command 0x0301)."""

    SIZE: ClassVar[int] = _INTERACTIVE_HEADER.size

    data_cmd_id: int = 0
    sender_id: int = 0
    receiver_id: int = 0

    def pack(self) -> bytes:
        return _INTERACTIVE_HEADER.pack(self.data_cmd_id, self.sender_id, self.receiver_id)

    @classmethod
    def from_bytes(cls, data) -> "InteractiveDataHeader":
        return cls(*_unpack(_INTERACTIVE_HEADER, data, "interactive data header"))


# Bit fields of the three 32-bit words, least significant bits first.
_GRAPH_WORDS = (
    (("operate_type", 3), ("graphic_type", 3), ("layer", 4), ("color", 4), ("start_angle", 9), ("end_angle", 9)),
    (("width", 10), ("start_x", 11), ("start_y", 11)),
    (("radius", 10), ("end_x", 11), ("end_y", 11)),
)
_GRAPH_BITS = {name: bits for word in _GRAPH_WORDS for name, bits in word}


@dataclass
class GraphConfig:
    """A client graphic description; numeric fields wrap to their bit widths."""

    SIZE: ClassVar[int] = _GRAPH_CONFIG.size

    graphic_id: bytes = b"\x00\x00\x00"
    operate_type: int = 0
    graphic_type: int = 0
    layer: int = 0
    color: int = 0
    start_angle: int = 0
    end_angle: int = 0
    width: int = 0
    start_x: int = 0
    start_y: int = 0
    radius: int = 0
    end_x: int = 0
    end_y: int = 0

    def __setattr__(self, name, value):
        bits = _GRAPH_BITS.get(name)
        if bits is not None:
            value = int(value) & ((1 << bits) - 1)
        elif name == "graphic_id":
            value = bytes(value)
            if len(value) != 3:
                raise ValueError("graphic_id must be exactly 3 bytes")
        super().__setattr__(name, value)

    def pack(self) -> bytes:
        words = []
        for fields in _GRAPH_WORDS:
            word, shift = 0, 0
            for name, bits in fields:
                word |= getattr(self, name) << shift
                shift += bits
            words.append(word)
        return _GRAPH_CONFIG.pack(self.graphic_id, *words)

    @classmethod
    def from_bytes(cls, data) -> "GraphConfig":
        graphic_id, *words = _unpack(_GRAPH_CONFIG, data, "graph config")
        values = {}
        for word, fields in zip(words, _GRAPH_WORDS):
            for name, bits in fields:
                values[name] = word & ((1 << bits) - 1)
                word >>= bits
        return cls(graphic_id=graphic_id, **values)

    def copy(self) -> "GraphConfig":
        return replace(self)
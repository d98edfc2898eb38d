"""Decoding of referee frame payloads into message records."""

import logging
import struct
from collections.abc import Callable
from dataclasses import dataclass

from .protocol import DataCmdId, InteractiveDataHeader, RefereeCmdId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameStatus:
    game_type: int
    game_progress: int
    stage_remain_time: int
    sync_time_stamp: int


@dataclass(frozen=True)
class GameRobotHp:
    red_1_robot_hp: int
    red_2_robot_hp: int
    red_3_robot_hp: int
    red_4_robot_hp: int
    red_5_robot_hp: int
    red_7_robot_hp: int
    red_outpost_hp: int
    red_base_hp: int
    blue_1_robot_hp: int
    blue_2_robot_hp: int
    blue_3_robot_hp: int
    blue_4_robot_hp: int
    blue_5_robot_hp: int
    blue_7_robot_hp: int
    blue_outpost_hp: int
    blue_base_hp: int


@dataclass(frozen=True)
class DartStatus:
    dart_belong: int
    stage_remaining_time: int


@dataclass(frozen=True)
class IcraBuffDebuffZoneStatus:
    f_1_zone_status: int
    f_1_zone_buff_debuff_status: int
    f_2_zone_status: int
    f_2_zone_buff_debuff_status: int
    f_3_zone_status: int
    f_3_zone_buff_debuff_status: int
    f_4_zone_status: int
    f_4_zone_buff_debuff_status: int
    f_5_zone_status: int
    f_5_zone_buff_debuff_status: int
    f_6_zone_status: int
    f_6_zone_buff_debuff_status: int
    red_1_bullet_left: int
    red_2_bullet_left: int
    blue_1_bullet_left: int
    blue_2_bullet_left: int


@dataclass(frozen=True)
class EventData:
    event_data: int


@dataclass(frozen=True)
class SupplyProjectileAction:
    supply_projectile_id: int
    supply_robot_id: int
    supply_projectile_step: int
    supply_projectile_num: int


@dataclass(frozen=True)
class DartRemainingTime:
    dart_remaining_time: int


@dataclass(frozen=True)
class GameRobotStatus:
    robot_id: int
    robot_level: int
    remain_hp: int
    max_hp: int
    shooter_id_1_17_mm_cooling_rate: int
    shooter_id_1_17_mm_cooling_limit: int
    shooter_id_1_17_mm_speed_limit: int
    shooter_id_2_17_mm_cooling_rate: int
    shooter_id_2_17_mm_cooling_limit: int
    shooter_id_2_17_mm_speed_limit: int
    shooter_id_1_42_mm_cooling_rate: int
    shooter_id_1_42_mm_cooling_limit: int
    shooter_id_1_42_mm_speed_limit: int
    chassis_power_limit: int
    mains_power_gimbal_output: int
    mains_power_chassis_output: int
    mains_power_shooter_output: int


@dataclass(frozen=True)
class PowerHeatData:
    """Chassis voltage in volts and current in amperes, truncated to whole units."""

    chassis_volt: int
    chassis_current: int
    chassis_power: float
    chassis_power_buffer: int
    shooter_id_1_17_mm_cooling_heat: int
    shooter_id_2_17_mm_cooling_heat: int
    shooter_id_1_42_mm_cooling_heat: int


@dataclass(frozen=True)
class RobotHurt:
    armor_id: int
    hurt_type: int


@dataclass(frozen=True)
class ShootData:
    bullet_type: int
    shooter_id: int
    bullet_freq: int
    bullet_speed: float


@dataclass(frozen=True)
class BulletAllowance:
    bullet_allowance_num_17_mm: int
    bullet_allowance_num_42_mm: int
    coin_remaining_num: int


@dataclass(frozen=True)
class RfidStatus:
    rfid_status: int


@dataclass(frozen=True)
class DartClientCmd:
    dart_launch_opening_status: int
    dart_attack_target: int
    target_change_time: int
    first_dart_speed: int
    second_dart_speed: int
    third_dart_speed: int
    fourth_dart_speed: int
    last_dart_launch_time: int
    operate_launch_cmd_time: int


@dataclass(frozen=True)
class RobotsPositionData:
    hero_x: float
    hero_y: float
    engineer_x: float
    engineer_y: float
    standard_3_x: float
    standard_3_y: float
    standard_4_x: float
    standard_4_y: float
    standard_5_x: float
    standard_5_y: float


@dataclass(frozen=True)
class RadarMarkData:
    mark_hero_progress: int
    mark_engineer_progress: int
    mark_standard_3_progress: int
    mark_standard_4_progress: int
    mark_standard_5_progress: int
    mark_sentry_progress: int


@dataclass(frozen=True)
class CurrentSentryPosData:
    x: float
    y: float
    z: float
    yaw: float


@dataclass(frozen=True)
class ClientMapReceiveData:
    target_robot_id: int
    target_position_x: float
    target_position_y: float


@dataclass(frozen=True)
class ClientMapSendData:
    target_position_x: float
    target_position_y: float
    target_position_z: float
    command_keyboard: int
    target_robot_id: int


@dataclass(frozen=True)
class PowerManagementSampleAndStatusData:
    chassis_power: float
    chassis_expect_power: float
    capacity_recent_charge_power: float
    capacity_remain_charge: float
    capacity_expect_charge_power: int
    state_machine_running_state: int
    power_management_protection_info: int
    power_management_topology: int


@dataclass(frozen=True)
class PowerManagementInitializationExceptionData:
    error_code: int
    string: str


@dataclass(frozen=True)
class PowerManagementSystemExceptionData:
    r0: int
    r1: int
    r2: int
    r3: int
    r12: int
    lr: int
    pc: int
    psr: int


@dataclass(frozen=True)
class PowerManagementProcessStackOverflowData:
    process_name: str


@dataclass(frozen=True)
class PowerManagementUnknownExceptionData:
    abnormal_reset_reason: int
    power_management_before_reset_topology: int
    state_machine_before_reset_mode: int


_Parser = Callable[[bytes], object]
_PARSERS: dict[int, _Parser] = {}

# Commands whose handling continues into the next command's handler on the same payload.
_CONTINUES_INTO = {
    RefereeCmdId.RADAR_MARK_CMD: RefereeCmdId.INTERACTIVE_DATA_CMD,
    RefereeCmdId.POWER_MANAGEMENT_PROCESS_STACK_OVERFLOW_CMD: RefereeCmdId.POWER_MANAGEMENT_UNKNOWN_EXCEPTION_CMD,
}

_IGNORED = (
    RefereeCmdId.GAME_RESULT_CMD,
    RefereeCmdId.REFEREE_WARNING_CMD,
    RefereeCmdId.ROBOT_POS_CMD,
    RefereeCmdId.BUFF_CMD,
    RefereeCmdId.AERIAL_ROBOT_ENERGY_CMD,
)


def _padded(payload, size: int) -> bytes:
    """The payload with missing trailing bytes read as zero."""
    return bytes(payload).ljust(size, b"\x00")


def _unpack(layout: struct.Struct, payload) -> tuple:
    return layout.unpack_from(_padded(payload, layout.size))


def _c_string(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("utf-8", "replace")


def _parser(cmd_id: int, fmt: str):
    layout = struct.Struct(fmt)

    def register(build):
        _PARSERS[cmd_id] = lambda payload: build(*_unpack(layout, payload))
        return build

    return register


@_parser(RefereeCmdId.GAME_STATUS_CMD, "<BHQ")
def _game_status(type_and_progress, remain_time, sync_time_stamp):
    return GameStatus(type_and_progress & 0x0F, type_and_progress >> 4, remain_time, sync_time_stamp)


_parser(RefereeCmdId.GAME_ROBOT_HP_CMD, "<16H")(GameRobotHp)
_parser(RefereeCmdId.DART_STATUS_CMD, "<BH")(DartStatus)


@_parser(RefereeCmdId.ICRA_ZONE_STATUS_CMD, "<3B4H")
def _icra_zone_status(zone_12, zone_34, zone_56, *bullets_left):
    zones = []
    for byte in (zone_12, zone_34, zone_56):
        for nibble in (byte & 0x0F, byte >> 4):
            zones += [nibble & 0x01, nibble >> 1]
    return IcraBuffDebuffZoneStatus(*zones, *bullets_left)


_parser(RefereeCmdId.FIELD_EVENTS_CMD, "<I")(EventData)
_parser(RefereeCmdId.SUPPLY_PROJECTILE_ACTION_CMD, "<4B")(SupplyProjectileAction)
_parser(RefereeCmdId.DART_REMAINING_CMD, "<B")(DartRemainingTime)


@_parser(RefereeCmdId.ROBOT_STATUS_CMD, "<BBHH9HHB")
def _robot_status(*values):
    *fields, outputs = values
    return GameRobotStatus(*fields, outputs & 0x01, (outputs >> 1) & 0x01, (outputs >> 2) & 0x01)


@_parser(RefereeCmdId.POWER_HEAT_DATA_CMD, "<HHfHHHH")
def _power_heat(volt_mv, current_ma, power, *rest):
    return PowerHeatData(int(volt_mv * 0.001), int(current_ma * 0.001), power, *rest)


@_parser(RefereeCmdId.ROBOT_HURT_CMD, "<B")
def _robot_hurt(byte):
    return RobotHurt(byte & 0x0F, byte >> 4)


_parser(RefereeCmdId.SHOOT_DATA_CMD, "<BBBf")(ShootData)
_parser(RefereeCmdId.BULLET_REMAINING_CMD, "<HHH")(BulletAllowance)
_parser(RefereeCmdId.ROBOT_RFID_STATUS_CMD, "<I")(RfidStatus)
_parser(RefereeCmdId.DART_CLIENT_CMD, "<BBHBBBBHH")(DartClientCmd)
_parser(RefereeCmdId.ROBOTS_POS_CMD, "<10f")(RobotsPositionData)
_parser(RefereeCmdId.RADAR_MARK_CMD, "<6B")(RadarMarkData)
_parser(RefereeCmdId.CLIENT_MAP_CMD, "<Hff")(ClientMapReceiveData)
_parser(RefereeCmdId.TARGET_POS_CMD, "<fffBH")(ClientMapSendData)

_SENTRY_POSITION = struct.Struct("<4f")


def _interactive(payload):
    header = InteractiveDataHeader.from_bytes(_padded(payload, InteractiveDataHeader.SIZE + 1))
    if header.data_cmd_id != DataCmdId.CURRENT_SENTRY_POSITION_CMD:
        return None
    size = InteractiveDataHeader.SIZE + _SENTRY_POSITION.size
    return CurrentSentryPosData(*_SENTRY_POSITION.unpack_from(_padded(payload, size), InteractiveDataHeader.SIZE))


_PARSERS[RefereeCmdId.INTERACTIVE_DATA_CMD] = _interactive


@_parser(RefereeCmdId.POWER_MANAGEMENT_SAMPLE_AND_STATUS_DATA_CMD, ">HHHHBB")
def _sample_and_status(chassis, expect, recent_charge, remain_charge, expect_charge, status):
    return PowerManagementSampleAndStatusData(
        chassis / 100.0,
        expect / 100.0,
        recent_charge / 100.0,
        remain_charge / 10000.0,
        expect_charge,
        status >> 4,
        (status >> 2) & 0x03,
        status & 0x03,
    )


@_parser(RefereeCmdId.POWER_MANAGEMENT_INITIALIZATION_EXCEPTION_CMD, "<b31s")
def _initialization_exception(error_code, raw):
    return PowerManagementInitializationExceptionData(error_code, _c_string(raw))


_parser(RefereeCmdId.POWER_MANAGEMENT_SYSTEM_EXCEPTION_CMD, ">8I")(PowerManagementSystemExceptionData)


@_parser(RefereeCmdId.POWER_MANAGEMENT_PROCESS_STACK_OVERFLOW_CMD, "<32s")
def _stack_overflow(raw):
    return PowerManagementProcessStackOverflowData(_c_string(raw))


@_parser(RefereeCmdId.POWER_MANAGEMENT_UNKNOWN_EXCEPTION_CMD, "<BB")
def _unknown_exception(reason, modes):
    return PowerManagementUnknownExceptionData(reason, modes & 0x0F, modes >> 4)


for _cmd in _IGNORED:
    _PARSERS[_cmd] = lambda payload: None


def decode(cmd_id: int, payload) -> list:
    """Messages carried by one frame payload, in the order they are published.

    Commands that carry nothing of interest give an empty list, as do unknown
    commands, which are logged. Radar marks and stack overflow reports are also
    read as the command that follows them, so they may give two messages.
    """
    payload = bytes(payload)
    messages = []
    cmd = cmd_id
    while True:
        parse = _PARSERS.get(cmd)
        if parse is None:
            logger.warning("Referee command ID %d not found.", cmd_id)
            return messages
        message = parse(payload)
        if message is not None:
            messages.append(message)
        cmd = _CONTINUES_INTO.get(cmd)
        if cmd is None:
            return messages
import logging
import struct

import pytest

from refereelink.messages import (
    BulletAllowance,
    ClientMapReceiveData,
    ClientMapSendData,
    CurrentSentryPosData,
    DartClientCmd,
    DartStatus,
    GameRobotHp,
    GameRobotStatus,
    GameStatus,
    IcraBuffDebuffZoneStatus,
    PowerHeatData,
    PowerManagementInitializationExceptionData,
    PowerManagementProcessStackOverflowData,
    PowerManagementSampleAndStatusData,
    PowerManagementSystemExceptionData,
    PowerManagementUnknownExceptionData,
    RadarMarkData,
    RobotHurt,
    RobotsPositionData,
    ShootData,
    decode,
)
from refereelink.protocol import DataCmdId, InteractiveDataHeader, RefereeCmdId


def test_game_status_nibbles_and_fields():
    payload = struct.pack("<BHQ", (3 << 4) | 4, 180, 123456789)
    assert decode(RefereeCmdId.GAME_STATUS_CMD, payload) == [GameStatus(4, 3, 180, 123456789)]


def test_game_robot_hp_wire_order():
    values = [100 * (i + 1) for i in range(16)]
    (msg,) = decode(RefereeCmdId.GAME_ROBOT_HP_CMD, struct.pack("<16H", *values))
    assert isinstance(msg, GameRobotHp)
    assert msg.red_1_robot_hp == values[0]
    assert msg.red_base_hp == values[7]
    assert msg.blue_1_robot_hp == values[8]
    assert msg.blue_base_hp == values[15]


def test_icra_zone_bitfields():
    zones = [(1, 5), (0, 7), (1, 2), (0, 0), (1, 3), (1, 6)]
    packed = []
    for (s1, b1), (s2, b2) in zip(zones[0::2], zones[1::2]):
        packed.append(s1 | (b1 << 1) | (s2 << 4) | (b2 << 5))
    payload = bytes(packed) + struct.pack("<4H", 10, 20, 30, 40)
    (msg,) = decode(RefereeCmdId.ICRA_ZONE_STATUS_CMD, payload)
    assert isinstance(msg, IcraBuffDebuffZoneStatus)
    assert (msg.f_1_zone_status, msg.f_1_zone_buff_debuff_status) == zones[0]
    assert (msg.f_2_zone_status, msg.f_2_zone_buff_debuff_status) == zones[1]
    assert (msg.f_6_zone_status, msg.f_6_zone_buff_debuff_status) == zones[5]
    assert (msg.red_1_bullet_left, msg.blue_2_bullet_left) == (10, 40)


def test_robot_status_fields_and_outputs():
    shooters = list(range(11, 20))
    payload = struct.pack("<BBHH9HHB", 103, 2, 150, 200, *shooters, 60, 0b101)
    (msg,) = decode(RefereeCmdId.ROBOT_STATUS_CMD, payload)
    assert isinstance(msg, GameRobotStatus)
    assert (msg.robot_id, msg.robot_level, msg.remain_hp, msg.max_hp) == (103, 2, 150, 200)
    assert msg.shooter_id_1_17_mm_cooling_rate == shooters[0]
    assert msg.shooter_id_1_42_mm_speed_limit == shooters[8]
    assert msg.chassis_power_limit == 60
    assert msg.mains_power_gimbal_output == 1
    assert msg.mains_power_chassis_output == 0
    assert msg.mains_power_shooter_output == 1


def test_power_heat_converts_units():
    payload = struct.pack("<HHfHHHH", 24000, 3500, 42.5, 60, 1, 2, 3)
    (msg,) = decode(RefereeCmdId.POWER_HEAT_DATA_CMD, payload)
    assert msg == PowerHeatData(24, 3, 42.5, 60, 1, 2, 3)


def test_robot_hurt_nibbles():
    assert decode(RefereeCmdId.ROBOT_HURT_CMD, bytes([(2 << 4) | 3])) == [RobotHurt(3, 2)]


def test_shoot_data_and_bullets():
    assert decode(RefereeCmdId.SHOOT_DATA_CMD, struct.pack("<BBBf", 1, 2, 10, 15.5)) == [ShootData(1, 2, 10, 15.5)]
    assert decode(RefereeCmdId.BULLET_REMAINING_CMD, struct.pack("<HHH", 5, 6, 7)) == [BulletAllowance(5, 6, 7)]


def test_dart_client_cmd_round_trip():
    values = (1, 2, 300, 4, 5, 6, 7, 800, 900)
    assert decode(RefereeCmdId.DART_CLIENT_CMD, struct.pack("<BBHBBBBHH", *values)) == [DartClientCmd(*values)]


def test_robots_position_round_trip():
    values = tuple(float(i) + 0.5 for i in range(10))
    assert decode(RefereeCmdId.ROBOTS_POS_CMD, struct.pack("<10f", *values)) == [RobotsPositionData(*values)]


def test_client_map_messages():
    receive = struct.pack("<Hff", 101, 1.25, -2.5)
    assert decode(RefereeCmdId.CLIENT_MAP_CMD, receive) == [ClientMapReceiveData(101, 1.25, -2.5)]
    send = struct.pack("<fffBH", 1.5, 2.5, 3.5, 87, 7)
    assert decode(RefereeCmdId.TARGET_POS_CMD, send) == [ClientMapSendData(1.5, 2.5, 3.5, 87, 7)]


def test_interactive_sentry_position():
    header = InteractiveDataHeader(DataCmdId.CURRENT_SENTRY_POSITION_CMD, 9, 7).pack()
    payload = header + struct.pack("<4f", 1.0, 2.0, 0.5, -1.5)
    assert decode(RefereeCmdId.INTERACTIVE_DATA_CMD, payload) == [CurrentSentryPosData(1.0, 2.0, 0.5, -1.5)]


def test_interactive_other_command_gives_nothing():
    payload = InteractiveDataHeader(DataCmdId.CLIENT_GRAPH_SINGLE_CMD, 1, 2).pack() + b"\x00"
    assert decode(RefereeCmdId.INTERACTIVE_DATA_CMD, payload) == []


def test_radar_mark_continues_into_interactive():
    payload = bytes([0x00, 0x02, 3, 4, 5, 6])
    assert decode(RefereeCmdId.RADAR_MARK_CMD, payload) == [
        RadarMarkData(0, 2, 3, 4, 5, 6),
        CurrentSentryPosData(0.0, 0.0, 0.0, 0.0),
    ]


def test_radar_mark_alone():
    payload = bytes([1, 2, 3, 4, 5, 6])
    assert decode(RefereeCmdId.RADAR_MARK_CMD, payload) == [RadarMarkData(1, 2, 3, 4, 5, 6)]


def test_power_management_sample_and_status():
    status = (2 << 4) | (1 << 2) | 3
    payload = struct.pack(">HHHHBB", 4000, 3000, 1500, 5000, 9, status)
    (msg,) = decode(RefereeCmdId.POWER_MANAGEMENT_SAMPLE_AND_STATUS_DATA_CMD, payload)
    assert isinstance(msg, PowerManagementSampleAndStatusData)
    assert msg.chassis_power == pytest.approx(40.0)
    assert msg.capacity_expect_charge_power == 9
    assert msg.state_machine_running_state == 2
    assert msg.power_management_protection_info == 1
    assert msg.power_management_topology == 3


def test_system_exception_is_big_endian():
    registers = (1, 2, 3, 0xDEADBEEF, 5, 6, 7, 8)
    payload = struct.pack(">8I", *registers)
    assert decode(RefereeCmdId.POWER_MANAGEMENT_SYSTEM_EXCEPTION_CMD, payload) == [
        PowerManagementSystemExceptionData(*registers)
    ]


def test_initialization_exception_string():
    payload = struct.pack("<b31s", -3, b"boot failed")
    assert decode(RefereeCmdId.POWER_MANAGEMENT_INITIALIZATION_EXCEPTION_CMD, payload) == [
        PowerManagementInitializationExceptionData(-3, "boot failed")
    ]


def test_stack_overflow_continues_into_unknown_exception():
    payload = struct.pack("<32s", b"idle")
    messages = decode(RefereeCmdId.POWER_MANAGEMENT_PROCESS_STACK_OVERFLOW_CMD, payload)
    assert messages[0] == PowerManagementProcessStackOverflowData("idle")
    assert messages[1] == PowerManagementUnknownExceptionData(payload[0], payload[1] & 0x0F, payload[1] >> 4)
    assert len(messages) == 2


def test_unknown_exception_nibbles():
    payload = bytes([4, (2 << 4) | 1])
    assert decode(RefereeCmdId.POWER_MANAGEMENT_UNKNOWN_EXCEPTION_CMD, payload) == [
        PowerManagementUnknownExceptionData(4, 1, 2)
    ]


@pytest.mark.parametrize(
    "cmd",
    [RefereeCmdId.GAME_RESULT_CMD, RefereeCmdId.REFEREE_WARNING_CMD, RefereeCmdId.BUFF_CMD],
)
def test_ignored_commands_give_nothing(cmd):
    assert decode(cmd, b"\x01\x02") == []


def test_unknown_command_logs_warning(caplog):
    with caplog.at_level(logging.WARNING):
        assert decode(0x0999, b"\x00") == []
    assert "not found" in caplog.text


def test_short_payload_reads_missing_bytes_as_zero():
    assert decode(RefereeCmdId.DART_STATUS_CMD, b"\x01") == [DartStatus(1, 0)]
import pytest

from refereelink.protocol import (
    HEADER_LENGTH,
    SOF,
    DataCmdId,
    FrameHeader,
    GraphColor,
    GraphConfig,
    GraphOperation,
    GraphType,
    InteractiveDataHeader,
    RobotId,
)


def test_frame_header_wire_bytes():
    header = FrameHeader(sof=SOF, data_length=0x0102, seq=3, crc_8=4)
    assert header.pack() == b"\xa5\x02\x01\x03\x04"


def test_frame_header_round_trip():
    header = FrameHeader(sof=SOF, data_length=200, seq=9, crc_8=0x7F)
    packed = header.pack()
    assert len(packed) == HEADER_LENGTH
    assert FrameHeader.from_bytes(packed + b"extra") == header


def test_frame_header_too_short():
    with pytest.raises(ValueError):
        FrameHeader.from_bytes(b"\xa5\x00")


def test_interactive_header_wire_bytes():
    header = InteractiveDataHeader(DataCmdId.CLIENT_CHARACTER_CMD, RobotId.RED_HERO, 0x0101)
    assert header.pack() == b"\x10\x01\x01\x00\x01\x01"


def test_interactive_header_round_trip():
    header = InteractiveDataHeader(DataCmdId.CLIENT_GRAPH_SEVEN_CMD, RobotId.BLUE_SENTRY, RobotId.BLUE_HERO)
    assert InteractiveDataHeader.from_bytes(header.pack()) == header


def test_interactive_header_too_short():
    with pytest.raises(ValueError):
        InteractiveDataHeader.from_bytes(b"\x00\x01\x02")


def test_graph_config_operate_type_in_low_bits():
    packed = GraphConfig(operate_type=GraphOperation.ADD).pack()
    assert len(packed) == GraphConfig.SIZE
    assert packed[:3] == b"\x00\x00\x00"
    assert packed[3:7] == (1).to_bytes(4, "little")
    assert packed[7:] == bytes(8)


def test_graph_config_round_trip():
    config = GraphConfig(
        graphic_id=b"\x02\x00\x00",
        operate_type=GraphOperation.UPDATE,
        graphic_type=GraphType.STRING,
        layer=9,
        color=GraphColor.WHITE,
        start_angle=300,
        end_angle=360,
        width=1000,
        start_x=1920,
        start_y=1080,
        radius=700,
        end_x=2000,
        end_y=17,
    )
    restored = GraphConfig.from_bytes(config.pack())
    assert restored == config
    assert restored.start_x == 1920
    assert restored.graphic_type == GraphType.STRING


def test_graph_config_wraps_to_bit_width():
    config = GraphConfig()
    config.start_x = (1 << 11) + 5
    config.operate_type = 1 << 3
    assert config.start_x == 5
    assert config.operate_type == 0


def test_graph_config_negative_wraps_like_unsigned():
    config = GraphConfig(end_y=-1)
    assert config.end_y == (1 << 11) - 1


def test_graph_config_float_truncates():
    config = GraphConfig(end_x=610 + 600 * 0.5 + 0.9)
    assert config.end_x == 910


def test_graph_config_copy_is_independent():
    config = GraphConfig(color=GraphColor.GREEN)
    duplicate = config.copy()
    assert duplicate == config
    duplicate.color = GraphColor.PINK
    assert config.color == GraphColor.GREEN
    assert duplicate != config


def test_graph_config_bad_id_length():
    with pytest.raises(ValueError):
        GraphConfig(graphic_id=b"\x01\x02")


def test_graph_config_too_short():
    with pytest.raises(ValueError):
        GraphConfig.from_bytes(bytes(GraphConfig.SIZE - 1))
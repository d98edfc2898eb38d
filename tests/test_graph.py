import pytest

from refereelink.graph import Graph, get_color, get_type
from refereelink.protocol import GraphColor, GraphOperation, GraphType


@pytest.mark.parametrize(
    "name, color",
    [
        ("main_color", GraphColor.MAIN_COLOR),
        ("yellow", GraphColor.YELLOW),
        ("green", GraphColor.GREEN),
        ("orange", GraphColor.ORANGE),
        ("purple", GraphColor.PURPLE),
        ("pink", GraphColor.PINK),
        ("cyan", GraphColor.CYAN),
        ("black", GraphColor.BLACK),
        ("white", GraphColor.WHITE),
        ("magenta", GraphColor.WHITE),
    ],
)
def test_get_color(name, color):
    assert get_color(name) == color


@pytest.mark.parametrize(
    "name, graph_type",
    [
        ("rectangle", GraphType.RECTANGLE),
        ("circle", GraphType.CIRCLE),
        ("ellipse", GraphType.ELLIPSE),
        ("arc", GraphType.ARC),
        ("string", GraphType.STRING),
        ("line", GraphType.LINE),
        ("polygon", GraphType.LINE),
    ],
)
def test_get_type(name, graph_type):
    assert get_type(name) == graph_type


def test_graphic_id_little_endian():
    graph = Graph({}, 0x030201)
    assert graph.config.graphic_id == b"\x01\x02\x03"


def test_defaults():
    graph = Graph({}, 5)
    assert graph.config.graphic_type == GraphType.STRING
    assert graph.color == GraphColor.WHITE
    assert graph.operation == GraphOperation.DELETE
    assert graph.is_repeated()


def test_string_size_sets_start_angle():
    graph = Graph({"type": "string", "size": 20, "start_angle": 90}, 5)
    assert graph.start_angle == 20


def test_non_string_uses_start_angle():
    graph = Graph({"type": "arc", "size": 20, "start_angle": 90, "end_angle": 180, "radius": 7, "width": 3}, 5)
    assert graph.start_angle == 90
    assert graph.end_angle == 180
    assert graph.config.radius == 7
    assert graph.config.width == 3


def test_multiple_positions_and_update_position():
    graph = Graph(
        {"type": "line", "start_position": [[10, 20], [30, 40]], "end_position": [[50, 60], [70, 80]]},
        5,
    )
    assert (graph.config.start_x, graph.config.start_y) == (10, 20)
    assert (graph.config.end_x, graph.config.end_y) == (50, 60)
    graph.update_position(1)
    assert (graph.config.start_x, graph.config.start_y) == (30, 40)
    assert (graph.config.end_x, graph.config.end_y) == (70, 80)


def test_single_position_is_not_moved():
    graph = Graph({"type": "line", "start_position": [10, 20]}, 5)
    graph.update_position(3)
    assert (graph.config.start_x, graph.config.start_y) == (10, 20)


def test_repeat_tracking():
    graph = Graph({"type": "line", "color": "green"}, 5)
    graph.operation = GraphOperation.UPDATE
    assert not graph.is_repeated()
    graph.update_last_config()
    assert graph.is_repeated()
    graph.content = "x"
    assert not graph.is_repeated()


def test_update_last_config_sets_text_length():
    graph = Graph({"title": "Hp:", "content": "100"}, 5)
    graph.update_last_config()
    assert graph.end_angle == len("Hp:100")
    assert graph.characters == "Hp:100"


def test_angle_out_of_range_ignored():
    graph = Graph({"type": "arc", "start_angle": 10, "end_angle": 20}, 5)
    graph.start_angle = 400
    graph.end_angle = -1
    assert graph.start_angle == 10
    assert graph.end_angle == 20
    graph.start_angle = 360
    assert graph.start_angle == 360


def test_snapshot_is_independent():
    graph = Graph({"type": "line"}, 5)
    copy = graph.snapshot()
    graph.operation = GraphOperation.ADD
    graph.config.start_x = 99
    assert copy.operation == GraphOperation.DELETE
    assert copy.config.start_x == 0
    assert copy.config.graphic_id == graph.config.graphic_id
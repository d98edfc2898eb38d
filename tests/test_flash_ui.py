from types import SimpleNamespace

import pytest

from refereelink.base import Base
from refereelink.flash_ui import CoverFlashUi, FlashUi, SpinFlashUi
from refereelink.protocol import ClientId, GraphOperation, RobotId


class FakeSerial:
    def __init__(self):
        self.is_open = True
        self.writes = []

    def write(self, data):
        self.writes.append(bytes(data))
        return len(data)


@pytest.fixture
def link():
    port = FakeSerial()
    base = Base(serial_port=port)
    base.robot_id = RobotId.BLUE_HERO
    base.client_id = ClientId.BLUE_HERO_CLIENT
    return base, port


CONFIG = {"config": {"type": "rectangle", "start_position": [10, 10], "end_position": [50, 50]}}


def test_cover_flash_shows_and_hides(link):
    base, port = link
    ui = CoverFlashUi(CONFIG, base)
    ui.update_manual_cmd_data(SimpleNamespace(cover_state=1), 1.0)
    assert ui.graph.operation == GraphOperation.ADD
    assert len(port.writes) == 2
    ui.update_manual_cmd_data(SimpleNamespace(cover_state=1), 2.0)
    assert len(port.writes) == 2
    ui.update_manual_cmd_data(SimpleNamespace(cover_state=0), 3.0)
    assert ui.graph.operation == GraphOperation.DELETE
    assert len(port.writes) == 4


def test_spin_flash(link):
    base, port = link
    ui = SpinFlashUi(CONFIG, base)
    ui.update_chassis_cmd_data(SimpleNamespace(mode=0), 1.0)
    assert ui.graph.operation == GraphOperation.DELETE
    assert port.writes == []
    ui.update_chassis_cmd_data(SimpleNamespace(mode=2), 2.0)
    assert ui.graph.operation == GraphOperation.ADD
    assert len(port.writes) == 2


def test_flash_uis_get_distinct_ids(link):
    base, _ = link
    first = CoverFlashUi(CONFIG, base)
    second = SpinFlashUi(CONFIG, base)
    assert first.graph.config.graphic_id != second.graph.config.graphic_id
    assert first.graph.config.start_x == second.graph.config.start_x == 10


def test_flash_base_has_no_visibility(link):
    base, _ = link
    ui = FlashUi(CONFIG, base)
    with pytest.raises(NotImplementedError):
        ui.display_at(1.0)
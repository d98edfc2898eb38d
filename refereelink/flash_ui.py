"""Graphics shown while a condition holds and removed when it ends."""

from .base import Base
from .graph import Graph
from .protocol import GraphOperation
from .ui_base import UiBase

_CHASSIS_RAW = 0


class FlashUi(UiBase):
    """A graphic added or deleted according to ``visible``."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(base, graph_queue, delay=delay, clock=clock)
        self.graph = Graph(config["config"], self._allocate_id())

    @property
    def visible(self) -> bool:
        raise NotImplementedError("flash UIs define when they are visible")

    def display_at(self, time: float) -> None:
        visible = self.visible
        if not visible:
            self.graph.operation = GraphOperation.DELETE
        self.display_flash(time, visible, True)


class CoverFlashUi(FlashUi):
    """Shown while the cover is open."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, graph_queue, delay=delay, clock=clock)
        self.cover_state = 0

    @property
    def visible(self) -> bool:
        return bool(self.cover_state)

    def update_manual_cmd_data(self, data, time: float) -> None:
        self.cover_state = data.cover_state
        self.display_at(time)


class SpinFlashUi(FlashUi):
    """Shown while the chassis is in any mode other than raw."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, graph_queue, delay=delay, clock=clock)
        self.chassis_mode = _CHASSIS_RAW

    @property
    def visible(self) -> bool:
        return self.chassis_mode != _CHASSIS_RAW

    def update_chassis_cmd_data(self, data, time: float) -> None:
        self.chassis_mode = data.mode
        self.display_at(time)
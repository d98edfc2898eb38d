"""Client UI graphics built from configuration mappings."""

import copy
from collections.abc import Mapping

from .protocol import GraphColor, GraphConfig, GraphOperation, GraphType

_COLORS = {
    "main_color": GraphColor.MAIN_COLOR,
    "yellow": GraphColor.YELLOW,
    "green": GraphColor.GREEN,
    "orange": GraphColor.ORANGE,
    "purple": GraphColor.PURPLE,
    "pink": GraphColor.PINK,
    "cyan": GraphColor.CYAN,
    "black": GraphColor.BLACK,
}

_TYPES = {
    "rectangle": GraphType.RECTANGLE,
    "circle": GraphType.CIRCLE,
    "ellipse": GraphType.ELLIPSE,
    "arc": GraphType.ARC,
    "string": GraphType.STRING,
}


def get_color(name: str) -> GraphColor:
    """Colour named in a configuration; unknown names give white."""
    return _COLORS.get(name, GraphColor.WHITE)


def get_type(name: str) -> GraphType:
    """Graphic type named in a configuration; unknown names give a line."""
    return _TYPES.get(name, GraphType.LINE)


def _positions(value):
    """Yield (x, y) pairs from a pair or an arbitrarily nested list of pairs."""
    if len(value) and isinstance(value[0], (list, tuple)):
        for item in value:
            yield from _positions(item)
    else:
        yield int(value[0]), int(value[1])


class Graph:
    """One client graphic with its current and last-sent configuration."""

    def __init__(self, config: Mapping, graphic_id: int):
        self.config = GraphConfig(graphic_id=bytes((graphic_id >> shift) & 0xFF for shift in (0, 8, 16)))
        self.start_positions: list[tuple[int, int]] = []
        self.end_positions: list[tuple[int, int]] = []
        self.title = ""
        self.content = ""

        self.config.graphic_type = get_type(config["type"]) if "type" in config else GraphType.STRING
        if self.config.graphic_type == GraphType.STRING:
            if "size" in config:
                self.config.start_angle = int(config["size"])
        elif "start_angle" in config:
            self.config.start_angle = int(config["start_angle"])

        if "start_position" in config:
            self.start_positions = list(_positions(config["start_position"]))
            if self.start_positions:
                self.config.start_x, self.config.start_y = self.start_positions[0]
        if "end_position" in config:
            self.end_positions = list(_positions(config["end_position"]))
            if self.end_positions:
                self.config.end_x, self.config.end_y = self.end_positions[0]

        self.config.color = get_color(config["color"]) if "color" in config else GraphColor.WHITE
        if "end_angle" in config:
            self.config.end_angle = int(config["end_angle"])
        if "radius" in config:
            self.config.radius = int(config["radius"])
        if "width" in config:
            self.config.width = int(config["width"])
        if "title" in config:
            self.title = str(config["title"])
        if "content" in config:
            self.content = str(config["content"])

        self.config.operate_type = GraphOperation.DELETE
        self.last_config = self.config.copy()
        self.last_title = self.title
        self.last_content = self.content

    @property
    def operation(self) -> int:
        return self.config.operate_type

    @operation.setter
    def operation(self, value: int) -> None:
        self.config.operate_type = value

    @property
    def color(self) -> int:
        return self.config.color

    @color.setter
    def color(self, value: int) -> None:
        self.config.color = value

    @property
    def start_angle(self) -> int:
        return self.config.start_angle

    @start_angle.setter
    def start_angle(self, value: int) -> None:
        if 0 <= value <= 360:
            self.config.start_angle = value

    @property
    def end_angle(self) -> int:
        return self.config.end_angle

    @end_angle.setter
    def end_angle(self, value: int) -> None:
        if 0 <= value <= 360:
            self.config.end_angle = value

    @property
    def characters(self) -> str:
        """Text shown by a string graphic: the title followed by the content."""
        return self.title + self.content

    def update_position(self, index: int) -> None:
        """Move to the ``index``-th configured position where several are given."""
        if len(self.start_positions) > 1:
            self.config.start_x, self.config.start_y = self.start_positions[index]
        if len(self.end_positions) > 1:
            self.config.end_x, self.config.end_y = self.end_positions[index]

    def is_repeated(self) -> bool:
        """True when nothing changed since the last send."""
        return (
            self.config == self.last_config
            and self.title == self.last_title
            and self.content == self.last_content
        )

    def update_last_config(self) -> None:
        """Record the current state as sent."""
        if self.title and self.content:
            self.config.end_angle = len(self.title + self.content)
        self.last_content = self.content
        self.last_title = self.title
        self.last_config = self.config.copy()

    def snapshot(self) -> "Graph":
        """An independent copy, as queued for later sending."""
        clone = copy.copy(self)
        clone.config = self.config.copy()
        clone.last_config = self.last_config.copy()
        clone.start_positions = list(self.start_positions)
        clone.end_positions = list(self.end_positions)
        return clone
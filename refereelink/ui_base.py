"""Sending client UI graphics and robot interaction data over the referee link."""

import itertools
import logging
import struct
from time import monotonic

from .base import Base, append_crc8, append_crc16
from .graph import Graph
from .protocol import (
    CMD_ID_LENGTH,
    FRAME_LENGTH,
    HEADER_LENGTH,
    TAIL_LENGTH,
    DataCmdId,
    FrameHeader,
    GraphOperation,
    InteractiveDataHeader,
    RefereeCmdId,
    RobotId,
)

logger = logging.getLogger(__name__)

_CHARACTER_LENGTH = 30
_MAP_SENTRY_STEPS = 49
_graph_ids = itertools.count(2)


def pack_frame(data, cmd_id: int) -> bytes:
    """Build a complete frame: header with CRC-8, command id, data and CRC-16."""
    data = bytes(data)
    total = HEADER_LENGTH + CMD_ID_LENGTH + len(data) + TAIL_LENGTH
    if total > FRAME_LENGTH:
        raise ValueError(f"frame of {total} bytes exceeds {FRAME_LENGTH}")
    header = append_crc8(FrameHeader(data_length=len(data)).pack())
    return append_crc16(header + struct.pack("<H", cmd_id) + data + bytes(TAIL_LENGTH))


def _int8(value) -> int:
    return ((int(value) + 128) & 0xFF) - 128


class UiBase:
    """A single client graphic together with the serial senders it uses."""

    def __init__(self, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        self.base = base
        self.graph_queue = graph_queue
        self.delay = delay
        self.clock = clock or monotonic
        self.last_send = 0.0
        self.graph: Graph | None = None

    @classmethod
    def _allocate_id(cls) -> int:
        return next(_graph_ids)

    def _header(self, data_cmd_id: int, receiver_id: int) -> bytes:
        return InteractiveDataHeader(data_cmd_id, self.base.robot_id, receiver_id).pack()

    def _send(self, time: float, payload: bytes, cmd_id: int = RefereeCmdId.INTERACTIVE_DATA_CMD) -> None:
        self.last_send = time
        self.base.write(pack_frame(payload, cmd_id))

    def _require_queue(self) -> list:
        if self.graph_queue is None:
            raise RuntimeError("this UI has no graph queue")
        return self.graph_queue

    def add(self) -> None:
        self.graph.operation = GraphOperation.ADD
        self.display_twice(False)

    def add_for_queue(self, add_times: int = 1) -> None:
        """Queue ``add_times`` copies of the graphic marked for adding."""
        queue = self._require_queue()
        for _ in range(add_times):
            self.graph.operation = GraphOperation.ADD
            queue.append(self.graph.snapshot())
            self.last_send = self.clock()

    def update(self) -> None:
        self.graph.operation = GraphOperation.UPDATE
        self.display()

    def erasure(self) -> None:
        self.graph.operation = GraphOperation.DELETE
        self.display_twice(False)

    def _show(self, times: int, check_repeat: bool) -> None:
        if check_repeat and self.graph.is_repeated():
            return
        self.graph.update_last_config()
        for _ in range(times):
            self.send_ui(self.clock())

    def display(self, check_repeat: bool = True) -> None:
        self._show(1, check_repeat)

    def display_twice(self, check_repeat: bool = True) -> None:
        self._show(2, check_repeat)

    def display_at(self, time: float) -> None:
        """Display unless the last send was less than ``delay`` before ``time``."""
        if time - self.last_send < self.delay:
            return
        self.display()

    def display_flash(self, time: float, state: bool, once: bool = False) -> None:
        if once:
            self.graph.operation = GraphOperation.ADD if state else GraphOperation.DELETE
        elif state and time - self.last_send > self.delay:
            logger.info("%f  %.3f", self.last_send, self.delay)
            self.graph.operation = (
                GraphOperation.DELETE if self.graph.operation == GraphOperation.ADD else GraphOperation.ADD
            )
        self.display_twice()

    def send_interactive_data(self, data_cmd_id: int, receiver_id: int, data: int) -> None:
        payload = self._header(data_cmd_id, receiver_id) + bytes([data & 0xFF])
        self._send(self.clock(), payload)

    def send_current_sentry_data(self, data) -> None:
        """Send the sentry position (``x``, ``y``, ``z``, ``yaw``) to the team's sentry."""
        receiver = RobotId.RED_SENTRY if self.base.robot_id < 100 else RobotId.BLUE_SENTRY
        payload = self._header(DataCmdId.CURRENT_SENTRY_POSITION_CMD, receiver) + struct.pack(
            "<ffff", data.x, data.y, data.z, data.yaw
        )
        # The frame declares only the interactive-data length; the rest of the write is zero fill.
        declared = payload[: InteractiveDataHeader.SIZE + 1]
        frame = pack_frame(declared, RefereeCmdId.INTERACTIVE_DATA_CMD)
        total = HEADER_LENGTH + CMD_ID_LENGTH + TAIL_LENGTH + len(payload)
        self.last_send = self.clock()
        self.base.write(frame.ljust(total, b"\x00"))

    def send_ui(self, time: float) -> None:
        if self.base.robot_id == 0 or self.base.client_id == 0:
            return
        if self.graph.characters:
            self.send_character(time, self.graph)
        else:
            self.send_single_graph(time, self.graph)

    def send_map_sentry_data(self, data) -> None:
        """Send a sentry path: ``intention``, start position and 49 step deltas per axis."""
        deltas_x = [_int8(v) for v in list(data.delta_x)[:_MAP_SENTRY_STEPS]]
        deltas_y = [_int8(v) for v in list(data.delta_y)[:_MAP_SENTRY_STEPS]]
        payload = struct.pack(
            f"<BHH{_MAP_SENTRY_STEPS}b{_MAP_SENTRY_STEPS}b",
            int(data.intention) & 0xFF,
            int(data.start_position_x) & 0xFFFF,
            int(data.start_position_y) & 0xFFFF,
            *deltas_x,
            *deltas_y,
        )
        self.base.write(pack_frame(payload, RefereeCmdId.MAP_SENTRY_CMD))

    def send_radar_interactive_data(self, data) -> None:
        """Send a target marked on the client map by the radar."""
        payload = struct.pack(
            "<Hff", int(data.target_robot_id) & 0xFFFF, data.target_position_x, data.target_position_y
        )
        self.base.write(pack_frame(payload, RefereeCmdId.CLIENT_MAP_CMD))

    def send_character(self, time: float, graph: Graph) -> None:
        text = graph.characters.encode("utf-8")[:_CHARACTER_LENGTH].ljust(_CHARACTER_LENGTH, b" ")
        payload = self._header(DataCmdId.CLIENT_CHARACTER_CMD, self.base.client_id) + graph.config.pack() + text
        self._send(time, payload)

    def send_single_graph(self, time: float, graph: Graph) -> None:
        self._send_graphs(time, DataCmdId.CLIENT_GRAPH_SINGLE_CMD, [graph])

    def _send_graphs(self, time: float, data_cmd_id: int, graphs) -> None:
        payload = self._header(data_cmd_id, self.base.client_id) + b"".join(g.config.pack() for g in graphs)
        self._send(time, payload)


class GroupUiBase(UiBase):
    """A set of graphics and character graphics sent together."""

    def __init__(self, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(base, graph_queue, delay=delay, clock=clock)
        self.graph_vector: dict[str, Graph] = {}
        self.character_vector: dict[str, Graph] = {}

    def _graphs(self) -> list:
        return [self.graph_vector[name] for name in sorted(self.graph_vector)]

    def _characters(self) -> list:
        return [self.character_vector[name] for name in sorted(self.character_vector)]

    def _members(self) -> list:
        return self._characters() + self._graphs()

    def _mark(self, operation: GraphOperation) -> None:
        for graph in self._members():
            graph.operation = operation

    def add(self) -> None:
        self._mark(GraphOperation.ADD)
        self.display_twice(False)

    def add_for_queue(self, add_times: int = 1) -> None:
        queue = self._require_queue()
        for _ in range(add_times):
            for graph in self._graphs():
                graph.operation = GraphOperation.ADD
                queue.append(graph.snapshot())
                self.last_send = self.clock()

    def update(self) -> None:
        self._mark(GraphOperation.UPDATE)
        self.display()

    def erasure(self) -> None:
        self._mark(GraphOperation.DELETE)
        self.display_twice(False)

    def _show(self, times: int, check_repeat: bool) -> None:
        members = self._members()
        if check_repeat and all(graph.is_repeated() for graph in members):
            return
        for graph in members:
            graph.update_last_config()
        for _ in range(times):
            self.send_ui(self.clock())

    def display(self, check_repeat: bool = True) -> None:
        self._show(1, check_repeat)

    def display_twice(self, check_repeat: bool = True) -> None:
        self._show(2, check_repeat)

    def display_at(self, time: float) -> None:
        if time - self.last_send < self.delay:
            return
        self.display()

    def send_ui(self, time: float) -> None:
        if self.base.robot_id == 0 or self.base.client_id == 0:
            return
        for graph in self._characters():
            self.send_character(time, graph)
        for graph in self._graphs():
            self.send_single_graph(time, graph)

    def send_double_graph(self, time: float, graph0: Graph, graph1: Graph) -> None:
        self._send_graphs(time, DataCmdId.CLIENT_GRAPH_DOUBLE_CMD, [graph0, graph1])

    def send_five_graph(self, time: float, *args: Graph) -> None:
        if len(args) != 5:
            raise ValueError(f"five graphs expected, got {len(args)}")
        self._send_graphs(time, DataCmdId.CLIENT_GRAPH_FIVE_CMD, args)

    def send_seven_graph(self, time: float, *args: Graph) -> None:
        if len(args) != 7:
            raise ValueError(f"seven graphs expected, got {len(args)}")
        self._send_graphs(time, DataCmdId.CLIENT_GRAPH_SEVEN_CMD, args)
"""Coordinates the client UI graphics with robot state updates and the graph send queue."""

import logging
import math
from collections.abc import Mapping
from time import monotonic

from .base import Base
from .flash_ui import CoverFlashUi, SpinFlashUi
from .trigger_change_ui import (
    CameraTriggerChangeUi,
    ChassisTriggerChangeUi,
    GimbalTriggerChangeUi,
    ShooterTriggerChangeUi,
    TargetTriggerChangeUi,
    TargetViewAngleTriggerChangeUi,
)
from .ui_base import GroupUiBase, UiBase

logger = logging.getLogger(__name__)

SWITCH_UP = 1
MAX_QUEUE_LENGTH = 50
ADDING_SEND_PERIOD = 0.05

_TRIGGER_CHANGE_UIS = {
    "chassis": ("chassis_trigger_change_ui", ChassisTriggerChangeUi),
    "shooter": ("shooter_trigger_change_ui", ShooterTriggerChangeUi),
    "gimbal": ("gimbal_trigger_change_ui", GimbalTriggerChangeUi),
    "target": ("target_trigger_change_ui", TargetTriggerChangeUi),
    "target_view_angle": ("target_view_angle_trigger_change_ui", TargetViewAngleTriggerChangeUi),
    "camera": ("camera_trigger_change_ui", CameraTriggerChangeUi),
}

_FLASH_UIS = {
    "cover": ("cover_flash_ui", CoverFlashUi),
    "spin": ("spin_flash_ui", SpinFlashUi),
}


class _Timer:
    """A periodic timer polled by the owner's loop."""

    def __init__(self, period: float, clock, running: bool = False):
        self.period = period
        self._clock = clock
        self.running = False
        self._next = math.inf
        if running:
            self.start()

    def start(self) -> None:
        self.running = True
        self._next = self._clock() + self.period

    def stop(self) -> None:
        self.running = False
        self._next = math.inf

    def set_period(self, period: float) -> None:
        self.period = period
        if self.running:
            self._next = self._clock() + period

    def due(self, now: float | None = None) -> bool:
        """True once per elapsed period while running."""
        if not self.running:
            return False
        now = self._clock() if now is None else now
        if now >= self._next:
            self._next = now + self.period
            return True
        return False


class RefereeBase:
    """Owns the configured UIs, routes robot data to them and drains the graph queue."""

    def __init__(self, base: Base, config: Mapping | None = None, *, clock=None):
        config = config or {}
        self.base = base
        self.clock = clock or monotonic
        self.send_ui_queue_delay = float(config.get("send_ui_queue_delay", 0.15))
        self.add_ui_frequency = config.get("add_ui_frequency", 5)
        self.add_ui_max_times = config.get("add_ui_max_times", 10)
        self.add_ui_times = 0
        self.add_ui_flag = False
        self.is_adding = False
        self.graph_queue: list = []
        self._throttle: dict[str, float] = {}

        self.chassis_trigger_change_ui = None
        self.shooter_trigger_change_ui = None
        self.gimbal_trigger_change_ui = None
        self.target_trigger_change_ui = None
        self.target_view_angle_trigger_change_ui = None
        self.camera_trigger_change_ui = None
        self.cover_flash_ui = None
        self.spin_flash_ui = None
        self.graph_queue_sender = None

        self.interactive_data_sender = UiBase(base, clock=self.clock)
        if "ui" in config:
            ui_config = config["ui"]
            self.graph_queue_sender = GroupUiBase(base, self.graph_queue, clock=self.clock)
            self._build(ui_config.get("trigger_change", []), _TRIGGER_CHANGE_UIS)
            self._build(ui_config.get("flash", []), _FLASH_UIS)

        self.add_ui_timer = _Timer(1.0 / self.add_ui_frequency, self.clock, running=False)
        self.send_graph_ui_timer = _Timer(self.send_ui_queue_delay, self.clock, running=True)

    def _build(self, entries, known) -> None:
        for entry in entries:
            match = known.get(entry.get("name"))
            if match is None:
                continue
            attribute, cls = match
            setattr(self, attribute, cls(entry, self.base, self.graph_queue, clock=self.clock))

    def _log_throttled(self, period: float, level: int, message: str, *args) -> None:
        now = self.clock()
        last = self._throttle.get(message, -math.inf)
        if now - last >= period:
            self._throttle[message] = now
            logger.log(level, message, *args)

    def _trigger_uis_with_times(self):
        return (
            (self.chassis_trigger_change_ui, 3),
            (self.gimbal_trigger_change_ui, 3),
            (self.shooter_trigger_change_ui, 3),
            (self.target_trigger_change_ui, 1),
            (self.target_view_angle_trigger_change_ui, 1),
            (self.camera_trigger_change_ui, 1),
        )

    def add_ui(self) -> None:
        """Queue every graphic for adding; stop once the configured repetitions are done."""
        if self.add_ui_times > self.add_ui_max_times:
            logger.info("End add")
            self.add_ui_timer.stop()
            self.graph_queue.clear()
            self.is_adding = False
            self.send_graph_ui_timer.set_period(self.send_ui_queue_delay)
            return

        self._log_throttled(
            1.0, logging.INFO, "Adding ui... %.1f%%", self.add_ui_times / float(self.add_ui_max_times) * 100
        )
        for ui, times in self._trigger_uis_with_times():
            if ui is not None:
                ui.add_for_queue(times)
        self.add_ui_times += 1

    def send_graph_queue(self) -> None:
        """Send the newest queued graphics, as many per frame as the queue allows."""
        queue = self.graph_queue
        if not queue:
            return
        if len(queue) > MAX_QUEUE_LENGTH:
            self._log_throttled(
                2.0,
                logging.WARNING,
                "Sending UI too frequently, please modify the configuration file or code to reduce the frequency",
            )
            del queue[MAX_QUEUE_LENGTH:]

        sender = self.graph_queue_sender or GroupUiBase(self.base, queue, clock=self.clock)
        now = self.clock()
        if self.is_adding:
            sender.send_single_graph(now, queue[-1])
            queue.pop()
        else:
            count = len(queue)
            if count >= 7:
                take = 7
                sender.send_seven_graph(now, *reversed(queue[-take:]))
            elif count >= 5:
                take = 5
                sender.send_five_graph(now, *reversed(queue[-take:]))
            elif count >= 2:
                take = 2
                sender.send_double_graph(now, queue[-1], queue[-2])
            else:
                take = 1
                sender.send_single_graph(now, queue[-1])
            del queue[-take:]

        if not self.send_graph_ui_timer.running:
            self.send_graph_ui_timer.start()

    def robot_status_data_callback(self, data, time: float) -> None:
        """Robot status arrives; none of the configured UIs draw from it."""

    def game_status_data_callback(self, data, time: float) -> None:
        """Game status arrives; none of the configured UIs draw from it."""

    def capacity_data_callback(self, data, time: float) -> None:
        if self.chassis_trigger_change_ui is not None and not self.is_adding:
            self.chassis_trigger_change_ui.update_capacity_reset_status()

    def robot_hurt_data_callback(self, data, time: float) -> None:
        """Robot hurt data arrives; none of the configured UIs draw from it."""

    def dbus_data_callback(self, data) -> None:
        """Right switch moved up starts adding the UI; moving it away stops."""
        if self.add_ui_flag and data.s_r == SWITCH_UP:
            self.add_ui_flag = False
            self.is_adding = True
            self.graph_queue.clear()
            self.send_graph_ui_timer.set_period(ADDING_SEND_PERIOD)
            self.add_ui_timer.start()
            self.add_ui_times = 0
        if data.s_r != SWITCH_UP:
            self.add_ui_flag = True
            self.add_ui_timer.stop()
        if self.chassis_trigger_change_ui is not None:
            self.chassis_trigger_change_ui.update_dbus_data(data)

    def chassis_cmd_data_callback(self, data) -> None:
        if self.chassis_trigger_change_ui is not None:
            self.chassis_trigger_change_ui.update_chassis_cmd_data(data)
        if self.spin_flash_ui is not None and not self.is_adding:
            self.spin_flash_ui.update_chassis_cmd_data(data, self.clock())

    def shoot_state_callback(self, data) -> None:
        if self.target_trigger_change_ui is not None and not self.is_adding:
            self.target_trigger_change_ui.update_shoot_state_data(data)
        if self.shooter_trigger_change_ui is not None and not self.is_adding:
            self.shooter_trigger_change_ui.update_shoot_state_data(data)

    def gimbal_cmd_data_callback(self, data) -> None:
        if self.gimbal_trigger_change_ui is not None and not self.is_adding:
            self.gimbal_trigger_change_ui.update_gimbal_cmd_data(data)

    def manual_data_callback(self, data) -> None:
        if self.chassis_trigger_change_ui is not None:
            self.chassis_trigger_change_ui.update_manual_cmd_data(data)
        if self.is_adding:
            return
        for ui in (self.shooter_trigger_change_ui, self.gimbal_trigger_change_ui, self.target_trigger_change_ui):
            if ui is not None:
                ui.update_manual_cmd_data(data)
        if self.cover_flash_ui is not None:
            self.cover_flash_ui.update_manual_cmd_data(data, self.clock())

    def camera_name_callback(self, data) -> None:
        """``data`` is the camera name, or a message carrying it in ``data``."""
        if self.camera_trigger_change_ui is not None and not self.is_adding:
            name = data if isinstance(data, str) else data.data
            self.camera_trigger_change_ui.update_camera_name(name)

    def track_callback(self, data) -> None:
        if self.target_view_angle_trigger_change_ui is not None and not self.is_adding:
            self.target_view_angle_trigger_change_ui.update_track_id(data.id)

    def radar_receive_callback(self, data) -> None:
        self.interactive_data_sender.send_radar_interactive_data(data)

    def map_sentry_callback(self, data) -> None:
        self.interactive_data_sender.send_map_sentry_data(data)

    def send_current_sentry_callback(self, data) -> None:
        self.interactive_data_sender.send_current_sentry_data(data)
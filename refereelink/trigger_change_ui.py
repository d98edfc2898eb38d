"""Client graphics redrawn when a robot mode or setting changes."""

import logging
from enum import IntEnum

from .base import Base
from .graph import Graph
from .protocol import GraphColor, GraphOperation, PowerManagementStateMachine, RobotId
from .ui_base import GroupUiBase, UiBase

logger = logging.getLogger(__name__)


class ChassisMode(IntEnum):
    RAW = 0
    FOLLOW = 1
    TWIST = 2
    UP_SLOPE = 3
    FALLEN = 4


class ShootStateMode(IntEnum):
    STOP = 0
    READY = 1
    PUSH = 2
    BLOCK = 3


class GimbalMode(IntEnum):
    RATE = 0
    TRACK = 1
    DIRECT = 2


class _HeatLimit(IntEnum):
    LOW = 0
    HIGH = 1
    BURST = 2


_SWITCH_UP = 1
_SWITCH_MID = 3

_TARGET_ARMOR = 0
_TARGET_SMALL_BUFF = 1
_TARGET_BIG_BUFF = 2
_ARMOR_ALL = 0
_ARMOR_OUTPOST_BASE = 1
_DETECT_RED = 0

_CAP_RESET_MODE = 254
_COLOR_SETTLE_TIME = 0.2

_ENGINEERS = (RobotId.RED_ENGINEER, RobotId.BLUE_ENGINEER)
_HEROES = (RobotId.RED_HERO, RobotId.BLUE_HERO)


class TriggerChangeUi(UiBase):
    """A single graphic whose text and colour follow a mode."""

    def __init__(self, config, base: Base, graph_name: str, graph_queue: list | None = None, *,
                 delay: float = 0.0, clock=None):
        super().__init__(base, graph_queue, delay=delay, clock=clock)
        graph_id = 1 if graph_name == "chassis" else self._allocate_id()
        self.graph = Graph(config["config"], graph_id)

    def set_content(self, content: str) -> None:
        """Replace the shown text and display it."""
        self.graph.content = content
        self.display()

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        """Hook for subclasses to refresh the graphic; the plain graphic keeps its configuration."""


class ChassisTriggerChangeUi(TriggerChangeUi):
    """Chassis mode, coloured by power limit state."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, "chassis", graph_queue, delay=delay, clock=clock)
        self.graph.content = "raw" if base.robot_id in _ENGINEERS else "follow"
        self.mode_change_threshold = float(config.get("mode_change_threshold", 0.7))
        self.chassis_mode = 0
        self.power_limit_state = 0
        self.s_l = 0
        self.s_r = 0
        self.key_ctrl = 0
        self.key_shift = 0
        self.key_b = 0
        self._mode_trigger_time = 0.0
        self._mode_is_different = False
        self._color_trigger_time = 0.0
        self._expected_power_limit = 0
        self._color_delay = False

    def update(self) -> None:
        if self.s_l == _SWITCH_MID and self.s_r == _SWITCH_UP:
            self.update_config(self.chassis_mode, False, 1, False)
        else:
            self.update_config(
                self.chassis_mode,
                self.power_limit_state == PowerManagementStateMachine.BOOST,
                0,
                self.power_limit_state == PowerManagementStateMachine.CHARGE,
            )
        self.graph.operation = GraphOperation.UPDATE
        self.check_mode_change()
        self.display_twice()

    def _display_in_capacity(self) -> None:
        if self.key_ctrl and self.key_shift and self.key_b and self.base.robot_id not in _ENGINEERS:
            self.update_config(_CAP_RESET_MODE, False)
        self.graph.operation = GraphOperation.UPDATE
        self.display_twice()

    def check_mode_change(self) -> None:
        """Redisplay once the capacitor mode has disagreed with the request for too long."""
        differs = self.base.capacity_recent_mode != self.power_limit_state
        if differs and not self._mode_is_different:
            self._mode_is_different = True
            self._mode_trigger_time = self.clock()
        elif self._mode_is_different:
            if not differs:
                self._mode_is_different = False
            elif self.clock() - self._mode_trigger_time > self.mode_change_threshold:
                self._mode_is_different = False
                self.display(False)

    def _flag_color(self, main_flag: bool, sub_flag: bool) -> None:
        if main_flag:
            self.graph.color = GraphColor.ORANGE
        elif sub_flag:
            self.graph.color = GraphColor.GREEN
        else:
            self.graph.color = GraphColor.WHITE

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        if main_mode == _CAP_RESET_MODE:
            self.graph.content = "Cap reset"
            self.graph.color = GraphColor.YELLOW
            return
        self.graph.content = self.chassis_state(main_mode)
        if sub_mode == 1:
            self.graph.color = GraphColor.PINK
            return
        normal = PowerManagementStateMachine.NORMAL
        if (self.base.capacity_recent_mode == normal or self.power_limit_state == normal) and not self._color_delay:
            self._color_trigger_time = self.clock()
            self._expected_power_limit = self.power_limit_state
            self._color_delay = True
        elif self._color_delay:
            if self._expected_power_limit != self.power_limit_state:
                self._color_trigger_time = self.clock()
                self._expected_power_limit = self.power_limit_state
            elif self.clock() - self._color_trigger_time > _COLOR_SETTLE_TIME:
                self._flag_color(main_flag, sub_flag)
                self._color_delay = False
        else:
            self._flag_color(main_flag, sub_flag)

    def chassis_state(self, mode: int) -> str:
        names = {
            ChassisMode.RAW: "raw",
            ChassisMode.FOLLOW: "follow",
            ChassisMode.TWIST: "twist",
            ChassisMode.UP_SLOPE: "up_slope",
            ChassisMode.FALLEN: "fallen",
        }
        return names.get(mode, "error")

    def update_chassis_cmd_data(self, data) -> None:
        self.chassis_mode = data.mode
        self.update()

    def update_manual_cmd_data(self, data) -> None:
        self.power_limit_state = data.power_limit_state

    def update_dbus_data(self, data) -> None:
        self.s_l = data.s_l
        self.s_r = data.s_r
        self.key_ctrl = data.key_ctrl
        self.key_shift = data.key_shift
        self.key_b = data.key_b

    def update_capacity_reset_status(self) -> None:
        self._display_in_capacity()


class ShooterTriggerChangeUi(TriggerChangeUi):
    """Shooter state, coloured by shooting frequency."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, "shooter", graph_queue, delay=delay, clock=clock)
        self.graph.content = "0"
        self.shooter_mode = 0
        self.shoot_frequency = 0

    def update(self) -> None:
        self.update_config(self.shooter_mode, False, self.shoot_frequency, False)
        self.graph.operation = GraphOperation.UPDATE
        self.display()

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        self.graph.content = self.shooter_state(main_mode)
        if sub_mode == _HeatLimit.LOW:
            self.graph.color = GraphColor.WHITE
        elif sub_mode == _HeatLimit.HIGH:
            self.graph.color = GraphColor.YELLOW
        elif sub_mode == _HeatLimit.BURST:
            self.graph.color = GraphColor.ORANGE

    def shooter_state(self, state: int) -> str:
        names = {
            ShootStateMode.STOP: "stop",
            ShootStateMode.READY: "ready",
            ShootStateMode.PUSH: "push",
            ShootStateMode.BLOCK: "block",
        }
        return names.get(state, "error")

    def update_shoot_state_data(self, data) -> None:
        self.shooter_mode = data.state
        self.update()

    def update_manual_cmd_data(self, data) -> None:
        self.shoot_frequency = data.shoot_frequency


class GimbalTriggerChangeUi(TriggerChangeUi):
    """Gimbal mode, orange while ejecting."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, "gimbal", graph_queue, delay=delay, clock=clock)
        self.graph.content = "0"
        self.gimbal_mode = 0
        self.gimbal_eject = 0

    def update(self) -> None:
        self.update_config(self.gimbal_mode, bool(self.gimbal_eject))
        self.graph.operation = GraphOperation.UPDATE
        self.display_twice()

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        self.graph.content = self.gimbal_state(main_mode)
        self.graph.color = GraphColor.ORANGE if main_flag else GraphColor.WHITE

    def gimbal_state(self, mode: int) -> str:
        names = {GimbalMode.DIRECT: "direct", GimbalMode.RATE: "rate", GimbalMode.TRACK: "track"}
        return names.get(mode, "error")

    def update_gimbal_cmd_data(self, data) -> None:
        self.gimbal_mode = data.mode
        self.update()

    def update_manual_cmd_data(self, data) -> None:
        self.gimbal_eject = data.gimbal_eject


class TargetTriggerChangeUi(TriggerChangeUi):
    """Detection target; heroes show eject and armour choice instead."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, "target", graph_queue, delay=delay, clock=clock)
        self.graph.content = "armor"
        self.graph.color = GraphColor.CYAN if base.robot_color == "red" else GraphColor.PINK
        self.det_target = 0
        self.shoot_frequency = 0
        self.det_armor_target = 0
        self.det_color = 0
        self.gimbal_eject = 0

    def _is_hero(self) -> bool:
        return self.base.robot_id in _HEROES

    def update(self) -> None:
        red = self.det_color == _DETECT_RED
        if not self._is_hero():
            self.update_config(self.det_target, self.shoot_frequency == _HeatLimit.BURST,
                               self.det_armor_target, red)
        else:
            self.update_config(self.gimbal_eject, bool(self.shoot_frequency), self.det_armor_target, red)
        self.graph.operation = GraphOperation.UPDATE
        self.display()

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        self.graph.content = self.target_state(main_mode, sub_mode)
        if main_flag:
            self.graph.color = GraphColor.ORANGE
        elif sub_flag:
            self.graph.color = GraphColor.PINK
        else:
            self.graph.color = GraphColor.CYAN

    def target_state(self, target: int, armor_target: int) -> str:
        if not self._is_hero():
            if target == _TARGET_SMALL_BUFF:
                return "small_buff"
            if target == _TARGET_BIG_BUFF:
                return "big_buff"
            if target == _TARGET_ARMOR and armor_target == _ARMOR_ALL:
                return "armor_all"
            if target == _TARGET_ARMOR and armor_target == _ARMOR_OUTPOST_BASE:
                return "armor_base"
            return "error"
        if target == 1:
            return "eject"
        if armor_target == _ARMOR_ALL:
            return "all"
        if armor_target == _ARMOR_OUTPOST_BASE:
            return "base"
        return "error"

    def update_manual_cmd_data(self, data) -> None:
        self.det_target = data.det_target
        self.shoot_frequency = data.shoot_frequency
        self.det_armor_target = data.det_armor_target
        self.det_color = data.det_color
        self.gimbal_eject = data.gimbal_eject

    def update_shoot_state_data(self, data) -> None:
        self.update()


class TargetViewAngleTriggerChangeUi(TriggerChangeUi):
    """Marker that turns green while a target is tracked."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, "target_scale", graph_queue, delay=delay, clock=clock)
        self.track_id = 0

    def update(self) -> None:
        self.update_config(self.track_id == 0, False)
        self.graph.operation = GraphOperation.UPDATE
        self.display_twice()

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        self.graph.color = GraphColor.WHITE if main_mode else GraphColor.GREEN

    def update_track_id(self, track_id: int) -> None:
        self.track_id = track_id
        self.update()


class PolygonTriggerChangeGroupUi(GroupUiBase):
    """A closed outline drawn as one line per edge."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(base, graph_queue, delay=delay, clock=clock)
        if "points" not in config:
            raise ValueError("polygon configuration needs 'points'")
        graph_config = config.get("graph_config", {})
        points = list(config["points"])
        for index, start in enumerate(points, start=1):
            end = points[index] if index != len(points) else points[0]
            line = {
                "type": "line",
                "color": graph_config.get("color", "cyan"),
                "width": graph_config.get("width", 2),
                "start_position": [start[0], start[1]],
                "end_position": [end[0], end[1]],
            }
            self.graph_vector[f"graph_{index}"] = Graph(line, self._allocate_id())

    def update(self) -> None:
        for graph in self._graphs():
            graph.operation = GraphOperation.UPDATE
        self.display()


class CameraTriggerChangeUi(TriggerChangeUi):
    """Name of the active camera, coloured by which one it is."""

    def __init__(self, config, base: Base, graph_queue: list | None = None, *, delay: float = 0.0, clock=None):
        super().__init__(config, base, "camera", graph_queue, delay=delay, clock=clock)
        self.current_camera = ""
        self.camera1_name = ""
        self.camera2_name = ""
        if "camera_name" in config:
            names = config["camera_name"]
            self.camera1_name = str(names["camera1_name"])
            self.camera2_name = str(names["camera2_name"])
        else:
            logger.warning("Camera config 's member 'camera_name' not defined.")
        self.graph.content = "0"

    def update(self) -> None:
        self.update_config()
        self.graph.operation = GraphOperation.UPDATE
        self.display()

    def update_config(self, main_mode: int = 0, main_flag: bool = False, sub_mode: int = 0,
                      sub_flag: bool = False) -> None:
        self.graph.content = self.current_camera
        if self.current_camera == self.camera1_name:
            self.graph.color = GraphColor.CYAN
        elif self.current_camera == self.camera2_name:
            self.graph.color = GraphColor.ORANGE
        else:
            self.graph.color = GraphColor.WHITE

    def update_camera_name(self, name: str) -> None:
        self.current_camera = name
        self.update()
"""Game pad device backed by pygame.joystick

A `GamePadDevice` owns its joystick handle exclusively. Axis readings arrive
as signed raw values (-32767..32767) and are resolved against stick-motion
bindings after the deadzone check.
"""
import logging

import pygame

from core.bindings import BindingTable
from core.device import InputDevice
from core.errors import DeviceOpenError
from core.state import AxisDirection, InputType, PlayerAction

LOG = logging.getLogger("kartinput.gamepad")

DEADZONE_JOYSTICK = 2000

# (action, axis, direction); nitro/drift/rescue/fire/look back have no pad default yet
DEFAULT_AXES = [
    (PlayerAction.ACCEL, 1, AxisDirection.NEGATIVE),
    (PlayerAction.BRAKE, 1, AxisDirection.POSITIVE),
    (PlayerAction.STEER_LEFT, 0, AxisDirection.NEGATIVE),
    (PlayerAction.STEER_RIGHT, 0, AxisDirection.POSITIVE),
]


def default_bindings() -> BindingTable:
    table = BindingTable()
    for action, axis, direction in DEFAULT_AXES:
        table.bind(action, InputType.STICKMOTION, axis, direction)
    return table


def _open_joystick(index):
    try:
        if not pygame.joystick.get_init():
            pygame.joystick.init()
        js = pygame.joystick.Joystick(index)
        js.init()
    except pygame.error as e:
        raise DeviceOpenError(index, e) from e
    return js


class GamePadDevice(InputDevice):
    """A game pad bound to one joystick index.

    `joystick` may be passed in to wrap an already opened handle; the device
    takes ownership of it either way and releases it in `close()`.
    """

    kind = InputType.STICKMOTION

    def __init__(self, index: int, deadzone: int = DEADZONE_JOYSTICK, joystick=None):
        js = joystick if joystick is not None else _open_joystick(index)
        try:
            name = js.get_name() or f"gamepad {index}"
            count = js.get_numaxes()
            instance_id = js.get_instance_id() if hasattr(js, "get_instance_id") else index
        except pygame.error as e:
            js.quit()
            raise DeviceOpenError(index, e) from e

        super().__init__(name)
        self.index = index
        self.instance_id = instance_id
        self.deadzone = deadzone
        self._joystick = js
        self.prev_axis_directions = [AxisDirection.NEUTRAL] * count
        self._closed = False
        self.load_defaults()
        LOG.info("Opened game pad: %s (index %d, axes=%d)", name, index, count)

    @property
    def num_axes(self):
        return len(self.prev_axis_directions)

    @property
    def closed(self):
        return self._closed

    def load_defaults(self):
        self.bindings = default_bindings()

    def matches(self, event):
        action = self.bindings.resolve_analog(event.id1, event.value, self.deadzone)
        if action is not None:
            LOG.debug("%s: axis %d=%d -> %s", self.device_id, event.id1, event.value, action.name)
        return action

    def axis_direction_changed(self, axis: int, value: int) -> bool:
        """Record the direction of `axis` and report whether it differs from the last one."""
        if not 0 <= axis < len(self.prev_axis_directions):
            raise IndexError(f"axis {axis} out of range for {self.device_id}")
        if -self.deadzone < value < self.deadzone:
            direction = AxisDirection.NEUTRAL
        else:
            direction = AxisDirection.of(value)
        changed = self.prev_axis_directions[axis] != direction
        self.prev_axis_directions[axis] = direction
        return changed

    def close(self):
        if self._closed:
            return
        self._closed = True
        self.prev_axis_directions = []
        try:
            self._joystick.quit()
        except pygame.error:
            LOG.exception("error closing game pad %s", self.device_id)
        self._joystick = None
        LOG.info("Closed game pad: %s", self.device_id)


def discover_gamepads(deadzone: int = DEADZONE_JOYSTICK):
    """Open every connected game pad, skipping the ones that fail to open."""
    if not pygame.joystick.get_init():
        pygame.joystick.init()
    pads = []
    for i in range(pygame.joystick.get_count()):
        try:
            pads.append(GamePadDevice(i, deadzone=deadzone))
        except DeviceOpenError as e:
            LOG.warning("skipping game pad: %s", e)
    if not pads:
        LOG.info("No game pads found via pygame")
    return pads

"""Device manager: route RawEvents to connected devices and resolve player actions"""
import logging
import threading
from typing import Optional

from core.device import InputDevice
from core.state import ActionEvent, InputType, RawEvent
from devices.gamepad import GamePadDevice
from devices.keyboard import KeyboardDevice

LOG = logging.getLogger("kartinput.manager")


class DeviceManager:
    """Holds the connected keyboards and game pads.

    Devices are tried in the order they were added and the first match wins.
    Stick motion is matched against every pad unless `route_by_stick` is set,
    in which case only the pad whose instance id equals the event's stick
    index is tried.
    """

    def __init__(self, route_by_stick: bool = False):
        self.route_by_stick = route_by_stick
        self._keyboards = []
        self._gamepads = []
        self._players = {}  # device -> player index
        self._subs = []
        self._lock = threading.RLock()
        self.keyboard_count = 0
        self.gamepad_count = 0

    @property
    def keyboards(self):
        return tuple(self._keyboards)

    @property
    def gamepads(self):
        return tuple(self._gamepads)

    def add(self, device: InputDevice):
        with self._lock:
            if isinstance(device, KeyboardDevice):
                self._keyboards.append(device)
                self.keyboard_count = len(self._keyboards)
            elif isinstance(device, GamePadDevice):
                self._gamepads.append(device)
                self.gamepad_count = len(self._gamepads)
            else:
                raise TypeError(f"unsupported device type: {type(device).__name__}")
        LOG.info("added %r", device)

    def remove(self, device: InputDevice):
        with self._lock:
            if device in self._keyboards:
                self._keyboards.remove(device)
                self.keyboard_count = len(self._keyboards)
            elif device in self._gamepads:
                self._gamepads.remove(device)
                self.gamepad_count = len(self._gamepads)
            else:
                raise KeyError(device)
            self._players.pop(device, None)
        device.close()
        LOG.info("removed %r", device)

    def assign_player(self, device: InputDevice, player: int):
        with self._lock:
            if device not in self._keyboards and device not in self._gamepads:
                raise KeyError(device)
            self._players[device] = int(player)

    def unassign_player(self, device: InputDevice):
        with self._lock:
            self._players.pop(device, None)

    def player_for(self, device: InputDevice) -> int:
        return self._players.get(device, 0)

    def map_input_to_player_and_action(self, kind, id0, id1=0, id2=0, value=0) -> Optional[ActionEvent]:
        with self._lock:
            if kind == InputType.KEYBOARD:
                for kb in self._keyboards:
                    action = kb.bindings.resolve_digital(id0)
                    if action is not None:
                        return ActionEvent(self.player_for(kb), action)
                return None
            if kind == InputType.STICKMOTION:
                for pad in self._gamepads:
                    if self.route_by_stick and pad.instance_id != id0:
                        continue
                    action = pad.bindings.resolve_analog(id1, value, pad.deadzone)
                    if action is not None:
                        return ActionEvent(self.player_for(pad), action)
                return None
            # mouse buttons and stick buttons have no bindings yet
            return None

    def subscribe(self, callback):
        with self._lock:
            self._subs.append(callback)

    def dispatch(self, event: RawEvent) -> Optional[ActionEvent]:
        result = self.map_input_to_player_and_action(event.kind, event.id0, event.id1, event.id2, event.value)
        if result is None:
            return None
        LOG.debug("%s -> player %d %s", event, result.player, result.action.name)
        with self._lock:
            subs = list(self._subs)
        for cb in subs:
            try:
                cb(result)
            except Exception:
                LOG.exception("subscriber callback failed")
        return result

    def close(self):
        with self._lock:
            devices = self._keyboards + self._gamepads
            self._keyboards = []
            self._gamepads = []
            self._players.clear()
            self.keyboard_count = 0
            self.gamepad_count = 0
        for device in devices:
            device.close()

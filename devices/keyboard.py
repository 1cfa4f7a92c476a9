"""Keyboard device with the default racing key layout"""
import logging

import pygame

from core.device import InputDevice
from core.state import InputType, PlayerAction

LOG = logging.getLogger("kartinput.keyboard")

DEFAULT_KEYS = {
    PlayerAction.NITRO: pygame.K_SPACE,
    PlayerAction.ACCEL: pygame.K_UP,
    PlayerAction.BRAKE: pygame.K_DOWN,
    PlayerAction.STEER_LEFT: pygame.K_LEFT,
    PlayerAction.STEER_RIGHT: pygame.K_RIGHT,
    PlayerAction.DRIFT: pygame.K_LSHIFT,
    PlayerAction.RESCUE: pygame.K_ESCAPE,
    PlayerAction.FIRE: pygame.K_LALT,
    PlayerAction.LOOK_BACK: pygame.K_b,
}


class KeyboardDevice(InputDevice):
    kind = InputType.KEYBOARD

    def __init__(self, device_id: str = "keyboard"):
        super().__init__(device_id)
        self.load_defaults()

    def load_defaults(self):
        for action, key in DEFAULT_KEYS.items():
            self.bindings.bind(action, InputType.KEYBOARD, key)

    def matches(self, event):
        action = self.bindings.resolve_digital(event.id0)
        if action is not None:
            LOG.debug("%s: key %d -> %s", self.device_id, event.id0, action.name)
        return action

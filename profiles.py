"""YAML binding profiles: load, apply to devices, save

Example profile::

    keyboard:
      bindings:
        nitro: space
        fire: lctrl
    gamepad:
      deadzone: 3000
      bindings:
        accelerate: {axis: 1, dir: negative}
        fire: {button: 0}
"""
import logging
import string

import pygame
import yaml

from core.errors import BindingConflictError, ProfileError
from core.state import AxisDirection, InputType, PlayerAction
from devices.gamepad import DEADZONE_JOYSTICK

LOG = logging.getLogger("kartinput.profiles")

KEY_MAP = {
    "space": pygame.K_SPACE,
    "up": pygame.K_UP,
    "down": pygame.K_DOWN,
    "left": pygame.K_LEFT,
    "right": pygame.K_RIGHT,
    "lshift": pygame.K_LSHIFT,
    "rshift": pygame.K_RSHIFT,
    "lctrl": pygame.K_LCTRL,
    "rctrl": pygame.K_RCTRL,
    "lalt": pygame.K_LALT,
    "ralt": pygame.K_RALT,
    "escape": pygame.K_ESCAPE,
    "return": pygame.K_RETURN,
    "tab": pygame.K_TAB,
    "backspace": pygame.K_BACKSPACE,
}
for _c in string.ascii_lowercase + string.digits:
    KEY_MAP[_c] = getattr(pygame, f"K_{_c}")
KEY_NAMES = {code: name for name, code in KEY_MAP.items()}

ACTION_ALIASES = {
    "accelerate": PlayerAction.ACCEL,
    "left": PlayerAction.STEER_LEFT,
    "right": PlayerAction.STEER_RIGHT,
    "lookback": PlayerAction.LOOK_BACK,
}


def parse_action(name) -> PlayerAction:
    key = str(name).strip().lower().replace("-", "_")
    if key in ACTION_ALIASES:
        return ACTION_ALIASES[key]
    try:
        return PlayerAction[key.upper()]
    except KeyError:
        raise ProfileError(f"unknown action: {name!r}") from None


def parse_key(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    code = KEY_MAP.get(str(value).strip().lower())
    if code is None:
        raise ProfileError(f"unknown key name: {value!r}")
    return code


def _parse_direction(value) -> AxisDirection:
    direction = AxisDirection.__members__.get(str(value).strip().upper())
    # neutral marks a centred axis and never triggers an action
    if direction is None or direction == AxisDirection.NEUTRAL:
        raise ProfileError(f"bad axis direction: {value!r}")
    return direction


def load_profile(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProfileError(f"{path}: profile must be a mapping")
    return data


def _check_conflicts(device, allow_conflicts):
    try:
        device.bindings.validate()
    except BindingConflictError as e:
        if not allow_conflicts:
            raise
        for kept, shadowed, binding in e.conflicts:
            LOG.warning("%s: %s is unreachable, %s already uses %s",
                        device.device_id, shadowed.name, kept.name, binding)


def apply_keyboard(device, section: dict, allow_conflicts: bool = False):
    for name, key in (section.get("bindings") or {}).items():
        action = parse_action(name)
        if key is None:
            device.bindings.unbind(action)
        else:
            device.bindings.bind(action, InputType.KEYBOARD, parse_key(key))
    _check_conflicts(device, allow_conflicts)


def apply_gamepad(device, section: dict, allow_conflicts: bool = False):
    if "deadzone" in section:
        deadzone = section["deadzone"]
        if not isinstance(deadzone, int) or deadzone < 0:
            raise ProfileError(f"bad deadzone: {deadzone!r}")
        device.deadzone = deadzone
    for name, entry in (section.get("bindings") or {}).items():
        action = parse_action(name)
        if entry is None:
            device.bindings.unbind(action)
        elif isinstance(entry, dict) and "axis" in entry:
            device.bindings.bind(action, InputType.STICKMOTION, int(entry["axis"]),
                                 _parse_direction(entry.get("dir", "negative")))
        elif isinstance(entry, dict) and "button" in entry:
            device.bindings.bind(action, InputType.STICKBUTTON, int(entry["button"]))
        else:
            raise ProfileError(f"bad game pad binding for {name}: {entry!r}")
    _check_conflicts(device, allow_conflicts)


def apply_profile(profile: dict, keyboards=(), gamepads=(), allow_conflicts: bool = False):
    kb_section = profile.get("keyboard") or {}
    pad_section = profile.get("gamepad") or {}
    if not isinstance(kb_section, dict) or not isinstance(pad_section, dict):
        raise ProfileError("keyboard and gamepad sections must be mappings")
    for kb in keyboards:
        apply_keyboard(kb, kb_section, allow_conflicts)
    for pad in gamepads:
        apply_gamepad(pad, pad_section, allow_conflicts)
    LOG.info("applied profile to %d keyboard(s), %d game pad(s)", len(keyboards), len(gamepads))


def keyboard_section(table) -> dict:
    bindings = {}
    for action, binding in table:
        if binding.is_bound:
            bindings[action.name.lower()] = KEY_NAMES.get(binding.id, binding.id)
        else:
            bindings[action.name.lower()] = None
    return {"bindings": bindings}


def gamepad_section(table, deadzone: int) -> dict:
    bindings = {}
    for action, binding in table:
        if binding.source == InputType.STICKMOTION:
            bindings[action.name.lower()] = {"axis": binding.id, "dir": binding.direction.name.lower()}
        elif binding.source == InputType.STICKBUTTON:
            bindings[action.name.lower()] = {"button": binding.id}
        else:
            bindings[action.name.lower()] = None
    return {"deadzone": deadzone, "bindings": bindings}


def save_profile(path: str, keyboard=None, gamepad=None, deadzone: int = DEADZONE_JOYSTICK):
    """Write binding tables (not devices) to a YAML profile."""
    data = {}
    if keyboard is not None:
        data["keyboard"] = keyboard_section(keyboard)
    if gamepad is not None:
        data["gamepad"] = gamepad_section(gamepad, deadzone)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)
    LOG.info("saved profile to %s", path)

"""State models and lightweight DTOs"""
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple


class PlayerAction(IntEnum):
    # declaration order is the resolution order
    STEER_LEFT = 0
    STEER_RIGHT = 1
    ACCEL = 2
    BRAKE = 3
    NITRO = 4
    DRIFT = 5
    RESCUE = 6
    FIRE = 7
    LOOK_BACK = 8


class AxisDirection(IntEnum):
    NEGATIVE = 0
    POSITIVE = 1
    NEUTRAL = 2

    @classmethod
    def of(cls, value: int) -> "AxisDirection":
        if value < 0:
            return cls.NEGATIVE
        if value > 0:
            return cls.POSITIVE
        return cls.NEUTRAL


class InputType(IntEnum):
    NONE = 0
    KEYBOARD = 1
    MOUSEBUTTON = 2
    STICKBUTTON = 3
    STICKMOTION = 4


@dataclass(frozen=True)
class Binding:
    source: InputType = InputType.NONE
    id: int = -1
    direction: AxisDirection = AxisDirection.NEGATIVE  # only used for STICKMOTION

    @property
    def is_bound(self) -> bool:
        return self.source != InputType.NONE


UNBOUND = Binding()


@dataclass
class RawEvent:
    kind: InputType
    id0: int = 0  # key code, mouse button or stick instance
    id1: int = 0  # axis or stick button
    id2: int = 0
    value: int = 0  # signed raw axis reading


class ActionEvent(NamedTuple):
    player: int
    action: PlayerAction

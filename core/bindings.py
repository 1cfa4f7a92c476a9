"""Per-device binding table: PlayerAction -> Binding

Resolution is a linear scan in PlayerAction order, so when two actions share
an input only the lower one is ever reachable. `conflicts()` reports those
cases without changing resolution.
"""
import logging
from typing import Iterator, List, Optional, Tuple

from core.errors import BindingConflictError
from core.state import UNBOUND, AxisDirection, Binding, InputType, PlayerAction

LOG = logging.getLogger("kartinput.bindings")


class BindingTable:
    def __init__(self):
        self._bindings = [UNBOUND] * len(PlayerAction)

    def bind(self, action: PlayerAction, source: InputType, id: int,
             direction: AxisDirection = AxisDirection.NEGATIVE):
        self._bindings[action] = Binding(InputType(source), int(id), AxisDirection(direction))

    def unbind(self, action: PlayerAction):
        self._bindings[action] = UNBOUND

    def get(self, action: PlayerAction) -> Binding:
        return self._bindings[action]

    def __iter__(self) -> Iterator[Tuple[PlayerAction, Binding]]:
        for action in PlayerAction:
            yield action, self._bindings[action]

    def __len__(self):
        return len(self._bindings)

    def bound(self) -> List[Tuple[PlayerAction, Binding]]:
        return [(a, b) for a, b in self if b.is_bound]

    def copy(self) -> "BindingTable":
        other = BindingTable()
        other._bindings = list(self._bindings)
        return other

    def resolve_digital(self, id: int) -> Optional[PlayerAction]:
        """Return the first action bound to key/button `id`, ignoring source kind."""
        for action, binding in self:
            if binding.is_bound and binding.id == id:
                return action
        return None

    def resolve_analog(self, axis: int, value: int, deadzone: int) -> Optional[PlayerAction]:
        """Return the first stick-motion action on `axis` whose direction matches `value`.

        Readings with ``abs(value) < deadzone`` never resolve.
        """
        if -deadzone < value < deadzone or value == 0:
            return None
        wanted = AxisDirection.of(value)
        for action, binding in self:
            if binding.source != InputType.STICKMOTION or binding.id != axis:
                continue
            if binding.direction == wanted:
                return action
        return None

    def conflicts(self) -> List[Tuple[PlayerAction, PlayerAction, Binding]]:
        """List (reachable, shadowed, binding) for every duplicated binding.

        Stick motion is compared on the full (source, id, direction) triple.
        Keys and buttons are compared on id alone, since `resolve_digital`
        ignores source and direction.
        """
        found = []
        first_owner = {}
        for action, binding in self.bound():
            if binding.source == InputType.STICKMOTION:
                key = binding
            else:
                key = ("digital", binding.id)
            if key in first_owner:
                found.append((first_owner[key], action, binding))
            else:
                first_owner[key] = action
        return found

    def validate(self):
        found = self.conflicts()
        if found:
            for kept, shadowed, binding in found:
                LOG.debug("%s shadows %s on %s", kept.name, shadowed.name, binding)
            raise BindingConflictError(found)

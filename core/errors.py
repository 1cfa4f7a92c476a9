"""Exceptions raised by the input layer.

Unresolved events are not errors: they resolve to ``None``.
"""


class InputError(Exception):
    pass


class DeviceOpenError(InputError):
    """A game pad handle could not be acquired."""

    def __init__(self, index, reason=None):
        self.index = index
        msg = f"cannot open game pad {index}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class BindingConflictError(InputError):
    """Two actions on one device share an identical binding."""

    def __init__(self, conflicts):
        self.conflicts = list(conflicts)
        desc = ", ".join(f"{kept.name}/{shadowed.name}" for kept, shadowed, _ in self.conflicts)
        super().__init__(f"conflicting bindings: {desc}")


class ProfileError(InputError, ValueError):
    pass

"""Base device abstraction"""
import abc
from typing import Optional

from core.bindings import BindingTable
from core.state import InputType, PlayerAction, RawEvent


class InputDevice(abc.ABC):
    kind = InputType.NONE

    def __init__(self, device_id: str):
        self.device_id = device_id
        self.bindings = BindingTable()

    @abc.abstractmethod
    def load_defaults(self):
        raise NotImplementedError

    @abc.abstractmethod
    def matches(self, event: RawEvent) -> Optional[PlayerAction]:
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self):
        return f"{type(self).__name__}({self.device_id!r})"

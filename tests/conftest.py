import pygame
import pytest

from devices.gamepad import GamePadDevice


class FakeJoystick:
    """Stands in for pygame.joystick.Joystick so tests need no hardware."""

    def __init__(self, name="Fake Pad", axes=4, instance_id=0, fail_on=None):
        self.name = name
        self.axes = axes
        self.instance_id = instance_id
        self.fail_on = fail_on
        self.quit_calls = 0

    def init(self):
        pass

    def get_name(self):
        if self.fail_on == "get_name":
            raise pygame.error("device vanished")
        return self.name

    def get_numaxes(self):
        if self.fail_on == "get_numaxes":
            raise pygame.error("device vanished")
        return self.axes

    def get_instance_id(self):
        return self.instance_id

    def quit(self):
        self.quit_calls += 1


@pytest.fixture
def make_pad():
    def _make(index=0, deadzone=2000, **kwargs):
        kwargs.setdefault("instance_id", index)
        return GamePadDevice(index, deadzone=deadzone, joystick=FakeJoystick(**kwargs))
    return _make


@pytest.fixture
def fake_joystick():
    return FakeJoystick

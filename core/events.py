"""Translate pygame events into RawEvent records"""
from typing import Optional

import pygame

from core.state import InputType, RawEvent

AXIS_SCALE = 32767


def _instance(event):
    # pygame 2 reports instance_id; older events only carry joy
    return getattr(event, "instance_id", getattr(event, "joy", 0))


def from_pygame(event) -> Optional[RawEvent]:
    if event.type == pygame.KEYDOWN:
        return RawEvent(InputType.KEYBOARD, id0=event.key)
    if event.type == pygame.MOUSEBUTTONDOWN:
        return RawEvent(InputType.MOUSEBUTTON, id0=event.button)
    if event.type == pygame.JOYBUTTONDOWN:
        return RawEvent(InputType.STICKBUTTON, id0=_instance(event), id1=event.button)
    if event.type == pygame.JOYAXISMOTION:
        value = int(round(event.value * AXIS_SCALE))
        return RawEvent(InputType.STICKMOTION, id0=_instance(event), id1=event.axis, value=value)
    return None

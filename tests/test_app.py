import pygame
import pytest
import yaml

import app
from core.errors import BindingConflictError
from core.state import PlayerAction


def test_parser_defaults():
    args = app.build_parser().parse_args([])
    assert args.deadzone == 2000
    assert args.route_by_stick is False
    assert args.profile is None


def test_dump_profile(tmp_path):
    path = tmp_path / "defaults.yaml"
    app.main(["--dump-profile", str(path), "--deadzone", "3000"])
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["gamepad"]["deadzone"] == 3000
    assert data["keyboard"]["bindings"]["fire"] == "lalt"


def test_context_and_hotplug(tmp_path, monkeypatch, fake_joystick):
    path = tmp_path / "p.yaml"
    path.write_text("gamepad:\n  bindings:\n    nitro: {axis: 2, dir: negative}\n", encoding="utf-8")
    args = app.build_parser().parse_args(["--profile", str(path), "--route-by-stick"])
    ctx = app.build_context(args)
    assert ctx.manager.route_by_stick

    monkeypatch.setattr(pygame.joystick, "get_init", lambda: True)
    monkeypatch.setattr(pygame.joystick, "Joystick", lambda i: fake_joystick(instance_id=10 + i))
    app.hotplug(ctx, pygame.event.Event(pygame.JOYDEVICEADDED, device_index=0))
    assert ctx.manager.gamepad_count == 1
    result = ctx.manager.map_input_to_player_and_action(4, 10, 2, 0, -9000)
    assert result.action == PlayerAction.NITRO

    pad = ctx.manager.gamepads[0]
    app.hotplug(ctx, pygame.event.Event(pygame.JOYDEVICEREMOVED, instance_id=10))
    assert ctx.manager.gamepad_count == 0
    assert pad.closed


def test_negative_deadzone_is_rejected(capsys):
    with pytest.raises(SystemExit):
        app.build_parser().parse_args(["--deadzone", "-5"])
    assert "must be >= 0" in capsys.readouterr().err
    assert app.build_parser().parse_args(["--deadzone", "0"]).deadzone == 0


CONFLICTING_PAD_PROFILE = "gamepad:\n  bindings:\n    nitro: {axis: 1, dir: negative}\n"


def _conflicting_context(tmp_path):
    path = tmp_path / "conflict.yaml"
    path.write_text(CONFLICTING_PAD_PROFILE, encoding="utf-8")
    return app.build_context(app.build_parser().parse_args(["--profile", str(path)]))


def test_register_devices_closes_pads_when_profile_fails(tmp_path, monkeypatch, make_pad):
    ctx = _conflicting_context(tmp_path)
    pads = [make_pad(index=0), make_pad(index=1)]
    monkeypatch.setattr(app, "discover_gamepads", lambda deadzone: pads)
    with pytest.raises(BindingConflictError):
        app.register_devices(ctx)
    assert [p.closed for p in pads] == [True, True]
    assert (ctx.manager.keyboard_count, ctx.manager.gamepad_count) == (0, 0)


def test_hotplug_skips_pad_when_profile_fails(tmp_path, monkeypatch, fake_joystick, caplog):
    ctx = _conflicting_context(tmp_path)
    opened = []

    def opener(index):
        js = fake_joystick(instance_id=index)
        opened.append(js)
        return js

    monkeypatch.setattr(pygame.joystick, "get_init", lambda: True)
    monkeypatch.setattr(pygame.joystick, "Joystick", opener)
    app.hotplug(ctx, pygame.event.Event(pygame.JOYDEVICEADDED, device_index=0))
    assert ctx.manager.gamepad_count == 0
    assert opened[0].quit_calls == 1
    assert "skipping game pad" in caplog.text

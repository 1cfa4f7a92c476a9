"""Entry point for kartinput

Opens a small pygame window, registers the keyboard and every connected game
pad, and logs the player actions resolved from incoming events.
"""
import argparse
import logging
from dataclasses import dataclass, field

import pygame

from core.errors import DeviceOpenError, InputError
from core.events import from_pygame
from devices.gamepad import DEADZONE_JOYSTICK, GamePadDevice, default_bindings, discover_gamepads
from devices.keyboard import KeyboardDevice
from manager import DeviceManager
from profiles import apply_profile, load_profile, save_profile

LOG = logging.getLogger("kartinput")


@dataclass
class AppContext:
    args: argparse.Namespace
    manager: DeviceManager
    profile: dict = field(default_factory=dict)


def non_negative_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {number}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(description="kartinput: keyboard + game pad → player actions")
    parser.add_argument("--profile", help="YAML binding profile")
    parser.add_argument("--deadzone", type=non_negative_int, default=DEADZONE_JOYSTICK,
                        help=f"game pad deadzone in raw axis units (default: {DEADZONE_JOYSTICK})")
    parser.add_argument("--route-by-stick", action="store_true",
                        help="only match stick motion against the pad that produced it")
    parser.add_argument("--allow-conflicts", action="store_true",
                        help="warn instead of failing on duplicate bindings")
    parser.add_argument("--dump-profile", metavar="PATH",
                        help="write the default bindings to PATH and exit")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: INFO)")
    parser.add_argument("--log-format", default="%(levelname)s:%(name)s:%(message)s",
                        help="Logging format string (default: %(levelname)s:%(name)s:%(message)s)")
    parser.add_argument("--debug-modules", nargs="*", default=[],
                        help="Modules to set to DEBUG level (e.g., 'manager', 'gamepad', 'keyboard')")
    return parser


def configure_logging(args):
    logging.basicConfig(level=getattr(logging, args.log_level), format=args.log_format)
    for module in args.debug_modules:
        logging.getLogger(f"kartinput.{module}").setLevel(logging.DEBUG)


def build_context(args) -> AppContext:
    manager = DeviceManager(route_by_stick=args.route_by_stick)
    profile = load_profile(args.profile) if args.profile else {}
    return AppContext(args=args, manager=manager, profile=profile)


def register_devices(ctx: AppContext):
    keyboard = KeyboardDevice()
    pads = discover_gamepads(ctx.args.deadzone)
    if ctx.profile:
        try:
            apply_profile(ctx.profile, keyboards=[keyboard], gamepads=pads,
                          allow_conflicts=ctx.args.allow_conflicts)
        except InputError:
            for pad in pads:
                pad.close()
            raise
    ctx.manager.add(keyboard)
    for pad in pads:
        ctx.manager.add(pad)


def hotplug(ctx: AppContext, event):
    if event.type == pygame.JOYDEVICEADDED:
        try:
            pad = GamePadDevice(event.device_index, deadzone=ctx.args.deadzone)
        except DeviceOpenError as e:
            LOG.warning("skipping game pad: %s", e)
            return
        if ctx.profile:
            try:
                apply_profile(ctx.profile, gamepads=[pad], allow_conflicts=ctx.args.allow_conflicts)
            except InputError as e:
                LOG.warning("skipping game pad %s: %s", pad.device_id, e)
                pad.close()
                return
        ctx.manager.add(pad)
    elif event.type == pygame.JOYDEVICEREMOVED:
        for pad in ctx.manager.gamepads:
            if pad.instance_id == event.instance_id:
                ctx.manager.remove(pad)
                break


def run(ctx: AppContext):
    def on_action(result):
        LOG.info("player %d: %s", result.player, result.action.name)

    ctx.manager.subscribe(on_action)
    clock = pygame.time.Clock()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type in (pygame.JOYDEVICEADDED, pygame.JOYDEVICEREMOVED):
                hotplug(ctx, event)
            else:
                raw = from_pygame(event)
                if raw is not None:
                    ctx.manager.dispatch(raw)
        clock.tick(60)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args)

    if args.dump_profile:
        save_profile(args.dump_profile, keyboard=KeyboardDevice().bindings,
                     gamepad=default_bindings(), deadzone=args.deadzone)
        LOG.info("default bindings written to %s", args.dump_profile)
        return

    ctx = build_context(args)
    pygame.init()
    pygame.display.set_mode((320, 120))
    pygame.display.set_caption("kartinput")
    try:
        register_devices(ctx)
        # pads opened above are also announced as JOYDEVICEADDED at startup
        pygame.event.pump()
        pygame.event.clear(pygame.JOYDEVICEADDED)
        LOG.info("kartinput running, close the window to stop")
        run(ctx)
    except KeyboardInterrupt:
        LOG.info("shutdown requested")
    finally:
        ctx.manager.close()
        pygame.quit()


if __name__ == "__main__":
    main()

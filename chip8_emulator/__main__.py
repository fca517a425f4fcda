import argparse
import logging
import random
import sys

from .config import Config
from .cpu import CPU
from .errors import RomLoadError
from .machine import Machine

log = logging.getLogger("chip8_emulator")


def build_parser():
    defaults = Config()
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 emulator")
    parser.add_argument("rom", help="a CHIP-8 program to load")
    parser.add_argument("--ips", type=int, default=defaults.instructions_per_second,
                        help="instructions executed per second (default: %(default)s)")
    parser.add_argument("--scale", type=int, default=defaults.scale_factor,
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--fg", type=lambda x: int(x, 0), default=defaults.fg_color, metavar="RGBA",
                        help="foreground color as 0xRRGGBBAA")
    parser.add_argument("--bg", type=lambda x: int(x, 0), default=defaults.bg_color, metavar="RGBA",
                        help="background color as 0xRRGGBBAA")
    parser.add_argument("--no-outlines", action="store_true", help="don't outline lit pixels")
    parser.add_argument("--tone", type=int, default=defaults.square_wave_freq,
                        help="beep frequency in Hz (default: %(default)s)")
    parser.add_argument("--volume", type=int, default=defaults.volume,
                        help="beep volume, 0-32767 (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=None, help="seed for the RND instruction")
    parser.add_argument("--debug", action="store_true", help="enable verbose debug logging")
    return parser


def config_from_args(args):
    return Config(
        instructions_per_second=args.ips,
        scale_factor=args.scale,
        fg_color=args.fg,
        bg_color=args.bg,
        pixel_outlines=not args.no_outlines,
        square_wave_freq=args.tone,
        volume=args.volume,
        seed=args.seed,
    )


def load_rom(path):
    log.info("Loading ROM: %s", path)
    try:
        with open(path, "rb") as f:
            rom = f.read()
    except OSError as e:
        raise RomLoadError("Failed to open ROM: %s (%s)" % (path, e.strerror)) from e
    return Machine(rom)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    log.setLevel(logging.DEBUG if args.debug else logging.INFO)
    config = config_from_args(args)

    try:
        machine = load_rom(args.rom)
    except RomLoadError as e:
        print("Fatal error:", e, file=sys.stderr)
        return 1

    # pyglet needs a display, so only pull it in once there is something to show
    import pyglet
    from .window import Chip8Window

    window = Chip8Window(machine, config, cpu=CPU(machine, random.Random(config.seed)), rom_name=args.rom)
    pyglet.app.run()

    if window.error is not None:
        print("Fatal error:", window.error, file=sys.stderr)
        return 1
    log.info("Emulator shut down successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())

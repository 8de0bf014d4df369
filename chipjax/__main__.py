"""Command line entry point: ``python -m chipjax ROM``."""

import argparse
import sys

from chipjax.errors import Chip8Error
from chipjax.logging import EmulatorLogger
from chipjax.machine import Chip8
from chipjax.rendering import display_to_text


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="chipjax", description="Run a CHIP-8 program."
    )
    parser.add_argument("rom", help="Path to the CHIP-8 program file")
    parser.add_argument(
        "--scale", type=int, default=10, help="Window pixels per CHIP-8 pixel"
    )
    parser.add_argument(
        "--ipf", type=int, default=10, help="Instructions executed per 60 Hz frame"
    )
    parser.add_argument(
        "--colors", default="classic", help="Color scheme (classic, amber, white, blue, retro, purple)"
    )
    parser.add_argument(
        "--decouple-timers",
        action="store_true",
        help="Tick timers once per frame instead of once per instruction",
    )
    parser.add_argument(
        "--strict", action="store_true", help="Stop on unknown opcodes"
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed for CXNN")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    parser.add_argument(
        "--headless",
        type=int,
        metavar="STEPS",
        help="Run STEPS instructions without a window",
    )
    parser.add_argument(
        "--dump-display",
        action="store_true",
        help="Print the final display as text when the run ends",
    )
    return parser.parse_args(argv)


def run_headless(args, logger: EmulatorLogger):
    machine = Chip8(
        seed=args.seed,
        couple_timers=not args.decouple_timers,
        strict=args.strict,
        logger=logger,
        trace=args.log_level == "DEBUG",
    )
    machine.load_rom(args.rom)
    for _ in range(args.headless):
        machine.step()
    logger.log_session_end({"instructions": machine.steps})
    return machine.display


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = EmulatorLogger(log_level=args.log_level)

    try:
        if args.headless is not None:
            display = run_headless(args, logger)
        else:
            from chipjax.frontend import run_emulator

            display = run_emulator(
                args.rom,
                scale=args.scale,
                ipf=args.ipf,
                color_scheme=args.colors,
                couple_timers=not args.decouple_timers,
                strict=args.strict,
                seed=args.seed,
                logger=logger,
            )
    except (Chip8Error, OSError) as e:
        logger.error(str(e))
        return 1
    if args.dump_display:
        print(display_to_text(display))
    return 0


if __name__ == "__main__":
    sys.exit(main())

import sys

from .config import parse_args
from .cpu import Interpreter
from .driver import Driver
from .errors import Chip8Error
from .loader import read_rom
from .logger import logger, setup_logging
from .machine import Machine


def main(argv=None):
    try:
        config = parse_args(argv)
    except Chip8Error as e:
        print(f"chip8emu: {e}", file=sys.stderr)
        return 2

    setup_logging(config.debug)

    # a bad ROM must stop us before any window exists
    try:
        machine = Machine(read_rom(config.rom_path), seed=config.seed)
    except Chip8Error as e:
        logger.error("%s", e)
        return 1

    logger.info("Running at %d instructions/s (%d per frame), seed %d",
                config.instr_rate, config.instructions_per_frame, machine.seed)
    driver = Driver(machine, Interpreter(), config.instructions_per_frame)

    # pyglet is only needed once we actually open a window
    import pyglet
    from .window import Chip8Window

    window = Chip8Window(driver, config)
    pyglet.app.run()
    return window.exit_code


if __name__ == "__main__":
    sys.exit(main())

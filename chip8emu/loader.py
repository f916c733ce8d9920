# Font/ROM loader: fills low memory with the hex glyphs and copies the
# program image into the execution region.

from pathlib import Path

from .constants import FONTSET, MAX_PROGRAM_SIZE, PROGRAM_START
from .errors import RomLoadError
from .logger import logger


def check_size(data, name="ROM"):
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomLoadError(
            f"{name} is too big; ROM size: {len(data)}; max size allowed {MAX_PROGRAM_SIZE}"
        )


def load_font(memory):
    memory[:len(FONTSET)] = bytes(FONTSET)


def load_program(memory, data):
    check_size(data)
    memory[PROGRAM_START:PROGRAM_START + len(data)] = data


def read_rom(path):
    """Read a program image from disk.

    The whole file is read and size-checked here so that a bad ROM is
    rejected before a machine is ever built around it.
    """
    path = Path(path)
    logger.info("Loading ROM: %s", path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise RomLoadError(f"Failed to read ROM file {path}: {e}") from e

    check_size(data, f"ROM file {path}")
    return data

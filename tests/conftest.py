import pytest

from chip8emu.cpu import Interpreter
from chip8emu.machine import Machine


def program(*words):
    """Assemble 16-bit instruction words into a big-endian program image."""
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def cpu():
    return Interpreter()


@pytest.fixture
def make_machine():
    def _make(*words, seed=1234):
        return Machine(program(*words), seed=seed)
    return _make


@pytest.fixture
def assemble():
    return program

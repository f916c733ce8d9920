class Chip8Error(Exception):
    """Base class for every error raised by the emulator."""


class RomLoadError(Chip8Error):
    pass


class StackOverflowError(Chip8Error):
    pass


class StackUnderflowError(Chip8Error):
    pass


class ConfigError(Chip8Error, ValueError):
    """Raised when a configuration value is invalid."""

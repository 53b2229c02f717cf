"""Exception types raised by the data store and its importers."""


class BethYwError(Exception):
    """Base class for all errors raised by bethyw."""


class MalformedInputError(BethYwError, ValueError):
    """Input could not be parsed (bad row, number, year or stream)."""


class NotFoundError(BethYwError, LookupError):
    """A lookup by authority code, codename, language or year failed."""

    def __str__(self) -> str:
        # LookupError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class InvalidMappingError(BethYwError, ValueError):
    """A column mapping is too small or lacks a required column role."""


class UnsupportedSourceTypeError(BethYwError, ValueError):
    """The source type tag passed to populate() is not recognised."""


class InputOpenError(BethYwError, OSError):
    """An input source could not be opened or downloaded."""


class MeasureMismatchError(BethYwError, ValueError):
    """Two measures with different codenames were combined."""

"""Exceptions raised while reading LP (.lp) documents."""

from __future__ import annotations


class InputError(Exception):
    """Raised when an LP document cannot be turned into a model.

    Every parse-time failure is an ``InputError``; the concrete subclass names
    the kind of problem. ``section`` is filled in by the parser as the error
    leaves the section it was raised in.
    """

    def __init__(self, message: str, line_number: int = 0, section: str | None = None) -> None:
        self.message = message
        self.line_number = line_number
        self.section = section
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        if self.line_number > 0:
            return f"Line {self.line_number}: {self.message}"
        return self.message

    def as_dict(self) -> dict[str, str | int | None]:
        return {
            "line_number": self.line_number,
            "section": self.section,
            "kind": self.kind,
            "message": self.message,
        }


class UnrecognizedDirectionError(InputError):
    """The first non-blank line is not an optimisation direction."""


class MissingSignError(InputError):
    """Two addends follow each other without a ``+`` or ``-`` between them."""


class InvalidAddendError(InputError):
    """An addend has no variable part."""


class InvalidNameError(InputError):
    """A variable, constraint or objective name violates the name grammar."""


class InvalidNumberError(InputError):
    """A coefficient, bound or right-hand side is not a number."""


class MalformedConstraintError(InputError):
    """A constraint line cannot be split into expression, sense and value."""


class UnknownVariableError(InputError):
    """A bounds or type section references a variable never used before."""


class MalformedBoundError(InputError):
    """A bounds line has a recognised shape but invalid content."""


class UnknownBoundFormatError(InputError):
    """A bounds line has more than two ``<=`` operators."""


class SectionOrderError(InputError):
    """A section reader was invoked outside of its section."""


class IncompleteInputError(InputError):
    """The input ended before the ``end`` marker."""


class IoError(InputError):
    """The underlying file could not be opened or read."""


class ModelInvariantError(InputError):
    """A finished variable, objective or constraint is inconsistent."""


__all__ = [
    "IncompleteInputError",
    "InputError",
    "InvalidAddendError",
    "InvalidNameError",
    "InvalidNumberError",
    "IoError",
    "MalformedBoundError",
    "MalformedConstraintError",
    "MissingSignError",
    "ModelInvariantError",
    "SectionOrderError",
    "UnknownBoundFormatError",
    "UnknownVariableError",
    "UnrecognizedDirectionError",
]

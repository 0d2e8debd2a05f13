"""Reader for linear programs written in the textual LP (.lp) format."""

from .errors import InputError
from .model import (
    Constraint,
    ConstraintSense,
    LpModel,
    Objective,
    ObjectiveSense,
    Variable,
    VariableKind,
)
from .parser import LpParser, parse_lp
from .reader import LpFileReader

__all__ = [
    "Constraint",
    "ConstraintSense",
    "InputError",
    "LpFileReader",
    "LpModel",
    "LpParser",
    "Objective",
    "ObjectiveSense",
    "Variable",
    "VariableKind",
    "parse_lp",
]

__version__ = "0.1.0"

"""In-memory representation of a parsed LP model.

Records (`Variable`, `Objective`, `Constraint`) are frozen dataclasses that
validate themselves on construction. The parser never builds them directly:
it accumulates state in the matching builder and calls ``build()`` once the
document has been read completely.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ModelInvariantError


class VariableKind(Enum):
    CONTINUOUS = "continuous"
    INTEGER = "integer"
    BINARY = "binary"


class ObjectiveSense(Enum):
    MAX = ("max", "maximize", "maximise", "maximum")
    MIN = ("min", "minimize", "minimise", "minimum")

    @property
    def keywords(self) -> Tuple[str, ...]:
        return self.value

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["ObjectiveSense"]:
        lowered = keyword.lower()
        for sense in cls:
            if lowered in sense.keywords:
                return sense
        return None


class ConstraintSense(Enum):
    LE = "<="
    EQ = "="
    GE = ">="

    @classmethod
    def from_operator(cls, operator: str) -> Optional["ConstraintSense"]:
        """Map a relational operator to its sense; ``None`` if unsupported."""
        return _OPERATORS.get(operator)


_OPERATORS = {
    "<=": ConstraintSense.LE,
    "=<": ConstraintSense.LE,
    "<": ConstraintSense.LE,
    "=": ConstraintSense.EQ,
    ">=": ConstraintSense.GE,
    "=>": ConstraintSense.GE,
    ">": ConstraintSense.GE,
}


def _frozen(values: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(values))


def _merge(target: Dict[str, float], values: Mapping[str, float]) -> None:
    for name, value in values.items():
        target[name] = target.get(name, 0.0) + value


def _json_number(value: float) -> float | str:
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value


@dataclass(frozen=True)
class Variable:
    name: str
    lower_bound: float = 0.0
    upper_bound: float = math.inf
    kind: VariableKind = VariableKind.CONTINUOUS

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ModelInvariantError("Expected non-blank variable name.")
        if self.lower_bound > self.upper_bound:
            raise ModelInvariantError(
                f"Variable {self.name}: lower bound {self.lower_bound} > "
                f"{self.upper_bound} upper bound."
            )

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "lower_bound": _json_number(self.lower_bound),
            "upper_bound": _json_number(self.upper_bound),
        }


@dataclass(frozen=True)
class Objective:
    name: str
    sense: ObjectiveSense
    coefficients: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # An empty coefficient map is a valid (zero) objective.
        if not self.name or not self.name.strip():
            raise ModelInvariantError("Expected non-blank objective name.")

    def coefficient(self, name: str) -> float:
        return self.coefficients.get(name, 0.0)

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "sense": self.sense.name,
            "coefficients": dict(self.coefficients),
        }


@dataclass(frozen=True)
class Constraint:
    name: str
    source_line: int
    coefficients: Mapping[str, float]
    sense: ConstraintSense
    rhs: float

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ModelInvariantError("Expected non-blank constraint name.")
        if self.source_line <= 0:
            raise ModelInvariantError(
                f"Constraint {self.name}: expected positive line number, found {self.source_line}."
            )
        if not self.coefficients:
            raise ModelInvariantError(
                f"Constraint {self.name}: expected non-empty left-hand side.",
                line_number=self.source_line,
            )

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "line_number": self.source_line,
            "coefficients": dict(self.coefficients),
            "sense": self.sense.value,
            "rhs": _json_number(self.rhs),
        }


class VariableBuilder:
    """Mutable bounds and kind of a variable while its sections are read."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.lower_bound = 0.0
        self.upper_bound = math.inf
        self.kind = VariableKind.CONTINUOUS

    def set_bounds(self, lower: float, upper: float) -> "VariableBuilder":
        self.lower_bound = lower
        self.upper_bound = upper
        return self

    def build(self) -> Variable:
        lower, upper = self.lower_bound, self.upper_bound
        if self.kind is VariableKind.BINARY:
            lower = max(lower, 0.0)
            upper = min(upper, 1.0)
        return Variable(self.name, lower, upper, self.kind)


class ObjectiveBuilder:
    def __init__(self, name: str, sense: ObjectiveSense) -> None:
        self.name = name
        self.sense = sense
        self.coefficients: Dict[str, float] = {}

    def merge_coefficients(self, values: Mapping[str, float]) -> "ObjectiveBuilder":
        _merge(self.coefficients, values)
        return self

    def build(self) -> Objective:
        return Objective(self.name, self.sense, _frozen(self.coefficients))


class ConstraintBuilder:
    """Collects the left-hand side of a constraint spread over several lines."""

    def __init__(self, name: str, source_line: int) -> None:
        self.name = name
        self.source_line = source_line
        self.coefficients: Dict[str, float] = {}

    def merge_coefficients(self, values: Mapping[str, float]) -> "ConstraintBuilder":
        _merge(self.coefficients, values)
        return self

    def build(self, sense: ConstraintSense, rhs: float) -> Constraint:
        return Constraint(self.name, self.source_line, _frozen(self.coefficients), sense, rhs)


@dataclass(frozen=True)
class LpModel:
    """Finished model handed out by the parser. Never mutated afterwards."""

    objectives: Tuple[Objective, ...] = ()
    constraints: Tuple[Constraint, ...] = ()
    variables: Mapping[str, Variable] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def empty(cls) -> "LpModel":
        return cls()

    def variables_of_kind(self, kind: VariableKind) -> List[Variable]:
        return [variable for variable in self.variables.values() if variable.kind is kind]

    @property
    def summary(self) -> str:
        lines = [
            f"Objectives: {len(self.objectives)}",
            f"Constraints: {len(self.constraints)}",
            f"Variables: {len(self.variables)} "
            + ", ".join(
                f"{kind.value}={len(self.variables_of_kind(kind))}" for kind in VariableKind
            ),
        ]
        for objective in self.objectives:
            lines.append(
                f"  {objective.sense.name} {objective.name} ({len(objective.coefficients)} terms)"
            )
        return "\n".join(lines)

    def to_payload(self) -> dict[str, Any]:
        return {
            "objectives": [objective.as_dict() for objective in self.objectives],
            "constraints": [constraint.as_dict() for constraint in self.constraints],
            "variables": [variable.as_dict() for variable in self.variables.values()],
            "summary": self.summary,
        }


__all__ = [
    "Constraint",
    "ConstraintBuilder",
    "ConstraintSense",
    "LpModel",
    "Objective",
    "ObjectiveBuilder",
    "ObjectiveSense",
    "Variable",
    "VariableBuilder",
    "VariableKind",
]

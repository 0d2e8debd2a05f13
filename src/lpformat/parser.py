"""Section-driven reader turning LP text into an ``LpModel``.

The document is read strictly top to bottom:

    start -> objective -> [constraints] -> {bounds, binary, general}* -> end

Each section has its own reader method that consumes lines until a keyword
line switches to the next section. Variables, objectives and constraints are
accumulated in builders owned by the parser and frozen in ``_assemble``.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Optional, TextIO

from .bounds import lookup_variable, parse_bound
from .errors import (
    InputError,
    MalformedConstraintError,
    SectionOrderError,
    UnrecognizedDirectionError,
)
from .lexer import (
    ExpressionAndSense,
    ExpressionOnly,
    LineReader,
    SenseOnly,
    classify_constraint_line,
    has_relational_operator,
    parse_linear_combination,
    split_name_prefix,
)
from .model import (
    Constraint,
    ConstraintBuilder,
    ConstraintSense,
    LpModel,
    ObjectiveBuilder,
    ObjectiveSense,
    VariableBuilder,
    VariableKind,
)

LOGGER = logging.getLogger("lpformat.parser")

DEFAULT_OBJECTIVE_NAME = "obj"
DEFAULT_CONSTRAINT_PREFIX = "R"


class Section(Enum):
    START = "start"
    OBJECTIVE = "objective"
    CONSTRAINTS = "constraints"
    BOUNDS = "bounds"
    BINARY = "binary"
    GENERAL = "general"
    END = "end"


_CONSTRAINTS_KEYWORDS = frozenset({"subject to", "such that", "s.t.", "st.", "st"})

_SECTION_KEYWORDS = {
    "bounds": Section.BOUNDS,
    "bound": Section.BOUNDS,
    "binary": Section.BINARY,
    "binaries": Section.BINARY,
    "bin": Section.BINARY,
    "generals": Section.GENERAL,
    "general": Section.GENERAL,
    "gen": Section.GENERAL,
    "end": Section.END,
}

_TYPE_SECTIONS = {
    Section.BINARY: VariableKind.BINARY,
    Section.GENERAL: VariableKind.INTEGER,
}


def _keyword(line: str) -> str:
    return " ".join(line.lower().split())


class LpParser:
    """Reads exactly one LP document. Not reusable, not thread-safe."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.section = Section.START
        self._logger = logger or LOGGER
        self._lines: Optional[LineReader] = None
        self._sense: Optional[ObjectiveSense] = None
        self._variables: Dict[str, VariableBuilder] = {}
        self._objectives: List[ObjectiveBuilder] = []
        self._constraints: List[Constraint] = []

    @property
    def line_number(self) -> int:
        return self._lines.line_number if self._lines is not None else 0

    def parse(self, stream: TextIO) -> LpModel:
        """Consume ``stream`` up to the ``end`` marker and return the model.

        Raises:
            InputError: on the first problem found; ``section`` names the
                section being read when it happened.
        """
        self._lines = LineReader(stream)
        try:
            pending = self._read_direction()
            pending = self._read_objectives(pending)
            if self.section is Section.CONSTRAINTS:
                self._read_constraints(pending)
            while self.section is not Section.END:
                if self.section is Section.BOUNDS:
                    self._read_bounds()
                else:
                    self._read_types()
            return self._assemble()
        except InputError as exc:
            if exc.section is None:
                exc.section = self.section.value
            if exc.line_number == 0:
                exc.line_number = self.line_number
            raise

    def _switch(self, section: Section) -> None:
        self._logger.debug("Switching to section %s.", section.name)
        self.section = section

    def _expect(self, *sections: Section) -> None:
        if self.section not in sections:
            expected = ", ".join(section.name for section in sections)
            raise SectionOrderError(f"Expected section {expected}, found {self.section.name}.")

    def _next_line(self, *, skip_blank: bool = False) -> str:
        assert self._lines is not None
        line = self._lines.next_line(skip_blank=skip_blank)
        self._logger.debug("Parsing line %s: %s", self.line_number, line)
        return line

    def _read_direction(self) -> Optional[str]:
        """Read the optimisation direction; return text following the keyword, if any."""
        self._expect(Section.START)
        line = self._next_line(skip_blank=True)
        parts = line.split(None, 1)
        sense = ObjectiveSense.from_keyword(parts[0])
        if sense is None:
            raise UnrecognizedDirectionError(
                f"unrecognised optimisation direction {line!r}.", self.line_number
            )
        self._logger.debug("Found %s direction.", sense.name)
        self._sense = sense
        self._switch(Section.OBJECTIVE)
        return parts[1] if len(parts) > 1 else None

    def _read_objectives(self, pending: Optional[str]) -> Optional[str]:
        """Read objective lines; return a constraint line that ended the section, if any.

        Besides ``subject to``, a line holding a relational operator starts
        the constraints section implicitly, and a bounds, type or ``end``
        keyword skips the constraints section altogether.
        """
        self._expect(Section.OBJECTIVE)
        assert self._sense is not None
        current: Optional[ObjectiveBuilder] = None
        while True:
            if pending is not None:
                line, pending = pending, None
            else:
                line = self._next_line(skip_blank=True)
            keyword = _keyword(line)
            if keyword in _CONSTRAINTS_KEYWORDS:
                self._switch(Section.CONSTRAINTS)
                break
            if keyword in _SECTION_KEYWORDS:
                self._switch(_SECTION_KEYWORDS[keyword])
                break
            if has_relational_operator(line):
                self._switch(Section.CONSTRAINTS)
                pending = line
                break
            name, body = split_name_prefix(line, self.line_number)
            if name is not None:
                self._logger.debug("Found objective name: %s.", name)
                current = ObjectiveBuilder(name, self._sense)
                self._objectives.append(current)
            if not body:
                continue
            if current is None:
                current = ObjectiveBuilder(DEFAULT_OBJECTIVE_NAME, self._sense)
                self._objectives.append(current)
            current.merge_coefficients(
                parse_linear_combination(body, self.line_number, self._variables)
            )
        if not self._objectives:
            # A document without objective lines has a single zero objective.
            self._objectives.append(ObjectiveBuilder(DEFAULT_OBJECTIVE_NAME, self._sense))
        return pending

    def _read_constraints(self, pending: Optional[str] = None) -> None:
        self._expect(Section.CONSTRAINTS)
        builder: Optional[ConstraintBuilder] = None
        while True:
            if pending is not None:
                line, pending = pending, None
            else:
                line = self._next_line(skip_blank=True)
            section = _SECTION_KEYWORDS.get(_keyword(line))
            if section is not None:
                if builder is not None:
                    raise MalformedConstraintError(
                        f"constraint {builder.name} has no relational operator.",
                        builder.source_line,
                    )
                self._switch(section)
                break
            name, body = split_name_prefix(line, self.line_number)
            if name is not None:
                if builder is not None:
                    raise MalformedConstraintError(
                        f"constraint {builder.name} has no relational operator.",
                        builder.source_line,
                    )
                self._logger.debug("Found constraint name: %s.", name)
                builder = ConstraintBuilder(name, self.line_number)
            if not body:
                continue
            result = classify_constraint_line(body, self.line_number)
            if builder is None:
                if isinstance(result, SenseOnly):
                    raise MalformedConstraintError(
                        f"constraint line {line!r} has no left-hand side.", self.line_number
                    )
                builder = ConstraintBuilder(self._default_constraint_name(), self.line_number)
            if isinstance(result, ExpressionOnly):
                builder.merge_coefficients(self._linear_combination(result.lhs))
            elif isinstance(result, SenseOnly):
                self._finish_constraint(builder, result.sense, result.rhs)
                builder = None
            elif isinstance(result, ExpressionAndSense):
                builder.merge_coefficients(self._linear_combination(result.lhs))
                self._finish_constraint(builder, result.sense, result.rhs)
                builder = None

    def _default_constraint_name(self) -> str:
        used = {constraint.name for constraint in self._constraints}
        index = len(self._constraints) + 1
        while f"{DEFAULT_CONSTRAINT_PREFIX}{index}" in used:
            index += 1
        return f"{DEFAULT_CONSTRAINT_PREFIX}{index}"

    def _linear_combination(self, expr: str) -> Dict[str, float]:
        return parse_linear_combination(expr, self.line_number, self._variables)

    def _finish_constraint(
        self, builder: ConstraintBuilder, sense: ConstraintSense, rhs: float
    ) -> None:
        constraint = builder.build(sense, rhs)
        self._logger.debug("Finished constraint %s.", constraint.name)
        self._constraints.append(constraint)

    def _read_bounds(self) -> None:
        self._expect(Section.BOUNDS)
        while True:
            line = self._next_line()
            if not line:
                continue
            section = _SECTION_KEYWORDS.get(_keyword(line))
            if section is not None:
                self._switch(section)
                return
            parse_bound(line, self.line_number, self._variables)

    def _read_types(self) -> None:
        self._expect(Section.BINARY, Section.GENERAL)
        kind = _TYPE_SECTIONS[self.section]
        while True:
            line = self._next_line()
            if not line:
                continue
            section = _SECTION_KEYWORDS.get(_keyword(line))
            if section is not None:
                self._switch(section)
                return
            for name in line.split():
                lookup_variable(name, self._variables, self.line_number).kind = kind

    def _assemble(self) -> LpModel:
        self._expect(Section.END)
        return LpModel(
            objectives=tuple(builder.build() for builder in self._objectives),
            constraints=tuple(self._constraints),
            variables=MappingProxyType(
                {name: builder.build() for name, builder in self._variables.items()}
            ),
        )


def parse_lp(stream: TextIO, *, logger: Optional[logging.Logger] = None) -> LpModel:
    """Parse one LP document from an open text stream."""
    return LpParser(logger=logger).parse(stream)


__all__ = ["LpParser", "Section", "parse_lp"]

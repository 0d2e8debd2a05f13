"""Public entry point: read an LP file into an immutable model."""

from __future__ import annotations

import io
import logging
import os
from typing import Any, Callable, List, Optional, TextIO, Union

from .errors import InputError, IoError
from .model import Constraint, LpModel, Objective, Variable, VariableKind
from .parser import LpParser

LOGGER = logging.getLogger("lpformat.reader")


class LpFileReader:
    """Parse an LP document on construction and expose the resulting model.

    Parsing never raises. When the document is invalid the problem is logged,
    kept on ``error`` and the reader exposes an empty model, so callers check
    the counts (or ``ok``) rather than catching exceptions.
    """

    def __init__(
        self,
        path: Union[str, os.PathLike],
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.path = os.fspath(path)
        self._logger = logger or LOGGER
        self._read(lambda: open(self.path, "r", encoding="utf-8"))

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        source: str = "<text>",
        logger: Optional[logging.Logger] = None,
    ) -> "LpFileReader":
        """Parse LP text held in memory; ``source`` only appears in diagnostics."""
        reader = cls.__new__(cls)
        reader.path = source
        reader._logger = logger or LOGGER
        reader._read(lambda: io.StringIO(text))
        return reader

    def _read(self, opener: Callable[[], TextIO]) -> None:
        self.error: Optional[InputError] = None
        parser = LpParser(logger=self._logger)
        try:
            try:
                stream = opener()
            except OSError as exc:
                raise IoError(f"Cannot open input file {self.path}: {exc}") from exc
            with stream:
                self.model = parser.parse(stream)
        except InputError as exc:
            if exc.section is None:
                exc.section = parser.section.value
            self._logger.error(
                "Problem reading section %s in input file %s", exc.section, self.path
            )
            self._logger.error("%s", exc)
            self.error = exc
            self.model = LpModel.empty()

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def number_of_objectives(self) -> int:
        return len(self.model.objectives)

    @property
    def number_of_variables(self) -> int:
        return len(self.model.variables)

    @property
    def number_of_constraints(self) -> int:
        return len(self.model.constraints)

    @property
    def objectives(self) -> tuple[Objective, ...]:
        return self.model.objectives

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        return self.model.constraints

    @property
    def variables(self) -> List[Variable]:
        return list(self.model.variables.values())

    def get_objective(self, index: int) -> Objective:
        return self.model.objectives[index]

    def get_constraint(self, index: int) -> Constraint:
        return self.model.constraints[index]

    def get_variable(self, name: str) -> Optional[Variable]:
        return self.model.variables.get(name)

    @property
    def continuous_variables(self) -> List[Variable]:
        return self.model.variables_of_kind(VariableKind.CONTINUOUS)

    @property
    def integer_variables(self) -> List[Variable]:
        return self.model.variables_of_kind(VariableKind.INTEGER)

    @property
    def binary_variables(self) -> List[Variable]:
        return self.model.variables_of_kind(VariableKind.BINARY)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready view of the model, or of the error when parsing failed."""
        if self.error is not None:
            return {"valid": False, "source": self.path, "error": self.error.as_dict()}
        return {"valid": True, "source": self.path, **self.model.to_payload()}


__all__ = ["LpFileReader"]

"""Parsing of single lines of the ``bounds`` section."""

from __future__ import annotations

import logging
import math
from typing import Mapping

from .errors import MalformedBoundError, UnknownBoundFormatError, UnknownVariableError
from .lexer import parse_value
from .model import VariableBuilder

LOGGER = logging.getLogger("lpformat.bounds")


def lookup_variable(
    name: str, variables: Mapping[str, VariableBuilder], line_number: int
) -> VariableBuilder:
    """Return the builder registered under ``name``; raise if there is none."""
    variable = variables.get(name.strip())
    if variable is None:
        raise UnknownVariableError(f"unknown variable name {name.strip()!r}.", line_number)
    return variable


def _mirror_greater_equal(line: str, line_number: int) -> str:
    # "x >= 5" reads as "5 <= x"; "10 >= x >= 2" as "2 <= x <= 10".
    if ">=" not in line:
        return line
    if "<=" in line:
        raise MalformedBoundError(f"bound {line!r} mixes '<=' and '>='.", line_number)
    return " <= ".join(segment.strip() for segment in reversed(line.split(">=")))


def parse_bound(line: str, line_number: int, variables: Mapping[str, VariableBuilder]) -> None:
    """Apply one bounds line to the matching variable builder.

    Supported shapes are ``x = v``, ``x free``, ``v <= x``, ``x <= v`` and
    ``l <= x <= u`` (plus their ``>=`` mirrors). In the one-sided form the
    side naming a known variable decides the orientation.
    """
    segments = _mirror_greater_equal(line, line_number).split("<=")
    if len(segments) == 1:
        _parse_fix_or_free(line, line_number, variables)
    elif len(segments) == 2:
        first, second = segments[0].strip(), segments[1].strip()
        first_known = first in variables
        if first_known and second in variables:
            raise MalformedBoundError(
                f"bound {line!r} names a variable on both sides of '<='.", line_number
            )
        if not first_known:
            LOGGER.debug("Parsing one-sided lower bound.")
            variable = lookup_variable(second, variables, line_number)
            variable.lower_bound = parse_value(first, line_number)
        else:
            LOGGER.debug("Parsing one-sided upper bound.")
            variables[first].upper_bound = parse_value(second, line_number)
    elif len(segments) == 3:
        variable = lookup_variable(segments[1], variables, line_number)
        variable.set_bounds(
            parse_value(segments[0], line_number), parse_value(segments[2], line_number)
        )
    else:
        raise UnknownBoundFormatError(f"unknown bound format {line!r}.", line_number)


def _parse_fix_or_free(
    line: str, line_number: int, variables: Mapping[str, VariableBuilder]
) -> None:
    parts = line.split("=")
    if len(parts) > 1:
        LOGGER.debug("Parsing equality bound.")
        variable = lookup_variable(parts[0], variables, line_number)
        value = parse_value(parts[1], line_number)
        variable.set_bounds(value, value)
        return
    tokens = line.split()
    if len(tokens) != 2 or tokens[1].lower() != "free":
        raise MalformedBoundError(
            f"expected free variable expression, found {line!r}.", line_number
        )
    LOGGER.debug("Parsing free variable %s.", tokens[0])
    lookup_variable(tokens[0], variables, line_number).set_bounds(-math.inf, math.inf)


__all__ = ["lookup_variable", "parse_bound"]

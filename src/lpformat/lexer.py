"""Line-level building blocks of the LP reader.

The functions here know nothing about sections. They turn one logical line
(or a fragment of it) into numbers, names, linear combinations and
constraint-line classifications, raising an ``InputError`` subclass on the
first problem.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, MutableMapping, Optional, TextIO, Tuple, Union

from .errors import (
    IncompleteInputError,
    InvalidAddendError,
    InvalidNameError,
    InvalidNumberError,
    IoError,
    MalformedConstraintError,
    MissingSignError,
)
from .model import ConstraintSense, VariableBuilder

LOGGER = logging.getLogger("lpformat.lexer")

COMMENT_MARKER = "\\"

_NAME_PATTERN = re.compile(
    r"[A-Za-z!\"#$%&()/,;?'{}|~_][A-Za-z0-9!\"#$%&()/,.;?'{}|~_]*"
)
_SENSE_PATTERN = re.compile(r"[<>=]{1,2}")
_EXPONENT_PREFIX = re.compile(r"(?:\d+\.?\d*|\.\d+)[eE]")

_POSITIVE_INFINITY = {"inf", "+inf", "infinity", "+infinity"}
_NEGATIVE_INFINITY = {"-inf", "-infinity"}


class LineReader:
    """Hands out comment-free, trimmed lines and counts them (1-based)."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self.line_number = 0

    def next_line(self, *, skip_blank: bool = False) -> str:
        while True:
            try:
                raw = self._stream.readline()
            except (OSError, UnicodeDecodeError) as exc:
                raise IoError(f"Failed to read input: {exc}", self.line_number) from exc
            if raw == "":
                raise IncompleteInputError(
                    "Unexpected end of input; missing 'end' marker.", self.line_number
                )
            self.line_number += 1
            line = strip_comment(raw)
            if line or not skip_blank:
                return line


def strip_comment(raw: str) -> str:
    comment_begin = raw.find(COMMENT_MARKER)
    if comment_begin != -1:
        raw = raw[:comment_begin]
    return raw.strip()


def parse_value(text: str, line_number: int) -> float:
    """Parse a number, accepting the ``inf``/``infinity`` spellings."""
    token = text.strip()
    lowered = token.lower()
    if lowered in _POSITIVE_INFINITY:
        return math.inf
    if lowered in _NEGATIVE_INFINITY:
        return -math.inf
    try:
        value = float(token)
    except ValueError:
        raise InvalidNumberError(f"{token!r} is not a valid number.", line_number) from None
    if math.isnan(value) or math.isinf(value):
        # float() also accepts "nan" and overflowing literals such as "1e999".
        raise InvalidNumberError(f"{token!r} is not a valid number.", line_number)
    return value


def parse_name(text: str, line_number: int) -> str:
    name = text.strip()
    if not _NAME_PATTERN.fullmatch(name):
        raise InvalidNameError(f"invalid name {name!r}.", line_number)
    return name


def has_relational_operator(line: str) -> bool:
    return _SENSE_PATTERN.search(line) is not None


def split_name_prefix(line: str, line_number: int) -> Tuple[Optional[str], str]:
    """Split ``name: rest`` into its parts when the colon precedes any operator."""
    colon_index = line.find(":")
    if colon_index == -1:
        return None, line
    sense_match = _SENSE_PATTERN.search(line)
    if sense_match is not None and sense_match.start() < colon_index:
        return None, line
    name = parse_name(line[:colon_index], line_number)
    return name, line[colon_index + 1 :].strip()


class Sign(Enum):
    PLUS = 1
    MINUS = -1
    UNDEFINED = 0


def _exponent_follows(expr: str, index: int) -> bool:
    rest = expr[index + 1 : index + 3]
    if rest[:1].isdigit():
        return True
    return len(rest) == 2 and rest[0] in "+-" and rest[1].isdigit()


def summand_split_index(expr: str) -> int:
    """Index where the coefficient of an addend ends, -1 if there is no variable.

    Digits and ``.`` belong to the coefficient, as does one exponent marker
    (with an optional sign) that follows a digit and precedes the exponent
    digits.
    """
    seen_digit = False
    in_exponent = False
    for index, char in enumerate(expr):
        if char.isdigit():
            seen_digit = True
        elif char == ".":
            continue
        elif char in "eE" and seen_digit and not in_exponent and _exponent_follows(expr, index):
            in_exponent = True
        elif char in "+-" and in_exponent and expr[index - 1] in "eE":
            continue
        else:
            return index
    return -1


def _split_addends(chunk: str) -> list[str]:
    # A bare number binds to the word after it: "2 y z" is ["2 y", "z"].
    addends: list[str] = []
    coefficient: Optional[str] = None
    for word in chunk.split():
        if coefficient is not None:
            addends.append(f"{coefficient} {word}")
            coefficient = None
        elif summand_split_index(word) == -1:
            coefficient = word
        else:
            addends.append(word)
    if coefficient is not None:
        addends.append(coefficient)
    return addends


def tokenize_expression(expr: str) -> list[str]:
    """Split ``expr`` into ``+``/``-`` operator tokens and addend tokens.

    A sign directly after the exponent marker of a numeric literal stays in
    its token, so ``2.5e-1 y`` is a single addend. Addends written next to
    each other without an operator come out as consecutive tokens.
    """
    tokens: list[str] = []
    current: list[str] = []
    for index, char in enumerate(expr):
        if char in "+-":
            pending = "".join(current).lstrip()
            if _EXPONENT_PREFIX.fullmatch(pending) and expr[index + 1 : index + 2].isdigit():
                current.append(char)
                continue
            tokens.extend(_split_addends("".join(current)))
            tokens.append(char)
            current = []
        else:
            current.append(char)
    tokens.extend(_split_addends("".join(current)))
    return tokens


def parse_addend(expr: str, line_number: int) -> Tuple[float, str]:
    split_index = summand_split_index(expr)
    if split_index == -1:
        raise InvalidAddendError(f"{expr!r} is not a valid addend.", line_number)
    coefficient = 1.0
    if split_index > 0:
        coefficient = parse_value(expr[:split_index], line_number)
    name = parse_name(expr[split_index:], line_number)
    return coefficient, name


def parse_linear_combination(
    expr: str,
    line_number: int,
    variables: MutableMapping[str, VariableBuilder],
) -> Dict[str, float]:
    """Parse ``3 x - 2 y + z`` into ``{name: coefficient}``.

    Repeated names are summed. Names seen for the first time are registered
    in ``variables`` with default bounds.
    """
    combination: Dict[str, float] = {}
    sign = Sign.PLUS
    for token in tokenize_expression(expr):
        if token == "+":
            sign = Sign.PLUS
        elif token == "-":
            sign = Sign.MINUS
        else:
            if sign is Sign.UNDEFINED:
                raise MissingSignError(f"missing sign before {token!r}.", line_number)
            coefficient, name = parse_addend(token, line_number)
            if name not in variables:
                LOGGER.debug("Registering variable %s.", name)
                variables[name] = VariableBuilder(name)
            value = sign.value * coefficient
            LOGGER.debug("Found %s %s", value, name)
            combination[name] = combination.get(name, 0.0) + value
            sign = Sign.UNDEFINED
    return combination


@dataclass(frozen=True)
class ExpressionOnly:
    """Line holding only (part of) a left-hand side."""

    lhs: str


@dataclass(frozen=True)
class SenseOnly:
    """Line holding the operator and right-hand side of an earlier left-hand side."""

    sense: ConstraintSense
    rhs: float


@dataclass(frozen=True)
class ExpressionAndSense:
    lhs: str
    sense: ConstraintSense
    rhs: float


ConstraintLine = Union[ExpressionOnly, SenseOnly, ExpressionAndSense]


def classify_constraint_line(line: str, line_number: int) -> ConstraintLine:
    match = _SENSE_PATTERN.search(line)
    if match is None:
        return ExpressionOnly(line.strip())
    operator = match.group()
    sense = ConstraintSense.from_operator(operator)
    if sense is None:
        raise MalformedConstraintError(
            f"unsupported relational operator {operator!r} in {line!r}.", line_number
        )
    LOGGER.debug("Found constraint sense: %s", sense.value)
    tokens = [token.strip() for token in line.split(operator) if token.strip()]
    if len(tokens) == 1:
        return SenseOnly(sense, parse_value(tokens[0], line_number))
    if len(tokens) == 2:
        return ExpressionAndSense(tokens[0], sense, parse_value(tokens[1], line_number))
    raise MalformedConstraintError(f"invalid constraint line {line!r}.", line_number)


__all__ = [
    "ConstraintLine",
    "ExpressionAndSense",
    "ExpressionOnly",
    "LineReader",
    "SenseOnly",
    "Sign",
    "classify_constraint_line",
    "has_relational_operator",
    "parse_addend",
    "parse_linear_combination",
    "parse_name",
    "parse_value",
    "split_name_prefix",
    "strip_comment",
    "summand_split_index",
    "tokenize_expression",
]

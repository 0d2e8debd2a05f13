from __future__ import annotations

import io
import math

import pytest

from lpformat.errors import (
    IncompleteInputError,
    InvalidAddendError,
    InvalidNameError,
    InvalidNumberError,
    MalformedConstraintError,
    MissingSignError,
)
from lpformat.lexer import (
    ExpressionAndSense,
    ExpressionOnly,
    LineReader,
    SenseOnly,
    classify_constraint_line,
    parse_linear_combination,
    parse_value,
    split_name_prefix,
    summand_split_index,
    tokenize_expression,
)
from lpformat.model import ConstraintSense, VariableBuilder


def test_line_reader_strips_comments_and_counts_lines() -> None:
    reader = LineReader(io.StringIO("  max \\ direction\n\n   \\ only a comment\nobj: x\n"))

    assert reader.next_line() == "max"
    assert reader.line_number == 1
    assert reader.next_line() == ""
    assert reader.next_line(skip_blank=True) == "obj: x"
    assert reader.line_number == 4


def test_line_reader_raises_at_end_of_input() -> None:
    reader = LineReader(io.StringIO("end\n"))
    reader.next_line()

    with pytest.raises(IncompleteInputError):
        reader.next_line()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("inf", math.inf),
        ("+Infinity", math.inf),
        ("INF", math.inf),
        ("-inf", -math.inf),
        ("-Infinity", -math.inf),
        (" 2.5e-1 ", 0.25),
        ("-7", -7.0),
    ],
)
def test_parse_value_handles_numbers_and_infinity(text: str, expected: float) -> None:
    assert parse_value(text, 1) == expected


@pytest.mark.parametrize("text", ["abc", "nan", "1e999", "", "1.2.3"])
def test_parse_value_rejects_non_numbers(text: str) -> None:
    with pytest.raises(InvalidNumberError) as excinfo:
        parse_value(text, 7)
    assert excinfo.value.line_number == 7


def test_tokenize_expression_keeps_exponent_signs() -> None:
    assert tokenize_expression("3 x - 2.5e-1 y + z") == ["3 x", "-", "2.5e-1 y", "+", "z"]
    assert tokenize_expression("-x+1e+2y") == ["-", "x", "+", "1e+2y"]


def test_summand_split_index() -> None:
    assert summand_split_index("3 x") == 1
    assert summand_split_index("x") == 0
    assert summand_split_index("2e-3x") == 4
    assert summand_split_index("2effort") == 1
    assert summand_split_index("42") == -1


def test_linear_combination_registers_new_variables() -> None:
    variables: dict[str, VariableBuilder] = {}

    combination = parse_linear_combination("3 x - 2.5e1 y + z", 1, variables)

    assert combination == {"x": 3.0, "y": -25.0, "z": 1.0}
    assert list(variables) == ["x", "y", "z"]
    assert variables["x"].lower_bound == 0.0
    assert variables["x"].upper_bound == math.inf


def test_linear_combination_sums_repeated_names() -> None:
    variables: dict[str, VariableBuilder] = {}

    assert parse_linear_combination("x + x", 1, variables) == {"x": 2.0}
    assert parse_linear_combination("3 x - 1 x", 1, variables) == {"x": 2.0}
    assert len(variables) == 1


def test_linear_combination_accepts_leading_minus_and_empty_text() -> None:
    variables: dict[str, VariableBuilder] = {}

    assert parse_linear_combination("- 2 a + .5 b", 1, variables) == {"a": -2.0, "b": 0.5}
    assert parse_linear_combination("   ", 1, variables) == {}


def test_linear_combination_requires_sign_between_addends() -> None:
    with pytest.raises(MissingSignError):
        parse_linear_combination("x + 2 y z", 3, {})


def test_linear_combination_rejects_addend_without_variable() -> None:
    with pytest.raises(InvalidAddendError):
        parse_linear_combination("x + 4", 3, {})


def test_linear_combination_rejects_invalid_names() -> None:
    with pytest.raises(InvalidNameError):
        parse_linear_combination("3 x@y", 3, {})


def test_split_name_prefix() -> None:
    assert split_name_prefix("c1: x + y <= 3", 1) == ("c1", "x + y <= 3")
    assert split_name_prefix("x + y <= 3", 1) == (None, "x + y <= 3")
    assert split_name_prefix("obj:", 1) == ("obj", "")
    with pytest.raises(InvalidNameError):
        split_name_prefix("1st: x", 1)


def test_classify_expression_only() -> None:
    assert classify_constraint_line("x + 2 y", 1) == ExpressionOnly("x + 2 y")


def test_classify_sense_only() -> None:
    assert classify_constraint_line(">= -4", 1) == SenseOnly(ConstraintSense.GE, -4.0)


def test_classify_expression_and_sense() -> None:
    assert classify_constraint_line("x + y <= 10", 1) == ExpressionAndSense(
        "x + y", ConstraintSense.LE, 10.0
    )
    assert classify_constraint_line("x = inf", 1) == ExpressionAndSense(
        "x", ConstraintSense.EQ, math.inf
    )


@pytest.mark.parametrize(
    "operator, sense",
    [("<", ConstraintSense.LE), (">", ConstraintSense.GE), ("=<", ConstraintSense.LE), ("=>", ConstraintSense.GE)],
)
def test_classify_accepts_operator_spellings(operator: str, sense: ConstraintSense) -> None:
    result = classify_constraint_line(f"x {operator} 1", 1)

    assert isinstance(result, ExpressionAndSense)
    assert result.sense is sense


@pytest.mark.parametrize("line", ["-1 <= x <= 1", "<=", "x == 1", "x <> 1"])
def test_classify_rejects_malformed_lines(line: str) -> None:
    with pytest.raises(MalformedConstraintError) as excinfo:
        classify_constraint_line(line, 12)
    assert excinfo.value.line_number == 12

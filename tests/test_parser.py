from __future__ import annotations

import io

import pytest

from lpformat.errors import (
    InvalidNameError,
    MalformedBoundError,
    MalformedConstraintError,
    MissingSignError,
    SectionOrderError,
)
from lpformat.model import ConstraintSense
from lpformat.parser import LpParser, Section, parse_lp


def _parse(text: str):
    return parse_lp(io.StringIO(text))


def test_parse_lp_returns_model() -> None:
    model = _parse("min\n c: x + 2 y\nst\n r: x + y >= 2\nend\n")

    assert [objective.name for objective in model.objectives] == ["c"]
    assert model.constraints[0].sense is ConstraintSense.GE
    assert list(model.variables) == ["x", "y"]


def test_constraints_section_keyword_is_optional() -> None:
    model = _parse("max\nobj: 2 x + 3 y\nc1: x + y <= 10\nbounds\nx <= 4\nend\n")

    assert len(model.objectives) == 1
    assert model.constraints[0].name == "c1"
    assert model.constraints[0].source_line == 3
    assert model.variables["x"].upper_bound == 4.0


def test_keyword_spellings_are_case_and_space_insensitive() -> None:
    model = _parse("MAXIMUM\n o: x\nSubject   To\n c: x <= 1\nBOUND\n x <= 1\nGen\n x\nEnd\n")

    assert model.variables["x"].upper_bound == 1.0


def test_objective_section_may_end_directly() -> None:
    model = _parse("minimise\n obj: x\nend\n")

    assert len(model.objectives) == 1
    assert model.constraints == ()


def test_zero_objective_when_no_objective_lines() -> None:
    model = _parse("max\nst\n c: x <= 1\nend\n")

    assert len(model.objectives) == 1
    assert dict(model.objectives[0].coefficients) == {}


def test_unnamed_constraints_are_numbered_by_position() -> None:
    model = _parse("max\n obj: x\nst\n x <= 1\n c: x >= 0\n x <= 5\nend\n")

    assert [constraint.name for constraint in model.constraints] == ["R1", "c", "R3"]


def test_unnamed_constraint_skips_names_in_use() -> None:
    model = _parse("max\n obj: x\nst\n R2: x <= 1\n x >= 0\n x <= 5\nend\n")

    assert [constraint.name for constraint in model.constraints] == ["R2", "R3", "R4"]


def test_errors_carry_section_and_line() -> None:
    with pytest.raises(MissingSignError) as excinfo:
        _parse("max\n obj: x\nst\n c: x y <= 1\nend\n")

    assert excinfo.value.section == "constraints"
    assert excinfo.value.line_number == 4
    assert str(excinfo.value).startswith("Line 4:")


def test_invalid_constraint_name() -> None:
    with pytest.raises(InvalidNameError):
        _parse("max\n obj: x\nst\n 9c: x <= 1\nend\n")


def test_new_name_before_previous_constraint_is_complete() -> None:
    with pytest.raises(MalformedConstraintError):
        _parse("max\n obj: x\nst\n c1: x\n c2: x <= 1\nend\n")


def test_sense_without_left_hand_side() -> None:
    with pytest.raises(MalformedConstraintError):
        _parse("max\n obj: x\nst\n <= 1\nend\n")


def test_bound_naming_variables_on_both_sides() -> None:
    with pytest.raises(MalformedBoundError) as excinfo:
        _parse("max\n obj: x + y\nst\n c: x + y <= 1\nbounds\n x <= y\nend\n")

    assert excinfo.value.section == "bounds"


def test_section_reader_outside_its_section() -> None:
    parser = LpParser()

    assert parser.section is Section.START
    with pytest.raises(SectionOrderError):
        parser._read_bounds()

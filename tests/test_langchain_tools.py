"""Tests for LangChain tools."""

from __future__ import annotations

from langchain_lp.tools import create_inspect_lp_tool


def test_create_inspect_lp_tool() -> None:
    tool = create_inspect_lp_tool()
    assert tool.name == "inspect_lp"


def test_inspect_lp_tool_accepts_valid_lp() -> None:
    tool = create_inspect_lp_tool()
    result = tool.invoke({"lp_code": "Minimize\n obj: x + y\nSubject To\n c1: x >= 0\nEnd"})

    assert result["valid"] is True
    assert result["objectives"][0]["coefficients"] == {"x": 1.0, "y": 1.0}
    assert result["constraints"][0]["name"] == "c1"


def test_inspect_lp_tool_detects_issues() -> None:
    tool = create_inspect_lp_tool()
    result = tool.invoke({"lp_code": "Subject To\n bad: x + y <= 1\nEnd"})

    assert result["valid"] is False
    assert result["error"]["kind"] == "UnrecognizedDirectionError"
    assert result["error"]["line_number"] == 1


def test_inspect_lp_tool_rejects_empty_code() -> None:
    tool = create_inspect_lp_tool()
    result = tool.invoke({"lp_code": ""})

    assert result["valid"] is False
    assert result["error"]["message"] == "lp_code is required"

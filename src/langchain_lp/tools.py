"""LangChain tool definitions for reading LP models."""

from typing import Callable, Optional
import logging

from langchain_core.tools import tool
from pydantic import BaseModel, Field

from lpformat.reader import LpFileReader


LOGGER = logging.getLogger("langchain_lp.tools")

LP_FORMAT_GUIDE = """
LP Format Guide (CPLEX .lp text):

- Objective function: Begin with "Minimize" or "Maximize" on its own line, then one or more
  named objectives. Example: "obj: 3 x1 + 4 x2".

- Constraints: Introduced by "Subject To". Each constraint has a name, colon, linear expression,
  relational operator (<=, >=, =), and numeric right-hand side.
  Example: "c1: 0.333 x1 + 2 x2 <= 10".

- Variable Bounds: Introduced by "Bounds". Examples: "0 <= x1 <= 5", "5 <= x3", "x2 free".
  This section is optional; omitted bounds default to non-negative.

- Variable Types: Use "Generals" for integer variables or "Binaries" for 0-1 variables.

- End: The model ends with the line "End".
"""


class InspectLPInput(BaseModel):
    """Input schema for LP inspection."""

    lp_code: str = Field(description="LP code in CPLEX .lp format")


def _require_lp_code(lp_code: str) -> Optional[dict]:
    """Return an error payload when no LP code was supplied."""
    if not lp_code or not lp_code.strip():
        return {
            "valid": False,
            "error": {
                "line_number": 0,
                "section": None,
                "kind": "MissingInput",
                "message": "lp_code is required",
            },
        }
    return None


def create_inspect_lp_tool(logger: Optional[logging.Logger] = None) -> Callable:
    """Create a LangChain tool that reads LP text into a structured model.

    Args:
        logger: Optional logger handed to the LP reader for parse diagnostics.

    Returns:
        A LangChain tool callable.
    """

    @tool(
        "inspect_lp",
        args_schema=InspectLPInput,
        description=(
            "Reads LP (.lp) text into objectives, constraints and variables without solving it. "
            "Reports the line and section of the first structural problem. "
            f"\n\n{LP_FORMAT_GUIDE}"
        ),
    )
    def inspect_lp_tool(lp_code: str) -> dict:
        """Read LP text and return the structured model.

        Args:
            lp_code: LP code in CPLEX .lp format

        Returns:
            Dictionary with 'valid' (bool) plus either the model or an 'error' entry.
        """
        error = _require_lp_code(lp_code)
        if error:
            return error

        LOGGER.info("inspect_lp tool called")
        reader = LpFileReader.from_text(lp_code, source="<lp_code>", logger=logger)
        if not reader.ok:
            LOGGER.warning("LP reading failed: %s", reader.error)
        return reader.to_payload()

    return inspect_lp_tool

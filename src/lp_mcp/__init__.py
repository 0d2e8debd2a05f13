"""lp-mcp package.

Provides an MCP server that lets LLM clients check LP (.lp) models by reading
them into a structured model: objectives, constraints and variables.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

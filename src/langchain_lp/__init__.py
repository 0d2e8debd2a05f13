"""LangChain tools for LP model inspection."""

from .tools import create_inspect_lp_tool

__all__ = [
	"create_inspect_lp_tool",
]

"""Options, model resolution, Claude argument building, stream parsing, loop state and plugin inspection for AI coding-agent loops."""

__version__ = "1.3.0"
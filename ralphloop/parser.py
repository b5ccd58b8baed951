"""Turns Claude stream-json lines into agent events and render lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .stream import ClaudeStreamParser, StreamUpdate


class Role(Enum):
    ASSISTANT = "assistant"
    USER = "user"
    SYSTEM = "system"


class ToolSource(Enum):
    AGENT = "agent"
    MCP = "mcp"


class ToolStatus(Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class TokenUpdate:
    input: Optional[int]
    cached: Optional[int]
    output: Optional[int]


@dataclass(frozen=True)
class ToolCallBegin:
    call_id: str
    tool: str
    detail: Optional[str] = None
    source: ToolSource = ToolSource.AGENT


@dataclass(frozen=True)
class ToolCallEnd:
    call_id: str
    tool: str
    status: ToolStatus
    duration_ms: Optional[int] = None
    exit_code: Optional[int] = None


@dataclass(frozen=True)
class TextDelta:
    text: str
    role: Role


AgentEvent = Union[TokenUpdate, ToolCallBegin, ToolCallEnd, TextDelta]


class RenderKind(Enum):
    ASSISTANT = "assistant"
    STATUS = "status"
    TOOL_CALL = "tool_call"
    TOOL_OUTPUT = "tool_output"


@dataclass(frozen=True)
class RenderLine:
    """One line of display output with its kind."""

    kind: RenderKind
    text: str

    @classmethod
    def assistant(cls, text: str) -> "RenderLine":
        return cls(RenderKind.ASSISTANT, text)

    @classmethod
    def status(cls, text: str) -> "RenderLine":
        return cls(RenderKind.STATUS, text)

    @classmethod
    def tool_call(cls, text: str) -> "RenderLine":
        return cls(RenderKind.TOOL_CALL, text)

    @classmethod
    def tool_output(cls, text: str) -> "RenderLine":
        return cls(RenderKind.TOOL_OUTPUT, text)


@dataclass
class ParseResult:
    events: list = field(default_factory=list)
    lines: list[RenderLine] = field(default_factory=list)
    output_buffer_text: Optional[str] = None
    latest_response: Optional[str] = None


def _is_assistant(role: Optional[str]) -> bool:
    if role is None:
        return True
    return len(role) == 9 and role.isascii() and role.lower() == "assistant"


class ClaudeEventParser:
    """Converts Claude stream-json into agent events and render lines."""

    def __init__(self, replay_user_messages: bool = False) -> None:
        self._stream = ClaudeStreamParser()
        self._replay_user_messages = replay_user_messages
        self._pending_tools: dict[str, str] = {}

    def parse_line(self, line: str) -> ParseResult:
        """Parse one line; raises json.JSONDecodeError on invalid JSON."""
        return self._convert(self._stream.process_line(line))

    def flush(self) -> ParseResult:
        """Emit the unterminated tail line and the assembled response."""
        pending = self._stream.flush_pending()
        assembled = self._stream.assembled_text().strip()
        lines = [RenderLine.assistant(pending)] if pending is not None else []
        return ParseResult(lines=lines, latest_response=assembled or None)

    def _convert(self, update: StreamUpdate) -> ParseResult:
        result = ParseResult()
        events = result.events
        lines = result.lines

        if update.usage is not None:
            events.append(
                TokenUpdate(
                    input=update.usage.input_tokens,
                    cached=update.usage.cache_read_input_tokens,
                    output=update.usage.output_tokens,
                )
            )

        if update.tool_name is not None:
            call_id = update.tool_id
            if call_id is None:
                call_id = f"claude_tool_{len(self._pending_tools)}"
            self._pending_tools[call_id] = update.tool_name
            events.append(
                ToolCallBegin(call_id=call_id, tool=update.tool_name, source=ToolSource.AGENT)
            )
            lines.append(RenderLine.tool_call(f"[tool:{update.tool_name}]"))
        elif update.tool_id is not None:
            tool_name = self._pending_tools.pop(update.tool_id, None)
            if tool_name is not None:
                events.append(
                    ToolCallEnd(
                        call_id=update.tool_id,
                        tool=tool_name,
                        status=ToolStatus.COMPLETED,
                    )
                )
                lines.append(RenderLine.tool_output(f"[tool:{tool_name}:completed]"))

        if _is_assistant(update.role):
            if update.text_delta is not None:
                events.append(TextDelta(text=update.text_delta, role=Role.ASSISTANT))
                result.output_buffer_text = update.text_delta
            if update.full_text is not None and update.full_text.strip():
                result.latest_response = update.full_text
            lines.extend(RenderLine.assistant(text) for text in update.emitted_lines)
        elif self._replay_user_messages:
            role = update.role or "system"
            lines.extend(RenderLine.status(f"[{role}] {text}") for text in update.emitted_lines)

        return result
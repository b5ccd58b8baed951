"""Line parser for Claude stream-json output: text assembly and role filtering."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


@dataclass
class StreamUsage:
    input_tokens: int
    output_tokens: int
    cache_read_input_tokens: Optional[int] = None


@dataclass
class StreamUpdate:
    emitted_lines: list[str] = field(default_factory=list)
    text_delta: Optional[str] = None
    full_text: Optional[str] = None
    tool_name: Optional[str] = None
    tool_id: Optional[str] = None
    role: Optional[str] = None
    usage: Optional[StreamUsage] = None


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, dict) else None


def _has(value: Any, key: str) -> bool:
    return isinstance(value, dict) and key in value


def _str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        if _I64_MIN <= value <= _I64_MAX:
            return value
    return None


def _eq_ignore_ascii_case(a: str, b: str) -> bool:
    if len(a) != len(b):
        return False
    return all(
        x == y or (x.isascii() and y.isascii() and x.lower() == y.lower())
        for x, y in zip(a, b)
    )


class ClaudeStreamParser:
    """Turns stream-json lines into updates, assembling assistant text."""

    def __init__(self) -> None:
        self._assembled = ""
        self._pending_line = ""

    def process_line(self, line: str) -> StreamUpdate:
        """Parse one JSON line; raises json.JSONDecodeError on bad input."""
        return self._process_value(json.loads(line))

    def assembled_text(self) -> str:
        return self._assembled

    def flush_pending(self) -> Optional[str]:
        """Return and clear the unterminated tail line, if it has content."""
        pending, self._pending_line = self._pending_line, ""
        return pending if pending.strip() else None

    def _process_value(self, value: Any) -> StreamUpdate:
        update = StreamUpdate()
        role = _extract_role(value)
        is_assistant = role is None or _eq_ignore_ascii_case(role, "assistant")
        update.role = role
        update.usage = _extract_usage(value)
        update.tool_name = _find_tool_name(value)
        update.tool_id = _find_tool_id(value)

        if is_assistant:
            delta = _extract_text_delta(value)
            if delta is not None:
                update.emitted_lines = self._append_text(delta)
                update.text_delta = delta
                update.full_text = self._assembled
                return update

            full_text = _extract_full_text(value)
            if full_text is not None:
                update.text_delta, update.emitted_lines = self._apply_full_text(full_text)
                update.full_text = full_text
            return update

        text = _extract_full_text(value)
        if text is not None:
            update.emitted_lines = [line for line in text.split("\n") if line]
        return update

    def _append_text(self, text: str) -> list[str]:
        if not text:
            return []
        self._assembled += text
        *complete, self._pending_line = (self._pending_line + text).split("\n")
        return [line for line in complete if line]

    def _apply_full_text(self, full_text: str) -> tuple[Optional[str], list[str]]:
        if full_text.startswith(self._assembled):
            delta = full_text[len(self._assembled):]
            lines = self._append_text(delta)
            return (delta or None), lines

        self._assembled = full_text
        *complete, self._pending_line = full_text.split("\n")
        return None, [line for line in complete if line]


def _extract_text_delta(value: Any) -> Optional[str]:
    if _has(value, "delta"):
        text = _str(_get(value["delta"], "text"))
        if text is not None:
            return text
    if _get(value, "type") == "text_delta":
        return _str(_get(value, "text"))
    return None


def _extract_full_text(value: Any) -> Optional[str]:
    completion = _str(_get(value, "completion"))
    if completion is not None:
        return completion
    if _has(value, "message"):
        text = _collect_text_blocks(_get(value["message"], "content"), _has(value["message"], "content"))
        if text is not None:
            return text
    return _collect_text_blocks(_get(value, "content"), _has(value, "content"))


def _extract_usage(value: Any) -> Optional[StreamUsage]:
    if _has(value, "usage"):
        usage = value["usage"]
    elif _has(value, "message") and _has(value["message"], "usage"):
        usage = value["message"]["usage"]
    else:
        return None

    input_tokens = _int(_get(usage, "input_tokens"))
    output_tokens = _int(_get(usage, "output_tokens"))
    if input_tokens is None or output_tokens is None:
        return None
    return StreamUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_read_input_tokens=_int(_get(usage, "cache_read_input_tokens")),
    )


def _extract_role(value: Any) -> Optional[str]:
    role = _str(_get(value, "role"))
    if role is not None:
        return role
    return _str(_get(_get(value, "message"), "role"))


def _collect_text_blocks(value: Any, present: bool) -> Optional[str]:
    if not present:
        return None
    if isinstance(value, list):
        parts = [text for text in (_str(_get(item, "text")) for item in value) if text is not None]
        return "".join(parts) if parts else None
    if isinstance(value, dict) and value.get("type") == "text":
        return _str(value.get("text"))
    return None


def _find_tool_name(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        if value.get("type") == "tool_use":
            name = _str(value.get("name")) or _str(value.get("tool_name"))
            if name is not None:
                return name
        children = (child for _, child in sorted(value.items()))
    elif isinstance(value, list):
        children = iter(value)
    else:
        return None
    for child in children:
        found = _find_tool_name(child)
        if found is not None:
            return found
    return None


def _find_tool_id(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        if value.get("type") in ("tool_use", "tool_result"):
            candidate = value["id"] if "id" in value else value.get("tool_use_id")
            found = _str(candidate)
            if found is not None:
                return found
        children = (child for _, child in sorted(value.items()))
    elif isinstance(value, list):
        children = iter(value)
    else:
        return None
    for child in children:
        found = _find_tool_id(child)
        if found is not None:
            return found
    return None
"""State file and output markers of the Claude ralph-plugin loop."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Union

RALPH_LOOP_STATE_FILE = "ralph-loop.local.md"

_U32_MAX = 2**32 - 1

_ANSI_RE = re.compile(
    r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b\[[0-9;?]*[ -/]*[@-~]"
    r"|\x1b[@-Z\\-_]"
)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return _ANSI_RE.sub("", text)


class OutcomeKind(Enum):
    PROMISE_DETECTED = "promise_detected"
    MAX_ITERATIONS = "max_iterations"
    WARNING = "warning"


@dataclass(frozen=True)
class ClaudeLoopOutcome:
    """How a plugin loop ended: the promise text, the max count, or a warning."""

    kind: OutcomeKind
    value: Union[str, int]


@dataclass(frozen=True)
class ClaudeLoopEvent:
    """Either an iteration advance or a loop outcome."""

    iteration: Optional[int] = None
    outcome: Optional[ClaudeLoopOutcome] = None


@dataclass
class ClaudeLoopState:
    active: bool
    iteration: int
    max_iterations: int
    completion_promise: Optional[str] = None
    started_at: Optional[str] = None
    prompt: Optional[str] = None


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


def _parse_u32(text: str) -> Optional[int]:
    if not re.fullmatch(r"\+?[0-9]+", text):
        return None
    value = int(text)
    return value if value <= _U32_MAX else None


def ralph_state_path(project_dir) -> Path:
    return Path(project_dir) / ".claude" / RALPH_LOOP_STATE_FILE


def write_ralph_state_file(
    project_dir,
    prompt: str,
    iteration: int,
    max_iterations: int,
    completion_promise: Optional[str] = None,
) -> Path:
    """Write the loop state file with frontmatter and prompt body."""
    state_path = ralph_state_path(project_dir)
    state_path.parent.mkdir(parents=True, exist_ok=True)

    promise = completion_promise.strip() if completion_promise is not None else ""
    promise_value = '"' + promise.replace('"', '\\"') + '"' if promise else "null"
    started_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    contents = (
        "---\n"
        "active: true\n"
        f"iteration: {iteration}\n"
        f"max_iterations: {max_iterations}\n"
        f"completion_promise: {promise_value}\n"
        f'started_at: "{started_at}"\n'
        "---\n\n"
        f"{prompt}\n"
    )
    with open(state_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(contents)
    return state_path


def clear_ralph_state_file(project_dir) -> Optional[int]:
    """Delete the state file; return the iteration it recorded, if readable."""
    state_path = ralph_state_path(project_dir)
    if not state_path.exists():
        return None
    try:
        state = read_ralph_state_file(project_dir)
    except (OSError, UnicodeDecodeError):
        state = None
    state_path.unlink()
    return state.iteration if state is not None else None


def detect_outcome(output: str) -> Optional[ClaudeLoopOutcome]:
    """Find the last loop outcome in the output."""
    for line in reversed(_lines(strip_ansi(output))):
        event = parse_event(line)
        if event is not None and event.outcome is not None:
            return event.outcome
    return None


def parse_event(line: str) -> Optional[ClaudeLoopEvent]:
    """Recognise an iteration marker or a ``Ralph loop:`` outcome line."""
    trimmed = strip_ansi(line).strip()
    if not trimmed:
        return None

    iteration = _extract_iteration_marker(trimmed)
    if iteration is not None:
        return ClaudeLoopEvent(iteration=iteration)

    if "Ralph loop:" not in trimmed:
        return None

    promise = _extract_promise(trimmed)
    if promise is not None:
        return ClaudeLoopEvent(outcome=ClaudeLoopOutcome(OutcomeKind.PROMISE_DETECTED, promise))
    maximum = _extract_max_iterations(trimmed)
    if maximum is not None:
        return ClaudeLoopEvent(outcome=ClaudeLoopOutcome(OutcomeKind.MAX_ITERATIONS, maximum))
    return ClaudeLoopEvent(outcome=ClaudeLoopOutcome(OutcomeKind.WARNING, trimmed))


def read_ralph_state_file(project_dir) -> Optional[ClaudeLoopState]:
    state_path = ralph_state_path(project_dir)
    if not state_path.exists():
        return None
    with open(state_path, encoding="utf-8", newline="") as handle:
        return parse_ralph_state(handle.read())


def _extract_promise(line: str) -> Optional[str]:
    start_tag, end_tag = "<promise>", "</promise>"
    start = line.find(start_tag)
    if start < 0:
        return None
    start += len(start_tag)
    end = line.find(end_tag, start)
    if end < 0:
        return None
    promise = line[start:end].strip()
    return promise or None


def _extract_max_iterations(line: str) -> Optional[int]:
    open_pos = line.find("(")
    if open_pos < 0:
        return None
    close = line.find(")", open_pos + 1)
    if close < 0:
        return None
    return _parse_u32(line[open_pos + 1:close].strip())


def _extract_iteration_marker(line: str) -> Optional[int]:
    needle = "Ralph iteration"
    index = line.find(needle)
    if index < 0:
        return None
    tail = line[index + len(needle):].lstrip()
    match = re.match(r"[0-9]+", tail)
    if match is None:
        return None
    return _parse_u32(match.group())


def parse_ralph_state(contents: str) -> Optional[ClaudeLoopState]:
    """Parse the state file text; None if it has no frontmatter."""
    parsed = _parse_frontmatter(contents)
    if parsed is None:
        return None
    frontmatter, body = parsed

    def number(key: str) -> int:
        raw = frontmatter.get(key)
        value = _parse_u32(raw) if raw is not None else None
        return value if value is not None else 0

    active_raw = frontmatter.get("active")
    active = _parse_bool_value(active_raw) if active_raw is not None else None
    promise_raw = frontmatter.get("completion_promise")
    started_raw = frontmatter.get("started_at")
    prompt = body.strip() if body is not None else ""

    return ClaudeLoopState(
        active=True if active is None else active,
        iteration=number("iteration"),
        max_iterations=number("max_iterations"),
        completion_promise=_parse_yaml_value(promise_raw) if promise_raw is not None else None,
        started_at=_parse_yaml_value(started_raw) if started_raw is not None else None,
        prompt=prompt or None,
    )


def _parse_frontmatter(contents: str) -> Optional[tuple[dict[str, str], Optional[str]]]:
    frontmatter_lines: list[str] = []
    body_lines: list[str] = []
    in_frontmatter = False
    frontmatter_done = False

    for line in _lines(contents):
        if line.strip() == "---":
            if not in_frontmatter:
                in_frontmatter = True
                continue
            if not frontmatter_done:
                frontmatter_done = True
                continue
        if in_frontmatter and not frontmatter_done:
            frontmatter_lines.append(line)
        else:
            body_lines.append(line)

    if not in_frontmatter:
        return None

    mapping: dict[str, str] = {}
    for line in frontmatter_lines:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        key, sep, value = trimmed.partition(":")
        if sep:
            mapping[key.strip()] = value.strip()

    body = "\n".join(body_lines) if body_lines else None
    return mapping, body


def _parse_bool_value(value: str) -> Optional[bool]:
    return {"true": True, "false": False}.get(value.strip().lower())


def _parse_yaml_value(value: str) -> Optional[str]:
    trimmed = value.strip()
    if not trimmed or trimmed.lower() == "null":
        return None
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        trimmed = trimmed[1:-1]
    return trimmed.replace('\\"', '"')
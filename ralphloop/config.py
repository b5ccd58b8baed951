"""Model resolution and loading of Codex config defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .options import AgentType


@dataclass
class ResolvedModel:
    """Model selection for an iteration."""

    execution_model: str
    display_model: str
    reasoning_effort: Optional[str] = None


@dataclass
class CodexConfigDefaults:
    """Defaults read from the Codex config.toml."""

    model: Optional[str] = None
    reasoning_effort: Optional[str] = None


def _uses_codex_config(agent_type: AgentType) -> bool:
    return agent_type is AgentType.CODEX


def resolve_model(
    agent_type: AgentType,
    requested_model: Optional[str],
    codex_config: CodexConfigDefaults,
) -> ResolvedModel:
    """Pick the model: explicit request, agent default, Codex config, then implicit label."""
    requested = requested_model.strip() if requested_model is not None else ""

    if requested:
        effort = codex_config.reasoning_effort if _uses_codex_config(agent_type) else None
        return ResolvedModel(requested, requested, effort)

    default = agent_type.default_model
    if default is not None:
        return ResolvedModel(default, default, None)

    if _uses_codex_config(agent_type) and codex_config.model is not None:
        return ResolvedModel("", codex_config.model, codex_config.reasoning_effort)

    return ResolvedModel("", agent_type.implicit_model_label, None)


def _find_codex_home() -> Optional[Path]:
    codex_home = os.environ.get("CODEX_HOME")
    if codex_home is not None:
        path = Path(codex_home)
        if codex_home and path.is_dir():
            try:
                return path.resolve(strict=True)
            except OSError:
                return path
        return None

    home = os.environ.get("USERPROFILE") or os.environ.get("HOME")
    if home is None:
        return None
    return Path(home) / ".codex"


def load_codex_config_defaults() -> CodexConfigDefaults:
    """Read model defaults from $CODEX_HOME/config.toml or ~/.codex/config.toml."""
    codex_home = _find_codex_home()
    if codex_home is None:
        return CodexConfigDefaults()

    try:
        contents = (codex_home / "config.toml").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return CodexConfigDefaults()

    return CodexConfigDefaults(
        model=parse_toml_string(contents, "model"),
        reasoning_effort=parse_toml_string(contents, "model_reasoning_effort"),
    )


def parse_toml_string(contents: str, key: str) -> Optional[str]:
    """Return a top-level ``key = "value"`` from TOML text, ignoring tables."""
    in_root = True

    for raw_line in contents.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("[") and line.endswith("]"):
            in_root = False
            continue
        if not in_root:
            continue

        candidate_key, sep, candidate_value = line.partition("=")
        if not sep or candidate_key.strip() != key:
            continue

        value = candidate_value.split("#", 1)[0].strip()
        if not value:
            return None
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            return value[1:-1]
        return value

    return None
"""Validation of resume, fork and one-session options before a run."""

from __future__ import annotations

from .options import AgentOptions, AgentType


class OptionsValidationError(ValueError):
    """Raised when CLI options conflict with the agent or iteration."""


def _wants_resume(options: AgentOptions) -> bool:
    return options.codex.resume_last or options.codex.resume_session is not None


def validate_codex_resume(
    agent_type: AgentType,
    options: AgentOptions,
    iteration: int,
    one_session: bool,
) -> None:
    """Allow Codex resume only on iteration 1; one-session needs Codex there."""
    if _wants_resume(options) and iteration != 1:
        raise OptionsValidationError(
            "--codex-resume* can only be used when starting a fresh loop "
            f"(iteration 1) for agent {agent_type.as_str}"
        )

    if iteration == 1 and one_session and agent_type is not AgentType.CODEX:
        raise OptionsValidationError(
            "--one-session requires --agent codex on the first iteration"
        )


def validate_non_codex_first_iteration(
    agent_type: AgentType,
    options: AgentOptions,
    iteration: int,
    one_session: bool,
) -> None:
    """Reject Codex-only options for other agents on iteration 1."""
    if agent_type is AgentType.CODEX:
        return

    if iteration == 1 and (one_session or _wants_resume(options)):
        raise OptionsValidationError(
            "--codex-resume* and --one-session require --agent codex on the first iteration"
        )
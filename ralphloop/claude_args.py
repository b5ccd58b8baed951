"""Command-line arguments for the Claude Code CLI."""

from __future__ import annotations

import math
import sys
from decimal import Decimal

from .options import AgentOptions, ClaudeLoopMode, ClaudeOutputFormat


def _format_budget(value: float) -> str:
    """Render a float the way the CLI expects: no trailing ``.0``, no exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def build_claude_args(prompt: str, model: str, options: AgentOptions) -> list[str]:
    """Build the argument list for one Claude invocation; the prompt comes last."""
    claude = options.claude
    loop_mode = claude.loop_mode or ClaudeLoopMode.PRINT
    is_print_mode = claude.print_mode or loop_mode is ClaudeLoopMode.PRINT

    args: list[str] = []

    def flag(name: str, enabled: bool) -> None:
        if enabled:
            args.append(name)

    def pair(name: str, value: object) -> None:
        if value is not None:
            args.extend((name, str(value)))

    flag("--print", is_print_mode)
    pair("--system-prompt", claude.system_prompt)
    pair("--system-prompt-file", claude.system_prompt_file)
    pair("--append-system-prompt", claude.append_system_prompt)
    pair("--append-system-prompt-file", claude.append_system_prompt_file)
    flag("--continue", claude.continue_session)
    pair("--resume", claude.resume)
    pair("--session-id", claude.session_id)
    flag("--fork-session", claude.fork_session)
    pair("--from-pr", claude.from_pr)
    pair("--agent", claude.agent)
    pair("--tools", claude.tools)
    pair("--settings", claude.settings_file)
    pair("--setting-sources", claude.setting_sources)
    if claude.max_budget_usd is not None:
        args.extend(("--max-budget-usd", _format_budget(claude.max_budget_usd)))
    pair("--disallowedTools", claude.disallowed_tools)
    flag("--disable-slash-commands", claude.disable_slash_commands)
    flag("--mcp-debug", claude.mcp_debug)
    flag("--debug", claude.debug)
    flag("--worktree", claude.worktree)
    pair("--agents", claude.agents)
    flag("--init", claude.init)
    flag("--init-only", claude.init_only)
    flag("--maintenance", claude.maintenance)

    output_format = claude.output_format
    # Print mode only supports text output, so the two never go together.
    if (
        output_format is not None
        and not is_print_mode
        and output_format is not ClaudeOutputFormat.TEXT
    ):
        args.append(f"--output-format={output_format.cli_value}")

    flag("--include-partial-messages", claude.include_partial_messages)
    flag("--replay-user-messages", claude.replay_user_messages)
    for directory in claude.plugin_dirs:
        args.extend(("--plugin-dir", str(directory)))
    for directory in claude.add_dirs:
        args.extend(("--add-dir", str(directory)))
    for config in claude.mcp_configs:
        args.extend(("--mcp-config", str(config)))
    flag("--dangerously-skip-permissions", claude.skip_permissions)
    if model.strip():
        args.extend(("--model", model))

    args.extend(options.common.extra_flags)
    args.append(prompt)
    return args


def claude_command() -> str:
    """Name of the Claude executable on this platform."""
    return "claude.exe" if sys.platform.startswith("win") else "claude"
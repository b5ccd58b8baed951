import sys
from pathlib import Path

from ralphloop.claude_args import build_claude_args, claude_command
from ralphloop.options import (
    AgentOptions,
    ClaudeLoopMode,
    ClaudeOptions,
    ClaudeOutputFormat,
    CommonOptions,
)


def _plugin_mode(**kwargs):
    return AgentOptions(
        claude=ClaudeOptions(loop_mode=ClaudeLoopMode.RALPH_PLUGIN, **kwargs)
    )


def test_builds_basic_args():
    options = AgentOptions(
        claude=ClaudeOptions(
            output_format=ClaudeOutputFormat.STREAM_JSON,
            print_mode=False,
            loop_mode=ClaudeLoopMode.RALPH_PLUGIN,
        )
    )
    args = build_claude_args("fix bug", "claude-sonnet-4", options)
    assert "--output-format=stream-json" in args
    assert "--model" in args
    assert "claude-sonnet-4" in args
    assert args[-1] == "fix bug"


def test_builds_print_mode_args():
    options = AgentOptions(claude=ClaudeOptions(print_mode=True))
    args = build_claude_args("test", "model", options)
    assert "--print" in args


def test_default_loop_mode_is_print():
    args = build_claude_args("p", "", AgentOptions())
    assert args == ["--print", "p"]


def test_print_mode_suppresses_output_format():
    options = AgentOptions(
        claude=ClaudeOptions(output_format=ClaudeOutputFormat.STREAM_JSON)
    )
    args = build_claude_args("p", "", options)
    assert not any(a.startswith("--output-format") for a in args)


def test_text_format_is_not_passed():
    args = build_claude_args("p", "", _plugin_mode(output_format=ClaudeOutputFormat.TEXT))
    assert args == ["p"]


def test_blank_model_is_omitted():
    args = build_claude_args("p", "   ", _plugin_mode())
    assert "--model" not in args


def test_budget_formatting():
    args = build_claude_args("p", "", _plugin_mode(max_budget_usd=5.0))
    index = args.index("--max-budget-usd")
    assert args[index + 1] == "5"
    args = build_claude_args("p", "", _plugin_mode(max_budget_usd=2.5))
    assert args[args.index("--max-budget-usd") + 1] == "2.5"


def test_repeated_dirs_and_order():
    options = AgentOptions(
        common=CommonOptions(extra_flags=["--verbose"]),
        claude=ClaudeOptions(
            loop_mode=ClaudeLoopMode.RALPH_PLUGIN,
            resume="abc",
            plugin_dirs=[Path("a"), Path("b")],
            add_dirs=[Path("c")],
            skip_permissions=True,
        ),
    )
    args = build_claude_args("go", "m", options)
    assert args == [
        "--resume",
        "abc",
        "--plugin-dir",
        "a",
        "--plugin-dir",
        "b",
        "--add-dir",
        "c",
        "--dangerously-skip-permissions",
        "--model",
        "m",
        "--verbose",
        "go",
    ]


def test_disallowed_tools_flag_name():
    args = build_claude_args("p", "", _plugin_mode(disallowed_tools="Bash"))
    assert args[:2] == ["--disallowedTools", "Bash"]


def test_claude_command_per_platform(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    assert claude_command() == "claude.exe"
    monkeypatch.setattr(sys, "platform", "linux")
    assert claude_command() == "claude"
from pathlib import Path

import pytest

from ralphloop.options import (
    AgentOptions,
    AgentType,
    ClaudeLoopMode,
    ClaudeOutputFormat,
    CliOptionsBuilder,
    SandboxMode,
)


def test_builder_produces_defaults():
    options = CliOptionsBuilder().build()
    assert options.common.allow_all_permissions is False
    assert options.codex.resume_last is False
    assert options.claude.output_format is None


def test_builder_maps_all_fields():
    options = CliOptionsBuilder(
        allow_all_permissions=True,
        sandbox_mode=SandboxMode.DANGER_FULL_ACCESS,
        codex_resume_last=True,
        claude_print_mode=True,
        claude_loop_mode=ClaudeLoopMode.RALPH_PLUGIN,
    ).build()

    assert options.common.allow_all_permissions is True
    assert options.common.sandbox_mode == SandboxMode.DANGER_FULL_ACCESS
    assert options.codex.resume_last is True
    assert options.claude.print_mode is True
    assert options.claude.loop_mode == ClaudeLoopMode.RALPH_PLUGIN


def test_builder_maps_renamed_fields():
    options = CliOptionsBuilder(
        claude_continue=True,
        claude_skip_permissions=True,
        claude_settings_file=Path("settings.json"),
        opencode_continue=True,
        opencode_session="sess-1",
        opencode_fork=True,
        opencode_files=[Path("a.txt")],
        opencode_port=4096,
        codex_images=[Path("img.png")],
        claude_output_format=ClaudeOutputFormat.STREAM_JSON,
    ).build()

    assert options.claude.continue_session is True
    assert options.claude.skip_permissions is True
    assert options.claude.settings_file == Path("settings.json")
    assert options.claude.output_format == ClaudeOutputFormat.STREAM_JSON
    assert options.opencode.continue_session is True
    assert options.opencode.session_id == "sess-1"
    assert options.opencode.fork_session is True
    assert options.opencode.files == [Path("a.txt")]
    assert options.opencode.port == 4096
    assert options.codex.images == [Path("img.png")]


def test_default_agent_options_match_builder_defaults():
    assert CliOptionsBuilder().build() == AgentOptions()


def test_built_lists_are_independent_of_builder():
    builder = CliOptionsBuilder(extra_flags=["--x"])
    options = builder.build()
    builder.extra_flags.append("--y")
    assert options.common.extra_flags == ["--x"]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("codex", AgentType.CODEX),
        ("claude", AgentType.CLAUDE_CODE),
        ("Claude-Code", AgentType.CLAUDE_CODE),
        ("opencode", AgentType.OPENCODE),
    ],
)
def test_agent_type_parse(text, expected):
    assert AgentType.parse(text) is expected


def test_agent_type_parse_rejects_unknown():
    with pytest.raises(ValueError):
        AgentType.parse("gemini")


def test_agent_type_labels():
    assert AgentType.parse("codex").as_str == "codex"
    claude = AgentType.parse("claude")
    assert claude.implicit_model_label == "default"
    assert claude.default_model is None


def test_output_format_cli_value():
    options = CliOptionsBuilder(
        claude_output_format=ClaudeOutputFormat.STREAM_JSON
    ).build()
    assert options.claude.output_format.cli_value == "stream-json"
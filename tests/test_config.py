from ralphloop.config import (
    CodexConfigDefaults,
    load_codex_config_defaults,
    parse_toml_string,
    resolve_model,
)
from ralphloop.options import AgentType


def test_resolve_model_uses_explicit_over_default():
    resolved = resolve_model(AgentType.CLAUDE_CODE, "claude-opus-4", CodexConfigDefaults())
    assert resolved.execution_model == "claude-opus-4"
    assert resolved.display_model == "claude-opus-4"


def test_resolve_model_falls_back_to_agent_default():
    resolved = resolve_model(AgentType.CLAUDE_CODE, None, CodexConfigDefaults())
    assert resolved.execution_model == ""
    assert resolved.display_model == "default"


def test_resolve_model_uses_codex_config_for_codex():
    config = CodexConfigDefaults(model="gpt-5.4", reasoning_effort="xhigh")
    resolved = resolve_model(AgentType.CODEX, None, config)
    assert resolved.execution_model == ""
    assert resolved.display_model == "gpt-5.4"
    assert resolved.reasoning_effort == "xhigh"


def test_resolve_model_ignores_codex_config_for_claude():
    config = CodexConfigDefaults(model="gpt-5.4", reasoning_effort="xhigh")
    resolved = resolve_model(AgentType.CLAUDE_CODE, None, config)
    assert resolved.display_model == "default"
    assert resolved.reasoning_effort is None


def test_resolve_model_explicit_codex_keeps_effort():
    config = CodexConfigDefaults(model="gpt-5.4", reasoning_effort="high")
    resolved = resolve_model(AgentType.CODEX, "  o3  ", config)
    assert resolved.execution_model == "o3"
    assert resolved.reasoning_effort == "high"


def test_resolve_model_blank_request_is_ignored():
    resolved = resolve_model(AgentType.OPENCODE, "   ", CodexConfigDefaults())
    assert resolved.display_model == "default"


def test_parse_toml_string_ignores_nested_sections():
    contents = """
model = "gpt-5.4"
model_reasoning_effort = "xhigh"

[model_providers.custom]
model = "nested-value"
"""
    assert parse_toml_string(contents, "model") == "gpt-5.4"
    assert parse_toml_string(contents, "model_reasoning_effort") == "xhigh"


def test_parse_toml_string_strips_comments_and_unquoted():
    contents = "# comment\nmodel = o4-mini # trailing\n"
    assert parse_toml_string(contents, "model") == "o4-mini"


def test_parse_toml_string_missing_and_empty():
    assert parse_toml_string("other = 1\n", "model") is None
    assert parse_toml_string("model =   \n", "model") is None


def test_load_codex_config_defaults_from_codex_home(tmp_path, monkeypatch):
    (tmp_path / "config.toml").write_text(
        'model = "gpt-5.4"\nmodel_reasoning_effort = "low"\n', encoding="utf-8"
    )
    monkeypatch.setenv("CODEX_HOME", str(tmp_path))
    defaults = load_codex_config_defaults()
    assert defaults == CodexConfigDefaults(model="gpt-5.4", reasoning_effort="low")


def test_load_codex_config_defaults_missing_home(tmp_path, monkeypatch):
    monkeypatch.setenv("CODEX_HOME", str(tmp_path / "absent"))
    assert load_codex_config_defaults() == CodexConfigDefaults()


def test_load_codex_config_defaults_from_home(tmp_path, monkeypatch):
    monkeypatch.delenv("CODEX_HOME", raising=False)
    monkeypatch.delenv("USERPROFILE", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    codex_dir = tmp_path / ".codex"
    codex_dir.mkdir()
    (codex_dir / "config.toml").write_text('model = "m1"\n', encoding="utf-8")
    defaults = load_codex_config_defaults()
    assert defaults.model == "m1"
    assert defaults.reasoning_effort is None
"""Agent option types and the builder that assembles them from CLI values."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class AgentType(Enum):
    """The agent CLIs the loop can drive."""

    CODEX = "codex"
    CLAUDE_CODE = "claude"
    OPENCODE = "opencode"

    @classmethod
    def parse(cls, text: str) -> "AgentType":
        """Parse an agent name as given on the command line."""
        key = text.strip().lower()
        aliases = {
            "codex": cls.CODEX,
            "claude": cls.CLAUDE_CODE,
            "claude-code": cls.CLAUDE_CODE,
            "claude_code": cls.CLAUDE_CODE,
            "claudecode": cls.CLAUDE_CODE,
            "opencode": cls.OPENCODE,
        }
        try:
            return aliases[key]
        except KeyError:
            raise ValueError(f"Unknown agent type: {text}") from None

    @property
    def as_str(self) -> str:
        return self.value

    @property
    def default_model(self) -> Optional[str]:
        """Built-in model for the agent; none of the agents pins one."""
        return None

    @property
    def implicit_model_label(self) -> str:
        """Label shown when the agent chooses its own model."""
        return "default"

    def __str__(self) -> str:
        return self.value


class SandboxMode(Enum):
    READ_ONLY = "read-only"
    WORKSPACE_WRITE = "workspace-write"
    DANGER_FULL_ACCESS = "danger-full-access"

    def __str__(self) -> str:
        return self.value


class ApprovalPolicy(Enum):
    UNTRUSTED = "untrusted"
    ON_FAILURE = "on-failure"
    ON_REQUEST = "on-request"
    NEVER = "never"

    def __str__(self) -> str:
        return self.value


class ClaudeOutputFormat(Enum):
    TEXT = "text"
    JSON = "json"
    STREAM_JSON = "stream-json"

    @property
    def cli_value(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class ClaudeLoopMode(Enum):
    PRINT = "print"
    RALPH_PLUGIN = "ralph-plugin"

    def __str__(self) -> str:
        return self.value


@dataclass
class CommonOptions:
    allow_all_permissions: bool = False
    extra_flags: list[str] = field(default_factory=list)
    stream_output: bool = False
    sandbox_mode: Optional[SandboxMode] = None
    approval_policy: Optional[ApprovalPolicy] = None
    extra_writable_dirs: list[Path] = field(default_factory=list)
    output_last_message_path: Optional[Path] = None
    one_session: bool = False


@dataclass
class CodexOptions:
    resume_last: bool = False
    resume_session: Optional[str] = None
    fork_last: bool = False
    fork_session: Optional[str] = None
    images: list[Path] = field(default_factory=list)
    search: bool = False
    output_schema: Optional[Path] = None


@dataclass
class ClaudeOptions:
    output_format: Optional[ClaudeOutputFormat] = None
    include_partial_messages: bool = False
    replay_user_messages: bool = False
    continue_session: bool = False
    resume: Optional[str] = None
    session_id: Optional[str] = None
    fork_session: bool = False
    from_pr: Optional[str] = None
    agent: Optional[str] = None
    tools: Optional[str] = None
    system_prompt: Optional[str] = None
    append_system_prompt: Optional[str] = None
    system_prompt_file: Optional[Path] = None
    append_system_prompt_file: Optional[Path] = None
    plugin_dirs: list[Path] = field(default_factory=list)
    print_mode: bool = False
    add_dirs: list[Path] = field(default_factory=list)
    mcp_configs: list[Path] = field(default_factory=list)
    skip_permissions: bool = False
    settings_file: Optional[Path] = None
    setting_sources: Optional[str] = None
    max_budget_usd: Optional[float] = None
    disallowed_tools: Optional[str] = None
    disable_slash_commands: bool = False
    mcp_debug: bool = False
    debug: bool = False
    worktree: bool = False
    agents: Optional[str] = None
    init: bool = False
    init_only: bool = False
    maintenance: bool = False
    loop_mode: Optional[ClaudeLoopMode] = None


@dataclass
class OpencodeOptions:
    continue_session: bool = False
    session_id: Optional[str] = None
    fork_session: bool = False
    files: list[Path] = field(default_factory=list)
    title: Optional[str] = None
    attach: Optional[str] = None
    dir: Optional[Path] = None
    port: Optional[int] = None
    variant: Optional[str] = None
    thinking: bool = False
    format: Optional[str] = None
    agent: Optional[str] = None


@dataclass
class AgentOptions:
    """All options for one agent run, grouped by the agent they concern."""

    common: CommonOptions = field(default_factory=CommonOptions)
    codex: CodexOptions = field(default_factory=CodexOptions)
    claude: ClaudeOptions = field(default_factory=ClaudeOptions)
    opencode: OpencodeOptions = field(default_factory=OpencodeOptions)


@dataclass
class CliOptionsBuilder:
    """Flat CLI-level values that build into grouped AgentOptions."""

    # common
    allow_all_permissions: bool = False
    extra_flags: list[str] = field(default_factory=list)
    stream_output: bool = False
    sandbox_mode: Optional[SandboxMode] = None
    approval_policy: Optional[ApprovalPolicy] = None
    extra_writable_dirs: list[Path] = field(default_factory=list)
    output_last_message_path: Optional[Path] = None
    one_session: bool = False

    # codex
    codex_resume_last: bool = False
    codex_resume_session: Optional[str] = None
    codex_fork_last: bool = False
    codex_fork_session: Optional[str] = None
    codex_images: list[Path] = field(default_factory=list)
    codex_search: bool = False
    codex_output_schema: Optional[Path] = None

    # claude
    claude_output_format: Optional[ClaudeOutputFormat] = None
    claude_include_partial_messages: bool = False
    claude_replay_user_messages: bool = False
    claude_continue: bool = False
    claude_resume: Optional[str] = None
    claude_session_id: Optional[str] = None
    claude_fork_session: bool = False
    claude_from_pr: Optional[str] = None
    claude_agent: Optional[str] = None
    claude_tools: Optional[str] = None
    claude_system_prompt: Optional[str] = None
    claude_append_system_prompt: Optional[str] = None
    claude_system_prompt_file: Optional[Path] = None
    claude_append_system_prompt_file: Optional[Path] = None
    claude_plugin_dirs: list[Path] = field(default_factory=list)
    claude_print_mode: bool = False
    claude_add_dirs: list[Path] = field(default_factory=list)
    claude_mcp_configs: list[Path] = field(default_factory=list)
    claude_skip_permissions: bool = False
    claude_settings_file: Optional[Path] = None
    claude_setting_sources: Optional[str] = None
    claude_max_budget_usd: Optional[float] = None
    claude_disallowed_tools: Optional[str] = None
    claude_disable_slash_commands: bool = False
    claude_mcp_debug: bool = False
    claude_debug: bool = False
    claude_worktree: bool = False
    claude_agents: Optional[str] = None
    claude_init: bool = False
    claude_init_only: bool = False
    claude_maintenance: bool = False
    claude_loop_mode: Optional[ClaudeLoopMode] = None

    # opencode
    opencode_continue: bool = False
    opencode_session: Optional[str] = None
    opencode_fork: bool = False
    opencode_files: list[Path] = field(default_factory=list)
    opencode_title: Optional[str] = None
    opencode_attach: Optional[str] = None
    opencode_dir: Optional[Path] = None
    opencode_port: Optional[int] = None
    opencode_variant: Optional[str] = None
    opencode_thinking: bool = False
    opencode_format: Optional[str] = None
    opencode_agent: Optional[str] = None

    def build(self) -> AgentOptions:
        """Group the flat values into an AgentOptions."""
        return AgentOptions(
            common=CommonOptions(
                allow_all_permissions=self.allow_all_permissions,
                extra_flags=list(self.extra_flags),
                stream_output=self.stream_output,
                sandbox_mode=self.sandbox_mode,
                approval_policy=self.approval_policy,
                extra_writable_dirs=list(self.extra_writable_dirs),
                output_last_message_path=self.output_last_message_path,
                one_session=self.one_session,
            ),
            codex=CodexOptions(
                resume_last=self.codex_resume_last,
                resume_session=self.codex_resume_session,
                fork_last=self.codex_fork_last,
                fork_session=self.codex_fork_session,
                images=list(self.codex_images),
                search=self.codex_search,
                output_schema=self.codex_output_schema,
            ),
            claude=ClaudeOptions(
                output_format=self.claude_output_format,
                include_partial_messages=self.claude_include_partial_messages,
                replay_user_messages=self.claude_replay_user_messages,
                continue_session=self.claude_continue,
                resume=self.claude_resume,
                session_id=self.claude_session_id,
                fork_session=self.claude_fork_session,
                from_pr=self.claude_from_pr,
                agent=self.claude_agent,
                tools=self.claude_tools,
                system_prompt=self.claude_system_prompt,
                append_system_prompt=self.claude_append_system_prompt,
                system_prompt_file=self.claude_system_prompt_file,
                append_system_prompt_file=self.claude_append_system_prompt_file,
                plugin_dirs=list(self.claude_plugin_dirs),
                print_mode=self.claude_print_mode,
                add_dirs=list(self.claude_add_dirs),
                mcp_configs=list(self.claude_mcp_configs),
                skip_permissions=self.claude_skip_permissions,
                settings_file=self.claude_settings_file,
                setting_sources=self.claude_setting_sources,
                max_budget_usd=self.claude_max_budget_usd,
                disallowed_tools=self.claude_disallowed_tools,
                disable_slash_commands=self.claude_disable_slash_commands,
                mcp_debug=self.claude_mcp_debug,
                debug=self.claude_debug,
                worktree=self.claude_worktree,
                agents=self.claude_agents,
                init=self.claude_init,
                init_only=self.claude_init_only,
                maintenance=self.claude_maintenance,
                loop_mode=self.claude_loop_mode,
            ),
            opencode=OpencodeOptions(
                continue_session=self.opencode_continue,
                session_id=self.opencode_session,
                fork_session=self.opencode_fork,
                files=list(self.opencode_files),
                title=self.opencode_title,
                attach=self.opencode_attach,
                dir=self.opencode_dir,
                port=self.opencode_port,
                variant=self.opencode_variant,
                thinking=self.opencode_thinking,
                format=self.opencode_format,
                agent=self.opencode_agent,
            ),
        )
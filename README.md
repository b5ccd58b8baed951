# ralphloop

Building blocks for running an AI coding agent in a loop. The loop feeds the
agent the same prompt again and again until the agent reports completion or a
maximum number of iterations is reached. This package holds the parts such a
loop needs:

- option models
- model selection
- argument building for the Claude CLI
- parsing of Claude's `stream-json` output
- the Claude loop state file
- inspection of Claude Code plugins

It has no dependencies outside the standard library.

## Modules

### `ralphloop.options`

- The enums `AgentType`, `SandboxMode`, `ApprovalPolicy`, `ClaudeOutputFormat`
  and `ClaudeLoopMode`.
  - `AgentType.parse` accepts `codex`, `claude`, `claude-code`, `claude_code`,
    `claudecode` and `opencode`, ignoring case and surrounding spaces. Any
    other name raises `ValueError`.
- The dataclasses `CommonOptions`, `CodexOptions`, `ClaudeOptions`,
  `OpencodeOptions` and `AgentOptions`. `AgentOptions` groups the other four.
- `CliOptionsBuilder`, a flat dataclass of command-line values. Its `build()`
  method returns the grouped `AgentOptions`.

### `ralphloop.config`

- `resolve_model(agent_type, requested_model, codex_config)` returns a
  `ResolvedModel` with `execution_model`, `display_model` and
  `reasoning_effort`. It checks these in order and uses the first that is set:
  1. a non-blank requested model
  2. the agent's built-in default
  3. the Codex config model (Codex only)
  4. the label `default`

  When the Codex config model is used, `execution_model` is left empty, so the
  agent picks its own model.
- `load_codex_config_defaults()` reads `model` and `model_reasoning_effort`
  from `$CODEX_HOME/config.toml`. When `CODEX_HOME` is unset it reads
  `config.toml` in `.codex` under `USERPROFILE` or `HOME`. It returns them as
  a `CodexConfigDefaults`.
- `parse_toml_string(contents, key)` reads a top-level `key = value` line and
  strips surrounding double quotes. It ignores anything inside `[table]`
  sections.

### `ralphloop.validation`

`validate_codex_resume` and `validate_non_codex_first_iteration` raise
`OptionsValidationError` (a `ValueError`) in these cases:

- Codex resume is requested on an iteration other than 1.
- `one_session` or a Codex resume is requested with a non-Codex agent on
  iteration 1.

### `ralphloop.claude_args`

- `build_claude_args(prompt, model, options)` builds the argument list for the
  Claude CLI.
  - It adds `--print` when print mode or the `print` loop mode applies.
  - It adds `--output-format=...` only outside print mode, and only for formats
    other than `text`.
  - It adds `--model` only for a non-blank model.
  - The extra common flags follow, and the prompt always comes last.
- `claude_command()` returns `claude.exe` on Windows and `claude` elsewhere.

### `ralphloop.stream`

`ClaudeStreamParser.process_line(line)` parses one `stream-json` line into a
`StreamUpdate`. The update holds:

- the emitted lines
- the text delta
- the full text
- the tool name and tool id
- the role
- the `StreamUsage`

The parser assembles assistant text across lines. `assembled_text()` returns
the text so far, and `flush_pending()` returns the unterminated tail line.
Invalid JSON raises `json.JSONDecodeError`.

### `ralphloop.parser`

`ClaudeEventParser` builds on the stream parser.

- `parse_line(line)` returns a `ParseResult` with these parts:
  - `events`: `TokenUpdate`, `ToolCallBegin`, `ToolCallEnd` and `TextDelta`
  - `lines`: `RenderLine`s of kind assistant, status, tool call or tool output
  - the text to add to the output buffer
  - the latest full response
- A tool result with a matching id closes the tool call that was opened
  earlier.
- User and system messages become status lines only when
  `replay_user_messages` is true.
- `flush()` returns the pending tail line and the assembled response.

### `ralphloop.loop_state`

- `write_ralph_state_file`, `read_ralph_state_file`, `clear_ralph_state_file`
  and `parse_ralph_state` handle `.claude/ralph-loop.local.md`. The file holds
  front matter (`active`, `iteration`, `max_iterations`, `completion_promise`,
  `started_at`) followed by the prompt. It is read into a `ClaudeLoopState`.
- `parse_event(line)` recognises two kinds of line. A `Ralph iteration N`
  marker gives an event with `iteration` set. A `Ralph loop:` line gives an
  event with a `ClaudeLoopOutcome`:

  | Line contains | `OutcomeKind` |
  | --- | --- |
  | `<promise>...</promise>` | `PROMISE_DETECTED` |
  | `(N)` | `MAX_ITERATIONS` |
  | anything else | `WARNING` |

- `detect_outcome(output)` returns the last outcome in the output.
- `strip_ansi(text)` removes terminal escape sequences.

### `ralphloop.plugin_catalog`

- `ClaudeCodeWorkspace.discover(project_dir)` finds a `claude-code/` directory
  and reads its `.claude-plugin/marketplace.json`.
- `plugin_catalog()` returns a `PluginCatalog`. It searches the marketplace
  sources first and the `plugins/` directory after them.
  - `resolve(name)` returns the first match.
  - `list()` lists each plugin name once and keeps the first source found.
- Plugins are described by `ClaudePluginDescriptor`. Its `summary()` and
  `summary_with_description()` give display text.
- The manifest helpers are `plugin_manifest_path`, `read_plugin_manifest`,
  `plugin_manifest_name` and `read_plugin_manifest_value`.

### `ralphloop.plugin_components`

- `FilesystemPluginComponentInspector.inspect_components(plugin_dir)` collects
  these components, both from their default directories and from paths listed
  in the manifest:
  - commands
  - agents (`.json`)
  - skills (`.md`)
  - hook files
  - MCP files (`.json`)

  It also collects hooks and MCP servers declared in the manifest.
  - Each entry records whether its file exists.
  - Each entry records, as a `ComponentPathSource`, whether the manifest named
    it.
  - `counts()` summarises the components.
- `FilesystemPluginInspector.inspect(plugin_dir)` lists command and script
  names. The lookups `has_command` and `has_script` ignore case.
- `resolve_hook_command_path(plugin_dir, command)` returns the path of the
  program a hook command runs. It returns `None` for paths that start with
  `..`.

### `ralphloop.plugin_summary`

`FilesystemPluginSummaryProvider.summarize(plugin_dir)` returns a
`ClaudePluginSummary` with these parts:

- the manifest details
- whether the manifest is present and valid
- the components
- the hook and MCP files that the manifest names but that are missing

`label()` gives display text.

### `ralphloop.plugin_workspace`

`FilesystemClaudeWorkspaceInspector.summarize(project_dir, add_dirs)` returns
a `ClaudeWorkspaceSummary` with two parts:

- the `claude-code/` workspace summary: plugin count, marketplace count and
  local `.claude` counts
- component counts for the `.claude` directory of the project and of each
  extra directory, each directory counted once

## What this package does not do

This package provides no command-line program. It does not do any of the
following:

- start or supervise agent processes
- run the iteration loop itself, with its delays, interruption and completion
  checks
- keep a history of past iterations
- draw a terminal interface

It prepares arguments and interprets output. Launching the agent and driving
the loop is left to the caller.

## Installation

```
pip install ralphloop
```

## Example

```python
from ralphloop.options import AgentType, ClaudeLoopMode, CliOptionsBuilder
from ralphloop.config import CodexConfigDefaults, resolve_model
from ralphloop.claude_args import build_claude_args, claude_command
from ralphloop.parser import ClaudeEventParser

options = CliOptionsBuilder(claude_loop_mode=ClaudeLoopMode.PRINT).build()
model = resolve_model(AgentType.CLAUDE_CODE, "claude-sonnet-4", CodexConfigDefaults())

argv = [claude_command(), *build_claude_args("fix the bug", model.execution_model, options)]

parser = ClaudeEventParser(replay_user_messages=False)
result = parser.parse_line(
    '{"type":"content_block_delta","delta":{"type":"text_delta","text":"Hello\\n"}}'
)
for line in result.lines:
    print(line.text)
```

## Running the tests

```
pip install -e ".[test]"
pytest
```
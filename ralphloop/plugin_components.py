"""Inspection of plugin directories for commands, agents, skills, hooks and MCP."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .plugin_catalog import read_plugin_manifest_value


def _eq_ignore_ascii_case(a: str, b: str) -> bool:
    if len(a) != len(b):
        return False
    return all(
        x == y or (x.isascii() and y.isascii() and x.lower() == y.lower())
        for x, y in zip(a, b)
    )


def _contains_ignore_case(items: list[str], name: str) -> bool:
    needle = name.strip()
    return bool(needle) and any(_eq_ignore_ascii_case(item, needle) for item in items)


@dataclass
class ClaudePluginInspection:
    """Command and script names found in a plugin directory."""

    commands: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)

    def has_command(self, name: str) -> bool:
        return _contains_ignore_case(self.commands, name)

    def has_script(self, name: str) -> bool:
        return _contains_ignore_case(self.scripts, name)


class ComponentPathSource(Enum):
    """Where a component path came from."""

    DEFAULT = "default"
    MANIFEST = "manifest"

    def merge(self, other: "ComponentPathSource") -> "ComponentPathSource":
        if ComponentPathSource.MANIFEST in (self, other):
            return ComponentPathSource.MANIFEST
        return ComponentPathSource.DEFAULT


@dataclass(frozen=True)
class _ComponentPath:
    path: Path
    source: ComponentPathSource


@dataclass
class ClaudePluginCommand:
    name: str
    path: Path
    exists: bool
    source: ComponentPathSource


@dataclass
class ClaudePluginAgent:
    name: str
    path: Path
    exists: bool
    source: ComponentPathSource


@dataclass
class ClaudePluginSkill:
    name: str
    path: Path
    exists: bool
    source: ComponentPathSource


@dataclass
class ClaudePluginHookFile:
    path: Path
    exists: bool
    source: ComponentPathSource


@dataclass
class ClaudePluginHook:
    name: str
    command: str


@dataclass
class ClaudePluginMcpFile:
    path: Path
    exists: bool
    source: ComponentPathSource


@dataclass
class ClaudePluginMcpServer:
    name: str


@dataclass
class ClaudeComponentCounts:
    commands: int = 0
    agents: int = 0
    skills: int = 0
    hooks: int = 0
    mcp_servers: int = 0


@dataclass
class ClaudePluginComponents:
    commands: list[ClaudePluginCommand] = field(default_factory=list)
    agents: list[ClaudePluginAgent] = field(default_factory=list)
    skills: list[ClaudePluginSkill] = field(default_factory=list)
    hook_files: list[ClaudePluginHookFile] = field(default_factory=list)
    hooks: list[ClaudePluginHook] = field(default_factory=list)
    mcp_files: list[ClaudePluginMcpFile] = field(default_factory=list)
    mcp_servers: list[ClaudePluginMcpServer] = field(default_factory=list)

    def counts(self) -> ClaudeComponentCounts:
        return ClaudeComponentCounts(
            commands=len(self.commands),
            agents=len(self.agents),
            skills=len(self.skills),
            hooks=len(self.hooks),
            mcp_servers=len(self.mcp_servers),
        )


def _file_stem(path: Path) -> Optional[str]:
    if not path.name or path.name == "..":
        return None
    return path.stem


def _has_extension(path: Path, extension: Optional[str]) -> bool:
    if extension is None:
        return True
    suffix = path.suffix
    return bool(suffix) and _eq_ignore_ascii_case(suffix[1:], extension)


def _list_files(directory: Path) -> list[Path]:
    try:
        return sorted(child for child in directory.iterdir() if child.is_file())
    except OSError:
        return []


def _collect_component_paths(
    plugin_dir: Path, subdir: str, extension: Optional[str]
) -> list[_ComponentPath]:
    directory = plugin_dir / subdir
    if not directory.is_dir():
        return []
    return [
        _ComponentPath(path, ComponentPathSource.DEFAULT)
        for path in _list_files(directory)
        if _has_extension(path, extension)
    ]


def _resolve_relative(plugin_dir: Path, text: str) -> Optional[Path]:
    candidate = Path(text)
    if candidate.is_absolute():
        return candidate
    parts = candidate.parts
    if not parts or parts[0] == "..":
        return None
    return plugin_dir / candidate


def _resolve_component_path(plugin_dir: Path, path_str: str) -> Optional[Path]:
    trimmed = path_str.strip()
    if not trimmed:
        return None
    return _resolve_relative(plugin_dir, trimmed)


def _collect_manifest_component_paths(
    plugin_dir: Path, json_path: tuple[str, ...], extension: Optional[str]
) -> list[_ComponentPath]:
    current: Any = read_plugin_manifest_value(plugin_dir)
    for segment in json_path:
        if not isinstance(current, dict) or segment not in current:
            return []
        current = current[segment]
    if not isinstance(current, list):
        return []

    result = []
    for value in current:
        if not isinstance(value, str):
            continue
        path = _resolve_component_path(plugin_dir, value)
        if path is None or not _has_extension(path, extension):
            continue
        result.append(_ComponentPath(path, ComponentPathSource.MANIFEST))
    return result


def _gather(plugin_dir: Path, key: str, extension: Optional[str]) -> list[_ComponentPath]:
    return _collect_component_paths(plugin_dir, key, extension) + _collect_manifest_component_paths(
        plugin_dir, (key,), extension
    )


def _named_components(plugin_dir: Path, key: str, extension: Optional[str], kind):
    """Merge default and manifest paths by file stem; a present file wins."""
    seen: dict[str, Any] = {}
    for component in _gather(plugin_dir, key, extension):
        name = _file_stem(component.path)
        if name is None:
            continue
        is_file = component.path.is_file()
        entry = seen.get(name)
        if entry is None:
            entry = kind(name=name, path=component.path, exists=is_file, source=component.source)
            seen[name] = entry
        entry.source = entry.source.merge(component.source)
        if is_file:
            entry.exists = True
            entry.path = component.path
    return list(seen.values())


def _file_components(plugin_dir: Path, key: str, extension: Optional[str], kind):
    """Merge default and manifest paths by full path."""
    seen: dict[Path, Any] = {}
    for component in _gather(plugin_dir, key, extension):
        is_file = component.path.is_file()
        entry = seen.get(component.path)
        if entry is None:
            entry = kind(path=component.path, exists=is_file, source=component.source)
            seen[component.path] = entry
        entry.source = entry.source.merge(component.source)
        if is_file:
            entry.exists = True
    return list(seen.values())


def _manifest_object(plugin_dir: Path, key: str) -> dict:
    manifest = read_plugin_manifest_value(plugin_dir)
    value = manifest.get(key) if isinstance(manifest, dict) else None
    return value if isinstance(value, dict) else {}


def _inspect_hooks(plugin_dir: Path) -> list[ClaudePluginHook]:
    hooks = _manifest_object(plugin_dir, "hooks")
    return [
        ClaudePluginHook(name=name, command=command)
        for name, command in sorted(hooks.items())
        if isinstance(command, str)
    ]


def _inspect_mcp_servers(plugin_dir: Path) -> list[ClaudePluginMcpServer]:
    return [ClaudePluginMcpServer(name=name) for name in sorted(_manifest_object(plugin_dir, "mcp"))]


class FilesystemPluginInspector:
    """Lists command and script names of a plugin directory."""

    def inspect(self, plugin_dir) -> ClaudePluginInspection:
        plugin_dir = Path(plugin_dir)
        commands = [
            stem
            for stem in (_file_stem(p) for p in _list_files(plugin_dir / "commands"))
            if stem is not None
        ]
        scripts = [p.name for p in _list_files(plugin_dir / "scripts")]
        return ClaudePluginInspection(commands=commands, scripts=scripts)


class FilesystemPluginComponentInspector:
    """Collects every component of a plugin from its directories and manifest."""

    def inspect_components(self, plugin_dir) -> ClaudePluginComponents:
        plugin_dir = Path(plugin_dir)
        return ClaudePluginComponents(
            commands=_named_components(plugin_dir, "commands", None, ClaudePluginCommand),
            agents=_named_components(plugin_dir, "agents", "json", ClaudePluginAgent),
            skills=_named_components(plugin_dir, "skills", "md", ClaudePluginSkill),
            hook_files=_file_components(plugin_dir, "hooks", None, ClaudePluginHookFile),
            hooks=_inspect_hooks(plugin_dir),
            mcp_files=_file_components(plugin_dir, "mcp", "json", ClaudePluginMcpFile),
            mcp_servers=_inspect_mcp_servers(plugin_dir),
        )


def resolve_hook_command_path(plugin_dir, command: str) -> Optional[Path]:
    """Path of the program a hook command runs; None if it leaves the plugin."""
    parts = command.split()
    if not parts:
        return None
    return _resolve_relative(Path(plugin_dir), parts[0])
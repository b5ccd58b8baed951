"""Summaries of Claude workspaces and the project's own .claude components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .plugin_catalog import ClaudeCodeWorkspace
from .plugin_components import ClaudeComponentCounts, FilesystemPluginComponentInspector


@dataclass
class ClaudeCodeWorkspaceSummary:
    root: Path
    plugin_count: int
    marketplace_count: int
    local_counts: Optional[ClaudeComponentCounts] = None


@dataclass
class ClaudeProjectComponentsSummary:
    root: Path
    claude_dir: Path
    counts: ClaudeComponentCounts


@dataclass
class ClaudeWorkspaceSummary:
    claude_code: Optional[ClaudeCodeWorkspaceSummary] = None
    project_components: list[ClaudeProjectComponentsSummary] = field(default_factory=list)


class FilesystemClaudeWorkspaceInspector:
    """Summarises a project directory and extra directories from disk."""

    def __init__(self) -> None:
        self._component_inspector = FilesystemPluginComponentInspector()

    def summarize(self, project_dir, add_dirs: Iterable = ()) -> ClaudeWorkspaceSummary:
        project_dir = Path(project_dir)
        return ClaudeWorkspaceSummary(
            claude_code=self._summarize_claude_code(project_dir),
            project_components=self._summarize_project_components(project_dir, add_dirs),
        )

    def _summarize_claude_code(self, project_dir: Path) -> Optional[ClaudeCodeWorkspaceSummary]:
        workspace = ClaudeCodeWorkspace.discover(project_dir)
        if workspace is None:
            return None
        claude_dir = workspace.root / ".claude"
        local_counts = (
            self._component_inspector.inspect_components(claude_dir).counts()
            if claude_dir.is_dir()
            else None
        )
        return ClaudeCodeWorkspaceSummary(
            root=workspace.root,
            plugin_count=len(workspace.plugin_catalog().list()),
            marketplace_count=workspace.marketplace_len(),
            local_counts=local_counts,
        )

    def _summarize_project_components(
        self, project_dir: Path, add_dirs: Iterable
    ) -> list[ClaudeProjectComponentsSummary]:
        seen: set[Path] = set()
        summaries = []
        for root in [project_dir, *(Path(d) for d in add_dirs)]:
            if root in seen:
                continue
            seen.add(root)
            claude_dir = root / ".claude"
            if not claude_dir.is_dir():
                continue
            counts = self._component_inspector.inspect_components(claude_dir).counts()
            summaries.append(
                ClaudeProjectComponentsSummary(root=root, claude_dir=claude_dir, counts=counts)
            )
        return summaries
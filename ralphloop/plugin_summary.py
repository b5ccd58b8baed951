"""Summaries of a Claude plugin's manifest and components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .plugin_catalog import plugin_manifest_path, read_plugin_manifest
from .plugin_components import (
    ClaudePluginComponents,
    ComponentPathSource,
    FilesystemPluginComponentInspector,
)


@dataclass
class ClaudePluginSummary:
    """What a plugin directory declares and what is actually on disk."""

    name: str
    path: Path
    version: Optional[str] = None
    description: Optional[str] = None
    manifest_present: bool = False
    manifest_valid: bool = False
    components: ClaudePluginComponents = field(default_factory=ClaudePluginComponents)
    missing_hook_files: list[Path] = field(default_factory=list)
    missing_mcp_files: list[Path] = field(default_factory=list)

    def label(self) -> str:
        """Name with optional ``v<version>`` and `` - <description>``."""
        label = self.name
        if self.version is not None and self.version.strip():
            label = f"{self.name} v{self.version}"
        if self.description is not None and self.description.strip():
            label = f"{label} - {self.description}"
        return label


def _fallback_name(plugin_dir: Path) -> str:
    name = plugin_dir.name
    if name and name != "..":
        return name
    return str(plugin_dir)


class FilesystemPluginSummaryProvider:
    """Builds plugin summaries by reading the plugin directory."""

    def __init__(self) -> None:
        self._component_inspector = FilesystemPluginComponentInspector()

    def summarize(self, plugin_dir) -> ClaudePluginSummary:
        plugin_dir = Path(plugin_dir)
        manifest_present = plugin_manifest_path(plugin_dir).is_file()
        manifest = read_plugin_manifest(plugin_dir)
        manifest_valid = manifest_present and manifest is not None

        if manifest is not None:
            name, version, description = manifest.name, manifest.version, manifest.description
        else:
            name, version, description = _fallback_name(plugin_dir), None, None

        components = self._component_inspector.inspect_components(plugin_dir)
        missing_hook_files = [
            hook_file.path
            for hook_file in components.hook_files
            if not hook_file.exists and hook_file.source is ComponentPathSource.MANIFEST
        ]
        missing_mcp_files = [
            mcp_file.path
            for mcp_file in components.mcp_files
            if not mcp_file.exists and mcp_file.source is ComponentPathSource.MANIFEST
        ]

        return ClaudePluginSummary(
            name=name,
            path=plugin_dir,
            version=version,
            description=description,
            manifest_present=manifest_present,
            manifest_valid=manifest_valid,
            components=components,
            missing_hook_files=missing_hook_files,
            missing_mcp_files=missing_mcp_files,
        )
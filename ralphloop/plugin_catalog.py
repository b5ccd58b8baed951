"""Discovery of Claude Code plugins in a ``claude-code/`` workspace."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence


@dataclass
class ClaudePluginManifest:
    """Contents of a plugin's ``.claude-plugin/manifest.json``."""

    name: str
    version: Optional[str] = None
    description: Optional[str] = None


@dataclass
class _MarketplaceEntry:
    name: str
    source: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None


@dataclass
class ClaudePluginDescriptor:
    """A plugin found on disk, with the details its manifest gives."""

    name: str
    path: Path
    description: Optional[str] = None
    version: Optional[str] = None

    def summary(self) -> str:
        """Name, followed by ``v<version>`` when a version is set."""
        if self.version is not None and self.version.strip():
            return f"{self.name} v{self.version}"
        return self.name

    def summary_with_description(self) -> str:
        """The summary, followed by `` - <description>`` when one is set."""
        if self.description is not None and self.description.strip():
            return f"{self.summary()} - {self.description}"
        return self.summary()


def _read_json(path: Path) -> Any:
    """Parse a JSON file; None when it cannot be read or parsed."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return None


def _optional_str(mapping: dict, key: str) -> Optional[str]:
    value = mapping.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"field {key!r} must be a string")


def _required_str(mapping: dict, key: str) -> str:
    value = mapping.get(key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _manifest_from_value(value: Any) -> Optional[ClaudePluginManifest]:
    if not isinstance(value, dict):
        return None
    try:
        return ClaudePluginManifest(
            name=_required_str(value, "name"),
            version=_optional_str(value, "version"),
            description=_optional_str(value, "description"),
        )
    except ValueError:
        return None


def _marketplace_from_value(value: Any) -> Optional[list[_MarketplaceEntry]]:
    if not isinstance(value, dict):
        return None
    plugins = value.get("plugins")
    if not isinstance(plugins, list):
        return None
    entries = []
    try:
        for item in plugins:
            if not isinstance(item, dict):
                return None
            entries.append(
                _MarketplaceEntry(
                    name=_required_str(item, "name"),
                    source=_optional_str(item, "source"),
                    description=_optional_str(item, "description"),
                    version=_optional_str(item, "version"),
                )
            )
    except ValueError:
        return None
    return entries


def plugin_manifest_path(plugin_dir) -> Path:
    return Path(plugin_dir) / ".claude-plugin" / "manifest.json"


def read_plugin_manifest(plugin_dir) -> Optional[ClaudePluginManifest]:
    """Read and validate the plugin manifest; None if missing or malformed."""
    return _manifest_from_value(_read_json(plugin_manifest_path(plugin_dir)))


def plugin_manifest_name(plugin_dir) -> Optional[str]:
    manifest = read_plugin_manifest(plugin_dir)
    return manifest.name if manifest is not None else None


def read_plugin_manifest_value(plugin_dir) -> Any:
    """The raw JSON of the plugin manifest, or None if it cannot be read."""
    return _read_json(plugin_manifest_path(plugin_dir))


def _build_descriptor(plugin_dir: Path) -> Optional[ClaudePluginDescriptor]:
    manifest = read_plugin_manifest(plugin_dir)
    if manifest is not None:
        return ClaudePluginDescriptor(
            name=manifest.name,
            path=plugin_dir,
            description=manifest.description,
            version=manifest.version,
        )
    fallback_name = plugin_dir.name
    if not fallback_name or fallback_name == "..":
        return None
    return ClaudePluginDescriptor(name=fallback_name, path=plugin_dir)


class DirectoryPluginSource:
    """Plugins stored as subdirectories of one root directory."""

    def __init__(self, root) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirectoryPluginSource(root={self.root!r})"

    def resolve(self, name: str) -> Optional[ClaudePluginDescriptor]:
        plugin_dir = self.root / name
        if not plugin_dir.is_dir():
            return None
        return _build_descriptor(plugin_dir)

    def list(self):
        """Descriptors for every subdirectory, in name order."""
        try:
            children = sorted(self.root.iterdir())
        except OSError:
            return []
        descriptors = (_build_descriptor(child) for child in children if child.is_dir())
        return [descriptor for descriptor in descriptors if descriptor is not None]


class PluginCatalog:
    """An ordered set of plugin sources; earlier sources win."""

    def __init__(self, sources: Iterable = ()) -> None:
        self.sources: Sequence = tuple(sources)

    def __repr__(self) -> str:
        return f"PluginCatalog(sources={list(self.sources)!r})"

    def resolve(self, name: str) -> Optional[ClaudePluginDescriptor]:
        for source in self.sources:
            descriptor = source.resolve(name)
            if descriptor is not None:
                return descriptor
        return None

    def list(self):
        """All descriptors, keeping the first one seen for each name."""
        seen: set[str] = set()
        result = []
        for source in self.sources:
            for descriptor in source.list():
                if descriptor.name in seen:
                    continue
                seen.add(descriptor.name)
                result.append(descriptor)
        return result


def _resolve_marketplace_source(root: Path, source: str) -> Optional[Path]:
    trimmed = source.strip()
    if not trimmed:
        return None
    candidate = Path(trimmed)
    return candidate if candidate.is_absolute() else root / candidate


class ClaudeCodeWorkspace:
    """A ``claude-code/`` directory holding plugins and a marketplace."""

    def __init__(self, root, marketplace: Optional[list[_MarketplaceEntry]] = None) -> None:
        self._root = Path(root)
        self._marketplace = marketplace

    def __repr__(self) -> str:
        return f"ClaudeCodeWorkspace(root={self._root!r})"

    @classmethod
    def discover(cls, project_dir) -> Optional["ClaudeCodeWorkspace"]:
        root = Path(project_dir) / "claude-code"
        if not root.is_dir():
            return None
        marketplace = _marketplace_from_value(
            _read_json(root / ".claude-plugin" / "marketplace.json")
        )
        return cls(root, marketplace)

    @property
    def root(self) -> Path:
        return self._root

    def marketplace_len(self) -> int:
        return len(self._marketplace) if self._marketplace is not None else 0

    def plugin_catalog(self) -> PluginCatalog:
        """Marketplace sources first, then the ``plugins/`` directory."""
        sources = []
        for entry in self._marketplace or ():
            if entry.source is None:
                continue
            source_path = _resolve_marketplace_source(self._root, entry.source)
            if source_path is not None:
                sources.append(DirectoryPluginSource(source_path))

        plugins_root = self._root / "plugins"
        if plugins_root.is_dir():
            sources.append(DirectoryPluginSource(plugins_root))

        return PluginCatalog(sources)
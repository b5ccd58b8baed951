import json

from ralphloop.plugin_catalog import (
    ClaudeCodeWorkspace,
    ClaudePluginDescriptor,
    DirectoryPluginSource,
    PluginCatalog,
    plugin_manifest_name,
    plugin_manifest_path,
    read_plugin_manifest,
    read_plugin_manifest_value,
)


def write_manifest(plugin_dir, data):
    path = plugin_dir / ".claude-plugin" / "manifest.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return path


def test_manifest_path_layout(tmp_path):
    assert plugin_manifest_path(tmp_path) == tmp_path / ".claude-plugin" / "manifest.json"


def test_read_valid_manifest(tmp_path):
    write_manifest(tmp_path, {"name": "demo", "version": "1.0", "extra": 5})
    manifest = read_plugin_manifest(tmp_path)
    assert manifest.name == "demo"
    assert manifest.version == "1.0"
    assert manifest.description is None
    assert plugin_manifest_name(tmp_path) == "demo"


def test_read_manifest_missing_file(tmp_path):
    assert read_plugin_manifest(tmp_path) is None
    assert plugin_manifest_name(tmp_path) is None
    assert read_plugin_manifest_value(tmp_path) is None


def test_read_manifest_invalid_json(tmp_path):
    write_manifest(tmp_path, "{not json")
    assert read_plugin_manifest(tmp_path) is None


def test_read_manifest_rejects_missing_name_and_bad_types(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    write_manifest(a, {"version": "1.0"})
    write_manifest(b, {"name": "b", "version": 3})
    assert read_plugin_manifest(a) is None
    assert read_plugin_manifest(b) is None


def test_read_manifest_value_is_raw_json(tmp_path):
    data = {"name": "x", "hooks": {"start": "run.sh"}}
    write_manifest(tmp_path, data)
    assert read_plugin_manifest_value(tmp_path) == data


def test_descriptor_summary(tmp_path):
    with_version = ClaudePluginDescriptor("demo", tmp_path, description="Helps", version="1.0")
    blank_version = ClaudePluginDescriptor("demo", tmp_path, description="  ", version="  ")
    assert with_version.summary() == "demo v1.0"
    assert with_version.summary_with_description() == "demo v1.0 - Helps"
    assert blank_version.summary() == "demo"
    assert blank_version.summary_with_description() == "demo"


def test_directory_source_resolve(tmp_path):
    plugin = tmp_path / "alpha"
    write_manifest(plugin, {"name": "alpha-plugin", "description": "d"})
    bare = tmp_path / "beta"
    bare.mkdir()
    source = DirectoryPluginSource(tmp_path)

    resolved = source.resolve("alpha")
    assert resolved.name == "alpha-plugin"
    assert resolved.path == plugin
    assert resolved.description == "d"
    assert source.resolve("beta").name == "beta"
    assert source.resolve("missing") is None


def test_directory_source_list_skips_files(tmp_path):
    (tmp_path / "one").mkdir()
    (tmp_path / "two").mkdir()
    (tmp_path / "note.txt").write_text("x")
    names = sorted(d.name for d in DirectoryPluginSource(tmp_path).list())
    assert names == ["one", "two"]


def test_directory_source_list_missing_root(tmp_path):
    assert DirectoryPluginSource(tmp_path / "nope").list() == []


def test_catalog_first_source_wins_and_list_dedupes(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    write_manifest(first / "p", {"name": "shared", "version": "1"})
    write_manifest(second / "p", {"name": "shared", "version": "2"})
    (second / "other").mkdir()
    catalog = PluginCatalog([DirectoryPluginSource(first), DirectoryPluginSource(second)])

    assert catalog.resolve("p").version == "1"
    listed = catalog.list()
    assert [d.name for d in listed].count("shared") == 1
    assert {d.name for d in listed} == {"shared", "other"}
    assert next(d for d in listed if d.name == "shared").version == "1"
    assert catalog.resolve("absent") is None


def test_discover_without_workspace(tmp_path):
    assert ClaudeCodeWorkspace.discover(tmp_path) is None


def test_workspace_marketplace_and_plugins(tmp_path):
    root = tmp_path / "claude-code"
    (root / ".claude-plugin").mkdir(parents=True)
    (root / ".claude-plugin" / "marketplace.json").write_text(
        json.dumps(
            {
                "plugins": [
                    {"name": "ext", "source": "external"},
                    {"name": "blank", "source": "   "},
                    {"name": "nosource"},
                ]
            }
        ),
        encoding="utf-8",
    )
    write_manifest(root / "external" / "tool", {"name": "tool", "version": "9"})
    write_manifest(root / "plugins" / "tool", {"name": "tool", "version": "1"})
    (root / "plugins" / "local").mkdir()

    workspace = ClaudeCodeWorkspace.discover(tmp_path)
    assert workspace.root == root
    assert workspace.marketplace_len() == 3

    catalog = workspace.plugin_catalog()
    assert len(catalog.sources) == 2
    assert catalog.resolve("tool").version == "9"
    assert sorted(d.name for d in catalog.list()) == ["local", "tool"]


def test_workspace_invalid_marketplace(tmp_path):
    root = tmp_path / "claude-code"
    (root / ".claude-plugin").mkdir(parents=True)
    (root / ".claude-plugin" / "marketplace.json").write_text('{"plugins": [{"source": "x"}]}')
    workspace = ClaudeCodeWorkspace.discover(tmp_path)
    assert workspace.marketplace_len() == 0
    assert workspace.plugin_catalog().list() == []
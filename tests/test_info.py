"""Tests for deployment info collection."""

import json
import platform

import pytest

from devtools.config import Config
from devtools.info import (
    DependencyLister,
    Lockfile,
    PackageDependency,
    collect_dependencies,
    read_portal_version,
)

UV_LOCK = """\
version = 1
requires-python = ">=3.11"

[[package]]
name = "devtools-catalog"
version = "1.2.0"
source = { registry = "https://pypi.org/simple" }

[[package]]
name = "flask"
version = "3.0.3"

[[package]]
name = "devtools-catalog"
version = "1.3.0"

[[package]]
name = "devtools-scaffolder"
version = "0.4.1"

[[package]]
name = "devtools-catalog"
version = "1.2.0"
"""


class TestLockfile:
    def test_groups_entries_by_name(self):
        lockfile = Lockfile.parse(UV_LOCK)

        assert lockfile.keys() == ["devtools-catalog", "flask", "devtools-scaffolder"]
        assert len(lockfile.get("devtools-catalog")) == 3
        assert lockfile.get("missing") == []

    def test_collect_dependencies_filters_and_dedupes(self):
        dependencies = collect_dependencies(Lockfile.parse(UV_LOCK), "devtools")

        assert dependencies == [
            PackageDependency(name="devtools-catalog", versions="1.2.0, 1.3.0"),
            PackageDependency(name="devtools-scaffolder", versions="0.4.1"),
        ]


class TestPortalVersion:
    def test_reads_version(self, tmp_path):
        path = tmp_path / "portal.json"
        path.write_text(json.dumps({"version": "1.21.0"}), encoding="utf-8")

        assert read_portal_version(path) == "1.21.0"

    @pytest.mark.parametrize("content", [None, "{}", "not json", "[1, 2]"])
    def test_falls_back_to_na(self, tmp_path, content):
        path = tmp_path / "portal.json"
        if content is not None:
            path.write_text(content, encoding="utf-8")

        assert read_portal_version(path) == "N/A"


class TestDependencyLister:
    def test_list_info_from_files(self, tmp_path):
        (tmp_path / "uv.lock").write_text(UV_LOCK, encoding="utf-8")
        (tmp_path / "portal.json").write_text('{"version": "2.0.0"}', encoding="utf-8")
        lister = DependencyLister(root_dir=str(tmp_path), package_prefix="devtools-scaffolder")

        info = lister.list_info().to_dict()

        assert info["python_version"] == platform.python_version()
        assert info["operating_system"].startswith(platform.system())
        assert info["portal_version"] == "2.0.0"
        assert info["dependencies"] == [{"name": "devtools-scaffolder", "versions": "0.4.1"}]

    def test_missing_lockfile_gives_empty_dependencies(self, tmp_path):
        info = DependencyLister(root_dir=str(tmp_path)).list_info()

        assert info.dependencies == []
        assert info.portal_version == "N/A"

    def test_invalid_lockfile_gives_empty_dependencies(self, tmp_path):
        (tmp_path / "uv.lock").write_text("[[package]\nname=", encoding="utf-8")

        assert DependencyLister(root_dir=str(tmp_path)).list_info().dependencies == []

    def test_injected_sources(self, tmp_path):
        seen = []

        def lockfile_loader(path):
            seen.append(path)
            return Lockfile.parse(UV_LOCK)

        lister = DependencyLister(
            root_dir=str(tmp_path),
            lockfile="poetry.lock",
            lockfile_loader=lockfile_loader,
            version_loader=lambda path: "9.9.9",
        )

        info = lister.list_info()

        assert seen == [tmp_path / "poetry.lock"]
        assert info.portal_version == "9.9.9"
        assert [d.name for d in info.dependencies] == ["devtools-catalog", "devtools-scaffolder"]

    def test_from_config(self):
        config = Config.from_dict({"devTools": {"info": {"rootDir": "/srv/portal", "packagePrefix": "acme-"}}})

        lister = DependencyLister.from_config(config)

        assert str(lister.lockfile_path).endswith("uv.lock")
        assert lister.package_prefix == "acme-"
        assert lister.version_path.name == "portal.json"

"""
Tests for project discovery, settings files and default tags.
"""

import logging
from pathlib import Path

import pytest

from podforge.core.config.default_tags import DefaultTags
from podforge.core.config.loader import find_project_dir, load_pod_config, load_project_config
from podforge.core.errors import ConfigError, ProjectNotFound
from podforge.core.models.config import PodConfig, PodType, ProjectConfig


class TestFindProjectDir:
    def test_finds_in_current_dir(self, tmp_path: Path):
        (tmp_path / "pods").mkdir()
        assert find_project_dir(tmp_path) == tmp_path.resolve()

    def test_walks_up_from_subdirectory(self, tmp_path: Path):
        (tmp_path / "pods").mkdir()
        nested = tmp_path / "src" / "app" / "lib"
        nested.mkdir(parents=True)
        assert find_project_dir(nested) == tmp_path.resolve()

    def test_pods_file_is_not_a_marker(self, tmp_path: Path):
        (tmp_path / "pods").write_text("not a dir")
        with pytest.raises(ProjectNotFound):
            find_project_dir(tmp_path)

    def test_not_found(self, tmp_path: Path):
        with pytest.raises(ProjectNotFound) as exc:
            find_project_dir(tmp_path)
        assert exc.value.start_dir == tmp_path.resolve()

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch):
        (tmp_path / "pods").mkdir()
        monkeypatch.chdir(tmp_path)
        assert find_project_dir() == tmp_path.resolve()


class TestProjectConfig:
    def test_defaults_when_absent(self, tmp_path: Path):
        config = load_project_config(tmp_path)
        assert config == ProjectConfig()
        assert config.name is None
        assert config.default_target == "development"

    def test_load_values(self, tmp_path: Path):
        path = tmp_path / "config" / "project.yml"
        path.parent.mkdir()
        path.write_text("name: shop\ndefault_target: test\n")
        config = load_project_config(tmp_path)
        assert config.name == "shop"
        assert config.default_target == "test"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config" / "project.yml"
        path.parent.mkdir()
        path.write_text("")
        assert load_project_config(tmp_path) == ProjectConfig()

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "config" / "project.yml"
        path.parent.mkdir()
        path.write_text("nmae: typo\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_project_config(tmp_path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config" / "project.yml"
        path.parent.mkdir()
        path.write_text("name: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_project_config(tmp_path)

    def test_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "config" / "project.yml"
        path.parent.mkdir()
        path.write_bytes(b"name: caf\xe9\n")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_project_config(tmp_path)

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "config" / "project.yml"
        path.parent.mkdir()
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_project_config(tmp_path)


class TestPodConfig:
    def test_defaults_when_absent(self, tmp_path: Path):
        assert load_pod_config(tmp_path / "web.config.yml") == PodConfig()

    def test_task_pod(self, tmp_path: Path):
        path = tmp_path / "migrate.config.yml"
        path.write_text("pod_type: task\n")
        assert load_pod_config(path).pod_type is PodType.TASK

    def test_invalid_pod_type(self, tmp_path: Path):
        path = tmp_path / "migrate.config.yml"
        path.write_text("pod_type: daemon\n")
        with pytest.raises(ConfigError):
            load_pod_config(path)


class TestDefaultTags:
    def test_parse(self):
        tags = DefaultTags.read([
            "# pinned by CI",
            "",
            "dockercloud/hello-world:staging",
            "  postgres:9.6  ",
        ])
        assert len(tags) == 2
        assert tags.default_for("dockercloud/hello-world") == "dockercloud/hello-world:staging"
        assert tags.default_for("postgres") == "postgres:9.6"

    def test_tagged_images_unchanged(self):
        tags = DefaultTags.read(["postgres:9.6"])
        assert tags.default_for("postgres:10") == "postgres:10"
        assert tags.default_for("postgres@sha256:abc") == "postgres@sha256:abc"

    def test_unknown_image_unchanged(self):
        tags = DefaultTags.read(["postgres:9.6"])
        assert tags.default_for("redis") == "redis"

    def test_registry_port(self):
        tags = DefaultTags.read(["localhost:5000/app:v2"])
        assert tags.default_for("localhost:5000/app") == "localhost:5000/app:v2"

    def test_missing_tag_rejected(self):
        with pytest.raises(ConfigError, match="line 2 has no tag"):
            DefaultTags.read(["postgres:9.6", "redis"])

    def test_duplicate_keeps_last(self, caplog):
        with caplog.at_level(logging.WARNING):
            tags = DefaultTags.read(["redis:5", "redis:6"])
        assert tags.default_for("redis") == "redis:6"
        assert "Duplicate default tag for redis" in caplog.text

    def test_from_path(self, tmp_path: Path):
        path = tmp_path / "tags.txt"
        path.write_text("redis:6\n")
        assert DefaultTags.from_path(path).default_for("redis") == "redis:6"

    def test_from_path_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "tags.txt"
        path.write_bytes(b"caf\xe9:1.0\n")
        with pytest.raises(ConfigError, match="Cannot read default tags"):
            DefaultTags.from_path(path)

    def test_from_missing_path(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Cannot read default tags"):
            DefaultTags.from_path(tmp_path / "missing.txt")

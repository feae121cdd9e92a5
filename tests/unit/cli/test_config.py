#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for configuration file discovery and loading."""

import pytest

from bbtransform.cli.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
    merge_configs,
    options_from_config,
)
from bbtransform.exceptions import ConfigError


@pytest.mark.unit
@pytest.mark.cli
class TestLoadConfigFile:
    """Tests for reading the supported formats."""

    def test_toml(self, tmp_path) -> None:
        """Test loading a TOML file."""
        path = tmp_path / "c.toml"
        path.write_text('[parser]\nstandalone-tags = [":)"]\n', encoding="utf-8")
        assert load_config_file(path) == {"parser": {"standalone-tags": [":)"]}}

    def test_yaml(self, tmp_path) -> None:
        """Test loading a YAML file."""
        path = tmp_path / "c.yml"
        path.write_text("html:\n  sanitize-output: true\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"html": {"sanitize-output": True}}

    def test_empty_yaml(self, tmp_path) -> None:
        """Test that an empty YAML file is an empty config."""
        path = tmp_path / "c.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == {}

    def test_json(self, tmp_path) -> None:
        """Test loading a JSON file."""
        path = tmp_path / "c.json"
        path.write_text('{"html": {"keep-tags": ["b"]}}', encoding="utf-8")
        assert load_config_file(path) == {"html": {"keep-tags": ["b"]}}

    def test_pyproject_section(self, tmp_path) -> None:
        """Test reading the tool table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.bbtransform.html]\nescape-text = false\n', encoding="utf-8")
        assert load_config_file(path) == {"html": {"escape-text": False}}

    @pytest.mark.parametrize(
        "filename,content",
        [
            ("c.toml", "[parser\n"),
            ("c.json", "{nope"),
            ("c.json", "[1, 2]"),
            ("c.yaml", "html: [unclosed"),
            ("c.yaml", "- a\n- b\n"),
            ("c.ini", "[parser]\n"),
        ],
    )
    def test_invalid_files(self, tmp_path, filename: str, content: str) -> None:
        """Test that unreadable configs raise ConfigError."""
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_config_file(path)
        assert exc_info.value.config_path == str(path)

    def test_missing_file(self, tmp_path) -> None:
        """Test a nonexistent config path."""
        with pytest.raises(ConfigError, match="does not exist"):
            load_config_file(tmp_path / "missing.toml")

    def test_directory(self, tmp_path) -> None:
        """Test a directory as config path."""
        with pytest.raises(ConfigError, match="not a file"):
            load_config_file(tmp_path)


@pytest.mark.unit
@pytest.mark.cli
class TestDiscovery:
    """Tests for config discovery and priority."""

    def test_find_in_parent(self, isolated_config) -> None:
        """Test that parent directories are searched."""
        config = isolated_config / ".bbtransform.yaml"
        config.write_text("{}", encoding="utf-8")
        child = isolated_config / "a" / "b"
        child.mkdir(parents=True)
        assert find_config_in_parents(child) == config.resolve()

    def test_dedicated_file_beats_pyproject(self, isolated_config) -> None:
        """Test file priority within one directory."""
        (isolated_config / "pyproject.toml").write_text("[tool.bbtransform.html]\nescape-text = false\n")
        dedicated = isolated_config / ".bbtransform.toml"
        dedicated.write_text("", encoding="utf-8")
        assert find_config_in_parents(isolated_config) == dedicated.resolve()

    def test_pyproject_without_section_skipped(self, isolated_config) -> None:
        """Test that unrelated pyproject files are not configs."""
        (isolated_config / "pyproject.toml").write_text('[project]\nname = "x"\n')
        assert find_config_in_parents(isolated_config) is None

    def test_home_directory_fallback(self, isolated_config, monkeypatch) -> None:
        """Test discovery in the home directory."""
        home = isolated_config / "home"
        home.mkdir()
        work = isolated_config / "work"
        work.mkdir()
        config = home / ".bbtransform.json"
        config.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.setenv("USERPROFILE", str(home))
        assert discover_config_file(work) == config

    def test_priority(self, isolated_config) -> None:
        """Test explicit path, then environment path, then discovery."""
        explicit = isolated_config / "explicit.json"
        explicit.write_text('{"html": {"convert-newlines": true}}', encoding="utf-8")
        env = isolated_config / "env.json"
        env.write_text('{"html": {"sanitize-output": true}}', encoding="utf-8")
        (isolated_config / ".bbtransform.json").write_text('{"parser": {}}', encoding="utf-8")

        assert load_config_with_priority(str(explicit), str(env)) == {"html": {"convert-newlines": True}}
        assert load_config_with_priority(None, str(env)) == {"html": {"sanitize-output": True}}
        assert load_config_with_priority() == {"parser": {}}

    def test_nothing_found(self, isolated_config) -> None:
        """Test the empty default."""
        assert load_config_with_priority() == {}


@pytest.mark.unit
@pytest.mark.cli
class TestOptionsFromConfig:
    """Tests for turning config tables into option objects."""

    def test_empty(self) -> None:
        """Test that an empty config gives default options."""
        parser_options, html_options = options_from_config({})
        assert parser_options.max_nesting_depth == 100
        assert html_options.escape_text is True

    def test_values(self) -> None:
        """Test both sections."""
        parser_options, html_options = options_from_config(
            {"parser": {"preformatted-tags": ["code"]}, "html": {"keep-tags": ["spoiler"]}}
        )
        assert parser_options.preformatted_tags == frozenset({"code"})
        assert html_options.keep_tags == frozenset({"spoiler"})

    @pytest.mark.parametrize(
        "config,message",
        [
            ({"pdf": {}}, "Unknown configuration sections"),
            ({"html": True}, "must be a table"),
            ({"html": {"colour": "red"}}, "Unknown option 'colour'"),
            ({"html": {"unknown-tag-mode": "drop"}}, "unknown_tag_mode"),
        ],
    )
    def test_invalid(self, config, message: str) -> None:
        """Test configuration errors."""
        with pytest.raises(ConfigError, match=message):
            options_from_config(config)

    def test_merge_configs(self) -> None:
        """Test nested merging."""
        merged = merge_configs(
            {"html": {"escape-text": True}, "parser": {"max-nesting-depth": 3}},
            {"html": {"convert-newlines": True}, "parser": "replaced"},
        )
        assert merged == {"html": {"escape-text": True, "convert-newlines": True}, "parser": "replaced"}

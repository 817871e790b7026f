from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from uvup.config import (
    UvUpConfig,
    discover_config_file,
    load_config,
    _parse_section,
    _pyproject_has_uvup_section,
    _read_toml,
)
from uvup.exceptions import ConfigError


@pytest.mark.unit
class TestUvUpConfig:
    """Tests for UvUpConfig dataclass."""

    def test_default_initialization(self) -> None:
        config = UvUpConfig()

        assert config.timeout == 30
        assert config.max_retries == 2
        assert config.backup is False
        assert ".venv" in config.exclude
        assert config.source_path is None

    def test_exclude_lists_are_independent(self) -> None:
        first = UvUpConfig()
        second = UvUpConfig()

        first.exclude.append("examples")

        assert "examples" not in second.exclude

    def test_to_log_dict(self) -> None:
        config = UvUpConfig(timeout=5, exclude=["a"], source_path=Path("/x.toml"))

        assert config.to_log_dict() == {
            "timeout": 5,
            "max_retries": 2,
            "backup": False,
            "exclude": ["a"],
        }


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[uvup]\n", encoding="utf-8")
        (tmp_path / "uvup.toml").write_text("[uvup]\n", encoding="utf-8")

        with patch("uvup.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Configuration file not found"):
            discover_config_file(tmp_path / "missing.toml")

    def test_uvup_toml_before_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "uvup.toml").write_text("[uvup]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.uvup]\n", encoding="utf-8")

        with patch("uvup.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == tmp_path / "uvup.toml"

    def test_pyproject_with_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            "[tool.uvup]\ntimeout = 5\n", encoding="utf-8"
        )

        with patch("uvup.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == tmp_path / "pyproject.toml"

    def test_pyproject_without_section_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n', encoding="utf-8"
        )

        with patch("uvup.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_broken_pyproject_is_not_a_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.uvup\n", encoding="utf-8")

        assert _pyproject_has_uvup_section(path) is False


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        with patch("uvup.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config == UvUpConfig()

    def test_loads_uvup_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "uvup.toml"
        path.write_text(
            '[uvup]\ntimeout = 10\nbackup = true\nexclude = ["vendor"]\n',
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.timeout == 10
        assert config.backup is True
        assert config.exclude == ["vendor"]
        assert config.max_retries == 2
        assert config.source_path == path.resolve()

    def test_loads_tool_section(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.uvup]\nmax_retries = 0\n", encoding="utf-8")

        assert load_config(path).max_retries == 0

    def test_empty_section_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "uvup.toml"
        path.write_text("[other]\nkey = 1\n", encoding="utf-8")

        config = load_config(path)

        assert config.timeout == 30
        assert config.source_path == path.resolve()

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "uvup.toml"
        path.write_text("[uvup\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    @pytest.mark.parametrize(
        "filename,content,option",
        [
            ("uvup.toml", "uvup = 5\n", "uvup"),
            ("pyproject.toml", 'tool = "x"\n', "tool"),
            ("pyproject.toml", "[tool]\nuvup = [1, 2]\n", "tool.uvup"),
        ],
    )
    def test_section_must_be_table(
        self, tmp_path: Path, filename: str, content: str, option: str
    ) -> None:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigError, match="must be a table") as exc_info:
            load_config(path)

        assert exc_info.value.option == option


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section validation."""

    def test_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            _parse_section({"colour": True}, config_path="uvup.toml")

    @pytest.mark.parametrize(
        "option,value",
        [
            ("timeout", 0),
            ("timeout", "10"),
            ("timeout", True),
            ("max_retries", -1),
            ("backup", "yes"),
            ("exclude", "vendor"),
            ("exclude", ["ok", 1]),
        ],
    )
    def test_invalid_values(self, option: str, value: object) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({option: value}, config_path="uvup.toml")

        assert exc_info.value.option == option

    def test_valid_section(self) -> None:
        config = _parse_section(
            {"timeout": 3, "max_retries": 1, "backup": True, "exclude": []},
            config_path="uvup.toml",
        )

        assert (config.timeout, config.max_retries, config.backup) == (3, 1, True)
        assert config.exclude == []


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml."""

    def test_reads_document(self, tmp_path: Path) -> None:
        path = tmp_path / "x.toml"
        path.write_text("a = 1\n", encoding="utf-8")

        assert _read_toml(path) == {"a": 1}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            _read_toml(tmp_path / "missing.toml")

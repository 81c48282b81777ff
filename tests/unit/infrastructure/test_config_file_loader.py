"""Unit tests for ConfigFileLoader."""

from pathlib import Path

from handlergen.infrastructure.config_file_loader import ConfigFileLoader


class TestLoadConfigFromFs:
    """Test ConfigFileLoader.load_config_from_fs."""

    def test_reads_tool_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.handlergen]\noutput_suffix = "_dispatch"\nheader = false\n'
        )
        config = ConfigFileLoader.load_config_from_fs(tmp_path)
        assert config == {"output_suffix": "_dispatch", "header": False}

    def test_walks_up_to_nearest_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.handlergen]\nheader = true\n')
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        assert ConfigFileLoader.load_config_from_fs(nested) == {"header": True}

    def test_pyproject_without_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')
        assert ConfigFileLoader.load_config_from_fs(tmp_path) == {}

    def test_nearest_pyproject_wins(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.handlergen]\nheader = false\n')
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / "pyproject.toml").write_text('[project]\nname = "inner"\n')
        assert ConfigFileLoader.load_config_from_fs(inner) == {}

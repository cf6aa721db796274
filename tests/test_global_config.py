"""Tests for the YAML configuration loader."""

from pathlib import Path

import pytest

from utils.parsers.global_config_parser import (
    FLAT_KEY_MAP,
    ConfigFileError,
    ConfigValidationError,
    GlobalConfig,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in FLAT_KEY_MAP:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


BASE = """
paths:
  input_path: model.json
  out_dir: ${XYDOC_TEST_OUT:-build/out}
pdf:
  margin_left: 40
  author: Docs Team
logging:
  level: WARNING
  debug: "yes"
"""


class TestLoading:

    def test_dot_paths_and_types(self, tmp_path):
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE))

        assert config.get_float("pdf.margin_left") == 40.0
        assert config.get("pdf.author") == "Docs Team"
        assert config.get_bool("logging.debug") is True
        assert config.get("pdf.missing", "fallback") == "fallback"

    def test_paths_are_resolved(self, tmp_path):
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE))
        assert config.get("paths.input_path") == str((tmp_path / "model.json").resolve())
        assert config.get_path("paths.out_dir") == str((tmp_path / "build" / "out").resolve())

    def test_env_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XYDOC_TEST_OUT", str(tmp_path / "elsewhere"))
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE))
        assert config.get("paths.out_dir") == str((tmp_path / "elsewhere").resolve())

    def test_env_overrides_win(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XYDOC_AUTHOR", "Env Author")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE))

        assert config.get("pdf.author") == "Env Author"
        assert config.get("LOG_LEVEL") == "DEBUG"

    def test_env_overrides_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XYDOC_AUTHOR", "Env Author")
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE), env_override=False)
        assert config.get("pdf.author") == "Docs Team"

    def test_override_file_deep_merges(self, tmp_path):
        override = write(tmp_path / "local.yaml", "pdf:\n  margin_left: 30\n")
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE), override_file=override)

        assert config.get_float("pdf.margin_left") == 30.0
        assert config.get("pdf.author") == "Docs Team"

    def test_auto_discovery(self, tmp_path):
        write(tmp_path / "global_config.yaml", "pdf:\n  author: Found\n")
        assert GlobalConfig().get("pdf.author") == "Found"

    def test_no_file_means_empty(self):
        config = GlobalConfig()
        assert config.get("paths.out_dir") is None
        assert config.has("paths.out_dir") is False


class TestErrors:

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigFileError):
            GlobalConfig(config_file=str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigFileError):
            GlobalConfig(config_file=write(tmp_path / "bad.yaml", "pdf: [unclosed\n"))

    def test_non_mapping_root(self, tmp_path):
        with pytest.raises(ConfigFileError):
            GlobalConfig(config_file=write(tmp_path / "list.yaml", "- a\n- b\n"))

    def test_required_keys(self, tmp_path):
        path = write(tmp_path / "c.yaml", "pdf:\n  author: x\n")
        with pytest.raises(ConfigValidationError):
            GlobalConfig(config_file=path, required=["paths.input_path"])

    def test_bad_number_falls_back(self, tmp_path):
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", "pdf:\n  margin_left: wide\n"))
        assert config.get_float("pdf.margin_left", 54.0) == 54.0


class TestAccessors:

    def test_set_by_dot_path_and_env_key(self, tmp_path):
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", BASE))
        config.set("XYDOC_OUT_DIR", "cli-out")
        config.set("pdf.author", "CLI")

        assert config.get("paths.out_dir") == str((tmp_path / "cli-out").resolve())
        assert config.get("XYDOC_AUTHOR") == "CLI"
        assert config.has("pdf.author")

    def test_set_creates_missing_sections(self, tmp_path):
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", "pdf: flat\n"))
        config.set("pdf.fonts_dir", "fonts")
        assert config.get_path("pdf.fonts_dir") == str((tmp_path / "fonts").resolve())

    def test_unresolved_reference_kept(self, tmp_path):
        config = GlobalConfig(config_file=write(tmp_path / "c.yaml", "pdf:\n  author: ${XYDOC_NOBODY}\n"))
        assert config.get("pdf.author") == "${XYDOC_NOBODY}"

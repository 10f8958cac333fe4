"""Tests for configuration loading, validation and saving."""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest
import yaml

from quakelog.core.config import (
    LoggingConfig,
    QuakeLogConfig,
    dict_to_config,
    generate_default_config,
    load_config,
    load_config_file,
    load_env_config,
    merge_configs,
    save_config,
    setup_logging,
    validate_config,
)
from quakelog.core.parser import parse_log

ENV_VARS = [
    "QUAKELOG_LOG_LEVEL",
    "QUAKELOG_LOG_FILE",
    "QUAKELOG_ENCODING",
    "QUAKELOG_EXPORT_FORMAT",
    "QUAKELOG_TOP_N",
]


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """No config files or QUAKELOG_* variables leak in from the machine."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.chdir(tmp_path)
    yield tmp_path


class TestDefaults:
    """Tests for the default configuration."""

    def test_defaults(self):
        config = QuakeLogConfig()
        assert config.parser.encoding == "utf-8"
        assert config.parser.errors == "replace"
        assert config.report.top_n is None
        assert config.export.default_format == "json"
        assert config.logging.level == "INFO"

    def test_load_without_sources(self, isolated_env):
        config = load_config()
        assert config == QuakeLogConfig()


class TestLoading:
    """Tests for reading config files and environment variables."""

    def test_load_yaml(self, isolated_env):
        path = isolated_env / "custom.yaml"
        path.write_text("report:\n  top_n: 3\nexport:\n  default_format: csv\n")

        config = load_config(path)
        assert config.report.top_n == 3
        assert config.export.default_format == "csv"
        assert config.parser.encoding == "utf-8"

    def test_load_json(self, isolated_env):
        path = isolated_env / "custom.json"
        path.write_text(json.dumps({"logging": {"level": "debug"}}))

        config = load_config(path)
        assert config.logging.level == "DEBUG"

    def test_load_toml(self, isolated_env):
        path = isolated_env / "custom.toml"
        path.write_text('[parser]\nencoding = "latin-1"\n\n[report]\nshow_means = false\n')

        config = load_config(path)
        assert config.parser.encoding == "latin-1"
        assert config.report.show_means is False

    def test_default_path_in_cwd(self, isolated_env):
        (isolated_env / "quakelog.yaml").write_text("report:\n  top_n: 7\n")
        assert load_config().report.top_n == 7

    def test_missing_file_is_empty(self, tmp_path):
        assert load_config_file(tmp_path / "nope.yaml") == {}

    def test_unknown_suffix_is_empty(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[parser]\n")
        assert load_config_file(path) == {}

    def test_unknown_keys_ignored(self):
        config = dict_to_config({"parser": {"encoding": "ascii", "bogus": 1}, "other": {"x": 1}})
        assert config.parser.encoding == "ascii"
        assert not hasattr(config.parser, "bogus")

    def test_env_config(self, isolated_env, monkeypatch):
        monkeypatch.setenv("QUAKELOG_TOP_N", "5")
        monkeypatch.setenv("QUAKELOG_EXPORT_FORMAT", "CSV")
        monkeypatch.setenv("QUAKELOG_LOG_LEVEL", "warning")

        assert load_env_config() == {
            "report": {"top_n": 5},
            "export": {"default_format": "CSV"},
            "logging": {"level": "warning"},
        }

        config = load_config()
        assert config.report.top_n == 5
        assert config.export.default_format == "csv"
        assert config.logging.level == "WARNING"

    def test_env_overrides_file(self, isolated_env, monkeypatch):
        path = isolated_env / "custom.yaml"
        path.write_text("report:\n  top_n: 3\n")
        monkeypatch.setenv("QUAKELOG_TOP_N", "10")

        assert load_config(path).report.top_n == 10
        assert load_config(path, include_env=False).report.top_n == 3

    def test_env_text_values_stay_strings(self, isolated_env, monkeypatch):
        """Numeric-looking codec names and paths are not turned into numbers."""
        monkeypatch.setenv("QUAKELOG_ENCODING", "1252")
        monkeypatch.setenv("QUAKELOG_LOG_FILE", "2024")

        assert load_env_config() == {
            "parser": {"encoding": "1252"},
            "logging": {"file": "2024"},
        }
        assert load_config().parser.encoding == "1252"

    def test_env_encoding_reads_file(self, isolated_env, monkeypatch):
        monkeypatch.setenv("QUAKELOG_ENCODING", "1252")
        log_file = isolated_env / "games.log"
        log_file.write_bytes(
            b"0:00 InitGame: x\n"
            b"0:01 Kill: 1 2 3: Jo\xe3o killed B by MOD_X\n"
        )

        parser = parse_log(log_file, load_config().parser)
        assert parser.overall_killers == {"João": 1}

    def test_env_top_n_not_a_number(self, isolated_env, monkeypatch):
        monkeypatch.setenv("QUAKELOG_TOP_N", "ten")
        assert load_env_config() == {"report": {"top_n": "ten"}}
        with pytest.raises(ValueError, match="top_n"):
            load_config()

    def test_merge_configs(self):
        base = {"report": {"top_n": 1, "show_means": True}, "parser": {"encoding": "utf-8"}}
        override = {"report": {"top_n": 2}}
        assert merge_configs(base, override) == {
            "report": {"top_n": 2, "show_means": True},
            "parser": {"encoding": "utf-8"},
        }
        assert base["report"]["top_n"] == 1


class TestValidation:
    """Tests for validate_config()."""

    def test_bad_log_level(self):
        config = QuakeLogConfig()
        config.logging.level = "LOUD"
        with pytest.raises(ValueError, match="log level"):
            validate_config(config)

    def test_bad_export_format(self):
        config = QuakeLogConfig()
        config.export.default_format = "parquet"
        with pytest.raises(ValueError, match="export format"):
            validate_config(config)

    @pytest.mark.parametrize("top_n", [0, -1, "ten"])
    def test_bad_top_n(self, top_n):
        config = QuakeLogConfig()
        config.report.top_n = top_n
        with pytest.raises(ValueError, match="top_n"):
            validate_config(config)

    def test_numeric_encoding_from_yaml(self, isolated_env):
        path = isolated_env / "custom.yaml"
        path.write_text("parser:\n  encoding: 1252\n")
        assert load_config(path).parser.encoding == "1252"

    def test_unknown_encoding(self):
        config = QuakeLogConfig()
        config.parser.encoding = "no-such-codec"
        with pytest.raises(ValueError, match="encoding"):
            validate_config(config)

    def test_unknown_error_handler(self):
        config = QuakeLogConfig()
        config.parser.errors = "shrug"
        with pytest.raises(ValueError, match="error handler"):
            validate_config(config)

    def test_invalid_file_raises(self, isolated_env):
        path = isolated_env / "bad.yaml"
        path.write_text("export:\n  default_format: pdf\n")
        with pytest.raises(ValueError):
            load_config(path)


class TestSaving:
    """Tests for save_config() and generate_default_config()."""

    def test_save_yaml(self, tmp_path):
        config = QuakeLogConfig()
        config.report.top_n = 4
        path = tmp_path / "saved.yaml"
        save_config(config, path)

        data = yaml.safe_load(path.read_text())
        assert data["report"]["top_n"] == 4
        assert dict_to_config(data) == config

    def test_save_json(self, tmp_path):
        path = tmp_path / "saved.json"
        save_config(QuakeLogConfig(), path)
        assert json.loads(path.read_text())["export"]["default_format"] == "json"

    def test_save_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            save_config(QuakeLogConfig(), tmp_path / "saved.toml")

    def test_generate_default_yaml(self, isolated_env):
        path = isolated_env / "quakelog.yaml"
        generate_default_config(path)
        assert "default_format: json" in path.read_text()
        assert load_config(path) == QuakeLogConfig()

    def test_generate_default_json(self, isolated_env):
        path = isolated_env / "quakelog.json"
        generate_default_config(path)
        assert load_config(path) == QuakeLogConfig()


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_level_from_config(self):
        setup_logging(LoggingConfig(level="WARNING"))
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_forces_debug(self):
        setup_logging(LoggingConfig(level="ERROR"), verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "quakelog.log"
        setup_logging(LoggingConfig(file=str(log_file)))
        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(log_file)

"""Tests for bashlint configuration system."""

import os
import tempfile
from pathlib import Path

import pytest

from bashlint.config import (
    LintConfig,
    env_overrides,
    find_config_file,
    get_default_config,
    load_config,
    load_toml_config,
    merge_config,
    validate_toml_config,
)
from bashlint.errors import ExitCode, InvalidArgsError


def test_default_config():
    """Test default configuration values."""
    config = get_default_config()

    assert config.check_shebang is True
    assert config.check_unused_vars is True
    assert config.enabled_rules == []
    assert config.disabled_rules == []
    assert config.output_format == "text"
    assert config.color is True


def test_find_config_file():
    """Test finding bashlint.toml in directory hierarchy."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        subdir = root / "scripts" / "ci"
        subdir.mkdir(parents=True)

        config_file = root / "bashlint.toml"
        config_file.write_text("[checks]\n", encoding="utf-8")

        assert find_config_file(subdir) == config_file.resolve()
        assert find_config_file(root) == config_file.resolve()


def test_load_toml_config():
    """Test loading TOML configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_file = Path(tmpdir) / "bashlint.toml"
        config_file.write_text(
            """
[checks]
shebang = false
unused_vars = true

[rules]
enable = ["SH-X*", "SH-U*"]
disable = ["SH-X402-INSECURE-SUDO"]

[output]
format = "json"
color = false
""",
            encoding="utf-8",
        )

        toml_config = load_toml_config(config_file)
        config = merge_config(get_default_config(), toml_config)

        assert config.check_shebang is False
        assert config.check_unused_vars is True
        assert config.enabled_rules == ["SH-X*", "SH-U*"]
        assert config.disabled_rules == ["SH-X402-INSECURE-SUDO"]
        assert config.output_format == "json"
        assert config.color is False


class TestValidation:
    """Test schema validation of bashlint.toml."""

    def test_valid_document(self):
        assert validate_toml_config({"checks": {"shebang": True}}) == []

    def test_unknown_table_rejected(self):
        errors = validate_toml_config({"core": {}})

        assert len(errors) == 1
        assert "core" in errors[0]

    def test_wrong_type_rejected(self):
        errors = validate_toml_config({"checks": {"shebang": "no"}})

        assert errors and errors[0].startswith("checks.shebang")

    def test_invalid_file_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_file = Path(tmpdir) / "bashlint.toml"
            config_file.write_text('[output]\nformat = "xml"\n', encoding="utf-8")

            with pytest.raises(InvalidArgsError) as excinfo:
                load_toml_config(config_file)

            assert excinfo.value.exit_code == ExitCode.INVALID_ARGS

    def test_malformed_toml_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_file = Path(tmpdir) / "bashlint.toml"
            config_file.write_text("[checks\n", encoding="utf-8")

            with pytest.raises(InvalidArgsError, match="Invalid TOML"):
                load_toml_config(config_file)


class TestEnvironment:
    """Test environment overrides."""

    def test_boolean_words(self):
        overrides = env_overrides(
            {"BASHLINT_CHECK_SHEBANG": "off", "BASHLINT_CHECK_UNUSED_VARS": "YES"}
        )

        assert overrides == {"check_shebang": False, "check_unused_vars": True}

    def test_invalid_values_ignored(self):
        overrides = env_overrides({"BASHLINT_CHECK_SHEBANG": "maybe", "BASHLINT_FORMAT": "xml"})

        assert overrides == {}

    def test_no_color(self):
        assert env_overrides({"NO_COLOR": "1"}) == {"color": False}
        assert env_overrides({"NO_COLOR": ""}) == {}


def test_precedence():
    """CLI > ENV > TOML > defaults."""
    base = LintConfig()
    toml_config = {"checks": {"shebang": False, "unused_vars": False}, "output": {"format": "json"}}
    env = {"check_unused_vars": True, "output_format": "text"}
    cli = {"output_format": "json", "check_shebang": None}

    config = merge_config(base, toml_config, env, cli)

    assert config.check_shebang is False  # TOML, CLI None ignored
    assert config.check_unused_vars is True  # ENV over TOML
    assert config.output_format == "json"  # CLI over ENV


def test_load_config_explicit_path_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(InvalidArgsError, match="does not exist"):
            load_config(Path(tmpdir) / "nope.toml", environ={})


def test_load_config_discovers_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "bashlint.toml").write_text("[checks]\nshebang = false\n", encoding="utf-8")

        original = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config(environ={}, cli_overrides={"check_unused_vars": False})
        finally:
            os.chdir(original)

        assert config.check_shebang is False
        assert config.check_unused_vars is False

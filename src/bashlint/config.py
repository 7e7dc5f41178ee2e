"""bashlint configuration management with precedence handling."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from bashlint.errors import InvalidArgsError
from bashlint.export import load_schema

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "bashlint.toml"
OUTPUT_FORMATS = ("text", "json")

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


@dataclass
class LintConfig:
    """
    bashlint configuration with defaults.

    Precedence: CLI args > Environment > bashlint.toml > defaults
    """

    # Checks
    check_shebang: bool = True
    check_unused_vars: bool = True

    # Rules (patterns matched against rule IDs; empty enable list means all)
    enabled_rules: list[str] = field(default_factory=list)
    disabled_rules: list[str] = field(default_factory=list)

    # Output
    output_format: str = "text"
    color: bool = True


def get_default_config() -> LintConfig:
    return LintConfig()


def find_config_file(start_path: Path | None = None) -> Path | None:
    """
    Find bashlint.toml in current directory or parent directories.

    Args:
        start_path: Starting directory (default: current directory)

    Returns:
        Path to bashlint.toml if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while True:
        config_path = current / CONFIG_FILENAME
        if config_path.is_file():
            return config_path

        if current.parent == current:
            break

        current = current.parent

    return None


def validate_toml_config(toml_config: dict[str, Any]) -> list[str]:
    """
    Validate a parsed bashlint.toml document against the bundled schema.

    Returns:
        Error messages (empty when valid)
    """
    validator = Draft202012Validator(load_schema("config"))
    errors = sorted(validator.iter_errors(toml_config), key=lambda e: list(e.path))
    return [f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors]


def load_toml_config(config_path: Path) -> dict[str, Any]:
    """
    Load and validate configuration from a bashlint.toml file.

    Raises:
        InvalidArgsError: If the file is not valid TOML or fails validation
    """
    try:
        with open(config_path, "rb") as f:
            toml_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise InvalidArgsError(f"Invalid TOML in {config_path}: {e}") from e
    except OSError as e:
        raise InvalidArgsError(f"Cannot read config file {config_path}: {e}") from e

    errors = validate_toml_config(toml_config)
    if errors:
        raise InvalidArgsError(f"Invalid configuration in {config_path}: {'; '.join(errors)}")

    logger.debug("loaded configuration from %s", config_path)
    return toml_config


def parse_bool(value: str) -> bool | None:
    """
    Parse a boolean environment word.

    Examples:
        >>> parse_bool("off")
        False
        >>> parse_bool("maybe") is None
        True
    """
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect configuration overrides from BASHLINT_* variables and NO_COLOR."""
    if environ is None:
        environ = dict(os.environ)

    overrides: dict[str, Any] = {}
    for var, key in (
        ("BASHLINT_CHECK_SHEBANG", "check_shebang"),
        ("BASHLINT_CHECK_UNUSED_VARS", "check_unused_vars"),
    ):
        if var in environ:
            value = parse_bool(environ[var])
            if value is None:
                logger.warning("ignoring %s=%r: not a boolean", var, environ[var])
            else:
                overrides[key] = value

    if "BASHLINT_FORMAT" in environ:
        fmt = environ["BASHLINT_FORMAT"].strip().lower()
        if fmt in OUTPUT_FORMATS:
            overrides["output_format"] = fmt
        else:
            logger.warning("ignoring BASHLINT_FORMAT=%r: expected one of %s", fmt, ", ".join(OUTPUT_FORMATS))

    if environ.get("NO_COLOR"):
        overrides["color"] = False

    return overrides


def merge_config(
    base: LintConfig,
    toml_config: dict[str, Any] | None = None,
    env: dict[str, Any] | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> LintConfig:
    """
    Merge configurations with precedence: CLI > ENV > TOML > defaults.

    Args:
        base: Base configuration (usually defaults)
        toml_config: Configuration from bashlint.toml
        env: Overrides from environment variables
        cli_overrides: Overrides from CLI arguments (None values are ignored)

    Returns:
        Merged LintConfig
    """
    config_dict = {
        "check_shebang": base.check_shebang,
        "check_unused_vars": base.check_unused_vars,
        "enabled_rules": base.enabled_rules[:],
        "disabled_rules": base.disabled_rules[:],
        "output_format": base.output_format,
        "color": base.color,
    }

    if toml_config:
        checks = toml_config.get("checks", {})
        if "shebang" in checks:
            config_dict["check_shebang"] = checks["shebang"]
        if "unused_vars" in checks:
            config_dict["check_unused_vars"] = checks["unused_vars"]

        rules = toml_config.get("rules", {})
        if "enable" in rules:
            config_dict["enabled_rules"] = list(rules["enable"])
        if "disable" in rules:
            config_dict["disabled_rules"] = list(rules["disable"])

        output = toml_config.get("output", {})
        if "format" in output:
            config_dict["output_format"] = output["format"]
        if "color" in output:
            config_dict["color"] = output["color"]

    for overrides in (env, cli_overrides):
        if overrides:
            for key, value in overrides.items():
                if value is not None and key in config_dict:
                    config_dict[key] = value

    return LintConfig(**config_dict)


def load_config(
    config_path: Path | str | None = None,
    cli_overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> LintConfig:
    """
    Load bashlint configuration with full precedence handling.

    Args:
        config_path: Explicit path to bashlint.toml (from --config flag)
        cli_overrides: Overrides from CLI arguments
        environ: Environment mapping (default: os.environ)

    Returns:
        Merged LintConfig

    Raises:
        InvalidArgsError: If an explicit config path is missing or invalid
    """
    toml_config = None
    if config_path:
        config_file = Path(config_path)
        if not config_file.is_file():
            raise InvalidArgsError(f"Config file does not exist: {config_file}")
        toml_config = load_toml_config(config_file)
    else:
        config_file = find_config_file()
        if config_file:
            toml_config = load_toml_config(config_file)

    return merge_config(get_default_config(), toml_config, env_overrides(environ), cli_overrides)

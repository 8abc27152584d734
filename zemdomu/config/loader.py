"""Configuration loader for zemdomu.

Supports two config sources:

1. **kind: Config YAML**, loaded via explicit path or the
   ``ZEMDOMU_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.zemdomu]**, auto-discovered from the working
   directory upwards.

When neither exists the defaults apply; a missing config is never an error.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any, cast

import pydantic
import yaml

from zemdomu.config.models import LinterOptions, LoggingConfig, ZemDomuConfig
from zemdomu.exceptions import ConfigurationError
from zemdomu.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse a boolean environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = _TRUTHY_VALUES | _FALSY_VALUES
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


class ConfigLoader:
    """Loads zemdomu configuration from YAML or pyproject.toml."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd or Path.cwd()

    def load(self, path: str | Path | None = None) -> ZemDomuConfig:
        """Load configuration, falling back to defaults when nothing is found.

        Parameters
        ----------
        path : str | Path | None
            Explicit config file. If None, searches using discovery order.

        Raises
        ------
        ConfigurationError
            If an explicit file is missing or a found file is malformed
        """
        config_path = self._find_config_file(path)
        if config_path is None:
            logger.debug("No zemdomu configuration found, using defaults")
            config = ZemDomuConfig()
            config.logging = self._parse_logging_config({})
            config.linter = self._apply_env_overrides(config.linter)
            return config

        logger.info("Loading configuration from {path}", path=config_path)
        if config_path.suffix in (".yaml", ".yml"):
            data = self._load_yaml(config_path)
        else:
            data = self._load_toml(config_path)

        config = self._parse_config(self._substitute_env_vars(data), config_path)
        config.source = config_path
        return config

    def _find_config_file(self, path: str | Path | None) -> Path | None:
        """Find the configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``ZEMDOMU_CONFIG_PATH`` env var
        3. ``pyproject.toml`` with ``[tool.zemdomu]`` in cwd or a parent
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise ConfigurationError(str(config_path), "configuration file not found")
            return config_path

        if env_path := os.getenv("ZEMDOMU_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from ZEMDOMU_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("ZEMDOMU_CONFIG_PATH set but file not found: {}", config_path)

        current = self.cwd.resolve()
        while True:
            pyproject = current / "pyproject.toml"
            if pyproject.exists():
                try:
                    with pyproject.open("rb") as f:
                        data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    logger.warning("Skipping unreadable {path}: {error}", path=pyproject, error=e)
                else:
                    if "zemdomu" in data.get("tool", {}):
                        return pyproject
            if current == current.parent:
                return None
            current = current.parent

    def _load_yaml(self, config_path: Path) -> dict[str, Any]:
        """Load a kind: Config YAML file and return its spec mapping."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(config_path.name, f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                config_path.name, f"must use 'kind: Config' manifest format, got 'kind: {kind}'"
            )

        spec = data.get("spec", {})
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' must be a mapping")
        return spec

    def _load_toml(self, config_path: Path) -> dict[str, Any]:
        """Load a TOML file, returning its [tool.zemdomu] table or the whole file."""
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(config_path.name, f"invalid TOML: {e}") from e

        tool_data = data.get("tool", {}).get("zemdomu")
        if tool_data is not None:
            return cast("dict[str, Any]", tool_data)
        if config_path.name == "pyproject.toml":
            logger.warning("No [tool.zemdomu] section found in pyproject.toml, using defaults")
            return {}
        return data

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders from the environment."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        "Environment variable ${{{var_name}}} not found, keeping placeholder",
                        var_name=var_name,
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any], config_path: Path) -> ZemDomuConfig:
        """Turn a raw mapping into a ZemDomuConfig."""
        linter_data = {key: value for key, value in data.items() if key != "logging"}
        if "exclude" in linter_data and isinstance(linter_data["exclude"], list):
            linter_data["exclude"] = tuple(linter_data["exclude"])
        root_dir = linter_data.get("root_dir", linter_data.get("rootDir"))
        if root_dir:
            resolved = (config_path.parent / str(root_dir)).resolve()
            linter_data.pop("rootDir", None)
            linter_data["root_dir"] = resolved

        try:
            linter = LinterOptions.model_validate(linter_data)
        except pydantic.ValidationError as e:
            raise ConfigurationError(config_path.name, str(e)) from e

        logging_data = data.get("logging", {})
        if not isinstance(logging_data, dict):
            raise ConfigurationError(config_path.name, "'logging' must be a mapping")

        return ZemDomuConfig(
            linter=self._apply_env_overrides(linter),
            logging=self._parse_logging_config(logging_data),
        )

    def _apply_env_overrides(self, linter: LinterOptions) -> LinterOptions:
        """Apply ZEMDOMU_CROSS_COMPONENT on top of file values."""
        if env_cross := os.getenv("ZEMDOMU_CROSS_COMPONENT"):
            try:
                enabled = _parse_bool_env(env_cross)
            except ValueError as e:
                logger.warning("Invalid ZEMDOMU_CROSS_COMPONENT value: {}", e)
            else:
                logger.debug("Overriding cross_component_analysis from env: {}", enabled)
                return linter.with_overrides(cross_component_analysis=enabled)
        return linter

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - ZEMDOMU_LOG_LEVEL
        - ZEMDOMU_LOG_FORMAT
        - ZEMDOMU_LOG_FILE
        - ZEMDOMU_LOG_COLOR
        """
        level = logging_data.get("level", "WARNING")
        format_type = logging_data.get("format", "structured")
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)

        if env_level := os.getenv("ZEMDOMU_LOG_LEVEL"):
            level = env_level.upper()
        if env_format := os.getenv("ZEMDOMU_LOG_FORMAT"):
            format_type = env_format.lower()
        if env_file := os.getenv("ZEMDOMU_LOG_FILE"):
            output_file = env_file
        if env_color := os.getenv("ZEMDOMU_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid ZEMDOMU_LOG_COLOR value: {}", e)

        return LoggingConfig(
            level=level.upper(),
            format=format_type,
            output_file=output_file,
            use_color=use_color,
        )


def load_config(path: str | Path | None = None, cwd: Path | None = None) -> ZemDomuConfig:
    """Load configuration with the default discovery order."""
    return ConfigLoader(cwd=cwd).load(path)

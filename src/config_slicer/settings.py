"""
Slicer settings using pydantic-settings.

Loads construction-time options from:
1. Constructor arguments (highest precedence)
2. Environment variables with CONFIG_SLICER_ prefix
3. Field defaults

    CONFIG_SLICER_PREFIX='plug\\.'
    CONFIG_SLICER_SEPARATOR='(.+?)\\.(.+?)'
    CONFIG_SLICER_JOIN=' '

SlicerSettings.from_yaml() reads the same options from a YAML mapping.
"""

from __future__ import annotations

import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import config_slicer.errors as errors
import config_slicer.patterns as patterns


class SlicerSettings(_pydantic_settings.BaseSettings):
    """Options controlling how keys are split and values are joined."""

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="CONFIG_SLICER_",
        extra="forbid",
    )

    prefix: str = _pydantic.Field(
        default=patterns.DEFAULT_PREFIX,
        description="Regex fragment matched before the plugin qualifier",
    )

    separator: str = _pydantic.Field(
        default=patterns.DEFAULT_SEPARATOR,
        description="Regex fragment capturing qualifier and attribute",
    )

    join: str | None = _pydantic.Field(
        default=None,
        description="Separator used to join text values during merge",
    )

    @_pydantic.field_validator("prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        try:
            _re.compile(value)
        except _re.error as e:
            raise ValueError(f"prefix is not a valid regular expression: {e}") from e
        return value

    @_pydantic.field_validator("separator")
    @classmethod
    def _validate_separator(cls, value: str) -> str:
        try:
            compiled = _re.compile(value)
        except _re.error as e:
            raise ValueError(f"separator is not a valid regular expression: {e}") from e
        if compiled.groups < 2:
            raise ValueError("separator must have two capture groups (qualifier, attribute)")
        return value

    @classmethod
    def from_yaml(cls, path: _pathlib.Path | str, **overrides: _typing.Any) -> SlicerSettings:
        """
        Load settings from a YAML file.

        Environment variables still apply to options the file leaves out;
        overrides take precedence over both.

        Args:
            path: YAML file containing a mapping of option names to values.
            **overrides: Options overriding the file's values.

        Raises:
            ConfigFileError: If the file cannot be read, is malformed YAML,
                or does not contain a mapping.
            pydantic.ValidationError: If an option value is invalid.
        """
        path = _pathlib.Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise errors.ConfigFileError(path, f"cannot read file: {e}") from e

        try:
            parsed = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise errors.ConfigFileError(path, f"invalid YAML: {e}") from e

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            type_name = type(parsed).__name__
            raise errors.ConfigFileError(
                path,
                f"config must be a YAML mapping (dict), got {type_name}",
            )

        return cls(**{**parsed, **overrides})

    def key_pattern(self) -> patterns.KeyPattern:
        """Compile the key pattern these settings describe."""
        return patterns.KeyPattern(self.prefix, self.separator)

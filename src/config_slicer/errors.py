"""
Exceptions raised by config_slicer.

Everything derives from SlicerError so callers can catch the whole family.
Keys that do not parse and qualifiers that do not belong to a plugin are
not errors; they are skipped silently by the slicer.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing


class SlicerError(Exception):
    """Base class for all config_slicer errors."""

    pass


class UnrecognizedPluginSpecError(SlicerError, TypeError):
    """Raised when a plugin spec is neither a triple nor a named plugin object."""

    def __init__(self, spec: _typing.Any) -> None:
        self.spec = spec
        super().__init__(f"Don't know how to handle {spec!r}")


class AttributeNotFoundError(SlicerError, AttributeError):
    """Raised when a sliced attribute has no writable field on the target."""

    def __init__(self, plugin_name: str, plugin_class: str, attribute: str) -> None:
        self.plugin_name = plugin_name
        self.plugin_class = plugin_class
        self.attribute = attribute
        super().__init__(
            f"Attribute '{attribute}' not found on {plugin_name}/{plugin_class}"
        )


class KeyPatternError(SlicerError, ValueError):
    """Raised when prefix and separator do not form a usable key pattern."""

    pass


class ConfigFileError(SlicerError):
    """Error loading or parsing a slicer settings file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")

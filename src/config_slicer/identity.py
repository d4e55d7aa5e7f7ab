"""
Plugin identity normalization.

The slicer accepts plugins in two shapes:

1. A triple ``[name, class_identifier, config]`` as produced when a bundle
   lists the plugins it loads. The config is usually a dict to merge into,
   but may also be an object with writable fields.
2. A plugin instance exposing ``plugin_name`` (attribute, property or
   zero-argument method). Its class identifier is its runtime type name and
   the instance itself is the merge target.
"""

from __future__ import annotations

import typing as _typing

import config_slicer.errors as errors


class PluginIdentity(_typing.NamedTuple):
    """Normalized (name, class identifier, config-or-target) triple."""

    name: str
    plugin_class: str
    config: _typing.Any


def plugin_info(spec: _typing.Any) -> PluginIdentity:
    """
    Normalize a plugin spec into a PluginIdentity.

    Args:
        spec: A 3-item list/tuple or an object with a plugin_name accessor.

    Returns:
        PluginIdentity for the spec. Triples are returned unchanged
        (the config element is the same object, not a copy).

    Raises:
        UnrecognizedPluginSpecError: If spec has neither shape.
    """
    if isinstance(spec, PluginIdentity):
        return spec

    # plugin bundles: ["name", "class", {"con": "fig"}]
    if isinstance(spec, (list, tuple)):
        if len(spec) != 3:
            raise errors.UnrecognizedPluginSpecError(spec)
        name, plugin_class, config = spec
        return PluginIdentity(name, plugin_class, config)

    # plugin instances
    if hasattr(spec, "plugin_name"):
        name = spec.plugin_name
        if callable(name):
            name = name()
        return PluginIdentity(name, type(spec).__name__, spec)

    raise errors.UnrecognizedPluginSpecError(spec)

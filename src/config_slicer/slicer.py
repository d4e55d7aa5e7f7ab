"""
Extract embedded plugin configuration from a parent configuration.

A bundle's flattened config can carry settings for the plugins it loads:

    [@MyBundle]
    bundle_option = value
    Other::Plugin.setting = new value
    Baz.quux[0] = part 1
    Baz.quux[1] = part 2

Slicer.slice() pulls out the keys belonging to one plugin, strips the
qualifier and subscript, and reassembles subscripted keys into lists:

    >>> slicer = Slicer({"Baz.quux[0]": "part 1", "Baz.quux[1]": "part 2"})
    >>> slicer.slice(["Baz", "Baz", {}])
    {'quux': ['part 1', 'part 2']}

Keys are processed in ascending string order of the whole key, so
subscripts sort alphabetically: "quux[10]" comes before "quux[9]".

Slicer.merge() applies a slice to the plugin's config dict or to the
writable fields of a plugin object.
"""

from __future__ import annotations

import collections.abc as _collections_abc
import logging as _logging
import re as _re
import types as _types
import typing as _typing

import config_slicer.errors as errors
import config_slicer.identity as identity
import config_slicer.matching as matching
import config_slicer.patterns as patterns
import config_slicer.settings as settings
import config_slicer.targets as targets

_logger = _logging.getLogger(__name__)

Slice = dict[str, _typing.Any]


def _is_sequence(value: _typing.Any) -> bool:
    return isinstance(value, (list, tuple))


def _spread(value: _typing.Any) -> list[_typing.Any]:
    """Elements of value if it is a sequence, else value as one element."""
    if _is_sequence(value):
        return list(value)
    return [value]


def update_hash(
    dest: _typing.MutableMapping[str, _typing.Any],
    key: str,
    value: _typing.Any,
    *,
    array: bool = False,
) -> None:
    """
    Store value under key, appending if the key holds or wants a list.

    The value is appended (elements spread if value is a list or tuple)
    when any of these hold:

    - array is True
    - dest[key] already is a list or tuple
    - value is a list or tuple

    An existing non-sequence value is wrapped into a list first. Otherwise
    dest[key] is overwritten.

    Args:
        dest: Mapping to update in place.
        key: Attribute name.
        value: New value.
        array: Force list form (the key carried a subscript).
    """
    exists = key in dest
    if array or (exists and _is_sequence(dest[key])) or _is_sequence(value):
        if not exists:
            dest[key] = []
        elif isinstance(dest[key], tuple):
            dest[key] = list(dest[key])
        elif not isinstance(dest[key], list):
            dest[key] = [dest[key]]
        dest[key].extend(_spread(value))
    else:
        dest[key] = value


class Slicer:
    """
    Slices plugin configuration out of a flat parent config.

    Args:
        config: Parent config mapping of composite keys to values. It is
            never modified.
        prefix: Regex fragment (or compiled pattern) before the qualifier.
        separator: Regex fragment with two groups capturing qualifier and
            attribute. Defaults to splitting on the first dot.
        match_name: Predicate (qualifier, plugin_name) -> bool.
        match_package: Predicate (qualifier, plugin_class) -> bool.
        join: Default separator for joining textual values in merge().

    Subclasses may override match_name / match_package instead of passing
    predicates.
    """

    def __init__(
        self,
        config: _typing.Mapping[str, _typing.Any] | None = None,
        *,
        prefix: str | _re.Pattern[str] = patterns.DEFAULT_PREFIX,
        separator: str | _re.Pattern[str] = patterns.DEFAULT_SEPARATOR,
        match_name: matching.MatchPredicate | None = None,
        match_package: matching.MatchPredicate | None = None,
        join: str | None = None,
    ) -> None:
        self._config: _typing.Mapping[str, _typing.Any] = (
            config if config is not None else {}
        )
        self._pattern = patterns.KeyPattern(prefix, separator)
        self._matcher = matching.PluginMatcher(match_name, match_package)
        self._join = join

    @classmethod
    def from_settings(
        cls,
        config: _typing.Mapping[str, _typing.Any] | None = None,
        slicer_settings: settings.SlicerSettings | None = None,
        **kwargs: _typing.Any,
    ) -> Slicer:
        """
        Build a Slicer from SlicerSettings.

        Args:
            config: Parent config mapping.
            slicer_settings: Settings to use. Defaults to SlicerSettings(),
                which reads CONFIG_SLICER_* environment variables.
            **kwargs: Extra constructor arguments (e.g. match_name).
        """
        if slicer_settings is None:
            slicer_settings = settings.SlicerSettings()
        return cls(
            config,
            prefix=slicer_settings.prefix,
            separator=slicer_settings.separator,
            join=slicer_settings.join,
            **kwargs,
        )

    @property
    def config(self) -> _typing.Mapping[str, _typing.Any]:
        """Read-only view of the parent config."""
        return _types.MappingProxyType(dict(self._config))

    @property
    def prefix(self) -> str:
        return self._pattern.prefix

    @property
    def separator(self) -> str:
        return self._pattern.separator

    @property
    def key_pattern(self) -> patterns.KeyPattern:
        return self._pattern

    @property
    def separator_regexp(self) -> _re.Pattern[str]:
        """Compiled regex combining prefix, separator and array subscript."""
        return self._pattern.regexp

    def match_name(self, qualifier: str, plugin_name: str) -> bool:
        """True if the key qualifier names this plugin."""
        return self._matcher.match_name(qualifier, plugin_name)

    def match_package(self, qualifier: str, plugin_class: str) -> bool:
        """True if the key qualifier is this plugin's class identifier."""
        return self._matcher.match_package(qualifier, plugin_class)

    def plugin_info(self, spec: _typing.Any) -> identity.PluginIdentity:
        """Normalize a plugin spec; see identity.plugin_info."""
        return identity.plugin_info(spec)

    def slice(self, plugin: _typing.Any) -> Slice:
        """
        Return the config arguments embedded for a plugin.

        Starting with a parent config of:

            {"APlug.attr1": "value1", "APlug.second": "2nd", "OtherPlug.attr": "0"}

        slicing for a plugin named "APlug" (or ["APlug", "Full::APlug", {}])
        returns {"attr1": "value1", "second": "2nd"}.

        Args:
            plugin: Plugin instance or [name, class, config] triple. Any
                existing config on it is ignored.

        Returns:
            New dict of attribute -> value; subscripted attributes are lists.
        """
        name, plugin_class, _ = self.plugin_info(plugin)

        result: Slice = {}
        # sort to keep the bracket subscripts in order
        for key in sorted(k for k in self._config if isinstance(k, str)):
            parsed = self._pattern.parse(key)
            if parsed is None:
                _logger.debug("Skipping %r: not an embedded key", key)
                continue

            if not (
                self.match_name(parsed.qualifier, name)
                or self.match_package(parsed.qualifier, plugin_class)
            ):
                _logger.debug("Skipping %r: not for plugin %s/%s", key, name, plugin_class)
                continue

            update_hash(result, parsed.attribute, self._config[key], array=parsed.is_array)

        _logger.debug("Sliced %d attribute(s) for %s/%s", len(result), name, plugin_class)
        return result

    def merge(
        self,
        plugin: _typing.Any,
        slice: Slice | None = None,  # noqa: A002 - mirrors the option name
        join: str | None = None,
    ) -> _typing.Any:
        """
        Slice the parent config and merge it into the plugin.

        If plugin is a triple whose config is a mapping, the mapping is
        updated with update_hash(). Otherwise the config element (or the
        plugin instance itself) is treated as an object with writable
        fields and merged field by field:

        - truthy list/tuple value: new values are appended
        - truthy scalar, new list: [previous, *new]
        - truthy value, text field, join given: previous + join + new
        - truthy value otherwise: overwritten
        - falsy value: assigned, wrapped in a list if the field is
          sequence-shaped

        Falsy previous values ("" or 0) count as unset.

        Args:
            plugin: Plugin instance or [name, class, config] triple.
            slice: Precomputed slice; computed with slice() if None.
            join: Separator for joining textual values; defaults to the
                slicer's join setting.

        Returns:
            The plugin argument, modified in place.

        Raises:
            AttributeNotFoundError: A sliced attribute has no writable field
                on an object target. Fields merged before the failure stay
                merged.
        """
        if slice is None:
            slice = self.slice(plugin)
        if join is None:
            join = self._join

        name, plugin_class, conf = self.plugin_info(plugin)

        if isinstance(conf, _collections_abc.MutableMapping):
            for key, value in slice.items():
                update_hash(conf, key, value)
            return plugin

        target = targets.as_merge_target(conf)
        for key, value in slice.items():
            if not target.has(key):
                raise errors.AttributeNotFoundError(name, plugin_class, key)
            self._merge_field(target, key, value, join)
            _logger.debug("Merged %r into %s/%s", key, name, plugin_class)

        return plugin

    @staticmethod
    def _merge_field(
        target: targets.MergeTarget,
        key: str,
        value: _typing.Any,
        join: str | None,
    ) -> None:
        shape = target.shape_of(key)
        previous = target.get(key)

        if previous:
            if _is_sequence(previous):
                target.set(key, [*previous, *_spread(value)])
            # if new value was specified as a list, attempt to merge
            elif _is_sequence(value):
                target.set(key, [previous, *value])
            elif shape is targets.FieldShape.TEXT and join:
                target.set(key, join.join([str(previous), str(value)]))
            else:
                target.set(key, value)
            return

        if shape is targets.FieldShape.SEQUENCE and not _is_sequence(value):
            value = [value]
        elif _is_sequence(value):
            value = list(value)
        target.set(key, value)

"""
Predicates deciding whether a key qualifier belongs to a plugin.

Two independent checks are made for every parsed key:

- name:    the qualifier against the plugin's name
- package: the qualifier against the plugin's class identifier

A key belongs to the plugin if either check passes.

The default name check tolerates bundle prefixes in front of the plugin
name, since bundles conventionally name their plugins "@Bundle/Plugin":

    qualifier "Foo"       matches "Foo", "@Bar/Foo"
    qualifier "@Bar/Foo"  matches "@Bar/Foo", "@Baz/@Bar/Foo"
                          but not "Foo" or "@Baz/Foo"

The default package check is plain equality.
"""

from __future__ import annotations

import re as _re
import typing as _typing

MatchPredicate = _typing.Callable[[str, str], bool]
"""Callable taking (qualifier, plugin_name_or_class) and returning a bool."""

# Zero or more "@Bundle/" segments before the qualifier
_BUNDLE_PREFIXES = r"(?:@[^/]+/)*"


def default_match_name(qualifier: str, plugin_name: str) -> bool:
    """
    Match a qualifier against a plugin name, allowing "@Bundle/" prefixes.

    Args:
        qualifier: Plugin portion of the configuration key.
        plugin_name: Name of the plugin being sliced.

    Returns:
        True if plugin_name is the qualifier with zero or more
        "@Bundle/" segments prepended.
    """
    pattern = f"{_BUNDLE_PREFIXES}{_re.escape(qualifier)}"
    return _re.fullmatch(pattern, plugin_name) is not None


def default_match_package(qualifier: str, plugin_class: str) -> bool:
    """Match a qualifier against a plugin class identifier by equality."""
    return qualifier == plugin_class


class PluginMatcher:
    """
    Pair of name and package predicates.

    Predicates can be replaced at construction or by overriding
    match_name / match_package in a subclass.

    Example:
        >>> matcher = PluginMatcher(
        ...     match_package=lambda q, cls: "My::" + q.lstrip("-") == cls,
        ... )
        >>> matcher.matches("-Thing", "whatever", "My::Thing")
        True
    """

    def __init__(
        self,
        match_name: MatchPredicate | None = None,
        match_package: MatchPredicate | None = None,
    ) -> None:
        self._match_name = match_name or default_match_name
        self._match_package = match_package or default_match_package

    def match_name(self, qualifier: str, plugin_name: str) -> bool:
        return bool(self._match_name(qualifier, plugin_name))

    def match_package(self, qualifier: str, plugin_class: str) -> bool:
        return bool(self._match_package(qualifier, plugin_class))

    def matches(self, qualifier: str, plugin_name: str, plugin_class: str) -> bool:
        """
        Check whether a qualifier belongs to the given plugin.

        Args:
            qualifier: Plugin portion of the configuration key.
            plugin_name: Name of the plugin being sliced.
            plugin_class: Class identifier of the plugin being sliced.

        Returns:
            True if either the name or the package predicate accepts it.
        """
        return self.match_name(qualifier, plugin_name) or self.match_package(
            qualifier, plugin_class
        )

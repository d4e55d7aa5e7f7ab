"""
Key pattern compilation and parsing.

A parent config key embeds plugin configuration as:

    <prefix><qualifier><separator><attribute>[<subscript>]

The prefix and separator are regular expression fragments combined with an
optional trailing bracket subscript into one anchored pattern:

    ^<prefix><separator>(\\[.*?\\])?$

The separator must provide two capture groups: the qualifier and the
attribute. With the default separator the qualifier ends at the first dot
and the attribute absorbs any remaining dots:

    >>> pattern = KeyPattern()
    >>> pattern.parse("Class::Name.attr.ibute")
    KeyMatch(qualifier='Class::Name', attribute='attr.ibute', subscript=None)
    >>> pattern.parse("Baz.quux[0]")
    KeyMatch(qualifier='Baz', attribute='quux', subscript='[0]')

Caveat: groups are read positionally. Capture groups inside a custom prefix
shift the qualifier and attribute groups; use non-capturing groups (?:...)
in prefixes.
"""

from __future__ import annotations

import re as _re
import typing as _typing

import config_slicer.errors as errors

DEFAULT_PREFIX = ""
DEFAULT_SEPARATOR = r"(.+?)\.(.+?)"

# Optional array subscript; the inner text is only used for ordering
SUBSCRIPT_PATTERN = r"(\[.*?\])?"


class KeyMatch(_typing.NamedTuple):
    """Result of parsing a parent config key."""

    qualifier: str
    """Plugin name or class portion of the key."""

    attribute: str
    """Destination attribute name."""

    subscript: str | None
    """Bracketed subscript including brackets (e.g. "[0]", "[]"), or None."""

    @property
    def is_array(self) -> bool:
        """True if the key carried a subscript, even an empty one."""
        return self.subscript is not None


# Flags a compiled fragment keeps when spliced into the combined pattern
_SCOPED_FLAGS = (
    (_re.IGNORECASE, "i"),
    (_re.MULTILINE, "m"),
    (_re.DOTALL, "s"),
    (_re.VERBOSE, "x"),
)


def _fragment(value: str | _re.Pattern[str]) -> str:
    """
    Return the pattern text of a string or compiled regex.

    Flags of a compiled regex (i, m, s, x) are kept by wrapping its text in
    a scoped, non-capturing group such as "(?i:plug\\.)". Other flags
    (re.ASCII, re.LOCALE) are not carried over.
    """
    if isinstance(value, _re.Pattern):
        letters = "".join(letter for flag, letter in _SCOPED_FLAGS if value.flags & flag)
        if letters:
            return f"(?{letters}:{value.pattern})"
        return value.pattern
    return value


def compile_key_regexp(
    prefix: str | _re.Pattern[str] = DEFAULT_PREFIX,
    separator: str | _re.Pattern[str] = DEFAULT_SEPARATOR,
) -> _re.Pattern[str]:
    """
    Combine prefix, separator and subscript into one anchored regex.

    Args:
        prefix: Fragment that must match before the qualifier.
        separator: Fragment capturing qualifier and attribute.

    Returns:
        Compiled pattern with at least three capture groups.

    Raises:
        KeyPatternError: If the combined pattern does not compile or has
            fewer than three capture groups.
    """
    source = f"^{_fragment(prefix)}{_fragment(separator)}{SUBSCRIPT_PATTERN}$"
    try:
        compiled = _re.compile(source)
    except _re.error as e:
        raise errors.KeyPatternError(f"invalid key pattern {source!r}: {e}") from e

    if compiled.groups < 3:
        raise errors.KeyPatternError(
            f"separator must capture qualifier and attribute: {source!r}"
        )
    return compiled


class KeyPattern:
    """
    Compiled matcher for embedded plugin keys.

    Compilation happens once at construction and depends only on the
    prefix and separator.
    """

    def __init__(
        self,
        prefix: str | _re.Pattern[str] = DEFAULT_PREFIX,
        separator: str | _re.Pattern[str] = DEFAULT_SEPARATOR,
    ) -> None:
        self._prefix = _fragment(prefix)
        self._separator = _fragment(separator)
        self._regexp = compile_key_regexp(self._prefix, self._separator)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def regexp(self) -> _re.Pattern[str]:
        """The combined, anchored regular expression."""
        return self._regexp

    def parse(self, key: str) -> KeyMatch | None:
        """
        Split a key into qualifier, attribute and subscript.

        Args:
            key: Raw parent config key.

        Returns:
            KeyMatch, or None if the key does not have the embedded shape.
        """
        match = self._regexp.fullmatch(key)
        if match is None:
            return None
        qualifier, attribute, subscript = match.groups()[:3]
        return KeyMatch(qualifier, attribute, subscript)

    def __repr__(self) -> str:
        return f"KeyPattern(prefix={self._prefix!r}, separator={self._separator!r})"

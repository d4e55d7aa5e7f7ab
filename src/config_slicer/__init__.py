"""
config_slicer - extract embedded plugin config from a parent config.

A bundle's flat configuration may carry settings for the plugins it loads,
keyed as "Plugin.attribute" or "Plugin.attribute[subscript]". The Slicer
finds the keys belonging to one plugin, reassembles subscripted values into
lists, and merges the result into the plugin's config dict or object.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("config-slicer")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from config_slicer.errors import (  # noqa: E402
    AttributeNotFoundError,
    ConfigFileError,
    KeyPatternError,
    SlicerError,
    UnrecognizedPluginSpecError,
)
from config_slicer.identity import PluginIdentity, plugin_info  # noqa: E402
from config_slicer.matching import (  # noqa: E402
    PluginMatcher,
    default_match_name,
    default_match_package,
)
from config_slicer.patterns import KeyMatch, KeyPattern  # noqa: E402
from config_slicer.settings import SlicerSettings  # noqa: E402
from config_slicer.slicer import Slicer, update_hash  # noqa: E402
from config_slicer.targets import (  # noqa: E402
    AttributeTarget,
    FieldShape,
    MergeTarget,
    as_merge_target,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Core
    "Slicer",
    "update_hash",
    "KeyMatch",
    "KeyPattern",
    "PluginMatcher",
    "default_match_name",
    "default_match_package",
    "PluginIdentity",
    "plugin_info",
    # Targets
    "AttributeTarget",
    "FieldShape",
    "MergeTarget",
    "as_merge_target",
    # Settings
    "SlicerSettings",
    # Errors
    "AttributeNotFoundError",
    "ConfigFileError",
    "KeyPatternError",
    "SlicerError",
    "UnrecognizedPluginSpecError",
]

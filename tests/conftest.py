"""
Shared pytest fixtures for config_slicer tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import dataclasses as _dataclasses
import os as _os
import typing as _typing

import pytest as _pytest

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "CONFIG_SLICER_PREFIX",
    "CONFIG_SLICER_SEPARATOR",
    "CONFIG_SLICER_JOIN",
]


@_pytest.fixture(autouse=True)
def clean_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Isolate every test from CONFIG_SLICER_* environment variables."""
    for key in ENV_KEYS_TO_CLEAR:
        if key in _os.environ:
            monkeypatch.delenv(key)


@_dataclasses.dataclass
class Plugger:
    """Plugin object with writable fields of each shape."""

    plugin_name: str = "Plugger"
    names: list[str] = _dataclasses.field(default_factory=list)
    title: str = ""
    count: int = 0
    tags: tuple[str, ...] = ()


@_pytest.fixture
def plugger() -> Plugger:
    return Plugger()


@_pytest.fixture
def bundle_config() -> dict[str, _typing.Any]:
    """Flattened config of a bundle embedding config for two plugins."""
    return {
        "bundle_option": "value",
        "APlug.attr1": "value1",
        "APlug.second": "2nd",
        "OtherPlug.attr": "0",
    }


@_pytest.fixture
def hunting_config() -> dict[str, str]:
    """Subscripted keys whose subscripts sort alphabetically."""
    return {
        "Hunting.season[0]": "duck",
        "Hunting.season[1]": "wabbit",
        "Hunting.season[9]": "fudd",
        "Hunting2.season[1.08]": "wabbit",
        "Hunting2.season[1.09]": "bunny",
        "Hunting2.season[1.10]": "bird",
        "Hunting2.season[1.11]": "duck",
    }

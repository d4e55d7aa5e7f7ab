"""
Merge targets: objects whose fields receive sliced values.

The merge algorithm only needs four capabilities from a target, captured by
the MergeTarget interface:

- has(name):      is there a writable field with this name?
- get(name):      current value
- set(name, v):   assign a new value
- shape_of(name): declared shape (scalar, sequence or text)

Objects that implement MergeTarget are used directly. Anything else is
wrapped in AttributeTarget, which reflects over pydantic models,
dataclasses and plain annotated classes.
"""

from __future__ import annotations

import abc as _abc
import collections.abc as _collections_abc
import dataclasses as _dataclasses
import enum as _enum
import types as _types
import typing as _typing

import pydantic as _pydantic


class FieldShape(_enum.Enum):
    """Declared shape of a target field."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    TEXT = "text"


_SEQUENCE_TYPES: tuple[type, ...] = (
    list,
    tuple,
    set,
    frozenset,
    _collections_abc.Sequence,
    _collections_abc.MutableSequence,
    _collections_abc.Set,
)


def classify_annotation(annotation: _typing.Any) -> FieldShape:
    """
    Classify a type annotation as scalar, sequence or text.

    Optional[X], X | None and Annotated[X, ...] are unwrapped. Unions of
    several non-None types are scalar.

    Examples:
        >>> classify_annotation(str)
        <FieldShape.TEXT: 'text'>
        >>> classify_annotation(list[str] | None)
        <FieldShape.SEQUENCE: 'sequence'>
        >>> classify_annotation(int)
        <FieldShape.SCALAR: 'scalar'>
    """
    origin = _typing.get_origin(annotation)

    if origin is _typing.Annotated:
        return classify_annotation(_typing.get_args(annotation)[0])

    if origin is _typing.Union or origin is _types.UnionType:
        members = [a for a in _typing.get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return classify_annotation(members[0])
        return FieldShape.SCALAR

    if annotation is str:
        return FieldShape.TEXT

    candidate = origin or annotation
    if (
        isinstance(candidate, type)
        and issubclass(candidate, _SEQUENCE_TYPES)
        and not issubclass(candidate, (str, bytes, bytearray))
    ):
        return FieldShape.SEQUENCE

    return FieldShape.SCALAR


def classify_value(value: _typing.Any) -> FieldShape:
    """Infer a field shape from a current value when no annotation exists."""
    if isinstance(value, str):
        return FieldShape.TEXT
    if isinstance(value, (list, tuple)):
        return FieldShape.SEQUENCE
    return FieldShape.SCALAR


class MergeTarget(_abc.ABC):
    """Capability interface the merge algorithm works against."""

    @_abc.abstractmethod
    def has(self, name: str) -> bool:
        """Return True if name is a writable field."""
        ...

    @_abc.abstractmethod
    def get(self, name: str) -> _typing.Any:
        ...

    @_abc.abstractmethod
    def set(self, name: str, value: _typing.Any) -> None:
        ...

    @_abc.abstractmethod
    def shape_of(self, name: str) -> FieldShape:
        ...


def _safe_type_hints(cls: type) -> dict[str, _typing.Any]:
    """Resolve class annotations, falling back to the raw ones."""
    try:
        return _typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        # Unresolvable forward references; raw strings classify as scalar
        hints: dict[str, _typing.Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


class AttributeTarget(MergeTarget):
    """
    MergeTarget that reflects over an arbitrary object.

    Field discovery, in order:

    1. pydantic models: declared model fields. Frozen models and frozen
       fields are not writable.
    2. dataclasses: declared fields. Frozen dataclasses are not writable.
    3. plain objects: annotated class attributes, properties (writable only
       with a setter) and public instance attributes.
    """

    def __init__(self, obj: _typing.Any) -> None:
        self._obj = obj
        self._annotations = self._collect_annotations(obj)

    @property
    def obj(self) -> _typing.Any:
        return self._obj

    @staticmethod
    def _collect_annotations(obj: _typing.Any) -> dict[str, _typing.Any]:
        cls = type(obj)
        if isinstance(obj, _pydantic.BaseModel):
            return {name: info.annotation for name, info in cls.model_fields.items()}
        if _dataclasses.is_dataclass(obj):
            hints = _safe_type_hints(cls)
            return {f.name: hints.get(f.name, f.type) for f in _dataclasses.fields(obj)}
        return _safe_type_hints(cls)

    def _is_frozen(self, name: str) -> bool:
        obj = self._obj
        if isinstance(obj, _pydantic.BaseModel):
            if obj.model_config.get("frozen"):
                return True
            info = type(obj).model_fields.get(name)
            return bool(info is not None and info.frozen)
        if _dataclasses.is_dataclass(obj):
            return bool(type(obj).__dataclass_params__.frozen)  # type: ignore[attr-defined]
        return False

    def has(self, name: str) -> bool:
        if self._is_frozen(name):
            return False

        if isinstance(self._obj, _pydantic.BaseModel) or _dataclasses.is_dataclass(
            self._obj
        ):
            return name in self._annotations

        descriptor = getattr(type(self._obj), name, None)
        if isinstance(descriptor, property):
            return descriptor.fset is not None
        if name in self._annotations:
            return True
        if name.startswith("_"):
            return False
        instance_vars = getattr(self._obj, "__dict__", {})
        return name in instance_vars

    def get(self, name: str) -> _typing.Any:
        return getattr(self._obj, name, None)

    def set(self, name: str, value: _typing.Any) -> None:
        setattr(self._obj, name, value)

    def shape_of(self, name: str) -> FieldShape:
        if name in self._annotations:
            return classify_annotation(self._annotations[name])
        return classify_value(self.get(name))


def as_merge_target(obj: _typing.Any) -> MergeTarget:
    """Return obj if it already is a MergeTarget, else wrap it."""
    if isinstance(obj, MergeTarget):
        return obj
    return AttributeTarget(obj)

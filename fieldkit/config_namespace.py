"""Strict reader for definition mappings (fieldsets, custom fieldtypes).

Every key a reader asks for is marked consumed; `assert_consumed` then rejects
whatever was left over, so typos in stored definitions fail loudly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


def _join_path(parent: str, key: str) -> str:
    if not parent:
        return key
    return f"{parent}.{key}"


@dataclass
class ConfigNamespace:
    data: Mapping[str, Any]
    path: str
    _consumed: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def empty(cls, *, path: str) -> "ConfigNamespace":
        return cls({}, path=path)

    def consumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._consumed))

    def unconsumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(str(k) for k in self.data.keys() if k not in self._consumed))

    def assert_consumed(self) -> None:
        unknown = self.unconsumed_keys()
        if unknown:
            consumed = ", ".join(self.consumed_keys()) or "<none>"
            raise ValueError(
                f"Unknown keys under {self.path or '<root>'}: {', '.join(unknown)} (known: {consumed})"
            )
        for child in self._children.values():
            child.assert_consumed()

    def _key(self, key: str) -> str:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        normalized = key.strip()
        if normalized in self._children:
            raise ValueError(f"{_join_path(self.path, normalized)} already read as a nested namespace")
        return normalized

    def _get_raw(self, key: str, *, default: Any) -> tuple[str, Any]:
        normalized = self._key(key)
        self._consumed.add(normalized)
        if normalized not in self.data:
            if default is _MISSING:
                raise ValueError(f"Missing required key: {_join_path(self.path, normalized)}")
            return normalized, default
        return normalized, self.data.get(normalized)

    def has(self, key: str) -> bool:
        return key in self.data

    def keys(self) -> tuple[str, ...]:
        return tuple(str(k) for k in self.data.keys())

    def namespace(self, key: str, *, default: Mapping[str, Any] | None | object = _MISSING) -> "ConfigNamespace":
        normalized = (key or "").strip()
        if not normalized:
            raise TypeError("ConfigNamespace key must be a non-empty string")
        if normalized in self._children:
            return self._children[normalized]

        self._consumed.add(normalized)
        raw = self.data.get(normalized)
        child_path = _join_path(self.path, normalized)
        if raw is None:
            if default is _MISSING:
                raise ValueError(f"Missing required mapping: {child_path}")
            raw = {} if default is None else default
        if not isinstance(raw, Mapping):
            raise TypeError(f"{child_path} must be a mapping (type={type(raw).__name__})")

        child = ConfigNamespace(dict(raw), path=child_path)
        self._children[normalized] = child
        return child

    def get_bool(self, key: str, *, default: bool | object = _MISSING) -> bool:
        normalized, value = self._get_raw(key, default=default)
        if not isinstance(value, bool):
            raise TypeError(
                f"{_join_path(self.path, normalized)} must be a boolean (type={type(value).__name__})"
            )
        return value

    def get_int(self, key: str, *, default: int | object = _MISSING, min_value: int | None = None) -> int:
        normalized, value = self._get_raw(key, default=default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{_join_path(self.path, normalized)} must be an int (type={type(value).__name__})")
        if min_value is not None and value < min_value:
            raise ValueError(f"{_join_path(self.path, normalized)} must be >= {min_value} (got {value})")
        return value

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        allow_empty: bool = False,
    ) -> str | None:
        normalized, value = self._get_raw(key, default=default)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError(f"{_join_path(self.path, normalized)} must be a string (type={type(value).__name__})")
        stripped = value.strip()
        if not stripped and not allow_empty:
            raise ValueError(f"{_join_path(self.path, normalized)} cannot be empty")
        return stripped

    def get_any(self, key: str, *, default: Any = _MISSING) -> Any:
        _normalized, value = self._get_raw(key, default=default)
        return value

    def get_mapping(self, key: str, *, default: Mapping[str, Any] | object = _MISSING) -> dict[str, Any]:
        """Read a mapping value without tracking its inner keys."""

        normalized, value = self._get_raw(key, default=default)
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise TypeError(f"{_join_path(self.path, normalized)} must be a mapping (type={type(value).__name__})")
        return dict(value)

from __future__ import annotations

import copy
import difflib
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

Preprocessor = Callable[[Any], Any]


class UnknownFieldtypeError(ValueError):
    def __init__(self, handle: str, *, suggestions: tuple[str, ...] = ()):
        self.handle = handle
        self.suggestions = suggestions
        message = f"Unknown fieldtype: {handle}"
        if suggestions:
            message += f" (did you mean: {', '.join(suggestions)})"
        super().__init__(message)


@dataclass(frozen=True)
class ConfigFieldSpec:
    """One configurable key of a fieldtype: which fieldtype edits it, and its default."""

    handle: str
    type: str
    default: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.handle, str) or not self.handle.strip():
            raise TypeError("ConfigFieldSpec.handle must be a non-empty string")
        if not isinstance(self.type, str) or not self.type.strip():
            raise TypeError(f"ConfigFieldSpec.type must be a non-empty string (config field: {self.handle})")
        object.__setattr__(self, "handle", self.handle.strip())
        object.__setattr__(self, "type", self.type.strip())


@dataclass(frozen=True)
class Fieldtype:
    handle: str
    component: str | None = None
    config_fields: tuple[ConfigFieldSpec, ...] = ()
    preprocessor: Preprocessor | None = None
    preloadable: bool = False
    doc: str | None = None
    _config_index: dict[str, ConfigFieldSpec] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.handle, str) or not self.handle.strip():
            raise TypeError("Fieldtype.handle must be a non-empty string")
        object.__setattr__(self, "handle", self.handle.strip())

        if self.component is None:
            object.__setattr__(self, "component", self.handle)
        elif not isinstance(self.component, str) or not self.component.strip():
            raise TypeError(f"Fieldtype.component must be a non-empty string or None (fieldtype: {self.handle})")

        if self.preprocessor is not None and not callable(self.preprocessor):
            raise TypeError(f"Fieldtype.preprocessor must be callable (fieldtype: {self.handle})")

        specs = tuple(self.config_fields)
        index: dict[str, ConfigFieldSpec] = {}
        for spec in specs:
            if not isinstance(spec, ConfigFieldSpec):
                raise TypeError(
                    f"Fieldtype.config_fields must contain ConfigFieldSpec items (fieldtype: {self.handle})"
                )
            if spec.handle in index:
                raise ValueError(f"Duplicate config field {spec.handle!r} on fieldtype {self.handle}")
            index[spec.handle] = spec
        object.__setattr__(self, "config_fields", specs)
        object.__setattr__(self, "_config_index", index)

    @property
    def has_preprocessor(self) -> bool:
        return self.preprocessor is not None

    def preprocess(self, value: Any) -> Any:
        if self.preprocessor is None:
            return value
        return self.preprocessor(value)

    def config_field(self, key: str) -> ConfigFieldSpec | None:
        return self._config_index.get(key)

    def config_defaults(self) -> dict[str, Any]:
        """Default values for every declared config field, in declaration order."""

        return {spec.handle: copy.deepcopy(spec.default) for spec in self.config_fields}


@dataclass(frozen=True)
class FieldtypeRegistry:
    _by_handle: dict[str, Fieldtype]

    @classmethod
    def from_fieldtypes(cls, fieldtypes: Iterable[Fieldtype]) -> "FieldtypeRegistry":
        entries: dict[str, Fieldtype] = {}
        for fieldtype in fieldtypes:
            if fieldtype.handle in entries:
                raise ValueError(f"Duplicate fieldtype handle: {fieldtype.handle}")
            entries[fieldtype.handle] = fieldtype
        return cls(_by_handle=entries)

    def merged(self, fieldtypes: Iterable[Fieldtype]) -> "FieldtypeRegistry":
        """Return a new registry with `fieldtypes` added; re-registering a handle is an error."""

        return FieldtypeRegistry.from_fieldtypes((*self._by_handle.values(), *fieldtypes))

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, str) and handle.strip() in self._by_handle

    def __len__(self) -> int:
        return len(self._by_handle)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_handle.keys()))

    def preloadable(self) -> tuple[str, ...]:
        return tuple(sorted(h for h, ft in self._by_handle.items() if ft.preloadable))

    def describe(self) -> tuple[dict[str, Any], ...]:
        rows: list[dict[str, Any]] = []
        for fieldtype in sorted(self._by_handle.values(), key=lambda ft: ft.handle):
            rows.append(
                {
                    "handle": fieldtype.handle,
                    "component": fieldtype.component,
                    "doc": fieldtype.doc,
                    "preloadable": fieldtype.preloadable,
                    "preprocesses": fieldtype.has_preprocessor,
                    "config_fields": {
                        spec.handle: {"type": spec.type, "default": spec.default}
                        for spec in fieldtype.config_fields
                    },
                }
            )
        return tuple(rows)

    def find(self, handle: Any) -> Fieldtype | None:
        if not isinstance(handle, str):
            return None
        return self._by_handle.get(handle.strip())

    def get(self, handle: Any) -> Fieldtype:
        if not isinstance(handle, str) or not handle.strip():
            raise TypeError(f"Fieldtype handle must be a non-empty string (got {handle!r})")
        found = self.find(handle)
        if found is None:
            raise UnknownFieldtypeError(handle.strip(), suggestions=self.suggest(handle))
        return found

    def suggest(self, handle: str, *, limit: int = 3) -> tuple[str, ...]:
        key = (handle or "").strip()
        if not key or not self._by_handle:
            return ()
        return tuple(difflib.get_close_matches(key, list(self.available()), n=limit))


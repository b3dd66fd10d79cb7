from __future__ import annotations

import copy
import difflib
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable


class UnknownFieldsetError(ValueError):
    def __init__(self, handle: str, *, suggestions: tuple[str, ...] = ()):
        self.handle = handle
        self.suggestions = suggestions
        message = f"Unknown fieldset: {handle}"
        if suggestions:
            message += f" (did you mean: {', '.join(suggestions)})"
        super().__init__(message)


class UnknownFieldError(ValueError):
    def __init__(self, reference: str, *, available: tuple[str, ...] = ()):
        self.reference = reference
        self.available = available
        listing = ", ".join(available) or "<none>"
        super().__init__(f"Unknown field reference: {reference} (fields in fieldset: {listing})")


def parse_field_reference(reference: Any) -> tuple[str, str]:
    """Split a `<fieldset>.<field>` reference into its two handles."""

    if not isinstance(reference, str) or not reference.strip():
        raise TypeError(f"Field reference must be a non-empty string (got {reference!r})")
    fieldset, sep, field = reference.strip().partition(".")
    if not sep or not fieldset.strip() or not field.strip():
        raise ValueError(f"Field reference must look like '<fieldset>.<field>' (got {reference!r})")
    return fieldset.strip(), field.strip()


@dataclass(frozen=True)
class Fieldset:
    handle: str
    fields: Mapping[str, Mapping[str, Any]]
    title: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.handle, str) or not self.handle.strip():
            raise TypeError("Fieldset.handle must be a non-empty string")
        if "." in self.handle:
            raise ValueError(f"Fieldset handle cannot contain '.': {self.handle!r}")
        object.__setattr__(self, "handle", self.handle.strip())

        normalized: dict[str, dict[str, Any]] = {}
        for key, definition in self.fields.items():
            if not isinstance(key, str) or not key.strip():
                raise TypeError(f"Field handles in fieldset {self.handle} must be non-empty strings")
            if not isinstance(definition, Mapping):
                raise TypeError(
                    f"Field {self.handle}.{key} must be a mapping (type={type(definition).__name__})"
                )
            normalized[key.strip()] = dict(definition)
        object.__setattr__(self, "fields", normalized)

    @classmethod
    def from_contents(cls, handle: str, contents: Mapping[str, Any]) -> "Fieldset":
        """Build a fieldset from stored contents: `{"title": ..., "fields": ...}`.

        `fields` may be a mapping of handle -> definition, or a list of
        `{"handle": ..., "field": {...}}` items.
        """

        raw_fields = contents.get("fields") or {}
        if isinstance(raw_fields, Mapping):
            fields = dict(raw_fields)
        elif isinstance(raw_fields, (list, tuple)):
            fields = {}
            for idx, item in enumerate(raw_fields):
                if not isinstance(item, Mapping) or not isinstance(item.get("field"), Mapping):
                    raise TypeError(
                        f"Fieldset {handle} fields[{idx}] must be a mapping with an inline 'field' mapping"
                    )
                fields[str(item.get("handle") or "")] = item["field"]
        else:
            raise TypeError(
                f"Fieldset {handle} fields must be a mapping or list (type={type(raw_fields).__name__})"
            )
        title = contents.get("title")
        return cls(handle=handle, fields=fields, title=str(title) if title is not None else None)

    def field_handles(self) -> tuple[str, ...]:
        return tuple(self.fields.keys())

    def field(self, handle: str) -> dict[str, Any] | None:
        definition = self.fields.get(handle)
        return copy.deepcopy(definition) if definition is not None else None


@dataclass(frozen=True)
class FieldsetRegistry:
    _by_handle: dict[str, Fieldset]

    @classmethod
    def from_fieldsets(cls, fieldsets: Iterable[Fieldset]) -> "FieldsetRegistry":
        entries: dict[str, Fieldset] = {}
        for fieldset in fieldsets:
            if fieldset.handle in entries:
                raise ValueError(f"Duplicate fieldset handle: {fieldset.handle}")
            entries[fieldset.handle] = fieldset
        return cls(_by_handle=entries)

    @classmethod
    def empty(cls) -> "FieldsetRegistry":
        return cls(_by_handle={})

    def __len__(self) -> int:
        return len(self._by_handle)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_handle.keys()))

    def find(self, handle: Any) -> Fieldset | None:
        if not isinstance(handle, str):
            return None
        return self._by_handle.get(handle.strip())

    def get(self, handle: Any) -> Fieldset:
        if not isinstance(handle, str) or not handle.strip():
            raise TypeError(f"Fieldset handle must be a non-empty string (got {handle!r})")
        found = self.find(handle)
        if found is None:
            key = handle.strip()
            suggestions = tuple(difflib.get_close_matches(key, list(self.available()), n=3))
            raise UnknownFieldsetError(key, suggestions=suggestions)
        return found

    def resolve_field(self, reference: Any) -> tuple[Fieldset, str, dict[str, Any]]:
        """Resolve `<fieldset>.<field>` to (fieldset, field handle, field definition)."""

        fieldset_handle, field_handle = parse_field_reference(reference)
        fieldset = self.get(fieldset_handle)
        definition = fieldset.field(field_handle)
        if definition is None:
            raise UnknownFieldError(f"{fieldset_handle}.{field_handle}", available=fieldset.field_handles())
        return fieldset, field_handle, definition

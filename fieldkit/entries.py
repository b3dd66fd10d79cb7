"""Blueprint and editor entry variants for nested field definitions.

Blueprint entries are the stored shape; editor entries are the flat shape a
form builder edits. Each side is a closed set of frozen dataclasses with a
`parse_*` function that turns raw mappings into exactly one variant.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

EditorType = Literal["inline", "reference", "import"]
EDITOR_TYPES: tuple[str, ...] = ("inline", "reference", "import")


def _require_str(value: Any, *, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{path} must be a non-empty string (got {value!r})")
    return value.strip()


def _optional_str(value: Any, *, path: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"{path} must be a string or null (type={type(value).__name__})")
    return value.strip() or None


def _mapping(value: Any, *, path: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{path} must be a mapping (type={type(value).__name__})")
    return dict(value)


# ---------------------------------------------------------------------------
# Blueprint (stored) entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InlineField:
    handle: str
    fieldtype: str
    config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"handle": self.handle, "field": {"type": self.fieldtype, **self.config}}


@dataclass(frozen=True)
class ReferencedField:
    handle: str
    reference: str
    overrides: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"handle": self.handle, "field": self.reference}
        if self.overrides:
            out["config"] = dict(self.overrides)
        return out


@dataclass(frozen=True)
class ImportedFieldset:
    fieldset: str
    prefix: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"import": self.fieldset}
        if self.prefix is not None:
            out["prefix"] = self.prefix
        return out


BlueprintEntry: TypeAlias = InlineField | ReferencedField | ImportedFieldset


def parse_blueprint_entry(raw: Any, *, path: str = "fields[0]") -> BlueprintEntry:
    if isinstance(raw, (InlineField, ReferencedField, ImportedFieldset)):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"{path} must be a mapping (type={type(raw).__name__})")

    if "import" in raw:
        if "field" in raw:
            raise ValueError(f"{path} cannot set both 'import' and 'field'")
        return ImportedFieldset(
            fieldset=_require_str(raw.get("import"), path=f"{path}.import"),
            prefix=_optional_str(raw.get("prefix"), path=f"{path}.prefix"),
        )

    if "field" not in raw:
        raise ValueError(f"{path} must set either 'field' or 'import'")

    handle = _require_str(raw.get("handle"), path=f"{path}.handle")
    target = raw.get("field")

    if isinstance(target, str):
        return ReferencedField(
            handle=handle,
            reference=_require_str(target, path=f"{path}.field"),
            overrides=_mapping(raw.get("config"), path=f"{path}.config"),
        )

    if isinstance(target, Mapping):
        if raw.get("config"):
            raise ValueError(f"{path}.config is only allowed on field references")
        config = dict(target)
        fieldtype = _require_str(config.pop("type", None), path=f"{path}.field.type")
        return InlineField(handle=handle, fieldtype=fieldtype, config=config)

    raise TypeError(
        f"{path}.field must be a '<fieldset>.<field>' string or a mapping (type={type(target).__name__})"
    )


def parse_blueprint_entries(raw: Any, *, path: str = "fields") -> list[BlueprintEntry]:
    if not isinstance(raw, (list, tuple)):
        raise TypeError(f"{path} must be a list (type={type(raw).__name__})")
    return [parse_blueprint_entry(item, path=f"{path}[{idx}]") for idx, item in enumerate(raw)]


# ---------------------------------------------------------------------------
# Editor (form builder) entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EditorInline:
    id: Any
    handle: str
    fieldtype: str
    config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "handle": self.handle,
            "type": "inline",
            "config": dict(self.config),
            "fieldtype": self.fieldtype,
            "_id": self.id,
        }


@dataclass(frozen=True)
class EditorReference:
    id: Any
    handle: str
    field_reference: str
    fieldtype: str | None
    config: dict[str, Any] = field(default_factory=dict)
    config_overrides: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "handle": self.handle,
            "type": "reference",
            "field_reference": self.field_reference,
            "config": dict(self.config),
            "config_overrides": list(self.config_overrides),
            "fieldtype": self.fieldtype,
            "_id": self.id,
        }


@dataclass(frozen=True)
class EditorImport:
    id: Any
    fieldset: str
    prefix: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": "import", "fieldset": self.fieldset, "prefix": self.prefix, "_id": self.id}


EditorEntry: TypeAlias = EditorInline | EditorReference | EditorImport


def _overrides_list(value: Any, *, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{path} must be a list of config keys (type={type(value).__name__})")
    keys: list[str] = []
    for idx, item in enumerate(value):
        key = _require_str(item, path=f"{path}[{idx}]")
        if key not in keys:
            keys.append(key)
    return tuple(keys)


def parse_editor_entry(raw: Any, *, path: str = "fields[0]") -> EditorEntry:
    if isinstance(raw, (EditorInline, EditorReference, EditorImport)):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"{path} must be a mapping (type={type(raw).__name__})")

    kind = raw.get("type")
    entry_id = raw.get("_id")

    if kind == "inline":
        config = _mapping(raw.get("config"), path=f"{path}.config")
        fieldtype = raw.get("fieldtype") or config.get("type")
        return EditorInline(
            id=entry_id,
            handle=_require_str(raw.get("handle"), path=f"{path}.handle"),
            fieldtype=_require_str(fieldtype, path=f"{path}.fieldtype"),
            config=config,
        )

    if kind == "reference":
        return EditorReference(
            id=entry_id,
            handle=_require_str(raw.get("handle"), path=f"{path}.handle"),
            field_reference=_require_str(raw.get("field_reference"), path=f"{path}.field_reference"),
            fieldtype=_optional_str(raw.get("fieldtype"), path=f"{path}.fieldtype"),
            config=_mapping(raw.get("config"), path=f"{path}.config"),
            config_overrides=_overrides_list(raw.get("config_overrides"), path=f"{path}.config_overrides"),
        )

    if kind == "import":
        return EditorImport(
            id=entry_id,
            fieldset=_require_str(raw.get("fieldset"), path=f"{path}.fieldset"),
            prefix=_optional_str(raw.get("prefix"), path=f"{path}.prefix"),
        )

    allowed = ", ".join(EDITOR_TYPES)
    raise ValueError(f"{path}.type must be one of: {allowed} (got {kind!r})")


def parse_editor_entries(raw: Any, *, path: str = "fields") -> list[EditorEntry]:
    if not isinstance(raw, (list, tuple)):
        raise TypeError(f"{path} must be a list (type={type(raw).__name__})")
    return [parse_editor_entry(item, path=f"{path}[{idx}]") for idx, item in enumerate(raw)]

"""Blueprint <-> editor transforms for nested field definitions.

All lookups go through registries passed in by the caller; nothing here reads
global state, so each call is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from fieldkit.entries import (
    BlueprintEntry,
    EditorEntry,
    EditorImport,
    EditorInline,
    EditorReference,
    ImportedFieldset,
    InlineField,
    ReferencedField,
    parse_blueprint_entries,
    parse_editor_entries,
)
from fieldkit.fieldsets import FieldsetRegistry
from fieldkit.fieldtype_registry import Fieldtype, FieldtypeRegistry

DEFAULT_WIDTH = 100

logger = logging.getLogger(__name__)


def is_required(validate: Any) -> bool:
    """True when a `validate` rule set contains the bare `required` rule.

    Accepts `"required|max:20"` style strings or a list of rules.
    """

    if validate is None:
        return False
    if isinstance(validate, str):
        rules = validate.split("|")
    elif isinstance(validate, (list, tuple)):
        rules = [str(rule) for rule in validate]
    else:
        return False
    return any(rule.strip().split(":", 1)[0] == "required" for rule in rules)


def _preprocess_config_value(
    fieldtype: Fieldtype | None,
    key: str,
    value: Any,
    *,
    fieldtypes: FieldtypeRegistry,
) -> Any:
    if fieldtype is None:
        return value
    spec = fieldtype.config_field(key)
    if spec is None:
        return value
    nested = fieldtypes.find(spec.type)
    if nested is None:
        logger.debug(
            "Config field %s.%s uses unregistered fieldtype %s; passing value through",
            fieldtype.handle,
            key,
            spec.type,
        )
        return value
    return nested.preprocess(value)


def preprocess_config(
    entries: Sequence[Mapping[str, Any]],
    *,
    fieldtypes: FieldtypeRegistry,
    fieldsets: FieldsetRegistry,
) -> list[dict[str, Any]]:
    """Flatten each entry into one preprocessed config mapping for the form builder.

    The resolved field's config is merged with the entry's local `config`,
    every value whose key is a declared config field is run through that config
    field's fieldtype, and `component`, `handle` and `required` are appended.
    Missing fieldtypes only disable preprocessing; a missing field reference
    raises.
    """

    out: list[dict[str, Any]] = []
    for idx, raw in enumerate(entries):
        path = f"fields[{idx}]"
        if not isinstance(raw, Mapping):
            raise TypeError(f"{path} must be a mapping (type={type(raw).__name__})")
        if "import" in raw:
            raise ValueError(f"{path} is a fieldset import; only single fields can be preprocessed")

        target = raw.get("field")
        if isinstance(target, str):
            _fieldset, _handle, definition = fieldsets.resolve_field(target)
        elif isinstance(target, Mapping):
            definition = dict(target)
        else:
            raise TypeError(
                f"{path}.field must be a '<fieldset>.<field>' string or a mapping (type={type(target).__name__})"
            )

        local = raw.get("config") or {}
        if not isinstance(local, Mapping):
            raise TypeError(f"{path}.config must be a mapping (type={type(local).__name__})")

        merged: dict[str, Any] = {**definition, **local}
        type_handle = merged.get("type")
        fieldtype = fieldtypes.find(type_handle)
        if fieldtype is None:
            logger.warning("%s: fieldtype %r is not registered; config values left unprocessed", path, type_handle)

        flat = {
            key: value if key == "type" else _preprocess_config_value(fieldtype, key, value, fieldtypes=fieldtypes)
            for key, value in merged.items()
        }
        flat["component"] = fieldtype.component if fieldtype is not None else type_handle
        flat["handle"] = raw.get("handle")
        flat["required"] = is_required(merged.get("validate"))
        out.append(flat)

    logger.debug("Preprocessed config for %d field(s)", len(out))
    return out


def expand_entries(
    entries: Sequence[BlueprintEntry],
    *,
    fieldtypes: FieldtypeRegistry,
    fieldsets: FieldsetRegistry,
    default_width: int = DEFAULT_WIDTH,
) -> list[EditorEntry]:
    """Typed blueprint -> editor transform; `_id` is the position in `entries`."""

    expanded: list[EditorEntry] = []
    for idx, entry in enumerate(entries):
        if isinstance(entry, InlineField):
            fieldtype = fieldtypes.get(entry.fieldtype)
            config = {"type": fieldtype.handle, **entry.config}
            config.setdefault("width", default_width)
            expanded.append(EditorInline(id=idx, handle=entry.handle, fieldtype=fieldtype.handle, config=config))
        elif isinstance(entry, ReferencedField):
            _fieldset, _handle, definition = fieldsets.resolve_field(entry.reference)
            type_handle = definition.get("type")
            if not isinstance(type_handle, str) or not type_handle.strip():
                raise ValueError(f"Referenced field {entry.reference} does not declare a fieldtype")
            fieldtype = fieldtypes.get(type_handle)

            config = fieldtype.config_defaults()
            config.update((key, value) for key, value in definition.items() if key != "type")
            config["component"] = fieldtype.component
            config.update(entry.overrides)

            expanded.append(
                EditorReference(
                    id=idx,
                    handle=entry.handle,
                    field_reference=entry.reference,
                    fieldtype=fieldtype.handle,
                    config=config,
                    config_overrides=tuple(entry.overrides.keys()),
                )
            )
        elif isinstance(entry, ImportedFieldset):
            fieldsets.get(entry.fieldset)
            expanded.append(EditorImport(id=idx, fieldset=entry.fieldset, prefix=entry.prefix))
        else:
            raise AssertionError(f"Unhandled blueprint entry: {type(entry).__name__}")
    return expanded


def collapse_entries(
    entries: Sequence[EditorEntry],
    *,
    default_width: int = DEFAULT_WIDTH,
) -> list[BlueprintEntry]:
    """Typed editor -> blueprint transform; keeps only what the blueprint must store."""

    collapsed: list[BlueprintEntry] = []
    for entry in entries:
        if isinstance(entry, EditorInline):
            config = {
                key: value
                for key, value in entry.config.items()
                if key != "type" and value is not None and not (key == "width" and value == default_width)
            }
            collapsed.append(InlineField(handle=entry.handle, fieldtype=entry.fieldtype, config=config))
        elif isinstance(entry, EditorReference):
            wanted = set(entry.config_overrides)
            overrides = {key: value for key, value in entry.config.items() if key in wanted}
            collapsed.append(ReferencedField(handle=entry.handle, reference=entry.field_reference, overrides=overrides))
        elif isinstance(entry, EditorImport):
            collapsed.append(ImportedFieldset(fieldset=entry.fieldset, prefix=entry.prefix))
        else:
            raise AssertionError(f"Unhandled editor entry: {type(entry).__name__}")
    return collapsed


def preprocess(
    entries: Sequence[Any],
    *,
    fieldtypes: FieldtypeRegistry,
    fieldsets: FieldsetRegistry,
    default_width: int = DEFAULT_WIDTH,
) -> list[dict[str, Any]]:
    """Blueprint format -> editor format."""

    blueprint = parse_blueprint_entries(list(entries))
    expanded = expand_entries(blueprint, fieldtypes=fieldtypes, fieldsets=fieldsets, default_width=default_width)
    if logger.isEnabledFor(logging.DEBUG):
        counts = Counter(type(entry).__name__ for entry in expanded)
        logger.debug(
            "Preprocessed %d blueprint entries (inline=%d reference=%d import=%d)",
            len(expanded),
            counts["EditorInline"],
            counts["EditorReference"],
            counts["EditorImport"],
        )
    return [entry.to_dict() for entry in expanded]


def process(entries: Sequence[Any], *, default_width: int = DEFAULT_WIDTH) -> list[dict[str, Any]]:
    """Editor format -> blueprint format."""

    editor = parse_editor_entries(list(entries))
    collapsed = collapse_entries(editor, default_width=default_width)
    logger.debug("Processed %d editor entries into blueprint format", len(collapsed))
    return [entry.to_dict() for entry in collapsed]

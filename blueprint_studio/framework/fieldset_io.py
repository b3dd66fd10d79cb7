from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

import yaml

from blueprint_studio.foundation.config_io import load_yaml_mapping
from fieldkit.config_namespace import ConfigNamespace
from fieldkit.fieldsets import Fieldset, FieldsetRegistry

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


def load_fieldset_file(path: str) -> Fieldset:
    """Load one fieldset; its handle is the file name without the extension."""

    handle = os.path.splitext(os.path.basename(path))[0]
    ns = ConfigNamespace(load_yaml_mapping(path), path=f"fieldset:{handle}")
    title = ns.get_str("title", default=None)
    fields = ns.get_any("fields", default={})
    ns.assert_consumed()
    return Fieldset.from_contents(handle, {"title": title, "fields": fields})


def load_fieldsets(directory: str | None) -> FieldsetRegistry:
    if not directory:
        return FieldsetRegistry.empty()
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Fieldsets directory not found: {directory}")

    fieldsets: list[Fieldset] = []
    for name in sorted(os.listdir(directory)):
        if not name.endswith(_YAML_SUFFIXES):
            continue
        fieldsets.append(load_fieldset_file(os.path.join(directory, name)))

    logger.debug("Loaded %d fieldset(s) from %s", len(fieldsets), directory)
    return FieldsetRegistry.from_fieldsets(fieldsets)


def _fields_payload(payload: Any, *, source: str) -> list[Any]:
    if isinstance(payload, Mapping):
        payload = payload.get("fields")
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of fields in {source} (type={type(payload).__name__})")
    return payload


def load_blueprint_fields(path: str) -> list[Any]:
    """Read the `fields` list of a blueprint YAML file."""

    return _fields_payload(load_yaml_mapping(path), source=path)


def dump_blueprint_fields(fields: list[dict[str, Any]]) -> str:
    return yaml.safe_dump({"fields": fields}, sort_keys=False, allow_unicode=True)


def load_editor_fields(path: str) -> list[Any]:
    """Read editor entries from JSON: a bare list or `{"fields": [...]}`."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    return _fields_payload(payload, source=path)


def dump_editor_fields(fields: list[dict[str, Any]]) -> str:
    return json.dumps(fields, ensure_ascii=False, indent=2)

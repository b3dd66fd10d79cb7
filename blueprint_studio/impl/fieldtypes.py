from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from fieldkit.config_namespace import ConfigNamespace
from fieldkit.fieldtype_registry import ConfigFieldSpec, Fieldtype, FieldtypeRegistry

logger = logging.getLogger(__name__)


def to_integer(value: Any) -> Any:
    """Coerce numeric strings/floats to int; anything non-numeric is returned as given."""

    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in "+-" else text
        if digits.isdigit():
            return int(text)
    return value


def to_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes", "on"}:
            return True
        if normalized in {"false", "0", "no", "off", ""}:
            return False
    return value


def to_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [value]
    return value


def to_options(value: Any) -> Any:
    """Normalize select options to a value -> label mapping."""

    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return {str(item): item for item in value}
    return value


_TEXT_CONFIG = (
    ConfigFieldSpec("placeholder", "text"),
    ConfigFieldSpec("character_limit", "integer", 0),
    ConfigFieldSpec("prepend", "text"),
    ConfigFieldSpec("append", "text"),
)

BUILTIN_FIELDTYPES: tuple[Fieldtype, ...] = (
    Fieldtype("text", config_fields=_TEXT_CONFIG, doc="Single line of text."),
    Fieldtype("plain", doc="Raw value, no preprocessing."),
    Fieldtype(
        "textarea",
        config_fields=(ConfigFieldSpec("character_limit", "integer", 0),),
        doc="Multi-line text.",
    ),
    Fieldtype("markdown", config_fields=(ConfigFieldSpec("buttons", "list"),), doc="Markdown editor."),
    Fieldtype("integer", preprocessor=to_integer, doc="Whole number."),
    Fieldtype("toggle", preprocessor=to_bool, doc="On/off switch."),
    Fieldtype("list", preprocessor=to_list, doc="Ordered list of strings."),
    Fieldtype(
        "select",
        config_fields=(
            ConfigFieldSpec("options", "options"),
            ConfigFieldSpec("multiple", "toggle", False),
            ConfigFieldSpec("placeholder", "text"),
        ),
        doc="Pick from predefined options.",
    ),
    Fieldtype("options", component="array", preprocessor=to_options, doc="Key/value option pairs."),
    Fieldtype(
        "assets",
        config_fields=(
            ConfigFieldSpec("max_files", "integer"),
            ConfigFieldSpec("container", "plain"),
        ),
        preloadable=True,
        doc="Files from an asset container.",
    ),
)


def fieldtype_from_definition(
    handle: str,
    definition: Mapping[str, Any],
    *,
    builtins: FieldtypeRegistry,
) -> Fieldtype:
    """Build a fieldtype from a `fieldtypes.custom.<handle>` config block.

    `preprocess_as` borrows the value preprocessing of an existing fieldtype.
    """

    ns = ConfigNamespace(definition, path=f"fieldtypes.custom.{handle}")
    component = ns.get_str("component", default=None)
    preloadable = ns.get_bool("preload", default=False)
    doc = ns.get_str("doc", default=None)
    preprocess_as = ns.get_str("preprocess_as", default=None)

    specs: list[ConfigFieldSpec] = []
    config_fields = ns.namespace("config_fields", default=None)
    for key in config_fields.keys():
        spec_ns = config_fields.namespace(key)
        specs.append(
            ConfigFieldSpec(
                handle=key,
                type=spec_ns.get_str("type") or "",
                default=spec_ns.get_any("default", default=None),
            )
        )
    ns.assert_consumed()

    preprocessor = None
    if preprocess_as is not None:
        preprocessor = builtins.get(preprocess_as).preprocessor

    return Fieldtype(
        handle,
        component=component,
        config_fields=tuple(specs),
        preprocessor=preprocessor,
        preloadable=preloadable,
        doc=doc,
    )


@lru_cache(maxsize=1)
def builtin_fieldtype_registry() -> FieldtypeRegistry:
    return FieldtypeRegistry.from_fieldtypes(BUILTIN_FIELDTYPES)


def get_fieldtype_registry(custom: Mapping[str, Any] | None = None) -> FieldtypeRegistry:
    """Built-in fieldtypes plus any custom definitions from config."""

    builtins = builtin_fieldtype_registry()
    if not custom:
        return builtins

    extra: list[Fieldtype] = []
    for handle, definition in custom.items():
        if not isinstance(definition, Mapping):
            raise ValueError(
                f"fieldtypes.custom.{handle} must be a mapping (type={type(definition).__name__})"
            )
        extra.append(fieldtype_from_definition(str(handle), definition, builtins=builtins))

    logger.debug("Registered %d custom fieldtype(s): %s", len(extra), ", ".join(ft.handle for ft in extra))
    return builtins.merged(extra)

"""Reusable nested-field toolkit (registries, entry variants, blueprint/editor transforms).

This package is intentionally independent of `blueprint_studio.*`. Concrete
fieldtypes, file layouts and CLI conventions belong to the consuming application.
"""

from fieldkit.config_namespace import ConfigNamespace
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
    parse_blueprint_entry,
    parse_editor_entries,
    parse_editor_entry,
)
from fieldkit.fieldsets import (
    Fieldset,
    FieldsetRegistry,
    UnknownFieldError,
    UnknownFieldsetError,
    parse_field_reference,
)
from fieldkit.fieldtype_registry import (
    ConfigFieldSpec,
    Fieldtype,
    FieldtypeRegistry,
    UnknownFieldtypeError,
)
from fieldkit.nested_fields import (
    DEFAULT_WIDTH,
    collapse_entries,
    expand_entries,
    is_required,
    preprocess,
    preprocess_config,
    process,
)

__all__ = [
    "DEFAULT_WIDTH",
    "BlueprintEntry",
    "ConfigFieldSpec",
    "ConfigNamespace",
    "EditorEntry",
    "EditorImport",
    "EditorInline",
    "EditorReference",
    "Fieldset",
    "FieldsetRegistry",
    "Fieldtype",
    "FieldtypeRegistry",
    "ImportedFieldset",
    "InlineField",
    "ReferencedField",
    "UnknownFieldError",
    "UnknownFieldsetError",
    "UnknownFieldtypeError",
    "collapse_entries",
    "expand_entries",
    "is_required",
    "parse_blueprint_entries",
    "parse_blueprint_entry",
    "parse_editor_entries",
    "parse_editor_entry",
    "parse_field_reference",
    "preprocess",
    "preprocess_config",
    "process",
]

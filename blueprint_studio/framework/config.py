from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from blueprint_studio.foundation.logging_utils import parse_log_level
from fieldkit.nested_fields import DEFAULT_WIDTH


def parse_bool(value: Any, path: str) -> bool:
    """
    Strict boolean parsing to avoid bool('false') footguns.

    Accepts True/False, 0/1, and the strings true/false/1/0/yes/no.
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"Invalid boolean for {path}: {value!r}")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes"}:
            return True
        if normalized in {"false", "0", "no"}:
            return False
    raise ValueError(f"Invalid boolean for {path}: {value!r}")


def parse_int(value: Any, path: str) -> int:
    if value is None:
        raise ValueError(f"Invalid config value for {path}: None")
    if isinstance(value, bool):
        raise ValueError(f"Invalid config type for {path}: expected int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid config value for {path}: must be an int") from exc
    raise ValueError(f"Invalid config type for {path}: expected int")


@dataclass(frozen=True)
class SiteConfig:
    handle: str
    name: str


@dataclass(frozen=True)
class StudioConfig:
    default_width: int = DEFAULT_WIDTH
    fieldsets_path: str | None = None
    custom_fieldtypes: Mapping[str, Any] = field(default_factory=dict)
    cp_route: str = "cp"
    pagination_size: int = 50
    locales: Mapping[str, Any] = field(default_factory=dict)
    ajax_timeout: int = 600
    sites: tuple[SiteConfig, ...] = ()
    selected_site: str | None = None
    log_level: str = "info"
    log_path: str | None = None

    @staticmethod
    def from_dict(cfg: Mapping[str, Any], *, base_dir: str | None = None) -> tuple["StudioConfig", list[str]]:
        """
        Parse and validate studio settings, returning (StudioConfig, warnings).

        Relative paths resolve against `base_dir` (default: the working directory).

        Raises:
            ValueError: if a value is invalid, or unknown keys are present with `strict: true`.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        warnings: list[str] = []
        strict_unknown_keys = parse_bool(cfg.get("strict", False), "strict")

        ANY: object = object()
        schema: Mapping[str, Any] = {
            "strict": None,
            "fields": {"default_width": None, "fieldsets_path": None},
            "fieldtypes": {"custom": ANY},
            "cp": {"route": None, "pagination_size": None},
            "system": {"locales": ANY, "ajax_timeout": None},
            "sites": ANY,
            "selected_site": None,
            "logging": {"level": None, "log_path": None},
        }

        def collect_unknown_keys(mapping: Any, sub: Mapping[str, Any], *, prefix: str) -> list[str]:
            if not isinstance(mapping, Mapping):
                return []
            unknown: list[str] = []
            for key, value in mapping.items():
                full = f"{prefix}.{key}" if prefix else str(key)
                if key not in sub:
                    unknown.append(full)
                    continue
                subschema = sub.get(key)
                if isinstance(subschema, Mapping):
                    unknown.extend(collect_unknown_keys(value, subschema, prefix=full))
            return unknown

        unknown_keys = sorted(set(collect_unknown_keys(cfg, schema, prefix="")))
        if unknown_keys:
            if strict_unknown_keys:
                raise ValueError("Unknown config keys: " + ", ".join(unknown_keys))
            warnings.extend(f"Unknown config key: {key}" for key in unknown_keys)

        def section(name: str) -> Mapping[str, Any]:
            value = cfg.get(name)
            if value is None:
                return {}
            if not isinstance(value, Mapping):
                raise ValueError(f"Config section {name} must be a mapping")
            return value

        def optional_str(mapping: Mapping[str, Any], key: str, path: str) -> str | None:
            value = mapping.get(key)
            if value is None:
                return None
            if not isinstance(value, str):
                raise ValueError(f"Invalid config type for {path}: expected string")
            return value.strip() or None

        def normalize_path(value: str) -> str:
            expanded = os.path.expandvars(os.path.expanduser(value))
            if not os.path.isabs(expanded):
                expanded = os.path.join(base_dir or os.getcwd(), expanded)
            return os.path.abspath(expanded)

        fields_cfg = section("fields")
        default_width = DEFAULT_WIDTH
        if fields_cfg.get("default_width") is not None:
            default_width = parse_int(fields_cfg.get("default_width"), "fields.default_width")
            if not 1 <= default_width <= 100:
                raise ValueError(f"fields.default_width must be between 1 and 100 (got {default_width})")

        fieldsets_raw = optional_str(fields_cfg, "fieldsets_path", "fields.fieldsets_path")
        fieldsets_path = normalize_path(fieldsets_raw) if fieldsets_raw else None

        custom_fieldtypes = section("fieldtypes").get("custom") or {}
        if not isinstance(custom_fieldtypes, Mapping):
            raise ValueError("fieldtypes.custom must be a mapping of handle -> definition")

        cp_cfg = section("cp")
        cp_route = (optional_str(cp_cfg, "route", "cp.route") or "cp").strip("/")
        if not cp_route:
            raise ValueError("cp.route cannot be empty")
        pagination_size = 50
        if cp_cfg.get("pagination_size") is not None:
            pagination_size = parse_int(cp_cfg.get("pagination_size"), "cp.pagination_size")
            if pagination_size < 1:
                raise ValueError(f"cp.pagination_size must be >= 1 (got {pagination_size})")

        system_cfg = section("system")
        locales = system_cfg.get("locales") or {}
        if not isinstance(locales, Mapping):
            raise ValueError("system.locales must be a mapping")
        ajax_timeout = 600
        if system_cfg.get("ajax_timeout") is not None:
            ajax_timeout = parse_int(system_cfg.get("ajax_timeout"), "system.ajax_timeout")

        sites: list[SiteConfig] = []
        raw_sites = cfg.get("sites") or []
        if not isinstance(raw_sites, (list, tuple)):
            raise ValueError("sites must be a list")
        for idx, raw_site in enumerate(raw_sites):
            if not isinstance(raw_site, Mapping):
                raise ValueError(f"sites[{idx}] must be a mapping")
            handle = optional_str(raw_site, "handle", f"sites[{idx}].handle")
            if not handle:
                raise ValueError(f"Missing required config: sites[{idx}].handle")
            name = optional_str(raw_site, "name", f"sites[{idx}].name") or handle
            sites.append(SiteConfig(handle=handle, name=name))

        selected_site = optional_str(cfg, "selected_site", "selected_site")
        if selected_site and sites and selected_site not in {s.handle for s in sites}:
            raise ValueError(f"selected_site {selected_site!r} is not one of the configured sites")
        if selected_site is None and sites:
            selected_site = sites[0].handle

        logging_cfg = section("logging")
        log_level = optional_str(logging_cfg, "level", "logging.level") or "info"
        parse_log_level(log_level)
        log_path_raw = optional_str(logging_cfg, "log_path", "logging.log_path")

        return (
            StudioConfig(
                default_width=default_width,
                fieldsets_path=fieldsets_path,
                custom_fieldtypes=dict(custom_fieldtypes),
                cp_route=cp_route,
                pagination_size=pagination_size,
                locales=dict(locales),
                ajax_timeout=ajax_timeout,
                sites=tuple(sites),
                selected_site=selected_site,
                log_level=log_level.lower(),
                log_path=normalize_path(log_path_raw) if log_path_raw else None,
            ),
            warnings,
        )

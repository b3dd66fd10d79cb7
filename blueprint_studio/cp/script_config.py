from __future__ import annotations

import base64
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from blueprint_studio.framework.config import StudioConfig
from fieldkit.fieldtype_registry import FieldtypeRegistry


@dataclass(frozen=True)
class ScriptUser:
    """The signed-in user as the front-end sees it."""

    data: Mapping[str, Any]
    permissions: tuple[str, ...] = ()
    preferences: Mapping[str, Any] = field(default_factory=dict)


def encode_permissions(permissions: Iterable[str]) -> str:
    return base64.b64encode(json.dumps(list(permissions)).encode("utf-8")).decode("ascii")


def build_script_config(
    cfg: StudioConfig,
    *,
    fieldtypes: FieldtypeRegistry,
    version: str,
    url_path: str,
    user: ScriptUser | None = None,
    locale: str = "en",
    flash: Iterable[Mapping[str, Any]] = (),
) -> dict[str, Any]:
    """Runtime configuration injected into the control panel front-end."""

    permissions = user.permissions if user is not None else ()
    user_payload: dict[str, Any] = {}
    if user is not None:
        user_payload = {
            **dict(user.data),
            "preferences": dict(user.preferences),
            "permissions": list(user.permissions),
        }

    return {
        "version": version,
        "cpRoot": "/" + cfg.cp_route.lstrip("/"),
        "urlPath": "/" + url_path.lstrip("/"),
        "locales": dict(cfg.locales),
        "flash": [dict(item) for item in flash],
        "ajaxTimeout": cfg.ajax_timeout,
        "user": user_payload,
        "paginationSize": cfg.pagination_size,
        "sites": [{"name": site.name, "handle": site.handle} for site in cfg.sites],
        "selectedSite": cfg.selected_site,
        "preloadableFieldtypes": list(fieldtypes.preloadable()),
        "locale": locale,
        "permissions": encode_permissions(permissions),
    }

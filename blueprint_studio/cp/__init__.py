"""Control panel surface: navigation items and the front-end script config.

Common entrypoints:

- `blueprint_studio.cp.navigation`: `Nav`/`NavItem` definitions and section grouping
- `blueprint_studio.cp.script_config`: the runtime payload handed to the front-end
"""

from blueprint_studio.cp.navigation import DEFAULT_SECTION, Authorization, Nav, NavItem, build_default_nav
from blueprint_studio.cp.script_config import ScriptUser, build_script_config, encode_permissions

__all__ = [
    "DEFAULT_SECTION",
    "Authorization",
    "Nav",
    "NavItem",
    "build_default_nav",
    "ScriptUser",
    "build_script_config",
    "encode_permissions",
]

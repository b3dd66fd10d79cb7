"""Control panel navigation items.

Each property has a plain getter and a `set_*` method; setters return the item
so definitions can be chained.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union
from urllib.parse import urlparse

DEFAULT_SECTION = "Top Level"

ChildrenSource = Union[Iterable["NavItem"], Mapping[str, str], Callable[[], Any]]


@dataclass(frozen=True)
class Authorization:
    ability: str
    arguments: tuple[Any, ...] = ()


class NavItem:
    def __init__(self, name: str | None = None, *, cp_root: str = "/cp"):
        self._cp_root = cp_root.rstrip("/")
        self._name = name
        self._section: str | None = None
        self._url: str | None = None
        self._icon: str | None = None
        self._children: list[NavItem] | Callable[[], Any] | None = None
        self._authorization: Authorization | None = None
        self._active: str | None = None
        self._view: str | None = None

    def __repr__(self) -> str:
        return f"NavItem(name={self._name!r}, section={self._section!r}, url={self._url!r})"

    @property
    def cp_root(self) -> str:
        return self._cp_root

    @property
    def name(self) -> str | None:
        return self._name

    def set_name(self, name: str) -> "NavItem":
        self._name = name
        return self

    @property
    def section(self) -> str | None:
        return self._section

    def set_section(self, section: str) -> "NavItem":
        self._section = section
        return self

    @property
    def url(self) -> str | None:
        return self._url

    def set_url(self, url: str) -> "NavItem":
        """Set the link target; a URL under the CP root also seeds the active pattern."""

        self._url = url
        if not self._active:
            prefix = self._cp_root + "/"
            relative = url[len(prefix) :] if url.startswith(prefix) else url
            self._active = relative + "*"
        return self

    def set_route(self, path: str) -> "NavItem":
        """Point the item at a path inside the control panel."""

        return self.set_url(f"{self._cp_root}/{path.strip('/')}")

    @property
    def icon(self) -> str | None:
        return self._icon

    def set_icon(self, icon: str) -> "NavItem":
        self._icon = icon
        return self

    @property
    def children(self) -> list["NavItem"] | Callable[[], Any] | None:
        return self._children

    def set_children(self, items: ChildrenSource | None) -> "NavItem":
        """Accept NavItems, a name -> url mapping, or a callable producing either (resolved lazily)."""

        if items is None:
            self._children = None
        elif callable(items) and not isinstance(items, Mapping):
            self._children = items
        else:
            self._children = self._normalize_children(items)
        return self

    def resolve_children(self) -> list["NavItem"] | None:
        if callable(self._children):
            self._children = self._normalize_children(self._children())
        return self._children

    def _normalize_children(self, items: Any) -> list["NavItem"] | None:
        if isinstance(items, Mapping):
            children = [NavItem(name, cp_root=self._cp_root).set_url(url) for name, url in items.items()]
        else:
            children = []
            for item in items:
                if not isinstance(item, NavItem):
                    raise TypeError(f"Nav children must be NavItem instances (type={type(item).__name__})")
                children.append(item)
        return children or None

    @property
    def authorization(self) -> Authorization | None:
        return self._authorization

    def set_authorization(self, ability: str, arguments: Iterable[Any] = ()) -> "NavItem":
        self._authorization = Authorization(ability=ability, arguments=tuple(arguments))
        return self

    def can(self, ability: str, arguments: Iterable[Any] = ()) -> "NavItem":
        return self.set_authorization(ability, arguments)

    @property
    def active(self) -> str | None:
        return self._active

    def set_active(self, pattern: str) -> "NavItem":
        self._active = pattern
        return self

    def is_active(self, request_path: str) -> bool:
        """Match a request path (with or without leading slash) against `<cp route>/<active>`."""

        if not self._active:
            return False
        route = urlparse(self._cp_root).path.strip("/")
        pattern = f"{route}/{self._active}" if route else self._active
        path = urlparse(request_path).path.strip("/")
        return fnmatch.fnmatchcase(path, pattern.strip("/"))

    @property
    def view(self) -> str | None:
        return self._view

    def set_view(self, view: str) -> "NavItem":
        self._view = view
        return self


AuthorizationCheck = Callable[[Authorization], bool]


class Nav:
    """Registry of navigation items sharing one CP root."""

    def __init__(self, *, cp_root: str = "/cp"):
        self._cp_root = cp_root.rstrip("/")
        self._items: list[NavItem] = []

    def item(self, name: str) -> NavItem:
        """Make an item without registering it (for use as a child)."""

        return NavItem(name, cp_root=self._cp_root)

    def create(self, name: str) -> NavItem:
        item = self.item(name)
        self._items.append(item)
        return item

    def items(self) -> tuple[NavItem, ...]:
        return tuple(self._items)

    def build(self, *, authorize: AuthorizationCheck | None = None) -> dict[str, list[NavItem]]:
        """Group items by section (first-seen order), dropping items `authorize` rejects."""

        sections: dict[str, list[NavItem]] = {}
        for item in self._items:
            if item.authorization is not None and authorize is not None and not authorize(item.authorization):
                continue
            item.resolve_children()
            sections.setdefault(item.section or DEFAULT_SECTION, []).append(item)
        return sections


def build_default_nav(cp_route: str, *, fieldset_handles: Iterable[str] = ()) -> Nav:
    """The studio's own CP items; each fieldset gets a child under Fieldsets."""

    handles = tuple(fieldset_handles)
    nav = Nav(cp_root="/" + cp_route.strip("/"))
    nav.create("Dashboard").set_route("dashboard").set_icon("charts")
    nav.create("Taxonomies").set_section("Content").set_route("taxonomies").set_icon("tags")
    nav.create("Blueprints").set_section("Fields").set_route("fields/blueprints").set_icon("blueprint").can(
        "configure fields"
    )
    nav.create("Fieldsets").set_section("Fields").set_route("fields/fieldsets").set_icon("fieldsets").can(
        "configure fields"
    ).set_children(lambda: [nav.item(handle).set_route(f"fields/fieldsets/{handle}") for handle in handles])
    return nav

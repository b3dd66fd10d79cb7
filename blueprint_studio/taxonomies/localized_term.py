"""Taxonomy terms and their per-locale views.

A `Term` owns the data for every site locale; a `LocalizedTerm` reads and
writes one locale and falls back to the default locale (the first site).
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


class TermSource(Protocol):
    """What `LocalizedTerm` needs from the term it wraps."""

    @property
    def id(self) -> str: ...

    @property
    def slug(self) -> str: ...

    @property
    def taxonomy(self) -> str: ...

    @property
    def default_locale(self) -> str: ...

    def set_slug(self, slug: str) -> Any: ...

    def data_for_locale(self, locale: str) -> dict[str, Any]: ...

    def set_data_for_locale(self, locale: str, data: Mapping[str, Any]) -> Any: ...


@dataclass
class Term:
    id: str
    slug: str
    taxonomy: str
    sites: tuple[str, ...]
    localizations: dict[str, dict[str, Any]] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.slug, str) or not self.slug.strip():
            raise ValueError("Term.slug must be a non-empty string")
        if not self.sites:
            raise ValueError(f"Term {self.taxonomy}/{self.slug} needs at least one site")
        self.sites = tuple(self.sites)
        for locale in self.localizations:
            self._check_locale(locale)

    def _check_locale(self, locale: str) -> None:
        if locale not in self.sites:
            raise ValueError(
                f"Unknown locale {locale!r} for term {self.taxonomy}/{self.slug} (sites: {', '.join(self.sites)})"
            )

    @property
    def default_locale(self) -> str:
        return self.sites[0]

    def set_slug(self, slug: str) -> "Term":
        self.slug = slug
        return self

    def data_for_locale(self, locale: str) -> dict[str, Any]:
        self._check_locale(locale)
        return copy.deepcopy(self.localizations.get(locale, {}))

    def set_data_for_locale(self, locale: str, data: Mapping[str, Any]) -> "Term":
        self._check_locale(locale)
        self.localizations[locale] = copy.deepcopy(dict(data))
        return self

    def in_locale(self, locale: str) -> "LocalizedTerm":
        self._check_locale(locale)
        return LocalizedTerm(self, locale)


class LocalizedTerm:
    def __init__(self, term: TermSource, locale: str):
        self._term = term
        self._locale = locale

    def __repr__(self) -> str:
        return f"LocalizedTerm(taxonomy={self.taxonomy!r}, slug={self.slug!r}, locale={self._locale!r})"

    @property
    def term(self) -> TermSource:
        return self._term

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def id(self) -> str:
        return self._term.id

    @property
    def taxonomy(self) -> str:
        return self._term.taxonomy

    def data(self) -> dict[str, Any]:
        """This locale's own data, without default-locale fallback."""

        return self._term.data_for_locale(self._locale)

    def set_data(self, data: Mapping[str, Any]) -> "LocalizedTerm":
        self._term.set_data_for_locale(self._locale, data)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self.data().get(key, default)

    def set(self, key: str, value: Any) -> "LocalizedTerm":
        data = self.data()
        data[key] = value
        return self.set_data(data)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def remove(self, key: str) -> "LocalizedTerm":
        data = self.data()
        data.pop(key, None)
        return self.set_data(data)

    def merge(self, data: Mapping[str, Any]) -> "LocalizedTerm":
        return self.set_data({**self.data(), **data})

    def values(self) -> dict[str, Any]:
        """Default-locale data overlaid with this locale's data."""

        return {**self._term.data_for_locale(self.default_locale), **self.data()}

    def value(self, key: str) -> Any:
        local = self.get(key)
        if local is not None:
            return local
        return self.in_default_locale().get(key)

    def title(self) -> str:
        title = self.value("title")
        return title if title is not None else self.slug

    @property
    def slug(self) -> str:
        slug = self.get("slug")
        return slug if slug is not None else self._term.slug

    def set_slug(self, slug: str) -> "LocalizedTerm":
        """The default locale renames the term; other locales keep an override only when it differs."""

        if self.is_default_locale():
            self._term.set_slug(slug)
        elif self._term.slug != slug:
            self.set("slug", slug)
        return self

    @property
    def default_locale(self) -> str:
        return self._term.default_locale

    def is_default_locale(self) -> bool:
        return self._locale == self.default_locale

    def is_root(self) -> bool:
        return self.is_default_locale()

    def has_origin(self) -> bool:
        return not self.is_default_locale()

    def in_default_locale(self) -> "LocalizedTerm":
        return LocalizedTerm(self._term, self.default_locale)

    def origin(self) -> "LocalizedTerm":
        return self.in_default_locale()

    def route_data(self) -> dict[str, Any]:
        return {**self.values(), "id": self.id, "slug": self.slug}

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __getitem__(self, key: str) -> Any:
        return self.value(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        self.remove(key)

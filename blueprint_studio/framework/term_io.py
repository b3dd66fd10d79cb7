from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

from blueprint_studio.foundation.config_io import load_yaml_mapping
from blueprint_studio.taxonomies.localized_term import Term

logger = logging.getLogger(__name__)


def load_term_file(path: str, *, sites: Sequence[str]) -> Term:
    """Load `<taxonomy>/<slug>.yaml`.

    Top-level keys are the default-locale data (the first site); per-locale
    overrides live under `localizations.<locale>`. `id` defaults to
    `<taxonomy>::<slug>`.
    """

    if not sites:
        raise ValueError("At least one site is required to load terms")

    slug = os.path.splitext(os.path.basename(path))[0]
    taxonomy = os.path.basename(os.path.dirname(os.path.abspath(path)))

    contents = load_yaml_mapping(path)
    term_id = contents.pop("id", None) or f"{taxonomy}::{slug}"
    if not isinstance(term_id, str):
        raise TypeError(f"{path}: id must be a string (type={type(term_id).__name__})")

    raw_localizations = contents.pop("localizations", None) or {}
    if not isinstance(raw_localizations, Mapping):
        raise TypeError(
            f"{path}: localizations must be a mapping of locale -> data (type={type(raw_localizations).__name__})"
        )

    default_locale = sites[0]
    localizations = {default_locale: contents}
    for locale, data in raw_localizations.items():
        if locale == default_locale:
            raise ValueError(f"{path}: localizations.{locale} repeats the default locale; put that data at the top level")
        if not isinstance(data, Mapping):
            raise TypeError(f"{path}: localizations.{locale} must be a mapping (type={type(data).__name__})")
        localizations[str(locale)] = dict(data)

    logger.debug("Loaded term %s with %d locale(s)", term_id, len(localizations))
    return Term(id=term_id, slug=slug, taxonomy=taxonomy, sites=tuple(sites), localizations=localizations)

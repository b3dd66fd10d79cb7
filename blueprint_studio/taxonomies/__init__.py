"""Taxonomy terms with per-locale data and default-locale fallback."""

from blueprint_studio.taxonomies.localized_term import LocalizedTerm, Term, TermSource

__all__ = ["LocalizedTerm", "Term", "TermSource"]

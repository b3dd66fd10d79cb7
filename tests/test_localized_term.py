from pathlib import Path

import pytest

from blueprint_studio.framework.term_io import load_term_file
from blueprint_studio.taxonomies import LocalizedTerm, Term

REPO_ROOT = Path(__file__).resolve().parents[1]


def _term(**localizations):
    return Term(
        id="tags::news",
        slug="news",
        taxonomy="tags",
        sites=("en", "fr"),
        localizations=localizations or {"en": {"title": "News", "colour": "blue"}, "fr": {"title": "Actualités"}},
    )


def test_values_overlay_locale_data_on_default_locale():
    fr = _term().in_locale("fr")

    assert fr.values() == {"title": "Actualités", "colour": "blue"}
    assert fr.data() == {"title": "Actualités"}


def test_value_falls_back_to_default_locale_but_get_does_not():
    fr = _term().in_locale("fr")

    assert fr.value("colour") == "blue"
    assert fr["colour"] == "blue"
    assert fr.get("colour") is None
    assert fr.get("colour", "none") == "none"
    assert not fr.has("colour")
    assert "title" in fr


def test_title_falls_back_to_slug():
    term = _term(en={}, fr={})
    assert term.in_locale("fr").title() == "news"
    assert _term().in_locale("fr").title() == "Actualités"


def test_default_locale_slug_renames_the_term():
    term = _term()
    en = term.in_locale("en")

    assert en.set_slug("headlines") is en
    assert term.slug == "headlines"
    assert en.get("slug") is None
    assert term.in_locale("fr").slug == "headlines"


def test_other_locale_slug_is_stored_only_when_it_differs():
    term = _term()
    fr = term.in_locale("fr")

    fr.set_slug("news")
    assert fr.get("slug") is None

    fr.set_slug("actualites")
    assert fr.slug == "actualites"
    assert term.slug == "news"
    assert term.in_locale("en").slug == "news"


def test_origin_and_root():
    term = _term()
    en, fr = term.in_locale("en"), term.in_locale("fr")

    assert not en.has_origin()
    assert en.is_root()
    assert fr.has_origin()
    assert fr.origin().locale == "en"
    assert fr.in_default_locale().get("colour") == "blue"


def test_set_merge_and_remove_write_through_to_the_term():
    term = _term()
    fr = term.in_locale("fr")

    fr.set("colour", "bleu").merge({"summary": "Annonces"})
    fr["featured"] = True
    del fr["title"]

    assert term.data_for_locale("fr") == {"colour": "bleu", "summary": "Annonces", "featured": True}
    assert term.data_for_locale("en") == {"title": "News", "colour": "blue"}
    assert fr.value("title") == "News"


def test_returned_data_is_a_copy():
    term = _term(en={"tags": ["a"]}, fr={})
    en = term.in_locale("en")

    en.data()["tags"].append("b")
    en.values()["tags"].append("c")

    assert en.get("tags") == ["a"]


def test_route_data_includes_id_and_localized_slug():
    fr = _term().in_locale("fr").set_slug("actualites")
    assert fr.route_data() == {
        "title": "Actualités",
        "colour": "blue",
        "slug": "actualites",
        "id": "tags::news",
    }


def test_unknown_locale_is_rejected():
    with pytest.raises(ValueError, match=r"Unknown locale 'de' for term tags/news \(sites: en, fr\)"):
        _term().in_locale("de")
    with pytest.raises(ValueError, match=r"Unknown locale 'de'"):
        Term(id="x", slug="news", taxonomy="tags", sites=("en",), localizations={"de": {}})
    with pytest.raises(ValueError, match=r"needs at least one site"):
        Term(id="x", slug="news", taxonomy="tags", sites=())


def test_wraps_any_term_source():
    class StoredTerm:
        id = "categories::books"
        taxonomy = "categories"
        default_locale = "en"

        def __init__(self):
            self.slug = "books"
            self.rows = {"en": {"title": "Books"}}

        def set_slug(self, slug):
            self.slug = slug

        def data_for_locale(self, locale):
            return dict(self.rows.get(locale, {}))

        def set_data_for_locale(self, locale, data):
            self.rows[locale] = dict(data)

    stored = StoredTerm()
    de = LocalizedTerm(stored, "de")

    assert de.title() == "Books"
    de.set_slug("buecher")
    assert stored.rows["de"] == {"slug": "buecher"}
    assert stored.slug == "books"


def test_load_sample_term_file():
    term = load_term_file(str(REPO_ROOT / "resources" / "taxonomies" / "tags" / "news.yaml"), sites=("default", "fr"))

    assert (term.id, term.taxonomy, term.slug) == ("tags::news", "tags", "news")
    fr = term.in_locale("fr")
    assert fr.slug == "actualites"
    assert fr.title() == "Actualités"
    assert fr.value("description") == "Announcements and release notes."


def test_load_term_file_validation(tmp_path):
    taxonomy_dir = tmp_path / "tags"
    taxonomy_dir.mkdir()
    path = taxonomy_dir / "news.yaml"

    path.write_text("id: news-1\ntitle: News\n", encoding="utf-8")
    assert load_term_file(str(path), sites=("en",)).id == "news-1"

    path.write_text("title: News\nlocalizations:\n  en:\n    title: Again\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"localizations\.en repeats the default locale"):
        load_term_file(str(path), sites=("en", "fr"))

    path.write_text("title: News\nlocalizations:\n  de:\n    title: Neuigkeiten\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"Unknown locale 'de'"):
        load_term_file(str(path), sites=("en", "fr"))

    with pytest.raises(ValueError, match=r"At least one site"):
        load_term_file(str(path), sites=())

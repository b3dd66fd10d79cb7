import pytest

from fieldkit.entries import (
    EditorImport,
    EditorInline,
    EditorReference,
    ImportedFieldset,
    InlineField,
    ReferencedField,
    parse_blueprint_entries,
    parse_blueprint_entry,
    parse_editor_entry,
)
from fieldkit.fieldsets import (
    Fieldset,
    FieldsetRegistry,
    UnknownFieldError,
    UnknownFieldsetError,
    parse_field_reference,
)


def test_parse_field_reference():
    assert parse_field_reference("test.bar") == ("test", "bar")
    assert parse_field_reference(" seo.meta.title ") == ("seo", "meta.title")

    with pytest.raises(ValueError, match=r"'<fieldset>\.<field>'"):
        parse_field_reference("nodot")
    with pytest.raises(ValueError):
        parse_field_reference(".bar")
    with pytest.raises(TypeError):
        parse_field_reference(None)


def test_fieldset_from_contents_accepts_mapping_and_list_fields():
    as_mapping = Fieldset.from_contents("seo", {"title": "SEO", "fields": {"meta": {"type": "text"}}})
    as_list = Fieldset.from_contents("seo", {"fields": [{"handle": "meta", "field": {"type": "text"}}]})

    assert as_mapping.title == "SEO"
    assert as_mapping.fields == as_list.fields == {"meta": {"type": "text"}}
    assert as_list.title is None


def test_fieldset_rejects_bad_shapes():
    with pytest.raises(ValueError, match=r"cannot contain '\.'"):
        Fieldset("a.b", fields={})
    with pytest.raises(TypeError, match=r"Field seo\.meta must be a mapping"):
        Fieldset("seo", fields={"meta": "text"})
    with pytest.raises(TypeError, match=r"fields\[0\]"):
        Fieldset.from_contents("seo", {"fields": [{"handle": "meta", "field": "common.title"}]})


def test_fieldset_field_returns_a_copy():
    fieldset = Fieldset("seo", fields={"meta": {"type": "text"}})
    copy = fieldset.field("meta")
    copy["type"] = "plain"
    assert fieldset.field("meta") == {"type": "text"}
    assert fieldset.field("missing") is None


def test_registry_resolve_field():
    registry = FieldsetRegistry.from_fieldsets([Fieldset("test", fields={"bar": {"type": "text"}})])

    fieldset, handle, definition = registry.resolve_field("test.bar")
    assert (fieldset.handle, handle, definition) == ("test", "bar", {"type": "text"})

    with pytest.raises(UnknownFieldsetError, match=r"Unknown fieldset: tst \(did you mean: test\)"):
        registry.resolve_field("tst.bar")
    with pytest.raises(UnknownFieldError, match=r"test\.baz \(fields in fieldset: bar\)"):
        registry.resolve_field("test.baz")


def test_registry_rejects_duplicate_handles():
    with pytest.raises(ValueError, match=r"Duplicate fieldset handle: a"):
        FieldsetRegistry.from_fieldsets([Fieldset("a", fields={}), Fieldset("a", fields={})])


def test_parse_blueprint_entry_variants():
    assert parse_blueprint_entry({"handle": "one", "field": {"type": "plain", "display": "One"}}) == InlineField(
        handle="one", fieldtype="plain", config={"display": "One"}
    )
    assert parse_blueprint_entry({"handle": "two", "field": "test.bar", "config": {"width": 50}}) == ReferencedField(
        handle="two", reference="test.bar", overrides={"width": 50}
    )
    assert parse_blueprint_entry({"import": "test"}) == ImportedFieldset(fieldset="test", prefix=None)


def test_parse_blueprint_entry_rejects_ambiguous_shapes():
    with pytest.raises(ValueError, match=r"cannot set both 'import' and 'field'"):
        parse_blueprint_entry({"import": "test", "field": "test.bar"})
    with pytest.raises(ValueError, match=r"must set either 'field' or 'import'"):
        parse_blueprint_entry({"handle": "x"})
    with pytest.raises(ValueError, match=r"fields\[0\]\.field\.type"):
        parse_blueprint_entry({"handle": "x", "field": {"display": "No type"}})
    with pytest.raises(ValueError, match=r"config is only allowed on field references"):
        parse_blueprint_entry({"handle": "x", "field": {"type": "plain"}, "config": {"width": 50}})
    with pytest.raises(TypeError, match=r"fields\[1\] must be a mapping"):
        parse_blueprint_entries([{"import": "a"}, "oops"])


def test_blueprint_entries_serialize_back_to_stored_shape():
    assert InlineField("one", "plain", {"display": "One"}).to_dict() == {
        "handle": "one",
        "field": {"type": "plain", "display": "One"},
    }
    assert ReferencedField("two", "test.bar").to_dict() == {"handle": "two", "field": "test.bar"}
    assert ImportedFieldset("test", prefix="foo").to_dict() == {"import": "test", "prefix": "foo"}


def test_parse_editor_entry_variants():
    inline = parse_editor_entry({"_id": 3, "type": "inline", "handle": "one", "config": {"type": "plain"}})
    assert inline == EditorInline(id=3, handle="one", fieldtype="plain", config={"type": "plain"})

    reference = parse_editor_entry(
        {
            "_id": 4,
            "type": "reference",
            "handle": "two",
            "field_reference": "test.bar",
            "config_overrides": ["width", "width", "display"],
        }
    )
    assert isinstance(reference, EditorReference)
    assert reference.config_overrides == ("width", "display")
    assert reference.fieldtype is None

    assert parse_editor_entry({"type": "import", "fieldset": "test"}) == EditorImport(id=None, fieldset="test")


def test_parse_editor_entry_requires_handles_and_known_types():
    with pytest.raises(ValueError, match=r"fields\[0\]\.handle"):
        parse_editor_entry({"type": "inline", "fieldtype": "plain"})
    with pytest.raises(ValueError, match=r"got None"):
        parse_editor_entry({"handle": "x"})
    with pytest.raises(TypeError, match=r"config_overrides must be a list"):
        parse_editor_entry(
            {"type": "reference", "handle": "x", "field_reference": "a.b", "config_overrides": "width"}
        )


def test_fieldset_field_copies_nested_values():
    fieldset = Fieldset("shop", fields={"colour": {"type": "select", "options": {"r": "Red"}}})
    fieldset.field("colour")["options"]["g"] = "Green"
    assert fieldset.field("colour")["options"] == {"r": "Red"}

import pytest

from fieldkit.config_namespace import ConfigNamespace


def test_get_bool_is_strict():
    ns = ConfigNamespace({"preload": "false"}, path="fieldtypes.custom.slug")
    with pytest.raises(TypeError, match=r"fieldtypes\.custom\.slug\.preload must be a boolean"):
        ns.get_bool("preload")


def test_get_int_is_strict_and_validates_minimum():
    with pytest.raises(TypeError, match=r"must be an int"):
        ConfigNamespace({"limit": 2.0}, path="x").get_int("limit")
    with pytest.raises(TypeError, match=r"must be an int"):
        ConfigNamespace({"limit": True}, path="x").get_int("limit")
    with pytest.raises(ValueError, match=r"x\.limit must be >= 3"):
        ConfigNamespace({"limit": 2}, path="x").get_int("limit", min_value=3)
    assert ConfigNamespace({}, path="x").get_int("limit", default=7) == 7


def test_missing_required_key_names_the_path():
    with pytest.raises(ValueError, match=r"Missing required key: fieldset:seo\.fields"):
        ConfigNamespace({}, path="fieldset:seo").get_any("fields")


def test_get_str_strips_and_rejects_empty():
    ns = ConfigNamespace({"title": "  SEO  ", "blank": " "}, path="x")
    assert ns.get_str("title") == "SEO"
    with pytest.raises(ValueError, match=r"x\.blank cannot be empty"):
        ns.get_str("blank")
    assert ns.get_str("missing", default=None) is None


def test_unknown_key_enforcement_lists_known_keys():
    ns = ConfigNamespace({"component": "slug", "typo": 1}, path="fieldtypes.custom.slug")
    assert ns.get_str("component") == "slug"
    with pytest.raises(ValueError, match=r"Unknown keys under fieldtypes\.custom\.slug: typo \(known: component\)"):
        ns.assert_consumed()


def test_nested_namespaces_are_checked_too():
    ns = ConfigNamespace({"config_fields": {"from": {"type": "text", "typo": 1}}}, path="ft")
    fields = ns.namespace("config_fields")
    spec = fields.namespace("from")
    assert spec.get_str("type") == "text"

    with pytest.raises(ValueError, match=r"Unknown keys under ft\.config_fields\.from: typo"):
        ns.assert_consumed()


def test_namespace_defaults_and_type_errors():
    ns = ConfigNamespace({"bad": [1, 2]}, path="ft")
    assert ns.namespace("config_fields", default=None).keys() == ()
    with pytest.raises(TypeError, match=r"ft\.bad must be a mapping"):
        ns.namespace("bad")
    with pytest.raises(ValueError, match=r"Missing required mapping: ft\.other"):
        ns.namespace("other")


def test_reading_a_namespace_key_as_a_value_is_rejected():
    ns = ConfigNamespace({"child": {"a": 1}}, path="x")
    ns.namespace("child")
    with pytest.raises(ValueError, match=r"already read as a nested namespace"):
        ns.get_any("child")

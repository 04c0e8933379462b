"""
Tests for QuerySpec normalization.

Invalid or missing fields must silently take their defaults; nothing raises.
"""

import pytest
from pydantic import ValidationError

from jsonquery.spec import DEFAULT_PAGE, DEFAULT_PER_PAGE, QuerySpec


class TestDefaults:
    """Missing input yields documented defaults."""

    def test_empty_config(self):
        spec = QuerySpec.from_config({})

        assert spec.page == DEFAULT_PAGE == 1
        assert spec.per_page == DEFAULT_PER_PAGE == 20
        assert spec.all_page is False
        assert spec.order_by == ()
        assert spec.expands == ()
        assert spec.attributes == ()
        assert spec.filter == {}
        assert spec.additional_filter == {}

    @pytest.mark.parametrize("raw", [None, [], "page=2", 42])
    def test_non_mapping_config(self, raw):
        spec = QuerySpec.from_config(raw)
        assert spec.page == 1
        assert spec.per_page == 20

    def test_default_offset(self):
        assert QuerySpec.from_config({}).offset == 0

    def test_custom_defaults(self):
        spec = QuerySpec.from_config({}, default_page=2, default_per_page=50)
        assert spec.page == 2
        assert spec.per_page == 50


class TestWireFields:
    """camelCase wire names map onto spec fields."""

    def test_camel_case_fields(self):
        spec = QuerySpec.from_config({
            "page": 3,
            "perPage": 10,
            "allPage": True,
            "orderBy": ["-age"],
            "expands": ["pictures"],
            "attributes": ["id", "name"],
            "filter": {"a": 1},
            "additionalFilter": {"b": 2},
        })

        assert spec.page == 3
        assert spec.per_page == 10
        assert spec.all_page is True
        assert spec.order_by == ("-age",)
        assert spec.expands == ("pictures",)
        assert spec.attributes == ("id", "name")
        assert spec.filter == {"a": 1}
        assert spec.additional_filter == {"b": 2}

    def test_offset_from_page(self):
        spec = QuerySpec.from_config({"page": 3, "perPage": 10})
        assert spec.offset == 20

    def test_unknown_fields_ignored(self):
        spec = QuerySpec.from_config({"page": 2, "foo": "bar"})
        assert spec.page == 2
        assert not hasattr(spec, "foo")


class TestTolerantNormalization:
    """Wrong shapes degrade to defaults instead of failing."""

    @pytest.mark.parametrize("page", [0, -1, "2", 1.5, True, None, [2]])
    def test_invalid_page(self, page):
        assert QuerySpec.from_config({"page": page}).page == 1

    @pytest.mark.parametrize("per_page", [0, -20, "10", 2.0, False, {}])
    def test_invalid_per_page(self, per_page):
        assert QuerySpec.from_config({"perPage": per_page}).per_page == 20

    @pytest.mark.parametrize("all_page", ["true", 1, 0, None])
    def test_invalid_all_page(self, all_page):
        assert QuerySpec.from_config({"allPage": all_page}).all_page is False

    @pytest.mark.parametrize("value", ["-age", {"a": 1}, 5, None])
    def test_invalid_sequences(self, value):
        spec = QuerySpec.from_config({"orderBy": value, "expands": value, "attributes": value})
        assert spec.order_by == ()
        assert spec.expands == ()
        assert spec.attributes == ()

    def test_non_string_attributes_dropped(self):
        spec = QuerySpec.from_config({"attributes": ["id", 3, None, "name"]})
        assert spec.attributes == ("id", "name")

    def test_null_filters_mean_always_true(self):
        spec = QuerySpec.from_config({"filter": None, "additionalFilter": None})
        assert spec.filter == {}
        assert spec.additional_filter == {}


class TestImmutability:
    """QuerySpec is frozen and isolated from the caller's input."""

    def test_frozen(self):
        spec = QuerySpec.from_config({"page": 2})
        with pytest.raises(ValidationError):
            spec.page = 5

    def test_input_mutation_does_not_leak(self):
        raw = {
            "filter": {"a": 1},
            "orderBy": ["-age"],
            "expands": [{"name": "pictures", "limit": 5}],
        }
        spec = QuerySpec.from_config(raw)

        raw["filter"]["a"] = 2
        raw["orderBy"].append("id")
        raw["expands"][0]["limit"] = 99

        assert spec.filter == {"a": 1}
        assert spec.order_by == ("-age",)
        assert spec.expands[0]["limit"] == 5

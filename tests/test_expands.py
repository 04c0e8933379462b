"""
Tests for eager-load (expand) resolution.
"""

import pytest

from jsonquery.exceptions import TranslationError
from jsonquery.expands import ExpandDescriptor, resolve_expands
from jsonquery.ordering import Direction, OrderTerm
from jsonquery.predicates import Comparison


class TestPlainEntries:
    """Plain names pass through untouched."""

    def test_string_passthrough(self, registry, translator):
        assert resolve_expands(["pictures", "ghost"], registry, translator) == ["pictures", "ghost"]


class TestStructuredEntries:
    """Structured entries resolve against the registry."""

    def test_limit_and_required(self, registry, translator, models):
        includes = resolve_expands(
            [{"name": "pictures", "limit": 5, "required": True}], registry, translator
        )

        assert len(includes) == 1
        expand = includes[0]
        assert isinstance(expand, ExpandDescriptor)
        assert expand.model is models["pictures"]
        assert expand.alias == "pictures"
        assert expand.limit == 5
        assert expand.required is True
        assert expand.separate is None

    def test_unknown_relation_dropped(self, registry, translator):
        assert resolve_expands([{"name": "ghost"}], registry, translator) == []

    def test_model_name_takes_precedence(self, registry, translator, models):
        expand = resolve_expands(
            [{"name": "avatar", "modelName": "images"}], registry, translator
        )[0]
        assert expand.model is models["images"]
        assert expand.alias == "avatar"
        assert expand.key == "images"

    def test_falls_back_to_name(self, registry, translator, models):
        expand = resolve_expands(
            [{"name": "pictures", "modelName": "ghost"}], registry, translator
        )[0]
        assert expand.model is models["pictures"]
        assert expand.key == "pictures"

    def test_missing_name_dropped(self, registry, translator):
        assert resolve_expands([{"modelName": "pictures"}], registry, translator) == []
        assert resolve_expands([{"name": ""}], registry, translator) == []

    def test_flags_require_correct_types(self, registry, translator):
        expand = resolve_expands(
            [{"name": "pictures", "limit": "5", "required": "yes", "separate": 1}],
            registry, translator,
        )[0]
        assert expand.limit is None
        assert expand.required is None
        assert expand.separate is None

    def test_bool_is_not_a_limit(self, registry, translator):
        expand = resolve_expands([{"name": "pictures", "limit": True}], registry, translator)[0]
        assert expand.limit is None

    def test_separate(self, registry, translator):
        expand = resolve_expands([{"name": "pictures", "separate": False}], registry, translator)[0]
        assert expand.separate is False

    def test_nested_order(self, registry, translator, models):
        expand = resolve_expands(
            [{"name": "pictures", "order": ["-created", "$users.name$"]}], registry, translator
        )[0]

        assert expand.order[0] == OrderTerm("created", Direction.DESC)
        assert expand.order[1].relation.model is models["users"]

    def test_nested_where(self, registry, translator):
        expand = resolve_expands(
            [{"name": "pictures", "where": {"public": True}}], registry, translator
        )[0]
        assert expand.where == Comparison("public", "eq", True)

    def test_nested_where_translation_error_propagates(self, registry, translator):
        with pytest.raises(TranslationError):
            resolve_expands([{"name": "pictures", "where": "public"}], registry, translator)

    def test_attributes_passthrough(self, registry, translator):
        expand = resolve_expands(
            [{"name": "pictures", "attributes": ["id", "url"]}], registry, translator
        )[0]
        assert expand.attributes == ["id", "url"]

    def test_to_include(self, registry, translator, models):
        expand = resolve_expands(
            [{"name": "pictures", "limit": 2, "order": ["-id"]}], registry, translator
        )[0]
        assert expand.to_include() == {
            "model": models["pictures"],
            "as": "pictures",
            "limit": 2,
            "order": [["id", "DESC"]],
        }

    def test_to_dict(self, registry, translator):
        expand = resolve_expands(
            [{"name": "pictures", "required": False, "where": {"public": True}}], registry, translator
        )[0]
        assert expand.to_dict() == {
            "key": "pictures",
            "as": "pictures",
            "required": False,
            "where": {"public": {"$eq": True}},
        }


class TestMixedEntries:
    """Order is preserved and unsupported shapes are dropped."""

    def test_order_preserved(self, registry, translator):
        includes = resolve_expands(
            ["users", {"name": "ghost"}, 5, None, [1], {"name": "pictures"}, "images"],
            registry, translator,
        )

        assert includes[0] == "users"
        assert includes[1].alias == "pictures"
        assert includes[2] == "images"
        assert len(includes) == 3

    def test_diagnostics(self, registry, translator):
        diagnostics = []
        resolve_expands(["users", {"name": "ghost"}, 5, {"limit": 1}], registry, translator, diagnostics)

        assert [(d["code"], d["path"]) for d in diagnostics] == [
            ("UNRESOLVED_EXPAND", "expands[1]"),
            ("INVALID_EXPAND", "expands[2]"),
            ("INVALID_EXPAND", "expands[3]"),
        ]

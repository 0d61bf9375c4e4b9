"""Unit tests – query specifications, validation and request parameters."""
from __future__ import annotations

import pytest

from facetsearch.application.filters import FilterCondition, FilterOperator, LogicalOperator
from facetsearch.application.query import (
    QuerySpecification,
    SortOption,
    build_filter_by,
    build_search_params,
    ensure_valid,
    validate,
    validate_facet_selections,
)
from facetsearch.kernel.errors import ValidationError


def _spec(**kwargs) -> QuerySpecification:
    kwargs.setdefault("collection", "articles")
    return QuerySpecification(**kwargs)


def _codes(spec: QuerySpecification) -> dict[str, str]:
    return {e.field: e.code for e in validate(spec)}


class TestQuerySpecification:
    def test_defaults(self) -> None:
        spec = _spec()
        assert spec.query == "*"
        assert spec.per_page == 10
        assert spec.max_facet_values == 10
        assert spec.enabled is True
        assert len(spec.id) == 12

    def test_blank_query_is_wildcard(self) -> None:
        assert _spec(query="   ").effective_query == "*"
        assert _spec(query="  hobbit ").effective_query == "hobbit"

    def test_copy_does_not_share_lists(self) -> None:
        spec = _spec(query_by=["title"])
        clone = spec.copy()
        clone.query_by.append("body")
        assert spec.query_by == ["title"]
        assert clone.id == spec.id

    def test_copy_with_changes(self) -> None:
        assert _spec().copy(enabled=False).enabled is False

    def test_sort_param(self) -> None:
        assert SortOption("price", "desc").to_param() == "price:desc"


class TestValidate:
    def test_valid_wildcard(self) -> None:
        assert validate(_spec()) == []

    def test_missing_collection(self) -> None:
        assert _codes(_spec(collection="  ")) == {"collection": "required"}

    def test_non_wildcard_requires_query_by(self) -> None:
        assert _codes(_spec(query="hobbit")) == {"query_by": "required"}
        assert validate(_spec(query="hobbit", query_by=["title"])) == []

    @pytest.mark.parametrize("per_page", [0, 251, -1])
    def test_per_page_range(self, per_page: int) -> None:
        assert _codes(_spec(per_page=per_page)) == {"per_page": "out_of_range"}

    @pytest.mark.parametrize("per_page", [1, 250])
    def test_per_page_bounds_are_inclusive(self, per_page: int) -> None:
        assert validate(_spec(per_page=per_page)) == []

    def test_max_facet_values_positive(self) -> None:
        assert _codes(_spec(max_facet_values=0)) == {"max_facet_values": "out_of_range"}

    def test_page_and_typos(self) -> None:
        assert _codes(_spec(page=0, num_typos=3)) == {"page": "out_of_range", "num_typos": "out_of_range"}

    def test_invalid_field_names(self) -> None:
        codes = _codes(_spec(query="x", query_by=["title", "bad-name"], facet_by=["1st"]))
        assert codes == {"query_by[1]": "invalid_field_name", "facet_by[0]": "invalid_field_name"}

    def test_too_many_sorts(self) -> None:
        sorts = [SortOption(f"f{i}") for i in range(4)]
        assert _codes(_spec(sort_options=sorts)) == {"sort_options": "too_many"}

    def test_bad_sort_order(self) -> None:
        assert _codes(_spec(sort_options=[SortOption("price", "up")])) == {"sort_options[0]": "invalid"}

    def test_filter_condition_errors_are_reported_per_condition(self) -> None:
        spec = _spec(
            filter_conditions=[
                FilterCondition("price", FilterOperator.GT, 10),
                FilterCondition("price", FilterOperator.GT, "cheap"),
                FilterCondition("bad name", FilterOperator.EXACT, "x"),
            ]
        )
        assert _codes(spec) == {
            "filter_conditions[1]": "type_mismatch",
            "filter_conditions[2]": "invalid_field_name",
        }

    def test_every_problem_is_reported(self) -> None:
        errors = validate(_spec(collection="", query="x", per_page=0))
        assert {e.field for e in errors} == {"collection", "query_by", "per_page"}

    def test_ensure_valid_raises_with_all_errors(self) -> None:
        spec = _spec(collection="", per_page=0)
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(spec)
        assert exc_info.value.spec_id == spec.id
        assert exc_info.value.inline().scope == spec.id
        assert exc_info.value.code == "validation_error"
        assert len(exc_info.value.errors) == 2
        assert exc_info.value.to_dict()["errors"][0]["field"] == "collection"

    def test_ensure_valid_returns_spec(self) -> None:
        spec = _spec()
        assert ensure_valid(spec) is spec


class TestValidateFacetSelections:
    def test_expressible_values_pass(self) -> None:
        assert validate_facet_selections({"category": {"tech", "art & design"}, "year": {"2024"}}) == []

    @pytest.mark.parametrize("value", ["rock `n` roll", ""])
    def test_unexpressible_value(self, value: str) -> None:
        errors = validate_facet_selections({"category": {"tech", value}})
        assert [(e.field, e.code) for e in errors] == [("facet_selections[category]", "type_mismatch")]

    def test_bad_field_name(self) -> None:
        errors = validate_facet_selections({"bad name": {"x"}})
        assert [e.code for e in errors] == ["invalid_field_name"]

    def test_empty_selection_is_ignored(self) -> None:
        assert validate_facet_selections({"category": set()}) == []

    def test_validate_reports_selection_problems(self) -> None:
        errors = validate(_spec(), {"category": {""}})
        assert [e.field for e in errors] == ["facet_selections[category]"]

    def test_ensure_valid_covers_selections(self) -> None:
        with pytest.raises(ValidationError):
            ensure_valid(_spec(), {"category": {"a`b"}})


class TestBuildFilterBy:
    def test_structured_and_facets(self) -> None:
        spec = _spec(filter_conditions=[FilterCondition("price", FilterOperator.LT, 100)])
        assert build_filter_by(spec, {"category": ["electronics"]}) == "price:<100 && category:=electronics"

    def test_manual_filter_is_grouped(self) -> None:
        spec = _spec(filter_by="a:=1 || b:=2", filter_conditions=[FilterCondition("c", FilterOperator.EXACT, 3)])
        assert build_filter_by(spec) == "(a:=1 || b:=2) && c:=3"

    def test_manual_filter_alone(self) -> None:
        assert build_filter_by(_spec(filter_by=" a:=1 ")) == "a:=1"

    def test_nothing(self) -> None:
        assert build_filter_by(_spec()) == ""


class TestBuildSearchParams:
    def test_full_parameter_set(self) -> None:
        spec = _spec(
            query="hobbit",
            query_by=["title", "body", "title"],
            filter_conditions=[FilterCondition("year", FilterOperator.GE, 1937)],
            sort_options=[SortOption("year", "desc")],
            facet_by=["category"],
            max_facet_values=5,
            per_page=20,
        )
        params = build_search_params(spec, {"category": {"fantasy"}})
        assert params == {
            "collection": "articles",
            "q": "hobbit",
            "query_by": "title,body",
            "filter_by": "year:>=1937 && category:=fantasy",
            "sort_by": "year:desc",
            "facet_by": "category",
            "max_facet_values": 5,
            "page": 1,
            "per_page": 20,
            "num_typos": 2,
            "prefix": True,
            "highlight_start_tag": "<mark>",
            "highlight_end_tag": "</mark>",
        }

    def test_empty_optionals_are_omitted(self) -> None:
        params = build_search_params(_spec())
        for key in ("query_by", "filter_by", "sort_by", "facet_by", "max_facet_values"):
            assert key not in params
        assert params["q"] == "*"

    def test_custom_highlight_tags(self) -> None:
        params = build_search_params(_spec(), highlight_start_tag="<em>", highlight_end_tag="</em>")
        assert params["highlight_start_tag"] == "<em>"

    def test_or_condition_survives(self) -> None:
        spec = _spec(
            filter_conditions=[
                FilterCondition("a", FilterOperator.EXACT, "x"),
                FilterCondition("b", FilterOperator.EXACT, "y", LogicalOperator.OR),
            ]
        )
        assert build_search_params(spec)["filter_by"] == "a:=x || b:=y"

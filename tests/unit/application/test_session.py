"""Unit tests – MultiSearchSession dispatch cycle, stale results and facet actions."""
from __future__ import annotations

import asyncio

import pytest

from facetsearch.application.dispatch import MultiSearchDispatcher
from facetsearch.application.filters import FilterCondition, FilterOperator
from facetsearch.application.presets import SearchPreset
from facetsearch.application.query import QuerySpecification, SortOption
from facetsearch.application.state import MultiSearchSession
from facetsearch.kernel.errors import DispatchError, TransportTimeoutError
from facetsearch.testing import (
    FakeClock,
    FakeMetricsRegistry,
    FakeSearchTransport,
    make_facet_count,
    make_fault,
    make_search_result,
)


def _session(transport: FakeSearchTransport, **kwargs) -> MultiSearchSession:
    clock = kwargs.pop("clock", FakeClock())
    return MultiSearchSession(MultiSearchDispatcher(transport, clock=clock), clock=clock, **kwargs)


def _results(*found: int) -> dict:
    return {"results": [make_search_result(found=f) for f in found]}


class TestSpecifications:
    def test_add_update_remove(self) -> None:
        session = _session(FakeSearchTransport())
        spec = session.add_specification(QuerySpecification("articles"))
        updated = session.update_specification(spec.id, query="dune", query_by=["title"], id="ignored")
        assert updated.id == spec.id
        assert session.state.specification(spec.id).query == "dune"
        session.remove_specification(spec.id)
        assert session.state.specifications == []

    def test_duplicate_id_rejected(self) -> None:
        session = _session(FakeSearchTransport())
        spec = session.add_specification(QuerySpecification("articles"))
        with pytest.raises(ValueError):
            session.add_specification(spec)

    def test_unknown_id(self) -> None:
        with pytest.raises(KeyError):
            _session(FakeSearchTransport()).set_enabled("nope", False)

    def test_validation_errors_at_edit_time(self) -> None:
        session = _session(FakeSearchTransport())
        spec = session.add_specification(QuerySpecification("articles", query="dune"))
        assert [e.field for e in session.validation_errors(spec.id)] == ["query_by"]

    def test_validation_errors_include_facet_selections(self) -> None:
        session = _session(FakeSearchTransport())
        spec = session.add_specification(QuerySpecification("articles", facet_by=["category"]))
        asyncio.run(session.toggle_facet("articles", "category", "rock `n` roll"))
        errors = session.validation_errors(spec.id)
        assert [(e.field, e.code) for e in errors] == [("facet_selections[category]", "type_mismatch")]


class TestRefresh:
    def test_results_are_keyed_by_spec(self) -> None:
        transport = FakeSearchTransport().respond_with(_results(1, 2))
        session = _session(transport)
        a = session.add_specification(QuerySpecification("articles"))
        off = session.add_specification(QuerySpecification("drafts", enabled=False))
        b = session.add_specification(QuerySpecification("products"))

        assert asyncio.run(session.refresh()) is True
        assert session.result_for(a.id).found == 1  # type: ignore[union-attr]
        assert session.result_for(b.id).found == 2  # type: ignore[union-attr]
        assert session.result_for(off.id) is None
        assert [r.collection for r in session.state.ordered_results()] == ["articles", "products"]
        assert session.state.loading is False

    def test_performance_is_recorded(self) -> None:
        transport = FakeSearchTransport().respond_with(
            {"results": [make_search_result(search_time_ms=4), make_search_result(search_time_ms=6)]}
        )
        session = _session(transport)
        a = session.add_specification(QuerySpecification("a"))
        b = session.add_specification(QuerySpecification("b"))
        asyncio.run(session.refresh())
        assert session.state.performance.per_collection_ms == {a.id: 4, b.id: 6}

    def test_dispatch_error_keeps_last_results(self) -> None:
        transport = FakeSearchTransport().respond_with(_results(5), TransportTimeoutError("slow"))
        session = _session(transport)
        spec = session.add_specification(QuerySpecification("articles"))

        asyncio.run(session.refresh())
        assert asyncio.run(session.refresh()) is True
        assert isinstance(session.state.last_error, DispatchError)
        assert session.result_for(spec.id).found == 5  # type: ignore[union-attr]
        assert session.state.loading is False

    def test_success_clears_last_error(self) -> None:
        transport = FakeSearchTransport().respond_with(TransportTimeoutError("slow"), _results(1))
        session = _session(transport)
        session.add_specification(QuerySpecification("articles"))
        asyncio.run(session.refresh())
        asyncio.run(session.refresh())
        assert session.state.last_error is None

    def test_messages_are_scoped_to_what_they_concern(self) -> None:
        transport = FakeSearchTransport().respond_with(
            {"results": [make_fault("Collection not found", 404)]}, TransportTimeoutError("slow")
        )
        session = _session(transport)
        missing = session.add_specification(QuerySpecification("missing"))
        bad = session.add_specification(QuerySpecification("articles", per_page=500))

        asyncio.run(session.refresh())
        assert [(m.scope, m.code) for m in session.state.messages()] == [
            (missing.id, "per_collection_fault"),
            (f"{bad.id}/per_page", "out_of_range"),
        ]
        assert session.state.messages()[0].text == "Collection not found"

        asyncio.run(session.refresh())
        batch, *rest = session.state.messages()
        assert (batch.scope, batch.code) == ("batch", "dispatch_error")
        assert batch.text == "Search is unavailable right now. Showing the last results."
        assert [m.scope for m in rest] == [missing.id, f"{bad.id}/per_page"]

    def test_rejected_specs_are_exposed(self) -> None:
        transport = FakeSearchTransport().respond_with(_results(1))
        session = _session(transport)
        bad = session.add_specification(QuerySpecification("articles", per_page=500))
        session.add_specification(QuerySpecification("products"))
        asyncio.run(session.refresh())
        assert [e.field for e in session.state.rejected[bad.id]] == ["per_page"]
        assert session.result_for(bad.id) is None


class TestStaleResultSuppression:
    def test_late_response_of_an_older_token_is_dropped(self) -> None:
        transport = FakeSearchTransport()
        metrics = FakeMetricsRegistry()
        session = _session(transport, metrics=metrics)
        spec = session.add_specification(QuerySpecification("articles"))

        async def run() -> tuple[bool, bool]:
            first_gate = transport.gate()
            transport.respond_with(_results(111), _results(222))
            first = asyncio.create_task(session.refresh())
            await asyncio.sleep(0)
            assert session.state.loading is True
            second = asyncio.create_task(session.refresh())
            applied_second = await second
            first_gate.set()
            applied_first = await first
            return applied_first, applied_second

        applied_first, applied_second = asyncio.run(run())
        assert (applied_first, applied_second) == (False, True)
        assert session.result_for(spec.id).found == 222  # type: ignore[union-attr]
        assert session.state.latest_token == 2
        assert session.state.loading is False
        assert metrics.counter("session.stale_results").total == 1

    def test_stale_failure_does_not_set_error(self) -> None:
        transport = FakeSearchTransport()
        session = _session(transport)
        spec = session.add_specification(QuerySpecification("articles"))

        async def run() -> None:
            gate = transport.gate()
            transport.respond_with(TransportTimeoutError("late"), _results(7))
            first = asyncio.create_task(session.refresh())
            await asyncio.sleep(0)
            await session.refresh()
            gate.set()
            await first

        asyncio.run(run())
        assert session.state.last_error is None
        assert session.result_for(spec.id).found == 7  # type: ignore[union-attr]


class TestFacetActions:
    def test_toggle_on_one_collection_redispatches_both(self) -> None:
        transport = FakeSearchTransport()
        session = _session(transport)
        articles = session.add_specification(
            QuerySpecification("articles", query="ai", query_by=["title", "body"], facet_by=["category"])
        )
        products = session.add_specification(QuerySpecification("products", query="ai", query_by=["name"]))

        transport.respond_with(
            {
                "results": [
                    make_search_result(found=4, facet_counts=[make_facet_count("category", {"electronics": 3})]),
                    make_search_result(found=2),
                ]
            }
        )
        asyncio.run(session.refresh())
        assert [s["collection"] for s in transport.requests[0]] == ["articles", "products"]

        asyncio.run(session.toggle_facet("articles", "category", "electronics"))

        assert transport.call_count == 2
        articles_params, products_params = transport.requests[1]
        assert articles_params["filter_by"] == "category:=electronics"
        assert "filter_by" not in products_params
        assert session.selections.selected("articles", "category") == {"electronics"}
        assert session.result_for(articles.id) is not None
        assert session.result_for(products.id) is not None

    def test_selection_is_visible_before_the_redispatch_resolves(self) -> None:
        transport = FakeSearchTransport()
        session = _session(transport)
        spec = session.add_specification(QuerySpecification("articles", facet_by=["category"]))
        transport.respond_with(
            {"results": [make_search_result(facet_counts=[make_facet_count("category", {"tech": 3})])]}
        )
        asyncio.run(session.refresh())

        async def run() -> None:
            gate = transport.gate()
            task = asyncio.create_task(session.toggle_facet("articles", "category", "tech"))
            await asyncio.sleep(0)
            facet = session.result_for(spec.id).facet("category")  # type: ignore[union-attr]
            assert facet.values[0].selected is True  # type: ignore[union-attr]
            assert session.state.loading is True
            gate.set()
            await task

        asyncio.run(run())

    def test_new_results_carry_selection_flags(self) -> None:
        transport = FakeSearchTransport(
            default=lambda searches: {
                "results": [make_search_result(facet_counts=[make_facet_count("category", {"tech": 3, "art": 1})])]
            }
        )
        session = _session(transport)
        spec = session.add_specification(QuerySpecification("articles", facet_by=["category"]))
        asyncio.run(session.toggle_facet("articles", "category", "art"))
        facet = session.result_for(spec.id).facet("category")  # type: ignore[union-attr]
        assert [(v.value, v.selected) for v in facet.values] == [("tech", False), ("art", True)]  # type: ignore[union-attr]

    def test_clear_facets(self) -> None:
        transport = FakeSearchTransport()
        session = _session(transport)
        session.add_specification(QuerySpecification("articles"))
        asyncio.run(session.toggle_facet("articles", "category", "tech"))
        asyncio.run(session.toggle_facet("articles", "brand", "x"))
        asyncio.run(session.clear_facet_field("articles", "category"))
        assert transport.requests[-1][0]["filter_by"] == "brand:=x"
        asyncio.run(session.clear_facets("articles"))
        assert "filter_by" not in transport.requests[-1][0]

    def test_stale_selections(self) -> None:
        transport = FakeSearchTransport(
            default=lambda searches: {
                "results": [make_search_result(facet_counts=[make_facet_count("category", {"tech": 3})])]
            }
        )
        session = _session(transport)
        spec = session.add_specification(QuerySpecification("articles", facet_by=["category"]))
        asyncio.run(session.toggle_facet("articles", "category", "retired"))
        assert session.stale_selections(spec.id) == {"category": {"retired"}}
        assert session.selections.selected("articles", "category") == {"retired"}

    @pytest.mark.parametrize("value", ["rock `n` roll", ""])
    def test_unexpressible_value_rejects_only_its_specification(self, value: str) -> None:
        transport = FakeSearchTransport(default=lambda searches: _results(*[2] * len(searches)))
        session = _session(transport)
        articles = session.add_specification(QuerySpecification("articles", facet_by=["category"]))
        products = session.add_specification(QuerySpecification("products"))

        assert asyncio.run(session.toggle_facet("articles", "category", value)) is True

        assert [s["collection"] for s in transport.requests[-1]] == ["products"]
        assert session.result_for(products.id).found == 2  # type: ignore[union-attr]
        assert session.result_for(articles.id) is None
        rejected = session.state.rejected[articles.id]
        assert [(e.field, e.code) for e in rejected] == [("facet_selections[category]", "type_mismatch")]
        assert session.state.last_error is None


class TestPresets:
    def test_export_and_load(self) -> None:
        session = _session(FakeSearchTransport())
        spec = session.add_specification(
            QuerySpecification(
                "articles",
                query="dune",
                query_by=["title"],
                filter_conditions=[FilterCondition("year", FilterOperator.GT, 1960)],
            )
        )
        session.selections.toggle("articles", "genre", "scifi")
        preset = session.export_preset("Sci-fi", description="classic")
        assert preset.exported_at == FakeClock().now()
        assert preset.facet_filters == {"articles": {"genre": ["scifi"]}}

        other = _session(FakeSearchTransport())
        other.load_preset(preset)
        assert [s.id for s in other.state.specifications] == [spec.id]
        assert other.state.specifications[0] is not spec
        assert other.selections.selected("articles", "genre") == {"scifi"}
        assert other.state.results == {}

    def test_default_sort_applies_to_unsorted_specs(self) -> None:
        session = _session(FakeSearchTransport())
        preset = SearchPreset(
            name="p",
            queries=(QuerySpecification("a"), QuerySpecification("b", sort_options=[SortOption("x", "desc")])),
            exported_at=FakeClock().now(),
            sort_options=(SortOption("year", "asc"),),
        )
        session.load_preset(preset)
        assert [s.sort_options for s in session.state.specifications] == [
            [SortOption("year", "asc")],
            [SortOption("x", "desc")],
        ]

"""Tests for pricelens.services.history_resolver — real vs. synthetic history."""

import pytest

from pricelens.core.exceptions import EventLogUnavailableError
from pricelens.services.history_resolver import HistoryResolver
from pricelens.services.synthetic_history import SyntheticHistoryGenerator, price_band


class TestRealHistory:

    async def test_uses_events_when_two_or_more(self, event_log, alpha_product, five_events):
        resolver = HistoryResolver(event_log)
        history = await resolver.resolve(alpha_product, limit=100)
        assert history.is_synthetic is False
        assert history.event_count == 5
        assert [p.price for p in history.points] == [e.new_price for e in five_events]
        assert [p.timestamp for p in history.points] == [e.created_at for e in five_events]

    async def test_exactly_two_events_is_enough(self, event_log, alpha_product, event_factory):
        event_log.events = event_factory([10.0, 12.0])
        history = await HistoryResolver(event_log).resolve(alpha_product, limit=100)
        assert history.is_synthetic is False
        assert len(history.points) == 2

    async def test_queries_by_model_supplier_and_limit(self, event_log, alpha_product):
        await HistoryResolver(event_log).resolve(alpha_product, limit=3)
        assert event_log.calls == [("Alpha-128", "Acme", 3)]

    async def test_points_sorted_even_if_source_unordered(self, event_log, alpha_product, five_events):
        event_log.events = list(reversed(five_events))
        history = await HistoryResolver(event_log).resolve(alpha_product, limit=100)
        stamps = [p.timestamp for p in history.points]
        assert stamps == sorted(stamps)


class TestSyntheticFallback:

    @pytest.mark.parametrize("count", [0, 1])
    async def test_sparse_events_trigger_synthesis(self, event_log, alpha_product, event_factory, count):
        event_log.events = event_factory([1000.0] * count)
        history = await HistoryResolver(event_log).resolve(alpha_product, limit=100)
        assert history.is_synthetic is True
        assert history.event_count == count
        assert len(history.points) == 31
        assert history.points[-1].price == alpha_product.price

        low, high = price_band(alpha_product.price)
        assert all(low <= p.price <= high for p in history.points)

    async def test_limit_keeps_most_recent_synthetic_points(self, event_log, alpha_product):
        event_log.events = []
        history = await HistoryResolver(event_log).resolve(alpha_product, limit=5)
        assert len(history.points) == 5
        assert history.points[-1].price == alpha_product.price

    async def test_custom_generator_and_threshold(self, event_log, alpha_product):
        resolver = HistoryResolver(
            event_log,
            generator=SyntheticHistoryGenerator(days_back=7),
            min_events=10,
        )
        history = await resolver.resolve(alpha_product, limit=100)
        assert history.is_synthetic is True
        assert len(history.points) == 8


async def test_event_log_failure_propagates(event_log, alpha_product):
    event_log.error = EventLogUnavailableError("Failed to read from price_change_events")
    with pytest.raises(EventLogUnavailableError):
        await HistoryResolver(event_log).resolve(alpha_product, limit=100)


async def test_product_without_supplier_skips_event_log(event_log, alpha_product):
    product = alpha_product.model_copy(update={"supplier": None})
    history = await HistoryResolver(event_log).resolve(product, limit=100)
    assert event_log.calls == []
    assert history.is_synthetic is True
    assert history.event_count == 0
    assert history.points[-1].price == product.price


@pytest.mark.parametrize("min_events", [0, -1])
def test_rejects_non_positive_threshold(event_log, min_events):
    with pytest.raises(ValueError, match="min_events"):
        HistoryResolver(event_log, min_events=min_events)

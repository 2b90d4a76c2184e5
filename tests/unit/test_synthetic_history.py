"""Tests for pricelens.services.synthetic_history — bounded synthetic series."""

from datetime import UTC, datetime, timedelta

import pytest

from pricelens.config import SeedPolicyName
from pricelens.services.synthetic_history import (
    DeterministicSeed,
    EphemeralSeed,
    SyntheticHistoryGenerator,
    price_band,
    seed_policy_from_name,
)

NOW = datetime(2026, 10, 17, 9, 30, tzinfo=UTC)


@pytest.fixture
def generator() -> SyntheticHistoryGenerator:
    return SyntheticHistoryGenerator()


class TestShape:

    def test_default_window_has_31_points(self, generator):
        points = generator.generate(500.0, product_id=1, now=NOW)
        assert len(points) == 31

    def test_custom_window(self):
        points = SyntheticHistoryGenerator(days_back=7).generate(500.0, product_id=1, now=NOW)
        assert len(points) == 8

    def test_one_point_per_day_ending_now(self, generator):
        points = generator.generate(500.0, product_id=1, now=NOW)
        assert points[-1].timestamp == NOW
        assert points[0].timestamp == NOW - timedelta(days=30)
        gaps = {b.timestamp - a.timestamp for a, b in zip(points, points[1:])}
        assert gaps == {timedelta(days=1)}

    def test_last_point_is_exact_current_price(self, generator):
        points = generator.generate(1234.567, product_id=1, now=NOW)
        assert points[-1].price == 1234.567

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError):
            SyntheticHistoryGenerator(days_back=0)


class TestEnvelope:

    @pytest.mark.parametrize("current", [0.05, 1.0, 9.99, 10.005, 333.33, 999.90, 25_000.0])
    def test_every_point_within_fifteen_percent(self, current):
        low, high = price_band(current)
        generator = SyntheticHistoryGenerator(seed_policy=EphemeralSeed())
        for _ in range(20):
            for point in generator.generate(current, now=NOW):
                assert low <= point.price <= high

    def test_historical_points_rounded_to_cents(self, generator):
        points = generator.generate(777.77, product_id=3, now=NOW)
        for point in points[:-1]:
            assert round(point.price, 2) == point.price

    def test_zero_price_yields_flat_series(self, generator):
        points = generator.generate(0.0, product_id=1, now=NOW)
        assert {p.price for p in points} == {0.0}

    def test_series_is_not_flat(self, generator):
        points = generator.generate(800.0, product_id=9, now=NOW)
        assert len({p.price for p in points}) > 1


class TestSeedPolicy:

    def test_deterministic_same_product_same_day_repeats(self):
        generator = SyntheticHistoryGenerator(seed_policy=DeterministicSeed())
        first = generator.generate(500.0, product_id=42, now=NOW)
        second = generator.generate(500.0, product_id=42, now=NOW + timedelta(hours=3))
        assert [p.price for p in first] == [p.price for p in second]

    def test_deterministic_differs_by_product(self):
        generator = SyntheticHistoryGenerator(seed_policy=DeterministicSeed())
        a = generator.generate(500.0, product_id=1, now=NOW)
        b = generator.generate(500.0, product_id=2, now=NOW)
        assert [p.price for p in a] != [p.price for p in b]

    def test_deterministic_differs_by_day(self):
        generator = SyntheticHistoryGenerator(seed_policy=DeterministicSeed())
        a = generator.generate(500.0, product_id=1, now=NOW)
        b = generator.generate(500.0, product_id=1, now=NOW + timedelta(days=1))
        assert [p.price for p in a] != [p.price for p in b]

    def test_fixed_seed_ignores_product_and_day(self):
        generator = SyntheticHistoryGenerator(seed_policy=DeterministicSeed(seed=7))
        a = generator.generate(500.0, product_id=1, now=NOW)
        b = generator.generate(500.0, product_id=2, now=NOW + timedelta(days=4))
        assert [p.price for p in a] == [p.price for p in b]

    def test_ephemeral_draws_fresh_series(self):
        generator = SyntheticHistoryGenerator(seed_policy=EphemeralSeed())
        runs = {
            tuple(p.price for p in generator.generate(500.0, product_id=1, now=NOW))
            for _ in range(5)
        }
        assert len(runs) > 1

    def test_policy_from_settings_name(self):
        assert isinstance(seed_policy_from_name(SeedPolicyName.EPHEMERAL), EphemeralSeed)
        assert isinstance(seed_policy_from_name(SeedPolicyName.DETERMINISTIC), DeterministicSeed)

    def test_default_policy_is_deterministic(self, generator):
        assert isinstance(generator.seed_policy, DeterministicSeed)

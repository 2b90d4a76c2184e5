"""
Synthetic price-history generator.

When a product has too few recorded price changes to show a trend, the
engine fills the chart with a bounded, plausible daily series ending at
today's exact price. Synthesized points are flagged on the result
(``isSynthetic``) and must not be treated as telemetry.

Per day offset ``i`` (``days_back`` … 1), the price is:

    current * (1 + deviate * 3% + sin(i / 7) * 2% * (i / days_back))

with ``deviate`` uniform in [-1, 1], clamped to ±15% of the current
price and rounded to cents. Offset 0 is the current price itself.

Seed policies:
- ``DeterministicSeed`` (default): the RNG is seeded from the product
  identifier and the calendar date, so cache-cold repeats within a day
  reproduce the same series. A fixed ``seed`` overrides the derivation.
- ``EphemeralSeed``: unseeded; every call draws a fresh series.
"""

import math
import random
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from pricelens.config import SeedPolicyName
from pricelens.core.models import PricePoint

DEFAULT_DAYS_BACK = 30
BASE_VOLATILITY = 0.03
WEEKLY_AMPLITUDE = 0.02
WEEKLY_PERIOD_DAYS = 7
MAX_DEVIATION = 0.15


@dataclass(frozen=True)
class DeterministicSeed:
    seed: int | str | None = None

    def rng(self, product_id: int | str | None, day: date) -> random.Random:
        if self.seed is not None:
            return random.Random(self.seed)
        return random.Random(f"{product_id}:{day.isoformat()}")


@dataclass(frozen=True)
class EphemeralSeed:
    def rng(self, product_id: int | str | None, day: date) -> random.Random:
        return random.Random()


SeedPolicy = DeterministicSeed | EphemeralSeed


def seed_policy_from_name(name: SeedPolicyName) -> SeedPolicy:
    if name == SeedPolicyName.EPHEMERAL:
        return EphemeralSeed()
    return DeterministicSeed()


def price_band(current_price: float) -> tuple[float, float]:
    """Inclusive (low, high) envelope every synthesized price stays within."""
    max_deviation = current_price * MAX_DEVIATION
    return current_price - max_deviation, current_price + max_deviation


def _round_within(value: float, low: float, high: float) -> float:
    """Round to cents without letting rounding push the value out of the band."""
    cents = round(value, 2)
    if cents < low:
        cents = round(cents + 0.01, 2)
    elif cents > high:
        cents = round(cents - 0.01, 2)
    # Bands narrower than a cent cannot hold a rounded value.
    return cents if low <= cents <= high else value


class SyntheticHistoryGenerator:
    """Manufactures a daily price series ending at the current price."""

    def __init__(
        self,
        days_back: int = DEFAULT_DAYS_BACK,
        seed_policy: SeedPolicy | None = None,
    ):
        if days_back < 1:
            raise ValueError("days_back must be >= 1")
        self.days_back = days_back
        self.seed_policy = seed_policy or DeterministicSeed()

    def generate(
        self,
        current_price: float,
        product_id: int | str | None = None,
        now: datetime | None = None,
    ) -> list[PricePoint]:
        """
        Generate ``days_back + 1`` daily points, oldest first.

        Args:
            current_price: Today's price; the last point equals it exactly.
            product_id: Identifier mixed into the deterministic seed.
            now: Timestamp of the final point (defaults to the current UTC time).
        """
        now = now or datetime.now(UTC)
        rng = self.seed_policy.rng(product_id, now.date())
        low, high = price_band(current_price)

        points: list[PricePoint] = []
        for i in range(self.days_back, -1, -1):
            timestamp = now - timedelta(days=i)
            if i == 0:
                price = current_price
            else:
                deviate = rng.uniform(-1.0, 1.0)
                day_weight = i / self.days_back
                weekly = math.sin(i / WEEKLY_PERIOD_DAYS) * WEEKLY_AMPLITUDE
                raw = current_price * (1 + deviate * BASE_VOLATILITY + weekly * day_weight)
                price = _round_within(max(low, min(high, raw)), low, high)
            points.append(PricePoint(price=price, timestamp=timestamp))

        return points

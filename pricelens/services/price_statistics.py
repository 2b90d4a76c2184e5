"""
Statistics calculator for price series.

Pure functions over a non-empty PricePoint sequence; no I/O.
"""

import statistics
from collections.abc import Sequence

from pricelens.core.models import PricePoint, PriceStatistics


class PriceStatisticsCalculator:
    """
    Derives min/max/average, change since the first point, and volatility.

    Volatility is the population standard deviation of the series
    expressed as a percentage of its mean.
    """

    def calculate(
        self,
        current_price: float,
        points: Sequence[PricePoint],
    ) -> PriceStatistics:
        """
        Compute PriceStatistics for ``points``.

        Raises:
            ValueError: If ``points`` is empty.
        """
        if not points:
            raise ValueError("Cannot compute statistics over an empty price history")

        prices = [p.price for p in points]
        avg_price = statistics.fmean(prices)

        first_price = prices[0]
        price_change = current_price - first_price
        price_change_pct = (price_change / first_price) * 100 if first_price > 0 else 0.0

        std_dev = statistics.pstdev(prices, mu=avg_price)
        volatility = (std_dev / avg_price) * 100 if avg_price > 0 else 0.0

        return PriceStatistics(
            min_price=min(prices),
            max_price=max(prices),
            avg_price=avg_price,
            price_change=price_change,
            price_change_percentage=price_change_pct,
            volatility=volatility,
        )

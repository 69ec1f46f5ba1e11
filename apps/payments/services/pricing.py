"""Unit prices and the rounding rule used by settlement."""

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class PricingPolicy:
    """
    Prices in whole currency units.

    ``female_price`` is the fixed share a going woman pays whenever at
    least one man attends. Every per-person share is rounded up to a
    multiple of ``rounding_unit``.
    """

    court_price: int
    shuttle_price: int
    female_price: int
    rounding_unit: int = 1000

    def __post_init__(self):
        if self.rounding_unit <= 0:
            raise ValueError("rounding_unit must be positive")

    @classmethod
    def from_settings(cls) -> 'PricingPolicy':
        """Build the policy from ``settings.SETTLEMENT_PRICING``."""
        pricing = settings.SETTLEMENT_PRICING
        return cls(
            court_price=pricing['COURT_PRICE'],
            shuttle_price=pricing['SHUTTLE_PRICE'],
            female_price=pricing['FEMALE_PRICE'],
            rounding_unit=pricing.get('ROUNDING_UNIT', 1000),
        )

    def ceil_round(self, amount: int, parts: int = 1) -> int:
        """
        Smallest multiple of ``rounding_unit`` that is >= ``amount / parts``.

        Integer arithmetic only, so 235000 / 3 rounds to 79000 without
        passing through a float.

            >>> PricingPolicy(120000, 25000, 40000).ceil_round(235000, 3)
            79000
        """
        step = parts * self.rounding_unit
        return -(-amount // step) * self.rounding_unit

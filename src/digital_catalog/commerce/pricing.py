"""Effective price selection and minor-unit conversion."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from digital_catalog.core.models import Product

MINOR_UNITS_PER_UNIT = 100


@dataclass(frozen=True)
class EffectivePrice:
    amount: Decimal  # Whole currency units
    is_preorder: bool

    @property
    def minor_units(self) -> int:
        return to_minor_units(self.amount)


def to_minor_units(amount: Decimal) -> int:
    """``Decimal("12.5")`` -> ``1250``."""
    return int(
        (Decimal(amount) * MINOR_UNITS_PER_UNIT).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP,
        )
    )


def effective_price(product: Product) -> EffectivePrice:
    """Preorder price applies only while in preorder and when it is set."""
    if product.is_in_preorder and product.preorder_price:
        return EffectivePrice(amount=product.preorder_price, is_preorder=True)
    return EffectivePrice(amount=product.price, is_preorder=False)

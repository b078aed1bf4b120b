"""Property test: the charged amount is the effective price in minor units."""

from decimal import Decimal

from hypothesis import given, strategies as st

from digital_catalog.commerce.pricing import effective_price, to_minor_units
from digital_catalog.core.models import Product


prices = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("10000"), places=2)


def _product(price, preorder_price, in_preorder) -> Product:
    return Product(
        id="p",
        name="Book",
        slug="book",
        github_repo="acme/book",
        price=price,
        preorder_price=preorder_price,
        is_in_preorder=in_preorder,
    )


@given(amount=prices)
def test_minor_units_exact_for_cents(amount):
    assert to_minor_units(amount) == int(amount * 100)


@given(price=prices, preorder=st.one_of(st.none(), prices), in_preorder=st.booleans())
def test_effective_price_selection(price, preorder, in_preorder):
    result = effective_price(_product(price, preorder, in_preorder))

    if in_preorder and preorder:
        assert result.is_preorder
        assert result.amount == preorder
    else:
        assert not result.is_preorder
        assert result.amount == price
    assert result.minor_units == to_minor_units(result.amount)

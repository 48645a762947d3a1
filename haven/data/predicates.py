"""Filter selection -> store predicate.

Bracket bounds are Decimal; 15.00 and 30.00 both fall in the middle bracket.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from .models import FilterSelection, PriceBracket, PriceRange, Predicate

PRICE_BRACKETS: Dict[PriceBracket, PriceRange] = {
    PriceBracket.UNDER_15: PriceRange(lt=Decimal("15")),
    PriceBracket.FROM_15_TO_30: PriceRange(gte=Decimal("15"), lte=Decimal("30")),
    PriceBracket.ABOVE_30: PriceRange(gt=Decimal("30")),
}


def build_predicate(selection: FilterSelection) -> Predicate:
    price_range = None
    if selection.price_bracket is not None:
        price_range = PRICE_BRACKETS[selection.price_bracket]
    return Predicate(
        seller_category_equals=selection.category,
        seller_id_equals=selection.seller_id,
        price_in_range=price_range,
    )

"""
Shopping route optimization.

Orders catalog products by walking path instead of plain aisle number.
Block B (aisles 25-81) is two parallel corridors walked in opposite
directions:
- right side, aisles 25-52, walked in ascending order
- left side, aisles 53-81, walked in descending order
Aisle a faces aisle 106 - a across the same gondola.

Everything outside Block B is walked in ascending aisle order.
"""

import logging
from enum import Enum
from itertools import groupby
from typing import List, Optional, Sequence, Tuple

from .utils import Product

logger = logging.getLogger(__name__)

BLOCK_B_START = 25
RIGHT_SIDE_END = 52
BLOCK_B_END = 81
OPPOSITE_AISLE_SUM = 106


class AisleSide(Enum):
    RIGHT = "right"
    LEFT = "left"
    UNCLASSIFIED = "unclassified"


def aisle_number(aisle: Optional[int]) -> int:
    """Aisle used for ordering; products without an aisle sort as aisle 0."""
    return aisle or 0


def in_block_b(aisle: int) -> bool:
    return BLOCK_B_START <= aisle <= BLOCK_B_END


def is_right_side(aisle: int) -> bool:
    return BLOCK_B_START <= aisle <= RIGHT_SIDE_END


def classify_aisle(aisle: int) -> AisleSide:
    """Which Block B corridor an aisle belongs to."""
    if is_right_side(aisle):
        return AisleSide.RIGHT
    if in_block_b(aisle):
        return AisleSide.LEFT
    return AisleSide.UNCLASSIFIED


def opposite_aisle(aisle: int) -> int:
    """Aisle facing the given one across the corridor (itself outside Block B)."""
    if in_block_b(aisle):
        return OPPOSITE_AISLE_SUM - aisle
    return aisle


def compare_aisles(aisle_a: int, aisle_b: int) -> int:
    """
    Walking-order comparator between two aisles.

    Returns a negative number if aisle_a is visited first, positive if
    aisle_b is, and 0 if they are visited together.
    """
    if in_block_b(aisle_a) and in_block_b(aisle_b):
        a_right = is_right_side(aisle_a)
        b_right = is_right_side(aisle_b)

        if a_right == b_right:
            if a_right:
                return aisle_a - aisle_b
            return aisle_b - aisle_a

        # Facing aisles are picked up together, right side first
        if opposite_aisle(aisle_a) == aisle_b:
            return -1 if a_right else 1

        # Otherwise the right side is still walked first
        return -1 if a_right else 1

    return aisle_a - aisle_b


def compare_products(a: Product, b: Product) -> int:
    return compare_aisles(aisle_number(a.aisle), aisle_number(b.aisle))


def route_sort_key(aisle: Optional[int]) -> Tuple[int, int]:
    """
    Sort key equivalent to compare_aisles.

    (0, a) before Block B, (1, a) right side, (2, -a) left side, (3, a) after.
    """
    aisle = aisle_number(aisle)
    if aisle < BLOCK_B_START:
        return 0, aisle
    if is_right_side(aisle):
        return 1, aisle
    if in_block_b(aisle):
        return 2, -aisle
    return 3, aisle


def optimize_shopping_route(products: Sequence[Product]) -> List[Product]:
    """
    Order products along the walking path through the store.

    Returns a new list; the input sequence and its products are untouched.
    The sort is stable, so products in the same aisle keep their input order.
    """
    route = sorted(products, key=lambda p: route_sort_key(p.aisle))
    logger.debug("[Route] Aisle order: %s", [p.aisle for p in route])
    return route


def group_by_aisle(route: Sequence[Product]) -> List[Tuple[int, List[Product]]]:
    """Split a route into consecutive (aisle, products) stops, in route order."""
    return [
        (aisle, list(items))
        for aisle, items in groupby(route, key=lambda p: aisle_number(p.aisle))
    ]

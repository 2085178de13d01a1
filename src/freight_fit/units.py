from __future__ import annotations

from typing import Iterable

from freight_fit.models import CargoGroup, CargoUnit


def expand_units(groups: Iterable[CargoGroup]) -> list[CargoUnit]:
    """One CargoUnit per physical piece, groups kept in input order."""
    units: list[CargoUnit] = []
    for group in groups:
        unit = CargoUnit(
            length=group.length,
            width=group.width,
            height=group.height,
            weight=group.weight if group.weight is not None else 0.0,
        )
        # Units are frozen, so the same instance can stand for every piece.
        units.extend([unit] * group.quantity)
    return units


def total_weight(units: Iterable[CargoUnit]) -> float:
    return sum(float(u.weight) for u in units)


def max_height(units: Iterable[CargoUnit]) -> float:
    return max((float(u.height) for u in units), default=0.0)

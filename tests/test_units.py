from __future__ import annotations

from freight_fit.models import CargoGroup
from freight_fit.units import expand_units, max_height, total_weight


def test_expand_count_matches_quantities() -> None:
    groups = [
        CargoGroup(quantity=3, length=48, width=48, height=52),
        CargoGroup(quantity=1, length=48, width=48, height=59),
    ]
    units = expand_units(groups)

    assert len(units) == 4
    assert [u.height for u in units] == [52, 52, 52, 59]


def test_missing_weight_becomes_zero() -> None:
    units = expand_units([
        CargoGroup(quantity=2, length=40, width=48, height=50),
        CargoGroup(length=40, width=73, height=63, weight=364),
    ])
    assert [u.weight for u in units] == [0.0, 0.0, 364.0]
    assert total_weight(units) == 364.0


def test_empty_input() -> None:
    assert expand_units([]) == []
    assert max_height([]) == 0.0
    assert total_weight([]) == 0.0


def test_units_keep_given_footprint() -> None:
    unit = expand_units([CargoGroup(length=40, width=100, height=30)])[0]
    assert (unit.length, unit.width) == (40, 100)
    assert unit.footprint_min == 40
    assert unit.footprint_max == 100

from __future__ import annotations

from freight_fit.models import CargoUnit
from freight_fit.packing.row_packer import Packable, pack_units, plan_rows, sort_for_packing


def units_of(n: int, length: float, width: float, height: float) -> list[CargoUnit]:
    return [CargoUnit(length=length, width=width, height=height)] * n


def test_three_square_pallets_split_into_two_rows() -> None:
    """Two 48" pallets fill a 96" width exactly; the third opens a new row."""
    plan = plan_rows(units_of(3, 48, 48, 52), interior_width=96, interior_height=96)

    assert plan.length_required == 96
    assert [r.side_by_side for r in plan.rows] == [2, 1]
    assert [r.length for r in plan.rows] == [48, 48]


def test_pack_units_returns_plan_length() -> None:
    units = units_of(5, 48, 40, 50)
    assert pack_units(units, 96, 96) == plan_rows(units, 96, 96).length_required


def test_equal_orientations_keep_primary() -> None:
    plan = plan_rows(units_of(1, 48, 48, 50), interior_width=96, interior_height=96)
    assert plan.rows[0].orientation == "primary"


def test_single_unit_turned_when_shorter() -> None:
    """A lone 48x40 costs 40" of length once turned sideways."""
    plan = plan_rows(units_of(1, 48, 40, 50), interior_width=96, interior_height=96)
    assert plan.length_required == 40
    assert plan.rows[0].orientation == "alternate"


def test_orientation_wider_than_vehicle_is_skipped() -> None:
    plan = plan_rows(units_of(1, 100, 40, 40), interior_width=96, interior_height=96)
    assert plan.length_required == 100
    assert plan.rows[0].orientation == "primary"


def test_over_width_anchor_falls_back_to_shorter_side() -> None:
    plan = plan_rows(units_of(2, 120, 110, 40), interior_width=96, interior_height=96)

    assert plan.length_required == 220
    assert all(r.fallback for r in plan.rows)
    assert [r.orientation for r in plan.rows] == ["none", "none"]


def test_stacking_rides_short_unit_on_row() -> None:
    """A 30" unit stacks on the row anchored by a 60" unit without adding length."""
    units = [
        CargoUnit(length=48, width=40, height=30),
        CargoUnit(length=48, width=40, height=60),
        CargoUnit(length=48, width=40, height=30),
    ]

    stacked = plan_rows(units, interior_width=96, interior_height=96, allow_stacking=True)
    flat = plan_rows(units, interior_width=96, interior_height=96, allow_stacking=False)

    assert stacked.length_required == 48
    assert len(stacked.rows) == 1
    assert stacked.rows[0].side_by_side == 2
    assert stacked.rows[0].stacked == 1
    assert stacked.units_packed == 3

    # the leftover 30" unit travels alone, turned sideways
    assert flat.length_required == 88
    assert len(flat.rows) == 2


def test_stacking_needs_clearance() -> None:
    """Nothing stacks when the shortest unit in the row leaves too little headroom."""
    units = units_of(3, 48, 40, 60)
    plan = plan_rows(units, interior_width=96, interior_height=96, allow_stacking=True)

    assert plan.length_required == 88
    assert sum(r.stacked for r in plan.rows) == 0


def test_stacking_clearance_is_measured_once_per_row() -> None:
    """One stacking pass per row: every unit under the clearance is taken."""
    units = units_of(3, 48, 40, 40)
    plan = plan_rows(units, interior_width=40, interior_height=96, allow_stacking=True)

    assert len(plan.rows) == 1
    assert plan.rows[0].stacked == 2
    assert plan.length_required == 48


def test_sort_order() -> None:
    short_wide = Packable.from_unit(CargoUnit(length=48, width=48, height=30))
    tall_narrow = Packable.from_unit(CargoUnit(length=48, width=40, height=70))

    assert sort_for_packing([tall_narrow, short_wide], allow_stacking=False) == [short_wide, tall_narrow]
    assert sort_for_packing([short_wide, tall_narrow], allow_stacking=True) == [tall_narrow, short_wide]


def test_packable_orientations() -> None:
    p = Packable.from_unit(CargoUnit(length=40, width=100, height=30))
    assert p.orientations() == [("primary", 100, 40), ("alternate", 40, 100)]


def test_packing_is_deterministic() -> None:
    units = (
        units_of(4, 48, 40, 50)
        + units_of(3, 47, 24, 59)
        + units_of(2, 60, 45, 30)
        + units_of(1, 120, 110, 20)
    )
    first = plan_rows(units, 96, 96, allow_stacking=True)
    second = plan_rows(list(units), 96, 96, allow_stacking=True)
    assert first == second


def test_empty_input_needs_no_length() -> None:
    plan = plan_rows([], 96, 96)
    assert plan.length_required == 0
    assert plan.rows == []

"""Fit evaluation: can this freight go into this vehicle?"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from freight_fit.metrics import compute_floor_space, format_number, utilization_percent
from freight_fit.models import CargoGroup, CargoUnit, FitResult, VehicleGeometry
from freight_fit.packing.row_packer import plan_rows
from freight_fit.units import expand_units, max_height, total_weight

logger = logging.getLogger(__name__)


def _inches(value: float) -> str:
    return f'{format_number(value)}"'


def passes_door(unit: CargoUnit, vehicle: VehicleGeometry) -> bool:
    """
    Freight must be strictly smaller than the door opening; length and width
    may be swapped, height may not.
    """
    height_ok = unit.height < vehicle.door_height
    fits_narrow = unit.footprint_min < vehicle.door_width and height_ok
    fits_wide = unit.footprint_max < vehicle.door_width and height_ok
    return fits_narrow or fits_wide


def screen_units(
    units: Iterable[CargoUnit],
    vehicle: VehicleGeometry,
) -> tuple[list[CargoUnit], list[str]]:
    """
    Drop units that cannot be loaded at all.

    Returns (loadable_units, warnings). A unit is rejected when it cannot pass
    the door in either floor orientation, or when even its narrower side is
    wider than the interior.
    """
    loadable: list[CargoUnit] = []
    warnings: list[str] = []

    for unit in units:
        if not passes_door(unit, vehicle):
            warnings.append(
                f"Pallet {_inches(unit.length)}x{_inches(unit.width)}x{_inches(unit.height)} "
                f"cannot fit through door ({_inches(vehicle.door_width)}x{_inches(vehicle.door_height)} "
                f"- freight must be smaller than door opening)"
            )
            continue

        if unit.footprint_min > vehicle.interior_width:
            warnings.append(
                f"Pallet {_inches(unit.length)}x{_inches(unit.width)} cannot fit "
                f"- both dimensions exceed truck width {_inches(vehicle.interior_width)}"
            )
            continue

        loadable.append(unit)

    return loadable, warnings


def evaluate_fit(
    units: Sequence[CargoUnit],
    vehicle: VehicleGeometry,
    length_required: float,
    warnings: Sequence[str] = (),
    excluded_units: int = 0,
    rows: int = 0,
) -> FitResult:
    """
    Apply height and length checks to a packing result.

    `units` is every unit of the shipment (excluded ones included), `warnings`
    the pre-filter warnings. Any pre-filter warning alone forces fits=False.
    """
    all_warnings = list(warnings)

    tallest = max_height(units)
    height_ok = tallest <= vehicle.interior_height
    length_ok = length_required <= vehicle.interior_length
    fits = height_ok and length_ok and not all_warnings

    if not height_ok:
        all_warnings.append(
            f"Max pallet height {_inches(tallest)} exceeds truck height {_inches(vehicle.interior_height)}"
        )
    if not length_ok:
        all_warnings.append(
            f"Total length needed {_inches(length_required)} exceeds truck length "
            f"{_inches(vehicle.interior_length)} by {_inches(length_required - vehicle.interior_length)}"
        )

    used_floor, vehicle_floor = compute_floor_space(length_required, vehicle)

    return FitResult(
        fits=fits,
        total_units=len(units),
        total_weight=total_weight(units),
        max_unit_height=tallest,
        vehicle_height=vehicle.interior_height,
        utilization_percent=utilization_percent(length_required, vehicle),
        warnings=all_warnings,
        length_required=length_required,
        vehicle_length=vehicle.interior_length,
        total_floor_space=used_floor,
        vehicle_floor_space=vehicle_floor,
        excluded_units=excluded_units,
        rows=rows,
    )


def calculate_fit(
    vehicle: VehicleGeometry,
    groups: Iterable[CargoGroup],
    stackable: bool = False,
) -> FitResult:
    """
    Expand, screen, pack and evaluate.

    Pure and deterministic: the same vehicle, groups and flag always give the
    same FitResult. Constraint violations never stop the calculation; they
    are reported as warnings with fits=False.
    """
    units = expand_units(groups)
    loadable, warnings = screen_units(units, vehicle)

    plan = plan_rows(loadable, vehicle.interior_width, vehicle.interior_height, allow_stacking=stackable)

    result = evaluate_fit(
        units,
        vehicle,
        plan.length_required,
        warnings=warnings,
        excluded_units=len(units) - len(loadable),
        rows=len(plan.rows),
    )
    logger.debug(
        f"fit={result.fits} units={result.total_units} excluded={result.excluded_units} "
        f"length={plan.length_required} rows={len(plan.rows)} stackable={stackable}"
    )
    return result

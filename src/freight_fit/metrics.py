from __future__ import annotations

import math

from freight_fit.models import VehicleGeometry


def format_number(value: float) -> str:
    """Render 48.0 as '48' and 48.5 as '48.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def utilization_percent(length_required: float, vehicle: VehicleGeometry) -> int:
    """
    Share of interior length consumed, as a whole percentage.

    Rounds half up and is clamped to [0, 100]; the raw ratio is what decides
    whether the length fits, never this display value.
    """
    ratio = float(length_required) / float(vehicle.interior_length)
    percent = math.floor(ratio * 100 + 0.5)
    return max(0, min(percent, 100))


def compute_floor_space(length_required: float, vehicle: VehicleGeometry) -> tuple[float, float]:
    used = float(length_required) * float(vehicle.interior_width)
    available = float(vehicle.interior_length) * float(vehicle.interior_width)
    return used, available

# src/freight_fit/vehicles.py
from __future__ import annotations

from typing import Any, Mapping

from freight_fit.models import VehicleGeometry

# Standard trailer interior when the catalog leaves width/height blank (inches).
DEFAULT_INTERIOR_WIDTH = 96.0
DEFAULT_INTERIOR_HEIGHT = 96.0

# Nominal interior + rear door dims (inches). Check against the actual unit before booking.
VEHICLE_PRESETS: dict[str, dict[str, float]] = {
    "CARGO_VAN":   {"interior_length": 144.0, "interior_width": 70.0, "interior_height": 64.0, "door_width": 62.0, "door_height": 60.0},
    "SPRINTER":    {"interior_length": 170.0, "interior_width": 70.0, "interior_height": 72.0, "door_width": 62.0, "door_height": 70.0},
    "16FT_BOX":    {"interior_length": 192.0, "interior_width": 90.0, "interior_height": 84.0, "door_width": 88.0, "door_height": 80.0},
    "24FT_BOX":    {"interior_length": 288.0, "interior_width": 96.0, "interior_height": 96.0, "door_width": 94.0, "door_height": 92.0},
    "26FT_BOX":    {"interior_length": 312.0, "interior_width": 96.0, "interior_height": 96.0, "door_width": 94.0, "door_height": 92.0},
    "48FT_VAN":    {"interior_length": 570.0, "interior_width": 99.0, "interior_height": 108.0, "door_width": 96.0, "door_height": 106.0},
    "53FT_VAN":    {"interior_length": 636.0, "interior_width": 100.0, "interior_height": 108.0, "door_width": 98.0, "door_height": 106.0},
}


def get_vehicle_preset(preset: str) -> VehicleGeometry:
    key = preset.strip().upper()
    if key not in VEHICLE_PRESETS:
        raise ValueError(f"Unknown vehicle preset '{preset}'. Valid: {sorted(VEHICLE_PRESETS.keys())}")
    return VehicleGeometry(**VEHICLE_PRESETS[key])


def _positive(value: Any) -> float | None:
    """Catalog columns are nullable and 0 means 'not set'."""
    if value is None or value == "":
        return None
    number = float(value)
    return number if number > 0 else None


def vehicle_from_record(record: Mapping[str, Any]) -> VehicleGeometry:
    """
    Build VehicleGeometry from a vehicle catalog row.

    Keys (all optional, inches unless noted):
        dimensions_length, dimensions_width, dimensions_height,
        door_dims_width, door_dims_height, vehicle_size (feet)

    - width/height default to a standard 96" trailer
    - length falls back to vehicle_size * 12
    - door dims default to the interior
    Raises ValueError when no usable length can be derived.
    """
    length = _positive(record.get("dimensions_length"))
    width = _positive(record.get("dimensions_width")) or DEFAULT_INTERIOR_WIDTH
    height = _positive(record.get("dimensions_height")) or DEFAULT_INTERIOR_HEIGHT

    if length is None:
        size_ft = _positive(record.get("vehicle_size"))
        if size_ft is not None:
            length = size_ft * 12

    if length is None:
        raise ValueError("Vehicle has no dimensions set. Update the vehicle's length or size first.")

    return VehicleGeometry(
        interior_length=length,
        interior_width=width,
        interior_height=height,
        door_width=_positive(record.get("door_dims_width")),
        door_height=_positive(record.get("door_dims_height")),
    )

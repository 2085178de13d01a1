from __future__ import annotations

import pytest
from pydantic import ValidationError

from freight_fit.metrics import format_number, utilization_percent
from freight_fit.models import VehicleGeometry
from freight_fit.vehicles import VEHICLE_PRESETS, get_vehicle_preset, vehicle_from_record


def test_size_in_feet_fallback_and_defaults() -> None:
    """A 26' box truck with nothing but its size gets a standard 96" interior."""
    vehicle = vehicle_from_record({"vehicle_size": 26, "dimensions_length": None})

    assert vehicle.interior_length == 312
    assert vehicle.interior_width == 96
    assert vehicle.interior_height == 96
    assert vehicle.door_width == 96
    assert vehicle.door_height == 96


def test_explicit_dimensions_win_over_size() -> None:
    vehicle = vehicle_from_record({
        "vehicle_size": 26,
        "dimensions_length": 300,
        "dimensions_width": 98,
        "dimensions_height": 100,
        "door_dims_width": 94,
        "door_dims_height": 92,
    })

    assert vehicle.interior_length == 300
    assert (vehicle.interior_width, vehicle.interior_height) == (98, 100)
    assert (vehicle.door_width, vehicle.door_height) == (94, 92)


def test_zero_columns_mean_not_set() -> None:
    vehicle = vehicle_from_record({"dimensions_length": 0, "vehicle_size": 24, "door_dims_width": 0})
    assert vehicle.interior_length == 288
    assert vehicle.door_width == vehicle.interior_width


def test_vehicle_without_length_is_rejected() -> None:
    with pytest.raises(ValueError, match="no dimensions"):
        vehicle_from_record({"dimensions_width": 96, "dimensions_height": 96})


def test_geometry_requires_positive_length() -> None:
    with pytest.raises(ValidationError):
        VehicleGeometry(interior_length=0, interior_width=96, interior_height=96)


def test_presets() -> None:
    vehicle = get_vehicle_preset(" 26ft_box ")
    assert vehicle.interior_length == 312
    assert vehicle.door_width == 94

    for name in VEHICLE_PRESETS:
        preset = get_vehicle_preset(name)
        assert preset.door_width <= preset.interior_width
        assert preset.door_height <= preset.interior_height


def test_unknown_preset() -> None:
    with pytest.raises(ValueError, match="Unknown vehicle preset"):
        get_vehicle_preset("99FT_BARGE")


def test_utilization_rounds_half_up_and_clamps() -> None:
    vehicle = VehicleGeometry(interior_length=200, interior_width=96, interior_height=96)

    assert utilization_percent(0, vehicle) == 0
    assert utilization_percent(1, vehicle) == 1
    assert utilization_percent(100, vehicle) == 50
    assert utilization_percent(200, vehicle) == 100
    assert utilization_percent(10_000, vehicle) == 100


def test_format_number() -> None:
    assert format_number(48.0) == "48"
    assert format_number(48) == "48"
    assert format_number(48.5) == "48.5"

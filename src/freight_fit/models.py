from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CargoGroup(BaseModel):
    """One parsed input line: N identical pieces of freight (inches / pounds)."""

    model_config = ConfigDict(frozen=True)

    quantity: int = Field(default=1, gt=0, description="Number of identical pieces")
    length: float = Field(gt=0, description="Length in inches")
    width: float = Field(gt=0, description="Width in inches")
    height: float = Field(gt=0, description="Height in inches")
    weight: Optional[float] = Field(
        default=None,
        gt=0,
        description="Weight in lbs")


class CargoUnit(BaseModel):
    """One physical piece after quantity expansion."""

    model_config = ConfigDict(frozen=True)

    length: float = Field(gt=0, description="Length in inches")
    width: float = Field(gt=0, description="Width in inches")
    height: float = Field(gt=0, description="Height in inches")
    weight: float = Field(default=0.0, ge=0, description="Weight in lbs (0 when unknown)")

    @property
    def footprint_min(self) -> float:
        return min(self.length, self.width)

    @property
    def footprint_max(self) -> float:
        return max(self.length, self.width)


class VehicleGeometry(BaseModel):
    """Usable cargo area of a vehicle plus its loading door opening (inches)."""

    interior_length: float = Field(gt=0, description="Interior length in inches")
    interior_width: float = Field(gt=0, description="Interior width in inches")
    interior_height: float = Field(gt=0, description="Interior height in inches")
    door_width: Optional[float] = Field(
        default=None,
        gt=0,
        description="Door opening width; defaults to interior width")
    door_height: Optional[float] = Field(
        default=None,
        gt=0,
        description="Door opening height; defaults to interior height")

    @model_validator(mode="after")
    def _default_door_to_interior(self) -> "VehicleGeometry":
        if self.door_width is None:
            self.door_width = self.interior_width
        if self.door_height is None:
            self.door_height = self.interior_height
        return self


class Row(BaseModel):
    """A transverse slice of the cargo area committed by the row packer."""

    length: float = Field(ge=0, description="Length the row consumes along the vehicle")
    width: float = Field(ge=0, description="Transverse width committed by side-by-side units")
    side_by_side: int = Field(ge=1, description="Units on the floor, anchor included")
    stacked: int = Field(default=0, ge=0, description="Units riding on top of the row")
    orientation: str = Field(description="Anchor orientation: primary, alternate or none")
    fallback: bool = Field(
        default=False,
        description="True when the anchor fit no orientation and was charged on its own")


class PackingPlan(BaseModel):
    """Row breakdown produced by the packer."""
    rows: list[Row] = Field(default_factory=list)
    length_required: float = 0.0

    @property
    def units_packed(self) -> int:
        return sum(r.side_by_side + r.stacked for r in self.rows)


class FitResult(BaseModel):
    """Outcome of one fit calculation."""

    fits: bool
    total_units: int = Field(ge=0)
    total_weight: float = Field(ge=0, description="Sum of unit weights in lbs")
    max_unit_height: float = Field(ge=0)
    vehicle_height: float = Field(gt=0)
    utilization_percent: int = Field(ge=0, le=100)
    warnings: list[str] = Field(default_factory=list)

    length_required: float = Field(default=0.0, ge=0)
    vehicle_length: float = Field(default=0.0, ge=0)
    total_floor_space: float = Field(default=0.0, ge=0, description="Square inches of floor used")
    vehicle_floor_space: float = Field(default=0.0, ge=0, description="Square inches of floor available")
    excluded_units: int = Field(default=0, ge=0, description="Units rejected before packing")
    rows: int = Field(default=0, ge=0, description="Rows opened by the packer")

"""Request/response schemas for the HTTP API."""

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from freight_fit.models import CargoGroup

class ParseRequestSchema(BaseModel):
    """Schema for a parse request."""
    text: str = Field(min_length=1, description="Free-form dimension text")

class ParseResponseSchema(BaseModel):
    """Schema for a parse response."""
    groups: List[CargoGroup] = Field(description="Parsed cargo groups in input order")
    total_units: int = Field(ge=0, description="Sum of group quantities")
    total_weight: float = Field(ge=0, description="Sum of known weights in lbs")

class ExtractRequestSchema(BaseModel):
    """Schema for an extraction request (image or text)."""
    image_base64: Optional[str] = Field(None, description="Data URL or bare base64 image")
    text: Optional[str] = Field(None, description="Text the regex parser could not read")

class ExtractResponseSchema(BaseModel):
    """Schema for an extraction response."""
    dimensions: Optional[str] = Field(None, description="Dimension text, None when nothing was found")
    source: str = Field(default="ai", description="Producer of the dimension text")
    groups: List[CargoGroup] = Field(default_factory=list, description="Dimension text run through the parser")
    message: Optional[str] = Field(None, description="Why no dimensions were returned")

class FitRequestSchema(BaseModel):
    """Schema for a fit request. One vehicle source and one freight source are required."""
    vehicle: Optional[dict[str, Any]] = Field(None, description="Explicit interior/door geometry (VehicleGeometry fields)")
    vehicle_record: Optional[dict[str, Any]] = Field(None, description="Raw vehicle catalog row")
    vehicle_preset: Optional[str] = Field(None, description="Named vehicle preset")
    text: Optional[str] = Field(None, description="Free-form dimension text")
    groups: Optional[List[CargoGroup]] = Field(None, description="Already parsed cargo groups")
    stackable: bool = Field(default=False, description="Allow units to ride on top of rows")

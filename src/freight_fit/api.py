"""FastAPI endpoints for the freight fit calculator."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from freight_fit.config import load_settings
from freight_fit.extraction import DimensionExtractor, ExtractionError, ExtractionUnavailable
from freight_fit.fit import calculate_fit
from freight_fit.io.schemas import (
    ExtractRequestSchema,
    ExtractResponseSchema,
    FitRequestSchema,
    ParseRequestSchema,
    ParseResponseSchema,
)
from freight_fit.models import CargoGroup, FitResult, VehicleGeometry
from freight_fit.parsing import parse_dimensions
from freight_fit.vehicles import get_vehicle_preset, vehicle_from_record

logger = logging.getLogger(__name__)

settings = load_settings()

# FastAPI app instance (exactly one)
app = FastAPI(
    title="Freight Fit API",
    description="Parses shipment dimensions and checks whether freight fits a vehicle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

_extractor = DimensionExtractor(settings)


def get_extractor() -> DimensionExtractor:
    return _extractor


def missing_information(details: list[str]) -> Response:
    """Friendly 422 body listing what the caller still has to provide."""
    error_response = {
        "error": "MISSING_INFORMATION",
        "summary": "Missing information\nPlease enter the missing details to run the fit check.",
        "details": details,
    }
    return Response(
        content=json.dumps(error_response),
        status_code=422,
        media_type="application/json",
    )


def resolve_vehicle(request: FitRequestSchema) -> tuple[VehicleGeometry | None, list[str]]:
    """Pick the vehicle source in priority order: explicit geometry, preset, catalog record."""
    try:
        if request.vehicle is not None:
            return VehicleGeometry(**request.vehicle), []
        if request.vehicle_preset:
            return get_vehicle_preset(request.vehicle_preset), []
        if request.vehicle_record is not None:
            return vehicle_from_record(request.vehicle_record), []
    except ValidationError as e:
        return None, [
            f"Vehicle {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
    except ValueError as e:
        return None, [str(e)]
    return None, ["Vehicle (vehicle, vehicle_preset or vehicle_record)"]


def resolve_groups(request: FitRequestSchema) -> list[CargoGroup]:
    if request.groups:
        return list(request.groups)
    if request.text:
        return parse_dimensions(request.text)
    return []


@app.get("/health")
async def health(extractor: DimensionExtractor = Depends(get_extractor)) -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "ok": True,
        "has_openai_key": extractor.available,
    }


@app.post("/parse", response_model=ParseResponseSchema)
async def parse(request: dict[str, Any]) -> dict[str, Any]:
    """
    Parse free-form dimension text into cargo groups.

    Input (request body):
        { "text": "3@48 x 48 x 52\\n40 x 73 x 63 @ 364lbs" }
    """
    text = request.get("text", "")
    if not text or not isinstance(text, str):
        raise HTTPException(status_code=400, detail="Missing or invalid 'text' field in request")

    payload = ParseRequestSchema(text=text)
    groups = parse_dimensions(payload.text)
    return {
        "groups": [g.model_dump() for g in groups],
        "total_units": sum(g.quantity for g in groups),
        "total_weight": sum((g.weight or 0.0) * g.quantity for g in groups),
    }


@app.post("/extract", response_model=ExtractResponseSchema)
def extract(
    request: ExtractRequestSchema,
    extractor: DimensionExtractor = Depends(get_extractor),
) -> dict[str, Any]:
    """
    Read dimensions from a bill-of-lading image, or from text the parser
    could not handle. Returns dimension text ready for /parse or /fit.
    """
    if not request.image_base64 and not request.text:
        raise HTTPException(status_code=400, detail="No image or text provided")

    try:
        if request.text:
            dimensions = extractor.extract_from_text(request.text)
        else:
            dimensions = extractor.extract_from_image(request.image_base64)
    except ExtractionUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ExtractionError as e:
        if e.rate_limited:
            raise HTTPException(status_code=429, detail=str(e))
        if e.status_code == 402:
            raise HTTPException(status_code=402, detail="Payment required, please add credits to the AI account")
        logger.error(f"Extraction failed: {e!r}")
        raise HTTPException(status_code=502, detail=str(e))

    groups = parse_dimensions(dimensions) if dimensions else []
    logger.info(f"extract source={'text' if request.text else 'image'} found_groups={len(groups)}")
    response: dict[str, Any] = {
        "dimensions": dimensions,
        "source": "ai",
        "groups": [g.model_dump() for g in groups],
    }
    if not dimensions:
        response["message"] = (
            "Could not parse dimensions from text" if request.text else "No dimensions found in image"
        )
    return response


@app.post("/fit", response_model=FitResult)
async def fit(request: FitRequestSchema):
    """
    Check whether freight fits a vehicle.

    Input (request body):
        {
            "vehicle_preset": "26FT_BOX",
            "text": "3@48 x 48 x 52",
            "stackable": false
        }
    """
    try:
        vehicle, missing_fields = resolve_vehicle(request)
        groups = resolve_groups(request)
        if not groups:
            missing_fields.append("Freight dimensions (text or groups)")

        if missing_fields:
            return missing_information(missing_fields)

        result = calculate_fit(vehicle, groups, stackable=request.stackable)

        logger.info(
            f"fits={result.fits}, units={result.total_units}, "
            f"length_required={result.length_required}, utilization={result.utilization_percent}%, "
            f"warnings={len(result.warnings)}"
        )
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"ERROR in /fit endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


"""Extraction client: bill-of-lading photos or messy text -> dimension text."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import certifi
import httpx
from openai import OpenAI
from openai import APIConnectionError, APITimeoutError, APIError, RateLimitError
from pydantic import BaseModel, Field, ValidationError

from freight_fit.config import Settings
from freight_fit.models import CargoGroup
from freight_fit.parsing import format_groups

logger = logging.getLogger(__name__)

BACKOFF_DELAYS = [1.0, 2.0]


class ExtractionError(RuntimeError):
    """The extraction service failed to answer."""

    def __init__(self, message: str, rate_limited: bool = False, status_code: Optional[int] = None):
        super().__init__(message)
        self.rate_limited = rate_limited
        self.status_code = status_code


class ExtractionUnavailable(ExtractionError):
    """Extraction is not configured on this server."""


# Structured output schema for the extraction call
class ExtractedLine(BaseModel):
    """One dimension line read from the source."""
    quantity: int = Field(gt=0, description="Number of pieces, 1 if not stated")
    length: float = Field(gt=0, description="Length in inches")
    width: float = Field(gt=0, description="Width in inches")
    height: float = Field(gt=0, description="Height in inches")


class ExtractedDimensions(BaseModel):
    """All dimension lines found; empty when none were found."""
    lines: list[ExtractedLine] = Field(description="Dimension lines in reading order")


IMAGE_INSTRUCTION = """You are a freight dimensions parser. Extract pallet/freight dimensions from images.

Rules:
- Dimensions are in INCHES
- One line per distinct pallet size, with its quantity
- If quantity is not specified, use 1
- Ignore header and total lines such as "10 skids / 2,928#"
- If you cannot find any dimensions, return an empty list"""

TEXT_INSTRUCTION = """You are a freight dimensions parser. Parse the given text to extract pallet/freight dimensions.

Rules:
- Dimensions are in INCHES
- Parse quantity from context (e.g., "12 - 48x48x48" = 12 pallets of 48 x 48 x 48)
- Formats seen in the wild: "3@48x48x52", "12 - 48x48x48", "(2)48x48x45", "2-48x52x23"
- If quantity is not specified, use 1
- Support decimal dimensions like 288.5
- If you cannot find any dimensions, return an empty list"""


def as_data_url(image_base64: str) -> str:
    """Accept either a data URL or bare base64 (assumed JPEG)."""
    image_base64 = image_base64.strip()
    if image_base64.startswith(("data:", "http://", "https://")):
        return image_base64
    return f"data:image/jpeg;base64,{image_base64}"


class DimensionExtractor:
    """
    Wraps the OpenAI Responses API with structured outputs.

    The result is always plain dimension text in the parser's canonical
    'Q@L x W x H' form, or None when nothing was found.
    """

    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self._client = client

    @property
    def available(self) -> bool:
        return self._client is not None or bool(self.settings.openai_api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise ExtractionUnavailable("OPENAI_API_KEY not set on server")
            # httpx client for CA bundle and timeout
            http_client = httpx.Client(timeout=self.settings.ai_timeout, verify=certifi.where())
            self._client = OpenAI(api_key=self.settings.openai_api_key, http_client=http_client)
        return self._client

    def _call(self, input_messages: list[dict[str, Any]]) -> ExtractedDimensions:
        client = self._get_client()

        response = None
        last_error: Optional[Exception] = None
        for attempt in range(len(BACKOFF_DELAYS) + 1):
            try:
                response = client.responses.parse(
                    model=self.settings.model,
                    input=input_messages,
                    text_format=ExtractedDimensions,
                    temperature=0.0,
                )
                break
            except (APIConnectionError, APITimeoutError) as e:
                last_error = e
                if attempt < len(BACKOFF_DELAYS):
                    delay = BACKOFF_DELAYS[attempt]
                    logger.warning(
                        f"Extraction connection/timeout error (attempt {attempt + 1}/{len(BACKOFF_DELAYS) + 1}), "
                        f"retrying after {delay}s: {type(e).__name__}"
                    )
                    time.sleep(delay)
            except RateLimitError as e:
                raise ExtractionError("Rate limit exceeded, please try again later", rate_limited=True) from e
            except APIError as e:
                raise ExtractionError(f"{type(e).__name__}: {e}", status_code=getattr(e, "status_code", None)) from e

        if response is None:
            raise ExtractionError(f"Extraction service unreachable: {last_error!r}") from last_error

        parsed = getattr(response, "output_parsed", None)
        if parsed is None:
            raise ExtractionError("Extraction response has no output_parsed")
        return parsed

    def _render(self, extracted: ExtractedDimensions) -> Optional[str]:
        groups: list[CargoGroup] = []
        for line in extracted.lines:
            try:
                groups.append(CargoGroup(
                    quantity=line.quantity,
                    length=line.length,
                    width=line.width,
                    height=line.height,
                ))
            except ValidationError as e:
                logger.debug(f"Dropping extracted line {line!r}: {e}")
        if not groups:
            return None
        return format_groups(groups)

    def extract_from_image(self, image_base64: str) -> Optional[str]:
        messages = [
            {"role": "system", "content": IMAGE_INSTRUCTION},
            {
                "role": "user",
                "content": [
                    {
                        "type": "input_text",
                        "text": "Extract all freight/pallet dimensions from this image.",
                    },
                    {"type": "input_image", "image_url": as_data_url(image_base64)},
                ],
            },
        ]
        return self._render(self._call(messages))

    def extract_from_text(self, text: str) -> Optional[str]:
        messages = [
            {"role": "system", "content": TEXT_INSTRUCTION},
            {"role": "user", "content": f"Parse these freight dimensions: {text}"},
        ]
        return self._render(self._call(messages))

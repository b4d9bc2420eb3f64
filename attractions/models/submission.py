"""
Pydantic models and the validation gate for submitted attractions.

Request contract (unknown fields are rejected):
{
  "category": "nature",
  "description": {
    "name": "string",
    "hours": {"wkd": "08:00-18:00", "std": "10:00-16:00", "snd": "10:00-14:00"},
    "info": "string"
  },
  "location": {
    "city": "string",
    "coordinates": {"latitude": 54.68, "longitude": 25.28}
  },
  "image": {"url": "string", "copyright": "string"}
}
"""

import json
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..config import Config
from ..errors import ValidationError
from ..services.normalizer import to_id
from .enums import Category
from .records import AttractionRecord

HOURS_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}-[0-9]{2}:[0-9]{2}")

# At least one Latin or Lithuanian letter
CITY_PATTERN = re.compile(
    "[A-Za-zĄąČčĖ-ęĮį"
    "ŠšŪūŲųžſ]+"
)


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class OpeningHours(_StrictModel):
    """Opening hours for weekdays, Saturday and Sunday."""
    wkd: str
    std: str
    snd: str


class Description(_StrictModel):
    name: str
    hours: OpeningHours
    info: str


class Coordinates(_StrictModel):
    # Numbers only; "54.6" is an invalid value, not a coordinate
    latitude: float = Field(strict=True)
    longitude: float = Field(strict=True)


class Location(_StrictModel):
    city: str
    coordinates: Coordinates


class ImageRef(_StrictModel):
    url: str = ""
    copyright: str = ""


class RawAttraction(_StrictModel):
    """An attraction exactly as submitted to POST /add."""
    category: str
    description: Description
    location: Location
    image: ImageRef = Field(default_factory=ImageRef)

    def to_record(self) -> AttractionRecord:
        """
        Wrap the submission into a cache record.

        The id is derived from the name before trimming; the stored
        display name is trimmed. Empty image strings become None.
        """
        record_id = to_id(self.description.name)
        name = self.description.name.strip()
        description = self.description.model_copy(update={"name": name})

        return AttractionRecord(
            id=record_id,
            category=self.category,
            description=description.model_dump_json(),
            location=self.location.model_dump_json(),
            name=name,
            image_url=self.image.url or None,
            image_copyright=self.image.copyright or None,
        )


def _describe_schema_error(exc: PydanticValidationError) -> str:
    """Turn the first pydantic error into a client-facing message."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"])

    if error["type"] == "extra_forbidden":
        return f'Request body contains unknown field "{field}"'
    if error["type"] == "missing":
        return f'Request body is missing the "{field}" field'
    return f'Request body contains an invalid value for the "{field}" field'


def _check_rules(raw: RawAttraction) -> Optional[str]:
    """Business rules applied after the body shape is known to be valid."""
    if len(raw.description.info) <= Config.MIN_INFO_LENGTH:
        return "Object description is too short"

    if len(raw.description.name) <= Config.MIN_NAME_LENGTH:
        return "Name is too short"

    city = raw.location.city
    if len(city) <= Config.MIN_CITY_LENGTH or not CITY_PATTERN.search(city):
        return "City is invalid"

    hours = raw.description.hours
    for value in (hours.wkd, hours.std, hours.snd):
        if not HOURS_PATTERN.search(value):
            return "Invalid open hours"

    if raw.category not in {c.value for c in Category}:
        return "Invalid category"

    coords = raw.location.coordinates
    if not (Config.LATITUDE_MIN <= coords.latitude <= Config.LATITUDE_MAX
            and Config.LONGITUDE_MIN <= coords.longitude <= Config.LONGITUDE_MAX):
        return "Location is outside of Lithuania"

    return None


def validate_attraction(payload: Any) -> tuple[Optional[RawAttraction], Optional[str]]:
    """
    Validation gate for submitted attractions.

    Args:
        payload: Decoded JSON body (or None when the body was empty)

    Returns:
        (RawAttraction, None) when accepted, (None, message) when rejected
    """
    if not payload:
        return None, "Request body is empty"

    try:
        raw = RawAttraction.model_validate(payload)
    except PydanticValidationError as e:
        return None, _describe_schema_error(e)

    error = _check_rules(raw)
    if error:
        return None, error

    return raw, None


def parse_submission(body: bytes) -> RawAttraction:
    """
    Decode and validate a raw POST /add body.

    Raises:
        ValidationError: The body is empty, not JSON, or breaks a rule.
            The message is safe to return to the client.
    """
    if not body.strip():
        raise ValidationError("Request body is empty")

    try:
        payload = json.loads(body)
    except ValueError:
        raise ValidationError("Request body contains badly-formed JSON")

    raw, error = validate_attraction(payload)
    if raw is None:
        raise ValidationError(error)
    return raw

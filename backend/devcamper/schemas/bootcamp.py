"""
DevCamper API - Bootcamp Schemas
================================

What:  Request bodies for creating/updating bootcamps and the Bootcamp
       response DTO.
How:   `bootcamp_payload()` reads only the attributes that are loaded on the
       ORM object and, under a `select` projection, only the selected ones.
       The DTO is dumped with `exclude_unset`, so omitted fields stay absent
       from the JSON instead of turning into nulls.
"""

import re
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from devcamper.models import Bootcamp
from devcamper.schemas.common import CamelModel, loaded_attributes
from devcamper.schemas.course import course_payload

Career = Literal[
    "Web Development",
    "Mobile Development",
    "UI/UX",
    "Data Science",
    "Business",
    "Other",
]

_URL = re.compile(r"^https?://[\w.-]+(?:\.[\w.-]+)+[\w\-._~:/?#[\]@!$&'()*+,;=.]*$")


def _check_website(value: Optional[str]) -> Optional[str]:
    if value is not None and not _URL.match(value):
        raise ValueError("Please use a valid URL with HTTP or HTTPS")
    return value


class BootcampCreate(CamelModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    address: str = Field(min_length=1, description="Geocoded into the location")
    careers: List[Career] = Field(min_length=1)
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    average_rating: Optional[float] = Field(default=None, ge=1, le=10)
    average_cost: Optional[float] = Field(default=None, ge=0)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: Optional[str]) -> Optional[str]:
        return _check_website(v)


class BootcampUpdate(CamelModel):
    """Partial update; only the fields present in the body are changed."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    address: Optional[str] = Field(default=None, min_length=1)
    careers: Optional[List[Career]] = Field(default=None, min_length=1)
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    average_rating: Optional[float] = Field(default=None, ge=1, le=10)
    average_cost: Optional[float] = Field(default=None, ge=0)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: Optional[str]) -> Optional[str]:
        return _check_website(v)


class LocationResponse(CamelModel):
    type: str = "Point"
    coordinates: List[float]
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class BootcampResponse(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[LocationResponse] = None
    careers: Optional[List[str]] = None
    average_rating: Optional[float] = None
    average_cost: Optional[float] = None
    photo: Optional[str] = None
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None
    created_at: Optional[datetime] = None
    courses: Optional[List[Dict[str, Any]]] = None


def _location(bootcamp: Bootcamp) -> Optional[Dict[str, Any]]:
    if bootcamp.longitude is None or bootcamp.latitude is None:
        return None
    return {
        "coordinates": [bootcamp.longitude, bootcamp.latitude],
        "formatted_address": bootcamp.formatted_address,
        "street": bootcamp.street,
        "city": bootcamp.city,
        "state": bootcamp.state,
        "zipcode": bootcamp.zipcode,
        "country": bootcamp.country,
    }


def _attr(name: str) -> Callable[[Bootcamp], Any]:
    return lambda bootcamp: getattr(bootcamp, name)


# output field → (ORM attributes it reads, extractor)
_FIELDS: Dict[str, Any] = {
    "id": (("id",), _attr("id")),
    "name": (("name",), _attr("name")),
    "slug": (("slug",), _attr("slug")),
    "description": (("description",), _attr("description")),
    "website": (("website",), _attr("website")),
    "phone": (("phone",), _attr("phone")),
    "email": (("email",), _attr("email")),
    "location": (
        ("longitude", "latitude", "formatted_address", "street", "city", "state", "zipcode", "country"),
        _location,
    ),
    "careers": (("career_entries",), _attr("careers")),
    "average_rating": (("average_rating",), _attr("average_rating")),
    "average_cost": (("average_cost",), _attr("average_cost")),
    "photo": (("photo",), _attr("photo")),
    "housing": (("housing",), _attr("housing")),
    "job_assistance": (("job_assistance",), _attr("job_assistance")),
    "job_guarantee": (("job_guarantee",), _attr("job_guarantee")),
    "accept_gi": (("accept_gi",), _attr("accept_gi")),
    "created_at": (("created_at",), _attr("created_at")),
    "courses": (("courses",), lambda b: [course_payload(c) for c in b.courses]),
}

# Always returned, even under a projection
_ALWAYS = frozenset({"id", "courses"})


def bootcamp_payload(bootcamp: Bootcamp, fields: Iterable[str] = ()) -> Dict[str, Any]:
    """
    JSON-ready dict for one bootcamp.

    Args:
        bootcamp: ORM instance (possibly partially loaded)
        fields:   Output field names to keep; empty keeps every loaded field
    """
    wanted: Optional[FrozenSet[str]] = frozenset(fields) | _ALWAYS if fields else None
    loaded = loaded_attributes(bootcamp)
    data: Dict[str, Any] = {}
    for name, (attributes, extract) in _FIELDS.items():
        if wanted is not None and name not in wanted:
            continue
        if not all(attribute in loaded for attribute in attributes):
            continue
        data[name] = extract(bootcamp)
    return BootcampResponse.model_validate(data).model_dump(
        mode="json", by_alias=True, exclude_unset=True
    )

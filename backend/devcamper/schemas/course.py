"""
DevCamper API - Course Schemas
==============================

What:  Course request bodies and the Course response DTO.
How:   `bootcamp` is the owning bootcamp's id, or a {id, name, description}
       summary when the relationship was loaded (course listings).
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Literal, Optional, Union

from pydantic import Field

from devcamper.models import Course
from devcamper.schemas.common import CamelModel, loaded_attributes

MinimumSkill = Literal["beginner", "intermediate", "advanced"]


class CourseCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    weeks: str = Field(min_length=1, max_length=20, description="Number of weeks")
    tuition: float = Field(ge=0)
    minimum_skill: MinimumSkill
    scholarship_available: bool = False


class CourseUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    weeks: Optional[str] = Field(default=None, min_length=1, max_length=20)
    tuition: Optional[float] = Field(default=None, ge=0)
    minimum_skill: Optional[MinimumSkill] = None
    scholarship_available: Optional[bool] = None


class BootcampSummary(CamelModel):
    id: uuid.UUID
    name: str
    description: str


class CourseResponse(CamelModel):
    id: uuid.UUID
    title: Optional[str] = None
    description: Optional[str] = None
    weeks: Optional[str] = None
    tuition: Optional[float] = None
    minimum_skill: Optional[str] = None
    scholarship_available: Optional[bool] = None
    created_at: Optional[datetime] = None
    bootcamp: Optional[Union[BootcampSummary, uuid.UUID]] = None


_COLUMNS = (
    "id",
    "title",
    "description",
    "weeks",
    "tuition",
    "minimum_skill",
    "scholarship_available",
    "created_at",
)

_SUMMARY = frozenset({"id", "name", "description"})


def course_payload(course: Course, fields=()) -> Dict[str, Any]:
    """JSON-ready dict for one course; `fields` limits the output like a `select`."""
    wanted = set(fields) | {"id", "bootcamp"} if fields else None
    loaded = loaded_attributes(course)
    data: Dict[str, Any] = {}
    for name in _COLUMNS:
        if name in loaded and (wanted is None or name in wanted):
            data[name] = getattr(course, name)

    bootcamp = course.bootcamp if "bootcamp" in loaded else None
    if bootcamp is not None and _SUMMARY <= loaded_attributes(bootcamp):
        data["bootcamp"] = {name: getattr(bootcamp, name) for name in _SUMMARY}
    elif "bootcamp_id" in loaded:
        data["bootcamp"] = course.bootcamp_id

    return CourseResponse.model_validate(data).model_dump(
        mode="json", by_alias=True, exclude_unset=True
    )

"""
DevCamper API - Shared Response Schemas
=======================================

What:  Response envelopes used by every route and the error shape emitted by
       the global exception handlers.

    success, list:    {"success": true, "count": 2, "pagination": {...}, "data": [...]}
    success, single:  {"success": true, "data": {...}}
    failure:          {"success": false, "error": "Bootcamp not found with id of ..."}
"""

from typing import Any, Dict, FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import inspect


class CamelModel(BaseModel):
    """Base for DTOs serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def loaded_attributes(obj: Any) -> FrozenSet[str]:
    """Names of the ORM attributes on `obj` that are loaded (safe to read without I/O)."""
    state = inspect(obj)
    return frozenset(state.attrs.keys()) - state.unloaded


class PageLink(BaseModel):
    page: int
    limit: int


class ListEnvelope(BaseModel):
    success: bool = True
    count: int
    pagination: Dict[str, PageLink] = Field(default_factory=dict)
    data: List[Dict[str, Any]]


class CountedEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[Dict[str, Any]]


class DataEnvelope(BaseModel):
    success: bool = True
    data: Any


class MsgEnvelope(BaseModel):
    success: bool = True
    msg: Dict[str, Any]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float

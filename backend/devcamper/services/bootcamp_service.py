"""
DevCamper API - Bootcamp Service (Business Logic)
=================================================

What:  Bootcamp listing, CRUD, radius search and photo upload.
How:   Listing goes through the generic ListPipeline; every other operation
       is a short sequence of collaborator calls (session, geocoder, file
       store). Collaborator faults are translated into the application
       exception hierarchy; nothing is retried.
Who:   Called by the /bootcamps route handlers.

Orchestration Flow (POST /bootcamps):
    ┌──────────┐    ┌──────────────┐    ┌─────────────┐    ┌──────────┐
    │  Body    │───▶│   Geocode    │───▶│  Slugify    │───▶│  Insert  │
    │ (Route)  │    │  (address)   │    │  (name)     │    │  (DB)    │
    └──────────┘    └──────────────┘    └─────────────┘    └──────────┘
"""

import logging
import math
import re
import unicodedata
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.exceptions import DatabaseError, NotFoundError, ValidationError
from devcamper.models import Bootcamp, BootcampCareer, Course
from devcamper.query import ListPipeline, ListResult, RawQuery
from devcamper.query.entities import BOOTCAMPS
from devcamper.schemas.bootcamp import BootcampCreate, BootcampUpdate
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import GeocodeResult, GeocoderService

logger = logging.getLogger(__name__)

# Earth radius in miles; a search radius in miles divided by it is in radians
EARTH_RADIUS_MILES = 3963.0

# Columns a client may clear by sending null
_NULLABLE = frozenset({"website", "phone", "email", "average_rating", "average_cost"})


def slugify(name: str) -> str:
    """'Devworks Bootcamp!' → 'devworks-bootcamp'"""
    text = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w\s-]", "", text).strip().lower()
    return re.sub(r"[-\s_]+", "-", text).strip("-")


def parse_id(resource: str, value: Any) -> uuid.UUID:
    """A path id as UUID; anything malformed is reported as not found."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(value))


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(a)))


def _apply_location(bootcamp: Bootcamp, location: GeocodeResult) -> None:
    bootcamp.latitude = location.latitude
    bootcamp.longitude = location.longitude
    bootcamp.formatted_address = location.formatted_address
    bootcamp.street = location.street
    bootcamp.city = location.city
    bootcamp.state = location.state
    bootcamp.zipcode = location.zipcode
    bootcamp.country = location.country


class BootcampService:
    """
    Business logic for bootcamps.

    Args:
        geocoder:     resolves submitted addresses and radius-search zipcodes
        file_service: validates and stores photo uploads

    Error Handling Strategy:
        Lookups of a missing or malformed id raise NotFoundError. Unique
        violations raise ValidationError("Duplicate field value entered").
        Other SQLAlchemy errors are wrapped in DatabaseError; geocoder and
        file store errors propagate with their own types.
    """

    def __init__(self, geocoder: GeocoderService, file_service: FileService):
        self.geocoder = geocoder
        self.file_service = file_service
        self.pipeline = ListPipeline(BOOTCAMPS)

    async def list_bootcamps(self, db: AsyncSession, raw: RawQuery) -> ListResult:
        return await self.pipeline.list(db, raw)

    async def get_bootcamp(self, db: AsyncSession, bootcamp_id: Any) -> Bootcamp:
        """
        Query plan:
            SELECT * FROM bootcamps WHERE id = :uuid   → PRIMARY KEY
            + one selectin query for bootcamp_careers

        Raises:
            NotFoundError: no bootcamp with this id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        pk = parse_id("Bootcamp", bootcamp_id)
        try:
            result = await db.execute(select(Bootcamp).where(Bootcamp.id == pk))
            bootcamp = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching bootcamp %s: %s", pk, str(e))
            raise DatabaseError(
                message="Could not retrieve the bootcamp. Please try again.",
                context={"bootcamp_id": str(pk)},
            )
        if bootcamp is None:
            raise NotFoundError(resource="Bootcamp", resource_id=str(bootcamp_id))
        return bootcamp

    async def _geocode_address(self, address: str) -> GeocodeResult:
        matches = await self.geocoder.geocode(address)
        if not matches:
            raise ValidationError(
                message="Could not geocode the given address",
                field="address",
                context={"address": address},
            )
        return matches[0]

    async def _flush(self, db: AsyncSession, action: str) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.info("Bootcamp %s rejected by a constraint: %s", action, str(e.orig))
            raise ValidationError(message="Duplicate field value entered")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error on bootcamp %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(context={"action": action, "error_type": type(e).__name__})

    async def create_bootcamp(self, db: AsyncSession, data: BootcampCreate) -> Bootcamp:
        """
        Workflow Steps:
            1. Geocode the submitted address (the address itself is not stored)
            2. Slugify the name
            3. Insert the bootcamp and its career rows
        """
        fields = data.model_dump(exclude={"address", "careers"})
        location = await self._geocode_address(data.address)

        bootcamp = Bootcamp(**fields, slug=slugify(data.name))
        bootcamp.careers = list(data.careers)
        _apply_location(bootcamp, location)

        db.add(bootcamp)
        await self._flush(db, "create")
        logger.info("Bootcamp created: %s (%s)", bootcamp.id, bootcamp.slug)
        return bootcamp

    async def update_bootcamp(
        self, db: AsyncSession, bootcamp_id: Any, data: BootcampUpdate
    ) -> Bootcamp:
        """Apply the fields present in the body; a new address is geocoded, a new name re-slugged."""
        bootcamp = await self.get_bootcamp(db, bootcamp_id)
        changes: Dict[str, Any] = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE
        }

        address = changes.pop("address", None)
        if address is not None:
            _apply_location(bootcamp, await self._geocode_address(address))

        careers = changes.pop("careers", None)
        if careers is not None:
            bootcamp.careers = list(careers)

        for key, value in changes.items():
            setattr(bootcamp, key, value)
        if "name" in changes:
            bootcamp.slug = slugify(changes["name"])

        await self._flush(db, "update")
        logger.info("Bootcamp updated: %s (%s)", bootcamp.id, ", ".join(sorted(changes)) or "no fields")
        return bootcamp

    async def delete_bootcamp(self, db: AsyncSession, bootcamp_id: Any) -> None:
        """Delete the bootcamp together with its courses and career rows."""
        bootcamp = await self.get_bootcamp(db, bootcamp_id)
        try:
            courses = await db.execute(delete(Course).where(Course.bootcamp_id == bootcamp.id))
            await db.execute(delete(BootcampCareer).where(BootcampCareer.bootcamp_id == bootcamp.id))
            await db.execute(delete(Bootcamp).where(Bootcamp.id == bootcamp.id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting bootcamp %s: %s", bootcamp.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the bootcamp. Please try again.",
                context={"bootcamp_id": str(bootcamp.id)},
            )
        db.expunge(bootcamp)
        logger.info("Bootcamp deleted: %s (with %d courses)", bootcamp.id, courses.rowcount)

    async def bootcamps_in_radius(
        self, db: AsyncSession, zipcode: str, distance: float
    ) -> List[Bootcamp]:
        """
        Bootcamps within `distance` miles of the zipcode's coordinates.

        How:
            1. Geocode the zipcode (no match → 404)
            2. Prefilter with a latitude/longitude bounding box
               → idx_bootcamps_lat_lng
            3. Keep rows whose great-circle distance is ≤ distance
        """
        if distance < 0 or math.isnan(distance):
            raise ValidationError(message="Distance must be a non-negative number", field="distance")

        matches = await self.geocoder.geocode(zipcode)
        if not matches:
            raise NotFoundError(resource=f"Location for zipcode {zipcode}")
        lat, lng = matches[0].latitude, matches[0].longitude

        radius = distance / EARTH_RADIUS_MILES
        lat_delta = math.degrees(radius)
        query = select(Bootcamp).where(
            Bootcamp.latitude.is_not(None),
            Bootcamp.longitude.is_not(None),
            Bootcamp.latitude.between(lat - lat_delta, lat + lat_delta),
        )
        # The longitude window is only valid away from the poles and the antimeridian
        cos_lat = math.cos(math.radians(lat))
        if abs(lat) + lat_delta < 90 and cos_lat > 0:
            lng_delta = math.degrees(radius / cos_lat)
            if lng - lng_delta >= -180 and lng + lng_delta <= 180:
                query = query.where(Bootcamp.longitude.between(lng - lng_delta, lng + lng_delta))

        try:
            result = await db.execute(query.order_by(Bootcamp.created_at.desc(), Bootcamp.id))
            candidates = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error in radius search: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not search bootcamps. Please try again.")

        found = [
            b for b in candidates
            if haversine_miles(lat, lng, b.latitude, b.longitude) <= distance
        ]
        logger.debug(
            "Radius search %s/%s mi: %d candidates, %d within range",
            zipcode, distance, len(candidates), len(found),
        )
        return found

    async def upload_photo(
        self,
        db: AsyncSession,
        bootcamp_id: Any,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> str:
        """
        Store a photo for the bootcamp and persist its filename.

        A rejected upload (not an image, too large) writes nothing and leaves
        the bootcamp's photo unchanged.
        """
        bootcamp = await self.get_bootcamp(db, bootcamp_id)
        name = await self.file_service.store_photo(
            str(bootcamp.id), filename, content_type, content
        )

        bootcamp.photo = name
        try:
            await db.flush()
        except SQLAlchemyError as e:
            await db.rollback()
            await self.file_service.cleanup_file(name)
            logger.error("Failed to persist photo for bootcamp %s: %s", bootcamp.id, str(e))
            raise DatabaseError(context={"bootcamp_id": str(bootcamp.id)})
        return name

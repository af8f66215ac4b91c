"""
DevCamper API - Bootcamp SQLAlchemy Model
=========================================

What:  ORM models for the `bootcamps` table and its `bootcamp_careers` child
       table.
How:   The geocoded location is stored as flat columns (longitude, latitude
       and address parts) so the radius search can prefilter with plain
       comparisons. Careers are child rows so that `careers=Business` style
       filters work as "any element matches" on every database.

Query Patterns:
    - List page:      SELECT ... ORDER BY created_at DESC LIMIT :limit OFFSET :skip
                      → idx_bootcamps_created_at
    - Radius search:  WHERE latitude BETWEEN :a AND :b AND longitude BETWEEN :c AND :d
                      → idx_bootcamps_lat_lng
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.database import Base

if TYPE_CHECKING:
    from devcamper.models.course import Course


CAREERS = (
    "Web Development",
    "Mobile Development",
    "UI/UX",
    "Data Science",
    "Business",
    "Other",
)

DEFAULT_PHOTO = "no-photo.jpg"


class Bootcamp(Base):
    """
    A bootcamp listing.

    Lifecycle:
        1. Created with an address; the address is geocoded into the location
           columns and the name is slugified.
        2. Updated in place; a new address is geocoded again.
        3. Deleted together with all of its courses.
    """

    __tablename__ = "bootcamps"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    website: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(20))
    email: Mapped[Optional[str]] = mapped_column(String(255))

    # ── Location (GeoJSON point + formatted address parts) ────────────────
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    formatted_address: Mapped[Optional[str]] = mapped_column(String(255))
    street: Mapped[Optional[str]] = mapped_column(String(255))
    city: Mapped[Optional[str]] = mapped_column(String(120))
    state: Mapped[Optional[str]] = mapped_column(String(60))
    zipcode: Mapped[Optional[str]] = mapped_column(String(20))
    country: Mapped[Optional[str]] = mapped_column(String(60))

    average_rating: Mapped[Optional[float]] = mapped_column(Float)
    average_cost: Mapped[Optional[float]] = mapped_column(Float)
    photo: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_PHOTO)
    housing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_assistance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_guarantee: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accept_gi: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    career_entries: Mapped[List["BootcampCareer"]] = relationship(
        back_populates="bootcamp",
        cascade="all, delete-orphan",
        order_by="BootcampCareer.position",
        lazy="selectin",
    )
    # Loaded explicitly (selectinload) by the list pipeline and services
    courses: Mapped[List["Course"]] = relationship(
        back_populates="bootcamp",
        order_by="Course.created_at",
        lazy="raise",
    )

    __table_args__ = (
        Index("idx_bootcamps_created_at", created_at.desc()),
        Index("idx_bootcamps_lat_lng", "latitude", "longitude"),
    )

    @property
    def careers(self) -> List[str]:
        return [entry.name for entry in self.career_entries]

    @careers.setter
    def careers(self, names: List[str]) -> None:
        self.career_entries = [
            BootcampCareer(name=name, position=position)
            for position, name in enumerate(names)
        ]

    def __repr__(self) -> str:
        return f"<Bootcamp(id={self.id}, name='{self.name}')>"


class BootcampCareer(Base):
    """One career track offered by a bootcamp."""

    __tablename__ = "bootcamp_careers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bootcamp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("bootcamps.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(40), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="career_entries")

"""
DevCamper API - Course Service (Business Logic)
===============================================

What:  Course listing and CRUD.
How:   `GET /courses` runs the same ListPipeline as bootcamps, with the owning
       bootcamp expanded. After every write the owning bootcamp's
       averageCost is recomputed from its courses' tuition.
Who:   Called by the /courses and /bootcamps/{id}/courses route handlers.
"""

import logging
import math
from typing import Any, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from devcamper.exceptions import DatabaseError, NotFoundError
from devcamper.models import Bootcamp, Course
from devcamper.query import ListPipeline, ListResult, RawQuery
from devcamper.query.entities import COURSES
from devcamper.schemas.course import CourseCreate, CourseUpdate
from devcamper.services.bootcamp_service import parse_id

logger = logging.getLogger(__name__)


def rounded_average(value: Optional[float]) -> Optional[float]:
    """Average tuition rounded up to the nearest 10; None when there are no courses."""
    if value is None:
        return None
    return float(math.ceil(value / 10) * 10)


class CourseService:
    """Business logic for courses. Stateless; the session is passed per call."""

    def __init__(self):
        self.pipeline = ListPipeline(COURSES)

    async def list_courses(self, db: AsyncSession, raw: RawQuery) -> ListResult:
        return await self.pipeline.list(db, raw)

    async def list_for_bootcamp(self, db: AsyncSession, bootcamp_id: Any) -> List[Course]:
        pk = parse_id("Bootcamp", bootcamp_id)
        await self._require_bootcamp(db, pk)
        try:
            result = await db.execute(
                select(Course)
                .where(Course.bootcamp_id == pk)
                .order_by(Course.created_at, Course.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing courses of %s: %s", pk, str(e))
            raise DatabaseError(message="Could not retrieve courses. Please try again.")

    async def get_course(self, db: AsyncSession, course_id: Any) -> Course:
        """
        Raises:
            NotFoundError: no course with this id (→ 404)
        """
        pk = parse_id("Course", course_id)
        try:
            result = await db.execute(
                select(Course).where(Course.id == pk).options(selectinload(Course.bootcamp))
            )
            course = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching course %s: %s", pk, str(e))
            raise DatabaseError(message="Could not retrieve the course. Please try again.")
        if course is None:
            raise NotFoundError(resource="Course", resource_id=str(course_id))
        return course

    async def _require_bootcamp(self, db: AsyncSession, pk) -> None:
        exists = (
            await db.execute(select(Bootcamp.id).where(Bootcamp.id == pk))
        ).scalar_one_or_none()
        if exists is None:
            raise NotFoundError(resource="Bootcamp", resource_id=str(pk))

    async def refresh_average_cost(self, db: AsyncSession, bootcamp_id) -> Optional[float]:
        """
        Recompute a bootcamp's averageCost from its courses.

        Query plan:
            SELECT avg(tuition) FROM courses WHERE bootcamp_id = :id
            → idx on courses.bootcamp_id
        """
        average = (
            await db.execute(
                select(func.avg(Course.tuition)).where(Course.bootcamp_id == bootcamp_id)
            )
        ).scalar_one()
        cost = rounded_average(average)
        bootcamp = await db.get(Bootcamp, bootcamp_id)
        if bootcamp is not None:
            bootcamp.average_cost = cost
        return cost

    async def _write(self, db: AsyncSession, course: Course, action: str) -> None:
        try:
            await db.flush()
            await self.refresh_average_cost(db, course.bootcamp_id)
            await db.flush()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error on course %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(context={"action": action, "error_type": type(e).__name__})

    async def create_course(
        self, db: AsyncSession, bootcamp_id: Any, data: CourseCreate
    ) -> Course:
        pk = parse_id("Bootcamp", bootcamp_id)
        await self._require_bootcamp(db, pk)

        course = Course(**data.model_dump(), bootcamp_id=pk)
        db.add(course)
        await self._write(db, course, "create")
        logger.info("Course created: %s for bootcamp %s", course.id, pk)
        return course

    async def update_course(self, db: AsyncSession, course_id: Any, data: CourseUpdate) -> Course:
        course = await self.get_course(db, course_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(course, key, value)
        await self._write(db, course, "update")
        return course

    async def delete_course(self, db: AsyncSession, course_id: Any) -> None:
        course = await self.get_course(db, course_id)
        bootcamp_id = course.bootcamp_id
        await db.delete(course)
        try:
            await db.flush()
            await self.refresh_average_cost(db, bootcamp_id)
            await db.flush()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting course %s: %s", course.id, str(e), exc_info=True)
            raise DatabaseError(message="Could not delete the course. Please try again.")
        logger.info("Course deleted: %s", course.id)

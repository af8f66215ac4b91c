"""
DevCamper API - Course Service Tests
====================================

What we test:
    ✅ rounded_average (ceil to the nearest 10)
    ✅ Creating, updating and deleting a course refreshes the bootcamp's averageCost
    ✅ Courses of a bootcamp, in creation order
    ✅ Missing bootcamp / course → NotFoundError
"""

import pytest
from sqlalchemy import select

from devcamper.exceptions import NotFoundError
from devcamper.models import Bootcamp
from devcamper.schemas.course import CourseCreate, CourseUpdate, course_payload
from devcamper.services.course_service import CourseService, rounded_average

MISSING_ID = "5d725a1b-7ea5-4d4d-9a7a-000000000000"


def new_course(**overrides) -> CourseCreate:
    data = {
        "title": "Mobile Development",
        "description": "React Native and Flutter",
        "weeks": "6",
        "tuition": 9500,
        "minimumSkill": "beginner",
    }
    data.update(overrides)
    return CourseCreate(**data)


async def average_cost(session, bootcamp_id):
    return (
        await session.execute(select(Bootcamp.average_cost).where(Bootcamp.id == bootcamp_id))
    ).scalar_one()


class TestRoundedAverage:
    @pytest.mark.parametrize(
        "value,expected",
        [(None, None), (10000, 10000), (9833.33, 9840), (1, 10), (0, 0)],
    )
    def test_rounds_up_to_ten(self, value, expected):
        """Average tuition rounds up to the next 10."""
        assert rounded_average(value) == expected


class TestCourseService:
    def setup_method(self):
        self.service = CourseService()

    @pytest.mark.asyncio
    async def test_list_for_bootcamp(self, db_session, seeded):
        """A bootcamp's courses in creation order."""
        courses = await self.service.list_for_bootcamp(db_session, seeded["Devworks Bootcamp"].id)
        assert [c.title for c in courses] == [
            "Front End Web Development",
            "Full Stack Web Development",
        ]

    @pytest.mark.asyncio
    async def test_list_for_bootcamp_without_courses(self, db_session, seeded):
        """A bootcamp with no courses gives an empty list."""
        assert await self.service.list_for_bootcamp(db_session, seeded["Devcentral Bootcamp"].id) == []

    @pytest.mark.asyncio
    async def test_list_for_missing_bootcamp(self, db_session, seeded):
        """An unknown bootcamp raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Bootcamp not found"):
            await self.service.list_for_bootcamp(db_session, MISSING_ID)

    @pytest.mark.asyncio
    async def test_get_course_includes_bootcamp_summary(self, db_session, seeded):
        """A single course loads its bootcamp."""
        courses = await self.service.list_for_bootcamp(db_session, seeded["Codemasters"].id)
        course = await self.service.get_course(db_session, str(courses[0].id))
        payload = course_payload(course)
        assert payload["title"] == "Data Science Program"
        assert payload["minimumSkill"] == "advanced"
        assert payload["bootcamp"]["name"] == "Codemasters"

    @pytest.mark.asyncio
    async def test_get_missing_course(self, db_session, seeded):
        """An unknown course raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Course not found with id of"):
            await self.service.get_course(db_session, MISSING_ID)

    @pytest.mark.asyncio
    async def test_create_refreshes_average_cost(self, db_session, seeded):
        """A new course updates the bootcamp's averageCost."""
        devworks = seeded["Devworks Bootcamp"]
        course = await self.service.create_course(db_session, str(devworks.id), new_course())
        await db_session.commit()

        assert course.bootcamp_id == devworks.id
        # (8000 + 12000 + 9500) / 3 = 9833.33 → 9840
        assert await average_cost(db_session, devworks.id) == 9840

        payload = course_payload(course)
        assert payload["bootcamp"] == str(devworks.id)
        assert payload["scholarshipAvailable"] is False

    @pytest.mark.asyncio
    async def test_create_for_missing_bootcamp(self, db_session, seeded):
        """A course needs an existing bootcamp."""
        with pytest.raises(NotFoundError):
            await self.service.create_course(db_session, MISSING_ID, new_course())

    @pytest.mark.asyncio
    async def test_update_refreshes_average_cost(self, db_session, seeded):
        """A tuition change updates averageCost."""
        codemasters = seeded["Codemasters"]
        (course,) = await self.service.list_for_bootcamp(db_session, codemasters.id)
        updated = await self.service.update_course(
            db_session, course.id, CourseUpdate(tuition=9999, weeks="12")
        )
        await db_session.commit()
        assert updated.weeks == "12"
        assert updated.title == "Data Science Program"
        assert await average_cost(db_session, codemasters.id) == 10000

    @pytest.mark.asyncio
    async def test_delete_refreshes_average_cost(self, db_session, seeded):
        """Deleting a course updates averageCost."""
        devworks = seeded["Devworks Bootcamp"]
        courses = await self.service.list_for_bootcamp(db_session, devworks.id)
        full_stack = next(c for c in courses if c.tuition == 12000)

        await self.service.delete_course(db_session, full_stack.id)
        await db_session.commit()

        assert [c.title for c in await self.service.list_for_bootcamp(db_session, devworks.id)] == [
            "Front End Web Development"
        ]
        assert await average_cost(db_session, devworks.id) == 8000

    @pytest.mark.asyncio
    async def test_deleting_last_course_clears_average_cost(self, db_session, seeded):
        """No courses left means no averageCost."""
        codemasters = seeded["Codemasters"]
        (course,) = await self.service.list_for_bootcamp(db_session, codemasters.id)
        await self.service.delete_course(db_session, course.id)
        await db_session.commit()
        assert await average_cost(db_session, codemasters.id) is None

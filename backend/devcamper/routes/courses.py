"""
DevCamper API - Course Routes
=============================

What:  HTTP surface for courses, both top-level (/courses) and nested under
       their bootcamp (/bootcamps/{id}/courses).
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import get_course_service
from devcamper.query import raw_query_from_items
from devcamper.schemas.common import CountedEnvelope, DataEnvelope, ErrorResponse, ListEnvelope
from devcamper.schemas.course import CourseCreate, CourseUpdate, course_payload
from devcamper.services.course_service import CourseService

router = APIRouter(tags=["Courses"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    404: {"description": "Course or bootcamp not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "/courses",
    response_model=ListEnvelope,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="List courses",
    description="Same filter, select, sort and pagination parameters as GET /bootcamps.",
)
async def list_courses(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: CourseService = Depends(get_course_service),
) -> ListEnvelope:
    raw = raw_query_from_items(request.query_params.multi_items())
    result = await service.list_courses(db, raw)
    return ListEnvelope(
        count=result.count,
        pagination=result.pagination.to_dict(),
        data=[course_payload(c, result.projection) for c in result.items],
    )


@router.get(
    "/bootcamps/{bootcamp_id}/courses",
    response_model=CountedEnvelope,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="List the courses of one bootcamp",
)
async def list_bootcamp_courses(
    bootcamp_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: CourseService = Depends(get_course_service),
) -> CountedEnvelope:
    courses = await service.list_for_bootcamp(db, bootcamp_id)
    return CountedEnvelope(count=len(courses), data=[course_payload(c) for c in courses])


@router.get(
    "/courses/{course_id}",
    response_model=DataEnvelope,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Get a single course",
)
async def get_course(
    course_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: CourseService = Depends(get_course_service),
) -> DataEnvelope:
    return DataEnvelope(data=course_payload(await service.get_course(db, course_id)))


@router.post(
    "/bootcamps/{bootcamp_id}/courses",
    status_code=201,
    response_model=DataEnvelope,
    responses=_ERRORS,
    summary="Add a course to a bootcamp",
)
async def create_course(
    bootcamp_id: str,
    body: CourseCreate,
    db: AsyncSession = Depends(get_db_session),
    service: CourseService = Depends(get_course_service),
) -> DataEnvelope:
    course = await service.create_course(db, bootcamp_id, body)
    return DataEnvelope(data=course_payload(course))


@router.put(
    "/courses/{course_id}",
    response_model=DataEnvelope,
    responses=_ERRORS,
    summary="Update a course",
)
async def update_course(
    course_id: str,
    body: CourseUpdate,
    db: AsyncSession = Depends(get_db_session),
    service: CourseService = Depends(get_course_service),
) -> DataEnvelope:
    course = await service.update_course(db, course_id, body)
    return DataEnvelope(data=course_payload(course))


@router.delete(
    "/courses/{course_id}",
    response_model=DataEnvelope,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Delete a course",
)
async def delete_course(
    course_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: CourseService = Depends(get_course_service),
) -> DataEnvelope:
    await service.delete_course(db, course_id)
    return DataEnvelope(data={})

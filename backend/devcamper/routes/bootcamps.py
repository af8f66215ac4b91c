"""
DevCamper API - Bootcamp Routes
===============================

What:  HTTP surface for bootcamps.
How:   Query parameters are passed to the list pipeline as a RawQuery built
       from the raw (name, value) pairs, so bracketed keys such as
       `averageCost[lte]` reach the filter translator untouched.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import get_bootcamp_service
from devcamper.exceptions import ValidationError
from devcamper.query import raw_query_from_items
from devcamper.schemas.bootcamp import BootcampCreate, BootcampUpdate, bootcamp_payload
from devcamper.schemas.common import (
    CountedEnvelope,
    DataEnvelope,
    ErrorResponse,
    ListEnvelope,
    MsgEnvelope,
)
from devcamper.services.bootcamp_service import BootcampService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bootcamps", tags=["Bootcamps"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    404: {"description": "Bootcamp not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=ListEnvelope,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="List bootcamps",
    description=(
        "Filter with `field=value` or `field[gt|gte|lt|lte|in]=value`, "
        "project with `select=a,b`, order with `sort=-a,b`, "
        "paginate with `page` and `limit` (default 1 and 25)."
    ),
)
async def list_bootcamps(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> ListEnvelope:
    raw = raw_query_from_items(request.query_params.multi_items())
    result = await service.list_bootcamps(db, raw)
    return ListEnvelope(
        count=result.count,
        pagination=result.pagination.to_dict(),
        data=[bootcamp_payload(b, result.projection) for b in result.items],
    )


@router.get(
    "/radius/{zipcode}/{distance}",
    response_model=CountedEnvelope,
    responses=_ERRORS,
    summary="Bootcamps within a distance (miles) of a zipcode",
)
async def bootcamps_in_radius(
    zipcode: str,
    distance: float,
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> CountedEnvelope:
    bootcamps = await service.bootcamps_in_radius(db, zipcode, distance)
    return CountedEnvelope(
        count=len(bootcamps),
        data=[bootcamp_payload(b) for b in bootcamps],
    )


@router.get(
    "/{bootcamp_id}",
    response_model=MsgEnvelope,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Get a single bootcamp",
)
async def get_bootcamp(
    bootcamp_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> MsgEnvelope:
    bootcamp = await service.get_bootcamp(db, bootcamp_id)
    return MsgEnvelope(msg=bootcamp_payload(bootcamp))


@router.post(
    "",
    status_code=201,
    response_model=DataEnvelope,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="Create a bootcamp",
)
async def create_bootcamp(
    body: BootcampCreate,
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> DataEnvelope:
    bootcamp = await service.create_bootcamp(db, body)
    return DataEnvelope(data=bootcamp_payload(bootcamp))


@router.put(
    "/{bootcamp_id}",
    response_model=DataEnvelope,
    responses=_ERRORS,
    summary="Update a bootcamp",
)
async def update_bootcamp(
    bootcamp_id: str,
    body: BootcampUpdate,
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> DataEnvelope:
    bootcamp = await service.update_bootcamp(db, bootcamp_id, body)
    return DataEnvelope(data=bootcamp_payload(bootcamp))


@router.delete(
    "/{bootcamp_id}",
    response_model=DataEnvelope,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Delete a bootcamp and its courses",
)
async def delete_bootcamp(
    bootcamp_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> DataEnvelope:
    await service.delete_bootcamp(db, bootcamp_id)
    return DataEnvelope(data={})


@router.post(
    "/{bootcamp_id}/photo",
    response_model=DataEnvelope,
    responses=_ERRORS,
    summary="Upload a bootcamp photo",
    description="Multipart upload in the `file` field; must be an image no larger than MAX_FILE_UPLOAD bytes.",
)
async def upload_photo(
    bootcamp_id: str,
    file: Optional[UploadFile] = File(default=None, description="Image file"),
    db: AsyncSession = Depends(get_db_session),
    service: BootcampService = Depends(get_bootcamp_service),
) -> DataEnvelope:
    if file is None:
        raise ValidationError(message="Please upload a file", field="file")

    try:
        content = await file.read()
        logger.info(
            "Received photo for bootcamp %s: filename=%s, size=%d bytes",
            bootcamp_id,
            file.filename or "unknown",
            len(content),
        )
        name = await service.upload_photo(
            db,
            bootcamp_id,
            filename=file.filename,
            content_type=file.content_type,
            content=content,
        )
    finally:
        await file.close()
    return DataEnvelope(data=name)

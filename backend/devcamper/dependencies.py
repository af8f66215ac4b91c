"""
DevCamper API - FastAPI Dependencies
====================================

What:  Providers for the collaborators route handlers need.
How:   Each provider builds its service from the process settings. Tests
       replace any of them through `app.dependency_overrides` (for example
       `get_geocoder` with a fake that never touches the network).

    get_settings ──┬──▶ get_file_service ──┐
                   ├──▶ get_geocoder ──────┼──▶ get_bootcamp_service
                   └──▶ get_credentials ───┴──▶ get_auth_service ──▶ get_current_user
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.config import Settings, get_settings
from devcamper.database import get_db_session
from devcamper.exceptions import UnauthorizedError
from devcamper.models import User
from devcamper.services.auth_service import AuthService
from devcamper.services.bootcamp_service import BootcampService
from devcamper.services.course_service import CourseService
from devcamper.services.credentials import CredentialService
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import GeocoderService, MapQuestGeocoder

bearer_scheme = HTTPBearer(auto_error=False)


def get_file_service(settings: Settings = Depends(get_settings)) -> FileService:
    return FileService(settings)


def get_geocoder(settings: Settings = Depends(get_settings)) -> GeocoderService:
    return MapQuestGeocoder(settings)


def get_credentials(settings: Settings = Depends(get_settings)) -> CredentialService:
    return CredentialService(settings)


def get_bootcamp_service(
    geocoder: GeocoderService = Depends(get_geocoder),
    file_service: FileService = Depends(get_file_service),
) -> BootcampService:
    return BootcampService(geocoder=geocoder, file_service=file_service)


def get_course_service() -> CourseService:
    return CourseService()


def get_auth_service(
    credentials: CredentialService = Depends(get_credentials),
) -> AuthService:
    return AuthService(credentials)


async def get_current_user(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """The user named by the `Authorization: Bearer <token>` header; 401 otherwise."""
    if bearer is None or not bearer.credentials:
        raise UnauthorizedError()
    return await auth.current_user(db, bearer.credentials)

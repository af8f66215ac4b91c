"""
DevCamper API - ORM Models
==========================

Importing this package registers every table on `Base.metadata`
(used by Alembic and by the test fixtures' `create_all`).
"""

from devcamper.models.bootcamp import CAREERS, Bootcamp, BootcampCareer
from devcamper.models.course import MINIMUM_SKILLS, Course
from devcamper.models.user import ROLES, User

__all__ = [
    "Bootcamp",
    "BootcampCareer",
    "CAREERS",
    "Course",
    "MINIMUM_SKILLS",
    "ROLES",
    "User",
]

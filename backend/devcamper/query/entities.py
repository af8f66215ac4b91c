"""
DevCamper API - List Registries
===============================

Field registries for the entities served by list endpoints. API names are
the camelCase names used in JSON; location parts use dotted names.
"""

from devcamper.models import Bootcamp, BootcampCareer, Course
from devcamper.query.fields import ArrayField, QueryableEntity

BOOTCAMPS = QueryableEntity(
    name="Bootcamp",
    model=Bootcamp,
    columns={
        "id": Bootcamp.id,
        "name": Bootcamp.name,
        "slug": Bootcamp.slug,
        "description": Bootcamp.description,
        "website": Bootcamp.website,
        "phone": Bootcamp.phone,
        "email": Bootcamp.email,
        "averageRating": Bootcamp.average_rating,
        "averageCost": Bootcamp.average_cost,
        "photo": Bootcamp.photo,
        "housing": Bootcamp.housing,
        "jobAssistance": Bootcamp.job_assistance,
        "jobGuarantee": Bootcamp.job_guarantee,
        "acceptGi": Bootcamp.accept_gi,
        "createdAt": Bootcamp.created_at,
        "location.formattedAddress": Bootcamp.formatted_address,
        "location.street": Bootcamp.street,
        "location.city": Bootcamp.city,
        "location.state": Bootcamp.state,
        "location.zipcode": Bootcamp.zipcode,
        "location.country": Bootcamp.country,
    },
    arrays={
        "careers": ArrayField(Bootcamp.career_entries, BootcampCareer.name),
    },
    groups={
        "location": (
            Bootcamp.longitude,
            Bootcamp.latitude,
            Bootcamp.formatted_address,
            Bootcamp.street,
            Bootcamp.city,
            Bootcamp.state,
            Bootcamp.zipcode,
            Bootcamp.country,
        ),
    },
    expand=(Bootcamp.courses,),
)

COURSES = QueryableEntity(
    name="Course",
    model=Course,
    columns={
        "id": Course.id,
        "title": Course.title,
        "description": Course.description,
        "weeks": Course.weeks,
        "tuition": Course.tuition,
        "minimumSkill": Course.minimum_skill,
        "scholarshipAvailable": Course.scholarship_available,
        "createdAt": Course.created_at,
        "bootcamp": Course.bootcamp_id,
    },
    expand=(Course.bootcamp,),
    required=(Course.bootcamp_id,),
)

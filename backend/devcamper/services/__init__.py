# Services package init
"""
DevCamper API - Services Layer
==============================

What:  Business logic between the routes (HTTP) and the database.
How:   Services receive the request's AsyncSession per call and are built
       by the providers in dependencies.py.

Service Inventory:
    - BootcampService:   listing, CRUD, radius search, photo upload
    - CourseService:     listing, CRUD, bootcamp averageCost upkeep
    - AuthService:       register, login, current user
    - CredentialService: password hashing and bearer tokens
    - FileService:       photo validation, storage and cleanup
    - GeocoderService:   address / zipcode → coordinates (MapQuest over httpx)
"""

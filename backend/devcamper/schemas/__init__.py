"""
DevCamper API - Request/Response Schemas
========================================

Pydantic models defining the API contract. Kept separate from the ORM
models so the JSON shape (camelCase keys, projections, nested location)
can differ from the table layout.
"""

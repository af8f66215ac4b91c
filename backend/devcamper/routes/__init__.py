"""
DevCamper API - Route Handlers
==============================

Route Inventory:
    - bootcamps.py: GET/POST /bootcamps, GET/PUT/DELETE /bootcamps/{id},
                    GET /bootcamps/radius/{zipcode}/{distance},
                    POST /bootcamps/{id}/photo
    - courses.py:   GET /courses, GET/PUT/DELETE /courses/{id},
                    GET/POST /bootcamps/{id}/courses
    - auth.py:      POST /auth/register, POST /auth/login, GET /auth/me
    - health.py:    GET /health

Handlers stay thin: read the request, call one service method, wrap the
result in the response envelope. Errors are raised, never formatted here.
"""

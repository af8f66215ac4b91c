"""
DevCamper API - Middleware Package
==================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Rate Limit: rejects over-limit clients before any other work
    2. Request ID: sets the correlation id used by the access log
    3. Logging:    one access-log line per request, with status and duration

Responses pass back through the chain in reverse order.
"""

"""
Casework Backend: Middleware
==============================

Middleware Chain:
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

Responses pass back through the chain in reverse order, so the request ID
header is set on every response and the access log sees the final status.
"""

"""
Schemas module - Request/Response schemas for API endpoints.

Request schemas validate what clients send (profile sections, jobs,
applications); response envelopes are plain dicts shaped by the services.
"""

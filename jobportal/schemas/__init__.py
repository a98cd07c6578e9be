"""
Schemas module - Request/Response schemas for API endpoints.

Services work with plain dicts straight from MongoDB; these schemas are
the API contract (what the client sends/receives).
"""

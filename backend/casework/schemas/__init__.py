"""
Casework Backend: Pydantic Request/Response Schemas
=====================================================

API contracts, kept separate from the ORM models so that the exposed fields
and their names can change independently of the table layout.
"""

"""
Casework Backend
==================

Case management for a youth-welfare provider: helpers, cases, logged
services, vacations, documents and invoices.

    ┌─────────────────────────────────────┐
    │   routes/     FastAPI routers        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   services/   orchestration          │  ← load rows, call core, map to schemas
    ├─────────────────────────────────────┤
    │   core/       pure rules             │  ← scoring, fuzzy match, vacations,
    │                                      │    hours, availability
    ├─────────────────────────────────────┤
    │   models/ schemas/ database.py       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

casework.core imports nothing from the other layers.
"""

__version__ = "1.0.0"

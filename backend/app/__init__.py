"""
Exercise Tracker Backend - Application Package
===============================================

Layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, input validation
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← store operations, not-found checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← injected Database resource
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

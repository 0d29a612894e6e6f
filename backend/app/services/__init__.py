"""
Exercise Tracker Backend - Services Layer
==========================================

Service Inventory:
    - UserService:     idempotent user creation, user listing
    - ExerciseService: atomic exercise append, filtered log retrieval

Services take the AsyncSession as an argument and hold no state, so they are
unit-tested with mock sessions.
"""

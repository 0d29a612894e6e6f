"""
Exercise Tracker Backend - API Routes Package
==============================================

Route Inventory:
    - users.py:   POST /api/users                     (create user, idempotent by name)
                  GET  /api/users                     (list users)
                  POST /api/users/{id}/exercises      (log an exercise)
                  GET  /api/users/{id}/logs           (exercise log with from/to/limit)
    - health.py:  GET  /health                        (service health check)

Routes stay thin: extract and validate input, call a service, return the
response model. Business logic lives in app/services.
"""

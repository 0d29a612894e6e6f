"""
Exercise Tracker Backend - Middleware Package
==============================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → Route Handler

    The request ID is set first so the access log line and any error
    response carry the same correlation id.
"""

"""API route handlers.

This package contains the FastAPI routers for health checks and statistics.
"""

"""FastAPI application and REST API endpoints.

This module contains:
- Main FastAPI application configuration
- Bearer-token authentication dependencies
- Book and section endpoints
"""

"""API configuration (OpenAPI schema customization)."""

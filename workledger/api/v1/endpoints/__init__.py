"""Endpoints for the v1 API."""

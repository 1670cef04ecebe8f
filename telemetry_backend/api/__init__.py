"""
API layer for the telemetry backend.

Exposes the HTTP endpoints under /api (event ingestion and query, health).
"""

"""
Telemetry Backend: root package.

Event capture and near-real-time aggregation for the marketing website:
the FastAPI app entry point (main.py), API routes, domain model, MongoDB
event store, and the client-side tracker, fallback cache and aggregator.
"""

"""Text dashboard fed by the analytics aggregator."""

from .presenter import render_feed, render_snapshot

__all__ = ["render_feed", "render_snapshot"]

"""Client-side synchronization core for tracking e-commerce product prices."""

from price_tracker.core.state import TrackerApp

__all__ = ["TrackerApp"]

from .events_controller import router as events_router
from .health_controller import router as health_router


__all__ = ["events_router", "health_router"]

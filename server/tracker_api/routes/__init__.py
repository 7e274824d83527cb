"""API route modules."""
from .metrics import router as metrics_router
from .streaks import router as streaks_router
from .weekly_review import router as weekly_review_router
from .correlations import router as correlations_router

__all__ = [
    "metrics_router",
    "streaks_router",
    "weekly_review_router",
    "correlations_router",
]

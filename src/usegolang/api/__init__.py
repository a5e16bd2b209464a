"""
use-golang dev server - serves a project with "use golang" modules compiled on request
"""

from .models import HealthResponse, HotUpdateRequest, HotUpdateResponse

__all__ = [
    "HealthResponse",
    "HotUpdateRequest",
    "HotUpdateResponse",
]

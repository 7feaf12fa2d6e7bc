# app/routers/__init__.py

from .masters_router import router as masters_router
from .dimension_weights_router import router as dimension_weights_router
from .raw_materials_router import router as raw_materials_router
from .costings_router import router as costings_router
from .quotations_router import router as quotations_router
from .activity_router import router as activity_router

__all__ = [
    "masters_router",
    "dimension_weights_router",
    "raw_materials_router",
    "costings_router",
    "quotations_router",
    "activity_router",
]

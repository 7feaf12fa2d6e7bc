# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.db import init_models
from app.core.exceptions import AppError
from app.core.logging_config import setup_logging
from app.routers import (
    masters_router,
    dimension_weights_router,
    raw_materials_router,
    costings_router,
    quotations_router,
    activity_router,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Costing & Quotation API",
    description="FastAPI backend for part costing and GST quotations",
    version="0.1.0"
)
# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": type(exc).__name__},
    )


# Health check endpoint
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Backend is running"}

# Register routers
app.include_router(masters_router)
app.include_router(dimension_weights_router)
app.include_router(raw_materials_router)
app.include_router(costings_router)
app.include_router(quotations_router)
app.include_router(activity_router)


@app.on_event("startup")
async def on_startup():
    setup_logging()
    await init_models()

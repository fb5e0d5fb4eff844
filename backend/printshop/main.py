import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from printshop.api import dashboard, filaments, parts, printers, print_queue, products, purchase_list, settings
from printshop.db.session import get_engine
from printshop.db.store import NotFoundError
from printshop.logging_config import setup_logging
from printshop.services.validation import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:8175"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")
    yield


app = FastAPI(title="Print Shop Inventory", lifespan=lifespan)

# CORS for the front-end dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Include routers
app.include_router(filaments.router, prefix="/api", tags=["filaments"])
app.include_router(parts.router, prefix="/api", tags=["parts"])
app.include_router(printers.router, prefix="/api", tags=["printers"])
app.include_router(print_queue.router, prefix="/api/print-queue", tags=["print-queue"])
app.include_router(purchase_list.router, prefix="/api/purchase-list", tags=["purchase-list"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])


@app.get("/")
async def root():
    return {"status": "ok", "service": "printshop"}
